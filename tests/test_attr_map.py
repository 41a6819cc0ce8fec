import pytest

from miko.attr_map import StrAttrMap


def test_default_and_named_value():
    attrs = StrAttrMap.parse('"/users/{id}", method = "get"')
    assert attrs.default == "/users/{id}"
    assert attrs.map == {"method": "get"}


def test_bare_identifier_maps_to_itself():
    attrs = StrAttrMap.parse("sse")
    assert attrs.map == {"sse": "sse"}
    assert attrs.default is None


def test_empty_input():
    attrs = StrAttrMap.parse("")
    assert attrs.map == {}
    assert attrs.default is None


def test_non_string_value_is_ignored():
    attrs = StrAttrMap.parse('status = 404, description = "gone"')
    assert attrs.map == {"description": "gone"}


def test_list_meta_is_ignored():
    attrs = StrAttrMap.parse('foo(a, "b"), bar')
    assert attrs.map == {"bar": "bar"}


def test_last_default_wins():
    attrs = StrAttrMap.parse('"first", "second"')
    assert attrs.default == "second"


def test_escapes_decoded():
    attrs = StrAttrMap.parse(r'"a\"b\n"')
    assert attrs.default == 'a"b\n'


def test_get_or_default_prefers_key():
    attrs = StrAttrMap.parse('"/fallback", path = "/explicit"')
    assert attrs.get_or_default("path") == "/explicit"
    assert attrs.get_or_default("other") == "/fallback"
    assert attrs.get("other") is None


def test_get_or_default_without_default():
    assert StrAttrMap.parse("x").get_or_default("path") is None


@pytest.mark.parametrize("text", ["123", "a::b", 'a = ', '"open'])
def test_malformed_input_raises(text):
    with pytest.raises(ValueError):
        StrAttrMap.parse(text)


@pytest.mark.parametrize(
    "text",
    ['"/api", method = "get,post"', "sse, prewarm", '"q\\"uote\\\\"', 'path = "tab\\there"'],
)
def test_to_source_round_trip(text):
    attrs = StrAttrMap.parse(text)
    again = StrAttrMap.parse(attrs.to_source())
    assert again == attrs


def test_to_source_layout():
    attrs = StrAttrMap(map={"method": "get"}, default="/x")
    assert attrs.to_source() == '"/x", method = "get"'


def test_to_source_rejects_bad_key():
    with pytest.raises(ValueError):
        StrAttrMap(map={"not valid": "v"}).to_source()