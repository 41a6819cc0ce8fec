from dataclasses import dataclass

import pytest

from miko.openapi.attributes import (
    parse_utoipa_attrs,
    u_deprecated,
    u_description,
    u_param,
    u_request_body,
    u_response,
    u_summary,
    u_tag,
)


@dataclass
class User:
    id: int
    name: str


def test_undecorated_function_gives_empty_config():
    def handler():
        return None

    config = parse_utoipa_attrs(handler)
    assert config.user_tags == []
    assert config.user_responses == []
    assert config.user_summary is None
    assert config.deprecated is False


def test_decorators_return_same_function():
    def handler():
        return "ok"

    decorated = u_tag("用户管理")(handler)
    assert decorated is handler
    assert decorated() == "ok"


def test_responses_keep_declaration_order():
    @u_response(status=200, description="成功", body=User)
    @u_response(status=404, description="用户不存在")
    def handler():
        return None

    responses = parse_utoipa_attrs(handler).user_responses
    assert [r.status for r in responses] == [200, 404]
    assert responses[0].body is User
    assert responses[1].body is None
    assert responses[1].description == "用户不存在"


def test_response_defaults():
    @u_response()
    def handler():
        return None

    (response,) = parse_utoipa_attrs(handler).user_responses
    assert response.status == 200
    assert response.description == ""
    assert response.content_type is None


def test_tags_accumulate():
    @u_tag("a")
    @u_tag("b")
    def handler():
        return None

    assert parse_utoipa_attrs(handler).user_tags == ["a", "b"]


def test_last_summary_and_description_win():
    @u_summary("first")
    @u_summary("second")
    @u_description("one")
    @u_description("two")
    def handler():
        return None

    config = parse_utoipa_attrs(handler)
    assert config.user_summary == "second"
    assert config.user_description == "two"


def test_deprecated():
    @u_deprecated
    def handler():
        return None

    assert parse_utoipa_attrs(handler).deprecated is True


def test_request_body_default_content_type():
    @u_request_body(content=User, description="文件上传")
    def handler():
        return None

    body = parse_utoipa_attrs(handler).user_request_body
    assert body.ty is User
    assert body.content_type == "application/json"
    assert body.required is True
    assert body.description == "文件上传"


def test_request_body_explicit_content_type():
    @u_request_body(content=bytes, content_type="multipart/form-data")
    def handler():
        return None

    assert parse_utoipa_attrs(handler).user_request_body.content_type == "multipart/form-data"


def test_request_body_requires_content():
    with pytest.raises(ValueError):
        u_request_body(content=None)


@pytest.mark.parametrize("status", [-1, 70000])
def test_response_status_out_of_range(status):
    with pytest.raises(ValueError):
        u_response(status=status)


@pytest.mark.parametrize("status", ["404", True, 4.0])
def test_response_status_must_be_int(status):
    with pytest.raises(TypeError):
        u_response(status=status)


def test_tag_must_be_string():
    with pytest.raises(TypeError):
        u_tag(5)


def test_param_validation():
    with pytest.raises(TypeError):
        u_param(name=1)
    with pytest.raises(TypeError):
        u_param(name="id", deprecated="yes")


def test_param_does_not_add_user_params():
    @u_param(name="id", description="用户ID", example=123)
    def handler():
        return None

    assert parse_utoipa_attrs(handler).user_params == []