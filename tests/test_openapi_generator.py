from dataclasses import dataclass
from typing import Optional

import pytest

from miko.openapi.config import (
    OpenApiConfig,
    ParamConfig,
    ParamLocation,
    RequestBodyConfig,
    ResponseConfig,
)
from miko.openapi.generator import HttpMethod, generate_operation


@dataclass
class User:
    id: int
    name: str


def _operation(config, method="GET", path="/users/{id}"):
    result = generate_operation(method, path, config)
    return result[path][HttpMethod.from_method(method).value]


@pytest.mark.parametrize(
    "given, expected",
    [
        ("GET", HttpMethod.GET),
        ("POST", HttpMethod.POST),
        ("delete", HttpMethod.DELETE),
        ("TRACE", HttpMethod.TRACE),
        ("CONNECT", HttpMethod.GET),
        (HttpMethod.PATCH, HttpMethod.PATCH),
    ],
)
def test_from_method(given, expected):
    assert HttpMethod.from_method(given) is expected


def test_structure_is_path_then_method():
    result = generate_operation("POST", "/users", OpenApiConfig())
    assert list(result) == ["/users"]
    assert list(result["/users"]) == ["post"]


def test_summary_and_description_use_final_values():
    config = OpenApiConfig(
        user_summary="用户摘要", auto_summary="自动摘要", auto_description="详细"
    )
    operation = _operation(config)
    assert operation["summary"] == config.final_summary()
    assert operation["description"] == "详细"


def test_absent_fields_are_omitted():
    operation = _operation(OpenApiConfig())
    assert set(operation) == {"responses"}
    assert operation["responses"] == {}


def test_tags_and_deprecated():
    operation = _operation(OpenApiConfig(user_tags=["用户管理"], deprecated=True))
    assert operation["tags"] == ["用户管理"]
    assert operation["deprecated"] is True


def test_parameters():
    config = OpenApiConfig(
        auto_params=[
            ParamConfig("id", int, ParamLocation.PATH, description="用户ID"),
            ParamConfig("page", Optional[int], ParamLocation.QUERY),
        ]
    )
    id_param, page_param = _operation(config)["parameters"]
    assert id_param["name"] == "id"
    assert id_param["in"] == ParamLocation.PATH.value
    assert id_param["required"] is True
    assert id_param["description"] == "用户ID"
    assert id_param["schema"]["type"] == "integer"
    assert page_param["in"] == ParamLocation.QUERY.value
    assert page_param["required"] is False
    assert "description" not in page_param


def test_user_param_overrides_auto_in_output():
    config = OpenApiConfig(
        auto_params=[ParamConfig("id", int, ParamLocation.PATH)],
        user_params=[ParamConfig("id", int, ParamLocation.PATH, description="override")],
    )
    params = _operation(config)["parameters"]
    assert len(params) == 1
    assert params[0]["description"] == "override"


def test_request_body():
    config = OpenApiConfig(
        user_request_body=RequestBodyConfig(
            ty=User, description="新用户", content_type="application/json"
        )
    )
    body = _operation(config)["requestBody"]
    assert list(body["content"]) == ["application/json"]
    assert body["required"] is True
    assert body["description"] == "新用户"
    assert body["content"]["application/json"]["schema"]["$ref"].endswith("/User")


def test_responses():
    config = OpenApiConfig(
        user_responses=[
            ResponseConfig(200, "成功", body=User),
            ResponseConfig(404, "用户不存在"),
            ResponseConfig(201, "created", body=str),
        ]
    )
    responses = _operation(config)["responses"]
    assert list(responses) == ["200", "404", "201"]
    assert responses["404"] == {"description": "用户不存在"}
    assert "application/json" in responses["200"]["content"]
    assert "text/plain" in responses["201"]["content"]


def test_response_explicit_content_type():
    config = OpenApiConfig(
        user_responses=[ResponseConfig(200, "ok", body=User, content_type="application/xml")]
    )
    content = _operation(config)["responses"]["200"]["content"]
    assert list(content) == ["application/xml"]