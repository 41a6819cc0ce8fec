"""Rendering of an :class:`OpenApiConfig` into an OpenAPI path item."""

from __future__ import annotations

import enum
import inspect
import types
import typing
from typing import Annotated, Any, Union

from miko.openapi.config import OpenApiConfig, ParamLocation
from miko.params import is_option, is_string_type

__all__ = ["HttpMethod", "generate_operation"]


class HttpMethod(enum.Enum):
    """HTTP methods an OpenAPI operation can be documented under."""

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"

    @classmethod
    def from_method(cls, method: Any) -> "HttpMethod":
        """Map a method name to a member; unknown methods map to ``GET``."""
        if isinstance(method, cls):
            return method
        if isinstance(method, enum.Enum):
            method = method.value
        if not isinstance(method, str):
            return cls.GET
        try:
            return cls(method.strip().lower())
        except ValueError:
            return cls.GET


_SEQUENCES = (list, tuple, set, frozenset)


def _primitive_schema(ty: type) -> dict:
    if issubclass(ty, bool):
        return {"type": "boolean"}
    if issubclass(ty, int):
        return {"type": "integer"}
    if issubclass(ty, float):
        return {"type": "number"}
    if issubclass(ty, str):
        return {"type": "string"}
    if issubclass(ty, (bytes, bytearray)):
        return {"type": "string", "format": "binary"}
    if issubclass(ty, _SEQUENCES):
        return {"type": "array", "items": {}}
    if issubclass(ty, dict):
        return {"type": "object"}
    return {"$ref": f"#/components/schemas/{ty.__name__}"}


def _schema(ty: Any) -> dict:
    if typing.get_origin(ty) is Annotated:
        ty = typing.get_args(ty)[0]
    if ty is Any or ty is None or ty is inspect.Parameter.empty:
        return {}
    optional, inner = is_option(ty)
    if optional:
        schema = _schema(inner)
        kind = schema.get("type")
        if isinstance(kind, str):
            return {**schema, "type": [kind, "null"]}
        return {"oneOf": [schema, {"type": "null"}]}
    origin = typing.get_origin(ty)
    args = typing.get_args(ty)
    if origin in _SEQUENCES:
        return {"type": "array", "items": _schema(args[0]) if args else {}}
    if origin is dict:
        schema = {"type": "object"}
        if len(args) == 2:
            schema["additionalProperties"] = _schema(args[1])
        return schema
    if origin is Union or origin is types.UnionType:
        return {"oneOf": [_schema(arg) for arg in args]}
    if isinstance(ty, type):
        return _primitive_schema(ty)
    if isinstance(ty, str):
        return {"$ref": f"#/components/schemas/{ty}"}
    return {}


def _response_content_type(body: Any) -> str:
    if isinstance(body, type) and issubclass(body, (bytes, bytearray)):
        return "application/octet-stream"
    if is_string_type(body):
        return "text/plain"
    return "application/json"


def _parameters(config: OpenApiConfig) -> list[dict]:
    entries = []
    for param in config.final_params():
        entry: dict[str, Any] = {
            "name": param.name,
            "in": param.location.value,
            "required": param.location is ParamLocation.PATH or not is_option(param.ty)[0],
        }
        if param.description is not None:
            entry["description"] = param.description
        if param.deprecated:
            entry["deprecated"] = True
        if param.example is not None:
            entry["example"] = param.example
        entry["schema"] = _schema(param.ty)
        entries.append(entry)
    return entries


def _responses(config: OpenApiConfig) -> dict[str, dict]:
    responses: dict[str, dict] = {}
    for response in config.final_responses():
        entry: dict[str, Any] = {"description": response.description}
        if response.body is not None:
            content_type = response.content_type or _response_content_type(response.body)
            entry["content"] = {content_type: {"schema": _schema(response.body)}}
        responses[str(response.status)] = entry
    return responses


def generate_operation(method: Any, path: str, config: OpenApiConfig) -> dict[str, dict]:
    """Return ``{path: {method: operation}}`` for the documented route."""
    operation: dict[str, Any] = {}
    summary = config.final_summary()
    if summary is not None:
        operation["summary"] = summary
    description = config.final_description()
    if description is not None:
        operation["description"] = description
    tags = config.final_tags()
    if tags:
        operation["tags"] = tags
    if config.deprecated:
        operation["deprecated"] = True
    parameters = _parameters(config)
    if parameters:
        operation["parameters"] = parameters
    body = config.final_request_body()
    if body is not None:
        request_body: dict[str, Any] = {}
        if body.description is not None:
            request_body["description"] = body.description
        request_body["content"] = {body.content_type: {"schema": _schema(body.ty)}}
        request_body["required"] = body.required
        operation["requestBody"] = request_body
    operation["responses"] = _responses(config)
    return {path: {HttpMethod.from_method(method).value: operation}}