"""Decorators that attach OpenAPI details to a handler, and their collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from miko.openapi.config import OpenApiConfig, RequestBodyConfig, ResponseConfig

__all__ = [
    "u_response",
    "u_tag",
    "u_summary",
    "u_description",
    "u_request_body",
    "u_param",
    "u_deprecated",
    "parse_utoipa_attrs",
]

F = TypeVar("F")

_MARKS = "__miko_openapi_attrs__"


@dataclass(frozen=True)
class _ParamAttr:
    name: str
    description: Optional[str]
    example: Any
    deprecated: bool


def _attach(func: F, kind: str, value: Any) -> F:
    marks = getattr(func, _MARKS, None)
    if marks is None:
        marks = []
        setattr(func, _MARKS, marks)
    # Decorators run bottom-up; inserting at the front keeps declaration order.
    marks.insert(0, (kind, value))
    return func


def _require_str(value: Any, name: str, optional: bool = False) -> None:
    if value is None and optional:
        return
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, not {type(value).__name__}")


def u_response(
    status: int = 200,
    description: str = "",
    body: Any = None,
    content_type: Optional[str] = None,
) -> Callable[[F], F]:
    """Document a response of the handler."""
    if isinstance(status, bool) or not isinstance(status, int):
        raise TypeError("status must be an integer")
    if not 0 <= status <= 0xFFFF:
        raise ValueError(f"status out of range: {status}")
    _require_str(description, "description")
    _require_str(content_type, "content_type", optional=True)
    config = ResponseConfig(status, description, body, content_type)

    def decorate(func: F) -> F:
        return _attach(func, "response", config)

    return decorate


def u_tag(tag: str) -> Callable[[F], F]:
    """Put the handler under an API tag."""
    _require_str(tag, "tag")

    def decorate(func: F) -> F:
        return _attach(func, "tag", tag)

    return decorate


def u_summary(summary: str) -> Callable[[F], F]:
    """Give the handler's operation a summary."""
    _require_str(summary, "summary")

    def decorate(func: F) -> F:
        return _attach(func, "summary", summary)

    return decorate


def u_description(description: str) -> Callable[[F], F]:
    """Give the handler's operation a description."""
    _require_str(description, "description")

    def decorate(func: F) -> F:
        return _attach(func, "description", description)

    return decorate


def u_request_body(
    content: Any,
    content_type: Optional[str] = None,
    description: Optional[str] = None,
) -> Callable[[F], F]:
    """Declare the request body, overriding whatever is inferred."""
    if content is None:
        raise ValueError("Missing required field: content")
    _require_str(content_type, "content_type", optional=True)
    _require_str(description, "description", optional=True)
    config = RequestBodyConfig(
        ty=content,
        description=description,
        required=True,
        content_type=content_type if content_type is not None else "application/json",
    )

    def decorate(func: F) -> F:
        return _attach(func, "request_body", config)

    return decorate


def u_param(
    name: str = "",
    description: Optional[str] = None,
    example: Any = None,
    deprecated: bool = False,
) -> Callable[[F], F]:
    """Mark a parameter with extra details; the details are validated and kept."""
    _require_str(name, "name")
    _require_str(description, "description", optional=True)
    if not isinstance(deprecated, bool):
        raise TypeError("deprecated must be a bool")
    attr = _ParamAttr(name, description, example, deprecated)

    def decorate(func: F) -> F:
        return _attach(func, "param", attr)

    return decorate


def u_deprecated(func: F) -> F:
    """Mark the handler's operation as deprecated."""
    return _attach(func, "deprecated", True)


def parse_utoipa_attrs(func: Any) -> OpenApiConfig:
    """Collect the details attached to ``func`` into an :class:`OpenApiConfig`."""
    config = OpenApiConfig()
    for kind, value in getattr(func, _MARKS, ()):
        if kind == "response":
            config.user_responses.append(value)
        elif kind == "tag":
            config.user_tags.append(value)
        elif kind == "summary":
            config.user_summary = value
        elif kind == "description":
            config.user_description = value
        elif kind == "deprecated":
            config.deprecated = True
        elif kind == "request_body":
            config.user_request_body = value
    return config