"""Inference of OpenAPI details from a handler's docstring and parameters."""

from __future__ import annotations

import typing
from typing import Any, Callable, Iterable, Optional, Union

from miko.openapi.config import (
    OpenApiConfig,
    ParamConfig,
    ParamLocation,
    RequestBodyConfig,
    ResponseConfig,
)
from miko.params import RouteParam, is_option, is_string_type, route_params

__all__ = [
    "extract_doc_comments",
    "infer_params_from_fn_args",
    "infer_response_from_return_type",
    "extract_path_params",
    "infer_path_from_fn_name",
    "infer_openapi_config",
]

_LOCATED_EXTRACTORS = {"Path": ParamLocation.PATH, "Query": ParamLocation.QUERY}
_BODY_EXTRACTORS = {"Json": "application/json", "Form": "application/x-www-form-urlencoded"}
_IGNORED_EXTRACTORS = frozenset({"State", "Extension", "Extensions", "Method", "Uri"})
_MARK_LOCATIONS = {
    "path": ParamLocation.PATH,
    "query": ParamLocation.QUERY,
    "header": ParamLocation.HEADER,
}
_METHOD_PREFIXES = ("get_", "post_", "put_", "delete_", "patch_")


def extract_doc_comments(
    doc: Union[str, Iterable[str], None],
) -> tuple[Optional[str], Optional[str]]:
    """Split documentation into a summary (first line) and a description (the rest).

    Lines are stripped and blank lines dropped.
    """
    if doc is None:
        return None, None
    raw_lines = doc.splitlines() if isinstance(doc, str) else doc
    lines = [line.strip() for line in raw_lines]
    lines = [line for line in lines if line]
    if not lines:
        return None, None
    summary, *rest = lines
    return summary, ("\n".join(rest) if rest else None)


def _analyze_extractor(annotation: Any) -> tuple[Optional[str], Optional[ParamLocation], Any]:
    """Return ``(extractor name, location, inner type)``; the name is ``None`` if unknown."""
    origin = typing.get_origin(annotation)
    target = origin if origin is not None else annotation
    name = getattr(target, "__name__", None) if isinstance(target, type) else None
    if name is None:
        return None, None, None
    if (
        name not in _LOCATED_EXTRACTORS
        and name not in _BODY_EXTRACTORS
        and name not in _IGNORED_EXTRACTORS
    ):
        return None, None, None
    args = typing.get_args(annotation) if origin is not None else ()
    inner = args[0] if args else None
    return name, _LOCATED_EXTRACTORS.get(name), inner


def _mark_location(param: RouteParam) -> Optional[ParamLocation]:
    for mark_name in param.marks:
        location = _MARK_LOCATIONS.get(mark_name)
        if location is not None:
            return location
    return None


def _body_from_mark(param: RouteParam) -> RequestBodyConfig:
    args = param.marks["body"].args
    content_type = "text/plain" if args is not None and "str" in args.map else "application/json"
    return RequestBodyConfig(
        ty=param.annotation,
        description=param.description(),
        required=True,
        content_type=content_type,
    )


def infer_params_from_fn_args(
    func: Callable[..., Any],
) -> tuple[list[ParamConfig], Optional[RequestBodyConfig]]:
    """Infer the documented parameters and request body of ``func``.

    Understands ``path``/``query``/``header``/``body`` markers and extractor types
    named ``Path``, ``Query``, ``Json`` and ``Form``. A last, unmarked ``str``
    parameter is taken as a plain-text body when nothing else is.
    """
    params: list[ParamConfig] = []
    request_body: Optional[RequestBodyConfig] = None
    route_args = route_params(func)

    for param in route_args:
        if param.has_mark("body"):
            request_body = _body_from_mark(param)
            continue

        name, extractor_location, inner = _analyze_extractor(param.annotation)
        if name in _BODY_EXTRACTORS:
            request_body = RequestBodyConfig(
                ty=inner if inner is not None else param.annotation,
                description=param.description(),
                required=True,
                content_type=_BODY_EXTRACTORS[name],
            )
            continue

        location = _mark_location(param) or extractor_location
        if location is None:
            continue
        base_type = inner if inner is not None else param.annotation
        params.append(
            ParamConfig(
                name=param.name,
                ty=base_type,
                location=location,
                description=param.description(),
                required=not is_option(base_type)[0],
                deprecated=False,
                example=None,
            )
        )

    if request_body is None and route_args:
        last = route_args[-1]
        if not last.marks and is_string_type(last.annotation):
            request_body = RequestBodyConfig(
                ty=last.annotation,
                description=None,
                required=True,
                content_type="text/plain",
            )

    return params, request_body


def infer_response_from_return_type(annotation: Any) -> Optional[ResponseConfig]:
    """Handlers return anything that converts to a response, so nothing is inferred."""
    return None


def extract_path_params(path: str) -> list[str]:
    """Names of the ``{param}`` placeholders in ``path``, in order."""
    params = []
    in_brace = False
    current: list[str] = []
    for char in path:
        if char == "{":
            in_brace = True
            current = []
        elif char == "}":
            if in_brace and current:
                params.append("".join(current))
            in_brace = False
        elif in_brace:
            current.append(char)
    return params


def _trim_start_repeated(text: str, prefix: str) -> str:
    while text.startswith(prefix):
        text = text[len(prefix):]
    return text


def infer_path_from_fn_name(name: str) -> str:
    """Guess a path from a handler name: ``get_user`` gives ``/user``."""
    for prefix in _METHOD_PREFIXES:
        name = _trim_start_repeated(name, prefix)
    return "/" + name.replace("_", "/")


def infer_openapi_config(func: Callable[..., Any]) -> OpenApiConfig:
    """Everything that can be inferred about ``func`` without user annotations."""
    config = OpenApiConfig()
    config.auto_summary, config.auto_description = extract_doc_comments(func.__doc__)
    config.auto_params, config.auto_request_body = infer_params_from_fn_args(func)
    annotations = getattr(func, "__annotations__", None) or {}
    config.auto_response = infer_response_from_return_type(annotations.get("return"))
    return config