"""Analysis of handler parameters marked with ``Annotated[..., Mark(...)]``."""

from __future__ import annotations

import dataclasses
import enum
import inspect
import types
import typing
from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Iterable, Optional, Union

from miko.attr_map import StrAttrMap

__all__ = [
    "Mark",
    "ArgKind",
    "RouteParam",
    "route_params",
    "is_option",
    "is_string_type",
    "classify",
    "build_query_model",
    "config_path",
]

_NONE_TYPE = type(None)
_EMPTY = inspect.Parameter.empty

_BUILTIN_TYPES: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "bytes": bytes,
    "bytearray": bytearray,
    "complex": complex,
    "list": list,
    "tuple": tuple,
    "dict": dict,
    "set": set,
    "frozenset": frozenset,
    "object": object,
    "None": None,
}


@dataclass
class Mark:
    """A parameter marker such as ``path``, ``query``, ``body``, ``dep``, ``config`` or ``desc``.

    ``args`` is ``None`` when the marker carries no argument list; a string is parsed
    into a :class:`StrAttrMap`.
    """

    name: str
    args: Optional[StrAttrMap] = None

    def __post_init__(self) -> None:
        if isinstance(self.args, str):
            self.args = StrAttrMap.parse(self.args)


class ArgKind(enum.Enum):
    """Where a handler parameter takes its value from."""

    PATH = "path"
    QUERY = "query"
    JSON_BODY = "json_body"
    RAW_BODY = "raw_body"
    DEP = "dep"
    CONFIG = "config"
    PLAIN = "plain"


@dataclass
class RouteParam:
    """One handler parameter with its type and markers."""

    name: str
    annotation: Any
    marks: dict[str, Mark] = field(default_factory=dict)
    is_option: bool = False
    default: Any = _EMPTY

    def has_mark(self, name: str) -> bool:
        return name in self.marks

    def description(self) -> Optional[str]:
        """The text given by a ``desc`` marker, if any."""
        mark = self.marks.get("desc")
        if mark is None or mark.args is None:
            return None
        return mark.args.default


def _unwrap_annotated(annotation: Any) -> tuple[Any, list[Any]]:
    if typing.get_origin(annotation) is Annotated:
        base, *metadata = typing.get_args(annotation)
        return base, metadata
    return annotation, []


def _resolve_name(annotation: Any, func: Any) -> Any:
    """Resolve a plain-name string annotation against the function's module."""
    if not isinstance(annotation, str):
        return annotation
    namespace = getattr(func, "__globals__", {})
    if annotation in namespace:
        return namespace[annotation]
    return _BUILTIN_TYPES.get(annotation, annotation)


def _arguments(func: Callable[..., Any]) -> tuple[Any, list[tuple[str, Any]]]:
    """The underlying function and its named parameters with their defaults."""
    skip = 0
    if not inspect.isfunction(func) and not inspect.ismethod(func):
        call = getattr(func, "__call__", None)
        if call is None or not inspect.ismethod(call):
            raise TypeError(f"cannot read the parameters of {func!r}")
        func = call
    if inspect.ismethod(func):
        func = func.__func__
        skip = 1
    func = inspect.unwrap(func)
    code = func.__code__
    positional = code.co_varnames[: code.co_argcount]
    keyword_only = code.co_varnames[
        code.co_argcount : code.co_argcount + code.co_kwonlyargcount
    ]
    defaults = func.__defaults__ or ()
    kwdefaults = func.__kwdefaults__ or {}
    first_default = len(positional) - len(defaults)

    arguments = [
        (name, defaults[index - first_default] if index >= first_default else _EMPTY)
        for index, name in enumerate(positional)
    ]
    arguments.extend((name, kwdefaults.get(name, _EMPTY)) for name in keyword_only)
    return func, arguments[skip:]


def route_params(func: Callable[..., Any]) -> list[RouteParam]:
    """Read the parameters of ``func`` in declaration order."""
    target, arguments = _arguments(func)
    annotations = getattr(target, "__annotations__", None) or {}
    params = []
    for name, default in arguments:
        annotation = _resolve_name(annotations.get(name, Any), target)
        base, metadata = _unwrap_annotated(annotation)
        marks = {item.name: item for item in metadata if isinstance(item, Mark)}
        params.append(
            RouteParam(
                name=name,
                annotation=base,
                marks=marks,
                is_option=is_option(base)[0],
                default=default,
            )
        )
    return params


def is_option(annotation: Any) -> tuple[bool, Any]:
    """Return ``(True, inner)`` for an optional type, else ``(False, None)``."""
    annotation, _ = _unwrap_annotated(annotation)
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(annotation)
        if _NONE_TYPE in args:
            rest = tuple(arg for arg in args if arg is not _NONE_TYPE)
            inner = rest[0] if len(rest) == 1 else Union[rest]
            return True, inner
    return False, None


def is_string_type(annotation: Any) -> bool:
    annotation, _ = _unwrap_annotated(annotation)
    return isinstance(annotation, type) and issubclass(annotation, str)


def classify(param: RouteParam) -> ArgKind:
    """Decide how the value of ``param`` is obtained."""
    if param.has_mark("path"):
        return ArgKind.PATH
    if param.has_mark("query"):
        return ArgKind.QUERY
    if param.has_mark("body"):
        args = param.marks["body"].args
        if args is not None:
            return ArgKind.RAW_BODY if "str" in args.map else ArgKind.JSON_BODY
        return ArgKind.RAW_BODY if is_string_type(param.annotation) else ArgKind.JSON_BODY
    if param.has_mark("dep"):
        return ArgKind.DEP
    if param.has_mark("config"):
        return ArgKind.CONFIG
    if not param.marks:
        return ArgKind.PLAIN
    raise ValueError(f"parameter {param.name!r} has no extractor marker")


def build_query_model(params: Iterable[RouteParam], name: str) -> Optional[type]:
    """Build a dataclass holding every ``query`` parameter, or ``None`` if there are none."""
    fields = []
    for param in params:
        if not param.has_mark("query"):
            continue
        description = param.description()
        metadata = {"description": description} if description is not None else {}
        if param.default is not _EMPTY:
            spec = field(default=param.default, metadata=metadata)
        elif param.is_option:
            spec = field(default=None, metadata=metadata)
        else:
            spec = field(metadata=metadata)
        fields.append((param.name, param.annotation, spec))
    if not fields:
        return None
    return dataclasses.make_dataclass(name, fields, kw_only=True)


def config_path(param: RouteParam) -> Optional[str]:
    """The configuration key of a ``config`` parameter; ``None`` if it has none."""
    mark = param.marks.get("config")
    if mark is None:
        return None
    path = mark.args.get_or_default("path") if mark.args is not None else None
    if path is None:
        raise ValueError(
            'config param must be like Mark("config", \'"xx"\') or Mark("config", \'path = "xx"\')'
        )
    return path