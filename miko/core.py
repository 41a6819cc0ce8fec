"""HTTP primitives: status codes, method lists, route encoding and streaming bodies."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union
from urllib.parse import unquote

__all__ = [
    "HTTPStatusCode",
    "SizeHint",
    "FallibleStreamBody",
    "into_methods",
    "encode_route",
    "decode_path",
    "empty_body",
]


class HTTPStatusCode(enum.IntEnum):
    """Status codes the framework knows by name."""

    OK = 200
    Created = 201
    Accepted = 202
    NoContent = 204
    BadRequest = 400
    Unauthorized = 401
    Forbidden = 403
    NotFound = 404
    MethodNotAllowed = 405
    NotAcceptable = 406
    ProxyAuthenticationRequired = 407
    RequestTimeout = 408
    Conflict = 409
    Gone = 410
    LengthRequired = 411
    PreconditionFailed = 412
    PayloadTooLarge = 413
    URITooLong = 414
    UnsupportedMediaType = 415
    RangeNotSatisfiable = 416
    ExpectationFailed = 417
    ImATeapot = 418
    MisdirectedRequest = 421
    UnprocessableEntity = 422
    Locked = 423
    FailedDependency = 424
    TooEarly = 425
    UpgradeRequired = 426
    PreconditionRequired = 428
    TooManyRequests = 429
    RequestHeaderFieldsTooLarge = 431
    UnavailableForLegalReasons = 451
    InternalServerError = 500


_TOKEN_CHARS = frozenset("!#$%&'*+-.^_`|~" + string.ascii_letters + string.digits)


def _check_method(method: object) -> str:
    if isinstance(method, enum.Enum):
        method = method.value
    if not isinstance(method, str):
        raise TypeError(f"HTTP method must be a string, not {type(method).__name__}")
    if not method or not set(method) <= _TOKEN_CHARS:
        raise ValueError(f"invalid HTTP method: {method!r}")
    return method


def into_methods(value: Union[str, Iterable[str]]) -> list[str]:
    """Turn a comma separated string, a single method or a sequence into a method list."""
    if isinstance(value, str):
        return [_check_method(part.strip()) for part in value.split(",")]
    if isinstance(value, enum.Enum):
        return [_check_method(value)]
    return [_check_method(method) for method in value]


_ROUTE_SAFE = frozenset((string.ascii_letters + string.digits + "/-_:.{}").encode("ascii"))


def encode_route(path: str) -> str:
    """Percent-encode a route, keeping letters, digits and ``/-_:.{}``."""
    return "".join(
        chr(byte) if byte in _ROUTE_SAFE else f"%{byte:02X}" for byte in path.encode("utf-8")
    )


def decode_path(path: str) -> str:
    """Percent-decode a request path (lossy UTF-8) and drop its leading slashes."""
    return unquote(path, encoding="utf-8", errors="replace").lstrip("/")


def empty_body() -> bytes:
    """An empty response body."""
    return b""


@dataclass(frozen=True)
class SizeHint:
    """Bounds on the length of a body; ``upper`` is ``None`` when unknown."""

    lower: int = 0
    upper: Optional[int] = None

    @property
    def exact(self) -> Optional[int]:
        return self.upper if self.upper == self.lower else None


class FallibleStreamBody:
    """A body fed by a stream of chunks that ends quietly at the first error."""

    def __init__(self, stream: Iterable[object], length: Optional[int] = None) -> None:
        if length is not None and length < 0:
            raise ValueError("body length cannot be negative")
        self._stream = stream
        self._size_hint = SizeHint() if length is None else SizeHint(length, length)

    def __iter__(self) -> Iterator[bytes]:
        iterator = iter(self._stream)
        while True:
            try:
                chunk = next(iterator)
            except Exception:
                return
            if isinstance(chunk, BaseException):
                return
            yield bytes(chunk)

    def size_hint(self) -> SizeHint:
        return self._size_hint