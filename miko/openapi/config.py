"""Data model of the OpenAPI information gathered for one route."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

__all__ = [
    "ParamLocation",
    "ParamConfig",
    "ResponseConfig",
    "RequestBodyConfig",
    "OpenApiConfig",
]


class ParamLocation(enum.Enum):
    """Where a parameter appears in a request; values are OpenAPI ``in`` names."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


@dataclass
class ParamConfig:
    """A documented request parameter."""

    name: str
    ty: Any
    location: ParamLocation
    description: Optional[str] = None
    # Kept for the record; the schema generator derives requiredness from ``ty``.
    required: bool = True
    deprecated: bool = False
    example: Any = None


@dataclass
class ResponseConfig:
    """A documented response."""

    status: int
    description: str = ""
    body: Any = None
    content_type: Optional[str] = None


@dataclass
class RequestBodyConfig:
    """A documented request body."""

    ty: Any
    description: Optional[str] = None
    required: bool = True
    content_type: str = "application/json"


@dataclass
class OpenApiConfig:
    """User supplied and inferred OpenAPI details of a route."""

    user_summary: Optional[str] = None
    user_description: Optional[str] = None
    user_tags: list[str] = field(default_factory=list)
    user_params: list[ParamConfig] = field(default_factory=list)
    user_responses: list[ResponseConfig] = field(default_factory=list)
    user_request_body: Optional[RequestBodyConfig] = None
    deprecated: bool = False

    auto_summary: Optional[str] = None
    auto_description: Optional[str] = None
    auto_params: list[ParamConfig] = field(default_factory=list)
    auto_response: Optional[ResponseConfig] = None
    auto_request_body: Optional[RequestBodyConfig] = None

    def final_summary(self) -> Optional[str]:
        """The user's summary, else the inferred one."""
        return self.user_summary if self.user_summary is not None else self.auto_summary

    def final_description(self) -> Optional[str]:
        """The user's description, else the inferred one."""
        if self.user_description is not None:
            return self.user_description
        return self.auto_description

    def final_tags(self) -> list[str]:
        return list(self.user_tags)

    def final_params(self) -> list[ParamConfig]:
        """Inferred parameters, with user parameters replacing those of the same name."""
        params = list(self.auto_params)
        for user_param in self.user_params:
            position = next(
                (i for i, param in enumerate(params) if param.name == user_param.name), None
            )
            if position is None:
                params.append(user_param)
            else:
                params[position] = user_param
        return params

    def final_responses(self) -> list[ResponseConfig]:
        """The inferred success response, if any, followed by the user's responses."""
        responses = [] if self.auto_response is None else [self.auto_response]
        responses.extend(self.user_responses)
        return responses

    def final_request_body(self) -> Optional[RequestBodyConfig]:
        """The user's request body, else the inferred one."""
        if self.user_request_body is not None:
            return self.user_request_body
        return self.auto_request_body