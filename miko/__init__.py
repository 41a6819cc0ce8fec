"""Handler parameter analysis, attribute parsing, HTTP helpers and OpenAPI generation."""

__version__ = "0.3.11"

__all__ = ["attr_map", "core", "openapi", "params"]