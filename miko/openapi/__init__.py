"""OpenAPI details: user annotations, inference from handlers, and operation rendering."""

__all__ = ["attributes", "config", "generator", "infer"]