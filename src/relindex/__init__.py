"""Incremental code-relationship index for JavaScript/TypeScript trees."""

__version__ = "0.1.0"
