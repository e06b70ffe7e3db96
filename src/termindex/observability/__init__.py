"""Observability helpers (structured logging)."""

from termindex.observability.logging import JsonFormatter, configure_logging


__all__ = [
    "JsonFormatter",
    "configure_logging",
]
