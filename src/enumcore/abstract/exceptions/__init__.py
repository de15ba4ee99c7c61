"""Exception utilities for enumcore."""

from .traced_exceptions import TracedException, format_exception

__all__ = [
    "TracedException",
    "format_exception",
]
