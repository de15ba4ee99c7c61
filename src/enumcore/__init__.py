"""
enumcore: Closed, immutable enum types defined at runtime.

This library provides:
- define() to build a sealed enum type from a list of names or a keyed definition
- Per-constant attributes and shared methods, frozen once defined
- TracedException based errors for enhanced exception formatting
"""

from .meta.classes.enums import define, EnumConstant

__version__ = "0.1.0"
__author__ = "Sébastien Gachoud"
__license__ = "MIT"

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Main API
    "define",
    "EnumConstant",
]
