"""
Re-export exceptions module for cleaner imports.

This allows: from enumcore.exceptions import EnumDefinitionError
Instead of: from enumcore.meta.classes.enums import EnumDefinitionError
"""

from .abstract.exceptions.traced_exceptions import TracedException, format_exception
from .meta.freezing import FreezingError
from .meta.classes.enums import (
    EnumError,
    EnumDefinitionError,
    EnumInstantiationError,
    EnumCompositionError,
    EnumModificationError,
    UnknownConstantError,
)

__all__ = [
    "TracedException",
    "format_exception",
    "EnumError",
    "EnumDefinitionError",
    "EnumInstantiationError",
    "EnumCompositionError",
    "EnumModificationError",
    "UnknownConstantError",
    "FreezingError",
]
