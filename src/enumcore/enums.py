"""
Re-export enums module for cleaner imports.

This allows: from enumcore.enums import define
Instead of: from enumcore.meta.classes.enums import define
"""

from .meta.classes.enums import (
    define,
    EnumConstant,
    EnumMetaclass,
    EnumDefinitionError,
    EnumInstantiationError,
    EnumCompositionError,
    EnumModificationError,
    UnknownConstantError,
)

__all__ = [
    "define",
    "EnumConstant",
    "EnumMetaclass",
    "EnumDefinitionError",
    "EnumInstantiationError",
    "EnumCompositionError",
    "EnumModificationError",
    "UnknownConstantError",
]
