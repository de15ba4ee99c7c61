"""
MIT License

Copyright (c) 2025 Sébastien Gachoud

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

-------------------------------------------------------------------------------

Author: Sébastien Gachoud
Created: 2025-07-11
Updated: 2026-10-18
Description: This module provides tools to define closed enum types at runtime, modeled after
            Java enums. An enum type is a sealed class whose only instances are its constants.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import logging
import re
import sys
from collections.abc import Callable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any, ClassVar, NoReturn, Self, TypeAlias

from ...abstract.exceptions.traced_exceptions import TracedException
from ..freezing import freeze, FreezingError

logger = logging.getLogger(__name__)

AttributeBag: TypeAlias = Mapping[str, Any]

_TYPE_NAME_PATTERN = re.compile(r"[a-z$_][0-9a-z$_]*", re.IGNORECASE | re.ASCII)
_DEFINITION_KEYS = ("constants", "methods")
_RESERVED_NAMES = frozenset({"values", "from_name", "name", "ordinal", "_name", "_ordinal"})


class EnumError(TracedException):
    """Base error of enum types."""


class EnumDefinitionError(EnumError, TypeError, ValueError):
    """Invalid arguments given to define()."""


class EnumInstantiationError(EnumError, TypeError):
    """Instantiation error of an enum type."""


class EnumCompositionError(EnumError, TypeError):
    """Composition error of an enum type."""


class EnumModificationError(EnumError, AttributeError):
    """Modification error of an enum type or of one of its constants."""


class UnknownConstantError(EnumError, TypeError, LookupError):
    """Lookup of a constant that the enum type does not have."""


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _verify_type_name(type_name: Any) -> None:
    """Verify that the type name is an identifier made of letters, digits, $ and _, not
    starting with a digit.

    Args:
        type_name (Any): name of the enum type.

    Raises:
        EnumDefinitionError: Raised when the name is missing or malformed.
    """
    if type_name is None:
        raise EnumDefinitionError("A name is required.")
    if not isinstance(type_name, str) or not _TYPE_NAME_PATTERN.fullmatch(type_name):
        raise EnumDefinitionError(
            f"Invalid enum name {type_name!r}. Enum names can only consist of numbers, letters,"
            " $, and _, and can only start with letters, $, or _."
        )


def _verify_constant_name(type_name: str, name: Any, methods: Mapping[str, Any]) -> None:
    """Verify that a constant name can be exposed on the enum type.

    Args:
        type_name (str): name of the enum type.
        name (Any): name of the constant.
        methods (Mapping[str, Any]): shared methods of the enum type.

    Raises:
        EnumDefinitionError: Raised when the name is not a non-empty string or would shadow
            a member of the enum type.
    """
    if not isinstance(name, str) or not name:
        raise EnumDefinitionError(
            f"Constant names of '{type_name}' must be non-empty strings, got {name!r}."
        )
    if _is_dunder(name) or name in _RESERVED_NAMES or name in methods:
        raise EnumDefinitionError(
            f"Constant name '{name}' of '{type_name}' is reserved or shadows a method."
        )


def _verify_member_name(type_name: str, kind: str, name: Any) -> None:
    """Verify that an attribute or method name is a public identifier that does not shadow
    the accessors of the enum type.

    Raises:
        EnumDefinitionError: Raised when the name is invalid or reserved.
    """
    if not isinstance(name, str) or not name.isidentifier():
        raise EnumDefinitionError(
            f"{kind.capitalize()} names of '{type_name}' must be identifiers, got {name!r}."
        )
    # class private names are mangled by __slots__, dunders belong to the type protocol.
    if name.startswith("__") or name in _RESERVED_NAMES:
        raise EnumDefinitionError(f"{kind.capitalize()} name '{name}' of '{type_name}' is reserved.")


def _verify_sequence_definition(type_name: str, definition: Sequence[Any]) -> tuple[str, ...]:
    """Verify a definition given as a sequence of constant names.

    Args:
        type_name (str): name of the enum type.
        definition (Sequence[Any]): the constant names.

    Raises:
        EnumDefinitionError: Raised when the sequence is empty, holds something else than
            strings or holds the same name twice.

    Returns:
        tuple[str, ...]: The constant names in definition order.
    """
    if len(definition) == 0:
        raise EnumDefinitionError("Need to provide at least one constant.")
    if not all(isinstance(element, str) for element in definition):
        raise EnumDefinitionError("One or more elements in the constant sequence is not a string.")

    seen: set[str] = set()
    for name in definition:
        _verify_constant_name(type_name, name, {})
        if name in seen:
            raise EnumDefinitionError(f"Constant '{name}' is defined twice in '{type_name}'.")
        seen.add(name)
    return tuple(definition)


def _verify_keyed_definition(
    type_name: str, definition: Mapping[Any, Any]
) -> tuple[tuple[str, ...], dict[str, AttributeBag], dict[str, Callable[..., Any]]]:
    """Verify a definition given as a mapping with a 'constants' entry and an optional
    'methods' entry.

    Args:
        type_name (str): name of the enum type.
        definition (Mapping[Any, Any]): the definition.

    Raises:
        EnumDefinitionError: Raised when the definition is malformed.

    Returns:
        tuple: The constant names, the attribute bags by constant name and the shared methods.
    """
    unknown = [key for key in definition if key not in _DEFINITION_KEYS]
    if unknown:
        raise EnumDefinitionError(
            f"Unknown entries {unknown!r} in the definition of '{type_name}'. Expected only"
            f" {_DEFINITION_KEYS!r}."
        )

    if "constants" not in definition:
        raise EnumDefinitionError(
            "If definition is a mapping, it must have a 'constants' entry."
        )
    constants = definition["constants"]
    if not isinstance(constants, Mapping):
        raise EnumDefinitionError("The 'constants' entry of the definition must be a mapping.")
    if len(constants) == 0:
        raise EnumDefinitionError("The 'constants' entry of the definition cannot be empty.")

    methods = definition.get("methods")
    if methods is None:
        methods = {}
    if not isinstance(methods, Mapping):
        raise EnumDefinitionError("The 'methods' entry of the definition must be a mapping.")
    for method_name, method in methods.items():
        _verify_member_name(type_name, "method", method_name)
        if not callable(method):
            raise EnumDefinitionError(
                f"Method '{method_name}' of '{type_name}' is not callable."
            )

    bags: dict[str, AttributeBag] = {}
    for name, bag in constants.items():
        _verify_constant_name(type_name, name, methods)
        if not isinstance(bag, Mapping):
            raise EnumDefinitionError(
                f"Constant '{name}' of '{type_name}' does not have an associated mapping of"
                " attributes."
            )
        for attribute in bag:
            _verify_member_name(type_name, "attribute", attribute)
            if attribute in methods or attribute in constants:
                raise EnumDefinitionError(
                    f"Attribute '{attribute}' of constant '{name}' shadows a method or a"
                    f" constant of '{type_name}'."
                )
        bags[name] = bag

    return tuple(bags), bags, dict(methods)


def _verify_definition(
    type_name: str, definition: Any
) -> tuple[tuple[str, ...], dict[str, AttributeBag], dict[str, Callable[..., Any]]]:
    """Verify the definition of an enum type and normalize it.

    Args:
        type_name (str): name of the enum type.
        definition (Any): a sequence of constant names or a keyed definition.

    Raises:
        EnumDefinitionError: Raised when the definition is missing or malformed.

    Returns:
        tuple: The constant names, the attribute bags by constant name and the shared methods.
    """
    if definition is None:
        raise EnumDefinitionError("Constants are required.")
    if isinstance(definition, (list, tuple)):
        return _verify_sequence_definition(type_name, definition), {}, {}
    if isinstance(definition, Mapping):
        return _verify_keyed_definition(type_name, definition)
    raise EnumDefinitionError(
        "The definition parameter must either be a sequence of names or a mapping, got"
        f" {type(definition).__name__}."
    )


def _instantiation_error(name: str) -> Callable[..., NoReturn]:
    """Helper to format an error message when trying to instantiate an enum type.

    Args:
        name (str): name of the enum type.

    Returns:
        Callable[..., NoReturn]: A callable that throws an instantiation error when called.
    """

    def f(_: Any, *args: Any, **kwargs: Any) -> NoReturn:
        raise EnumInstantiationError(
            f"Cannot instantiate an instance of '{name}'. Enum constants are only created by"
            " define()."
        )

    return f


def _guarded_constructor(type_name: str, marker: type) -> Callable[..., Any]:
    """Create the __new__ of an enum type. It only accepts an instance of the marker, which
    never leaves define(), followed by the name and the ordinal of the constant.

    Args:
        type_name (str): name of the enum type.
        marker (type): private marker class of the enum type.

    Returns:
        Callable[..., Any]: The guarded __new__.
    """
    refuse = _instantiation_error(type_name)

    def __new__(cls: type, *args: Any, **kwargs: Any) -> Any:
        if kwargs or len(args) != 3 or not isinstance(args[0], marker):
            refuse(cls)
        _, name, ordinal = args
        constant = object.__new__(cls)
        object.__setattr__(constant, "_name", name)
        object.__setattr__(constant, "_ordinal", ordinal)
        return constant

    return __new__


def _caller_module() -> str:
    """Name of the module that called define()."""
    try:
        return sys._getframe(2).f_globals.get("__name__", "__main__")
    except (AttributeError, ValueError):
        return "__main__"


def _verify_bases(name: str, bases: tuple[type, ...]) -> None:
    """Verify that no sealed enum type is extended.

    Raises:
        EnumCompositionError: Raised when a base is an enum type holding constants.
    """
    for base in bases:
        if isinstance(base, EnumMetaclass) and base.__constants__:
            raise EnumCompositionError(
                f"Enum type '{base.__name__}' is sealed and cannot be extended by '{name}'."
            )


class EnumMetaclass(type):
    __constants__: tuple[str, ...]
    __members__: Mapping[str, Any]
    __enum_values__: tuple[Any, ...]

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        /,
        **kwargs: Any,
    ) -> Any:
        # verify that no enum type is extended.
        _verify_bases(name, bases)

        return super().__new__(mcs, name, bases, namespace, **kwargs)

    def __setattr__(cls, name: str, value: Any) -> NoReturn:
        raise EnumModificationError(
            f"Attribute '{name}' of enum type '{cls.__name__}' cannot be modified. Reason: Enum"
            " type cannot be modified."
        )

    def __delattr__(cls, name: str) -> NoReturn:
        raise EnumModificationError(
            f"Attribute '{name}' of enum type '{cls.__name__}' cannot be deleted. Reason: Enum"
            " type cannot be modified."
        )

    def __str__(cls) -> str:
        """Returns the enum type name followed by its constant names."""
        return f"{cls.__name__} {{ {', '.join(cls.__constants__)} }}"

    def __repr__(cls) -> str:
        """Returns a string representation of the enum type."""
        return f"<enum {cls.__name__}({', '.join(cls.__constants__)})>"

    def __iter__(cls) -> Iterator[Any]:
        return iter(cls.__enum_values__)

    def __len__(cls) -> int:
        """Return the number of constants."""
        return len(cls.__enum_values__)

    def __bool__(cls) -> bool:
        return True

    def __contains__(cls, item: object) -> bool:
        """Check if a constant, or a constant name, belongs to the enum type."""
        if isinstance(item, str):
            return item in cls.__members__
        return any(item is constant for constant in cls.__enum_values__)

    def __getitem__(cls, name: str) -> Any:
        """Get a constant by name. See EnumConstant.from_name."""
        return cls.from_name(name)


class EnumConstant(metaclass=EnumMetaclass):
    """Base class of the enum types created by define().

    Examples:
        >>> Numbers = define("Numbers", ["ONE", "TWO", "THREE"])
        >>> Numbers.from_name("TWO").ordinal()
        1
        >>> str(Numbers.ONE)
        'ONE'
        >>> str(Numbers)
        'Numbers { ONE, TWO, THREE }'

        >>> Numbers.ONE.x = 1 # raises EnumModificationError.

        >>> Numbers() # raises EnumInstantiationError.
    """

    __slots__ = ("_name", "_ordinal", "__weakref__")

    __constants__: ClassVar[tuple[str, ...]] = ()
    __members__: ClassVar[Mapping[str, Any]] = MappingProxyType({})
    __enum_values__: ClassVar[tuple[Any, ...]] = ()

    _name: str
    _ordinal: int

    __new__ = _instantiation_error("EnumConstant")

    @classmethod
    def values(cls) -> tuple[Self, ...]:
        """Return all the constants of the enum type in definition order."""
        return cls.__enum_values__

    @classmethod
    def from_name(cls, name: str) -> Self:
        """Get the constant with the given name.

        Args:
            name (str): name of the constant.

        Raises:
            UnknownConstantError: Raised when the enum type has no such constant.

        Returns:
            Self: The constant.
        """
        constant = cls.__members__.get(name) if isinstance(name, str) else None
        if constant is None:
            raise UnknownConstantError(
                f"{cls.__name__} does not have a constant with name {name!r}."
            )
        return constant

    def name(self) -> str:
        return self._name

    def ordinal(self) -> int:
        return self._ordinal

    def __str__(self) -> str:
        return self._name

    def __format__(self, format_spec: str) -> str:
        return format(self._name, format_spec)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}.{self._name}: {self._ordinal}>"

    def __setattr__(self, name: str, value: Any) -> NoReturn:
        raise EnumModificationError(
            f"Attribute '{name}' of constant '{type(self).__name__}.{self._name}' cannot be"
            " modified. Reason: Enum constants cannot be modified."
        )

    def __delattr__(self, name: str) -> NoReturn:
        raise EnumModificationError(
            f"Attribute '{name}' of constant '{type(self).__name__}.{self._name}' cannot be"
            " deleted. Reason: Enum constants cannot be modified."
        )

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self


def _freeze_bags(type_name: str, bags: Mapping[str, AttributeBag]) -> dict[str, AttributeBag]:
    """Freeze the attribute values of every constant.

    Raises:
        EnumDefinitionError: Raised when an attribute value cannot be frozen.
    """
    frozen: dict[str, AttributeBag] = {}
    for name, bag in bags.items():
        frozen_bag: dict[str, Any] = {}
        for attribute, value in bag.items():
            try:
                frozen_bag[attribute] = freeze(value)
            except FreezingError as e:
                raise EnumDefinitionError(
                    f"Failed to freeze attribute '{attribute}' of constant '{name}' in"
                    f" '{type_name}': {e}"
                ) from e
        frozen[name] = frozen_bag
    return frozen


def _materialize(
    cls: type[EnumConstant],
    marker: type,
    names: tuple[str, ...],
    bags: Mapping[str, AttributeBag],
) -> tuple[EnumConstant, ...]:
    """Create the constants in definition order and attach their attributes.

    Args:
        cls (type[EnumConstant]): the enum type.
        marker (type): private marker class of the enum type.
        names (tuple[str, ...]): constant names in definition order.
        bags (Mapping[str, AttributeBag]): frozen attributes by constant name.

    Returns:
        tuple[EnumConstant, ...]: The constants, the ordinal being the position.
    """
    constants = []
    for ordinal, name in enumerate(names):
        constant = cls(marker(), name, ordinal)
        for attribute, value in bags.get(name, {}).items():
            object.__setattr__(constant, attribute, value)
        constants.append(constant)
    return tuple(constants)


def _seal(cls: type[EnumConstant], constants: tuple[EnumConstant, ...]) -> None:
    """Install the constants and the lookup tables on the enum type. After this, nothing can
    be set on the type anymore since EnumMetaclass refuses any modification."""
    members = MappingProxyType({constant.name(): constant for constant in constants})
    for constant in constants:
        type.__setattr__(cls, constant.name(), constant)
    type.__setattr__(cls, "__constants__", tuple(members))
    type.__setattr__(cls, "__members__", members)
    type.__setattr__(cls, "__enum_values__", constants)


def define(
    type_name: str | None = None,
    definition: Sequence[str] | Mapping[str, Any] | None = None,
    /,
    *,
    module: str | None = None,
    qualname: str | None = None,
) -> type[EnumConstant]:
    """Define a closed enum type.

    Args:
        type_name (str): name of the enum type. Letters, digits, $ and _, not starting with a
            digit.
        definition (Sequence[str] | Mapping[str, Any]): either a sequence of constant names, or a mapping with a
            'constants' entry mapping each constant name to its attributes, and an optional
            'methods' entry mapping names to functions shared by all the constants.
        module (str | None): __module__ of the enum type. Defaults to the caller's module.
        qualname (str | None): __qualname__ of the enum type. Defaults to type_name.

    Raises:
        EnumDefinitionError: Raised when the name or the definition is invalid.

    Returns:
        type[EnumConstant]: The sealed enum type. Its constants are available as attributes.

    Examples:
        >>> Numbers = define("Numbers", {
        ...     "constants": {"ONE": {"value": 1}, "TWO": {"value": 2}},
        ...     "methods": {"add": lambda self, other: self.value + other.value},
        ... })
        >>> Numbers.ONE.add(Numbers.TWO)
        3
    """
    _verify_type_name(type_name)
    names, bags, methods = _verify_definition(type_name, definition)
    bags = _freeze_bags(type_name, bags)

    # never leaves this call, so only define() can build the constants.
    marker = type(f"_{type_name}Marker", (), {"__slots__": ()})

    namespace: dict[str, Any] = dict(methods)
    namespace["__new__"] = _guarded_constructor(type_name, marker)
    namespace["__slots__"] = tuple(dict.fromkeys(a for bag in bags.values() for a in bag))
    namespace["__module__"] = module if module is not None else _caller_module()
    namespace["__qualname__"] = qualname if qualname is not None else type_name

    cls = EnumMetaclass(type_name, (EnumConstant,), namespace)
    constants = _materialize(cls, marker, names, bags)
    _seal(cls, constants)

    logger.debug(
        "Defined enum type %s with %d constants and %d shared methods.",
        type_name,
        len(constants),
        len(methods),
    )
    return cls
