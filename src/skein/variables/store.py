"""Typed variable storage shared by every node of a dialogue.

A VariableStore maps ``$``-prefixed names to boolean, numeric or string values.
The type of a variable is fixed when it is declared, either by a declaration
statement in the script or by the host seeding the store before the dialogue
starts. Reading or writing an undeclared variable is an error rather than an
implicit default.

Numbers are always stored as floats so that ``1`` and ``1.0`` compare equal and
format identically.

Example usage:
    store = VariableStore()
    store.declare("$gold", VariableType.NUMBER, 0)
    store.set("$gold", 10)
    store.get("$gold")  # 10.0

    # Persist between sessions
    saved = store.get_state()
    other = VariableStore()
    other.restore_state(saved)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from skein.constants import VARIABLE_PREFIX
from skein.errors import DuplicateDeclarationError, TypeMismatchError, UndeclaredVariableError

logger = logging.getLogger(__name__)

Value = bool | float | str


class VariableType(Enum):
    """Types a dialogue variable can have."""

    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"

    @classmethod
    def of_value(cls, value: Any) -> VariableType:  # noqa: ANN401
        """Return the variable type matching a Python value.

        Raises:
            TypeMismatchError: If the value is not a bool, number or string.
        """
        # bool is a subclass of int, so it must be checked first
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int | float):
            return cls.NUMBER
        if isinstance(value, str):
            return cls.STRING
        msg = f"Unsupported variable value {value!r} of type {type(value).__name__}"
        raise TypeMismatchError(msg)

    @classmethod
    def from_name(cls, name: str) -> VariableType:
        """Return the variable type for a type name used in compiled scripts."""
        aliases = {
            "bool": cls.BOOL,
            "boolean": cls.BOOL,
            "number": cls.NUMBER,
            "float": cls.NUMBER,
            "int": cls.NUMBER,
            "string": cls.STRING,
            "str": cls.STRING,
        }
        try:
            return aliases[name.lower()]
        except KeyError:
            msg = f"Unknown variable type '{name}'"
            raise TypeMismatchError(msg) from None


def normalize(value: Any) -> Value:  # noqa: ANN401
    """Convert a Python value to its stored form (ints become floats)."""
    if VariableType.of_value(value) is VariableType.NUMBER:
        return float(value)
    return value


class VariableStore:
    """Typed key/value mapping with declared defaults.

    The store is owned by the host and passed explicitly to each interpreter.
    It is not thread-safe; two interpreters sharing one store need external
    synchronization.

    Attributes:
        _types: Declared type of each variable.
        _defaults: Declared default of each variable. Variables seeded by the host
            have no entry until a script declares them.
        _values: Current value of each variable.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            initial: Optional host-provided values. Each entry is declared with the
                type inferred from its value.
        """
        self._types: dict[str, VariableType] = {}
        self._defaults: dict[str, Value] = {}
        self._values: dict[str, Value] = {}
        for name, value in (initial or {}).items():
            self.seed(name, value)

    def declare(self, name: str, var_type: VariableType, default: Any) -> None:  # noqa: ANN401
        """Declare a variable with a type and default value.

        Declaring a variable again with the same type and default does nothing.
        A variable seeded by the host accepts one declaration of the same type,
        which records the default but keeps the seeded value.

        Args:
            name: Variable name, starting with ``$``.
            var_type: The fixed type of the variable.
            default: Initial value, which must match var_type.

        Raises:
            DuplicateDeclarationError: If the variable exists with another type or default.
            TypeMismatchError: If default does not match var_type.
        """
        self._check_name(name)
        if VariableType.of_value(default) is not var_type:
            msg = f"Default {default!r} for '{name}' is not a {var_type.value}"
            raise TypeMismatchError(msg)
        default = normalize(default)

        if name in self._types:
            existing_type = self._types[name]
            if existing_type is not var_type:
                msg = f"Variable '{name}' already declared as {existing_type.value}, not {var_type.value}"
                raise DuplicateDeclarationError(msg)
            if name not in self._defaults:
                self._defaults[name] = default
                logger.debug("VariableStore: Declared seeded variable '%s' (keeping %r)", name, self._values[name])
                return
            if self._defaults[name] != default:
                msg = f"Variable '{name}' already declared with default {self._defaults[name]!r}, not {default!r}"
                raise DuplicateDeclarationError(msg)
            logger.debug("VariableStore: Re-declaration of '%s' ignored", name)
            return

        self._types[name] = var_type
        self._defaults[name] = default
        self._values[name] = default
        logger.debug("VariableStore: Declared '%s' as %s = %r", name, var_type.value, default)

    def seed(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Set a host-provided value, declaring the variable if needed.

        Unlike declare(), seeding does not record a default, so a later
        declaration in the script keeps this value.
        """
        self._check_name(name)
        var_type = VariableType.of_value(value)
        if name in self._types:
            self.set(name, value)
            return
        self._types[name] = var_type
        self._values[name] = normalize(value)

    def get(self, name: str) -> Value:
        """Return the current value of a variable.

        Raises:
            UndeclaredVariableError: If the variable has not been declared.
        """
        try:
            return self._values[name]
        except KeyError:
            raise UndeclaredVariableError(name) from None

    def set(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Assign a new value to a declared variable.

        Raises:
            UndeclaredVariableError: If the variable has not been declared.
            TypeMismatchError: If the value's type differs from the declared type.
        """
        if name not in self._types:
            raise UndeclaredVariableError(name)
        declared = self._types[name]
        actual = VariableType.of_value(value)
        if actual is not declared:
            msg = f"Cannot assign {actual.value} {value!r} to {declared.value} variable '{name}'"
            raise TypeMismatchError(msg)
        self._values[name] = normalize(value)

    def is_declared(self, name: str) -> bool:
        """Check whether a variable has been declared or seeded."""
        return name in self._types

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def type_of(self, name: str) -> VariableType:
        """Return the declared type of a variable."""
        try:
            return self._types[name]
        except KeyError:
            raise UndeclaredVariableError(name) from None

    def names(self) -> list[str]:
        """Return all variable names in declaration order."""
        return list(self._types)

    def as_dict(self) -> dict[str, Value]:
        """Return a copy of all current values."""
        return dict(self._values)

    def reset(self) -> None:
        """Return every declared variable to its default.

        Seeded variables that were never declared keep their values.
        """
        self._values.update(self._defaults)

    def clear(self) -> None:
        """Forget every variable."""
        self._types.clear()
        self._defaults.clear()
        self._values.clear()

    def snapshot(self) -> tuple[dict[str, VariableType], dict[str, Value], dict[str, Value]]:
        """Capture the full store contents for a later rollback()."""
        return dict(self._types), dict(self._defaults), dict(self._values)

    def rollback(self, snapshot: tuple[dict[str, VariableType], dict[str, Value], dict[str, Value]]) -> None:
        """Restore contents captured by snapshot()."""
        types, defaults, values = snapshot
        self._types = dict(types)
        self._defaults = dict(defaults)
        self._values = dict(values)

    def get_state(self) -> dict[str, Any]:
        """Get store state for saving.

        Returns:
            JSON-serializable dictionary of types, defaults and values.
        """
        return {
            "types": {name: var_type.value for name, var_type in self._types.items()},
            "defaults": dict(self._defaults),
            "values": dict(self._values),
        }

    def restore_state(self, state: dict[str, Any]) -> None:
        """Restore store state from saved data.

        Values without a saved type are restored like seeded values. The store
        is left unchanged if the state is inconsistent.

        Args:
            state: Dictionary previously returned by get_state().

        Raises:
            ValueError: If a default names an untyped variable.
            TypeMismatchError: If a default or value does not match its type.
        """
        types = {name: VariableType.from_name(type_name) for name, type_name in state.get("types", {}).items()}
        defaults: dict[str, Value] = {}
        values: dict[str, Value] = {}
        for name, value in state.get("defaults", {}).items():
            if name not in types:
                msg = f"Saved default for '{name}' has no saved type"
                raise ValueError(msg)
            defaults[name] = self._checked(name, types[name], value)
        for name, value in state.get("values", {}).items():
            var_type = types.setdefault(name, VariableType.of_value(value))
            values[name] = self._checked(name, var_type, value)

        self._types, self._defaults, self._values = types, defaults, values
        logger.debug("VariableStore: Restored %d variables", len(self._types))

    @staticmethod
    def _checked(name: str, var_type: VariableType, value: Any) -> Value:  # noqa: ANN401
        if VariableType.of_value(value) is not var_type:
            msg = f"Saved value {value!r} for '{name}' is not a {var_type.value}"
            raise TypeMismatchError(msg)
        return normalize(value)

    @staticmethod
    def _check_name(name: str) -> None:
        if not isinstance(name, str) or not name.startswith(VARIABLE_PREFIX) or len(name) == len(VARIABLE_PREFIX):
            msg = f"Variable names must start with '{VARIABLE_PREFIX}', got {name!r}"
            raise ValueError(msg)

    def __repr__(self) -> str:
        return f"VariableStore({self._values!r})"
