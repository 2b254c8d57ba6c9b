"""Unit tests for VariableStore."""

import unittest

import pytest

from skein.errors import DuplicateDeclarationError, TypeMismatchError, UndeclaredVariableError
from skein.variables import VariableStore, VariableType, normalize


class TestVariableType(unittest.TestCase):
    """Unit test class for VariableType."""

    def test_of_value_distinguishes_bool_from_number(self) -> None:
        """Test that booleans are not treated as numbers."""
        assert VariableType.of_value(True) is VariableType.BOOL
        assert VariableType.of_value(1) is VariableType.NUMBER
        assert VariableType.of_value(1.5) is VariableType.NUMBER
        assert VariableType.of_value("x") is VariableType.STRING

    def test_of_value_rejects_other_types(self) -> None:
        """Test that unsupported values raise TypeMismatchError."""
        with pytest.raises(TypeMismatchError):
            VariableType.of_value(None)
        with pytest.raises(TypeMismatchError):
            VariableType.of_value([1])

    def test_from_name_accepts_aliases(self) -> None:
        """Test type names used by compilers."""
        assert VariableType.from_name("Boolean") is VariableType.BOOL
        assert VariableType.from_name("int") is VariableType.NUMBER
        assert VariableType.from_name("str") is VariableType.STRING

    def test_from_name_unknown(self) -> None:
        """Test that an unknown type name raises TypeMismatchError."""
        with pytest.raises(TypeMismatchError):
            VariableType.from_name("list")

    def test_normalize_turns_ints_into_floats(self) -> None:
        """Test that integers are stored as floats."""
        assert normalize(3) == 3.0
        assert isinstance(normalize(3), float)
        assert normalize(True) is True


class TestVariableStore(unittest.TestCase):
    """Unit test class for VariableStore."""

    def setUp(self) -> None:
        """Create an empty store."""
        self.store = VariableStore()

    def test_declare_sets_default(self) -> None:
        """Test that declaring a variable makes its default readable."""
        self.store.declare("$my_var", VariableType.BOOL, False)

        assert self.store.get("$my_var") is False
        assert self.store.type_of("$my_var") is VariableType.BOOL
        assert "$my_var" in self.store

    def test_redeclare_same_type_and_default_is_noop(self) -> None:
        """Test that an identical declaration keeps the current value."""
        self.store.declare("$gold", VariableType.NUMBER, 0)
        self.store.set("$gold", 5)

        self.store.declare("$gold", VariableType.NUMBER, 0)

        assert self.store.get("$gold") == 5.0
        assert len(self.store) == 1

    def test_redeclare_with_other_type_fails(self) -> None:
        """Test that changing a variable's type is rejected."""
        self.store.declare("$gold", VariableType.NUMBER, 0)

        with pytest.raises(DuplicateDeclarationError):
            self.store.declare("$gold", VariableType.STRING, "0")

    def test_redeclare_with_other_default_fails(self) -> None:
        """Test that changing a variable's default is rejected."""
        self.store.declare("$gold", VariableType.NUMBER, 0)

        with pytest.raises(DuplicateDeclarationError):
            self.store.declare("$gold", VariableType.NUMBER, 10)

    def test_declare_with_mismatched_default_fails(self) -> None:
        """Test that the default must match the declared type."""
        with pytest.raises(TypeMismatchError):
            self.store.declare("$flag", VariableType.BOOL, 0)
        assert "$flag" not in self.store

    def test_declare_requires_prefixed_name(self) -> None:
        """Test that names must start with '$'."""
        with pytest.raises(ValueError, match=r"\$"):
            self.store.declare("gold", VariableType.NUMBER, 0)

    def test_get_undeclared_fails(self) -> None:
        """Test that reading an undeclared variable raises UndeclaredVariableError."""
        with pytest.raises(UndeclaredVariableError) as exc_info:
            self.store.get("$missing")
        assert exc_info.value.name == "$missing"

    def test_set_undeclared_fails(self) -> None:
        """Test that writing an undeclared variable raises UndeclaredVariableError."""
        with pytest.raises(UndeclaredVariableError):
            self.store.set("$missing", 1)

    def test_set_wrong_type_fails_and_keeps_value(self) -> None:
        """Test that type-changing assignments are rejected."""
        self.store.declare("$name", VariableType.STRING, "Ada")

        with pytest.raises(TypeMismatchError):
            self.store.set("$name", 3)
        assert self.store.get("$name") == "Ada"

    def test_seeded_variable_keeps_value_on_declaration(self) -> None:
        """Test that a script declaration does not overwrite a host-seeded value."""
        store = VariableStore({"$gold": 50})

        store.declare("$gold", VariableType.NUMBER, 0)

        assert store.get("$gold") == 50.0
        # The declaration is now recorded, so a conflicting one still fails
        with pytest.raises(DuplicateDeclarationError):
            store.declare("$gold", VariableType.NUMBER, 1)

    def test_seeded_variable_with_other_type_fails(self) -> None:
        """Test that a declaration must agree with the seeded type."""
        store = VariableStore({"$gold": 50})

        with pytest.raises(DuplicateDeclarationError):
            store.declare("$gold", VariableType.STRING, "")

    def test_reset_returns_to_defaults(self) -> None:
        """Test that reset() restores declared defaults only."""
        store = VariableStore({"$seeded": "x"})
        store.declare("$count", VariableType.NUMBER, 1)
        store.set("$count", 9)
        store.set("$seeded", "y")

        store.reset()

        assert store.get("$count") == 1.0
        assert store.get("$seeded") == "y"

    def test_snapshot_and_rollback(self) -> None:
        """Test that rollback() undoes declarations and assignments."""
        self.store.declare("$a", VariableType.NUMBER, 1)
        snapshot = self.store.snapshot()

        self.store.set("$a", 2)
        self.store.declare("$b", VariableType.BOOL, True)
        self.store.rollback(snapshot)

        assert self.store.get("$a") == 1.0
        assert "$b" not in self.store

    def test_state_round_trip(self) -> None:
        """Test that get_state() output restores an equivalent store."""
        self.store.declare("$met", VariableType.BOOL, False)
        self.store.declare("$name", VariableType.STRING, "")
        self.store.set("$met", True)
        self.store.seed("$gold", 7)

        restored = VariableStore()
        restored.restore_state(self.store.get_state())

        assert restored.as_dict() == self.store.as_dict()
        assert restored.type_of("$gold") is VariableType.NUMBER
        with pytest.raises(DuplicateDeclarationError):
            restored.declare("$met", VariableType.BOOL, True)

    def test_restore_rejects_default_without_type(self) -> None:
        """Test that a saved default must belong to a saved type."""
        self.store.declare("$kept", VariableType.BOOL, True)

        with pytest.raises(ValueError, match=r"\$x"):
            self.store.restore_state({"types": {}, "defaults": {"$x": 1}, "values": {}})

        self.store.reset()
        assert "$x" not in self.store
        with pytest.raises(UndeclaredVariableError):
            self.store.get("$x")
        assert self.store.get("$kept") is True

    def test_restore_rejects_mistyped_values(self) -> None:
        """Test that saved values must match their saved types."""
        with pytest.raises(TypeMismatchError):
            self.store.restore_state({"types": {"$gold": "number"}, "defaults": {}, "values": {"$gold": "lots"}})
        assert len(self.store) == 0

    def test_names_in_declaration_order(self) -> None:
        """Test that names() preserves declaration order."""
        self.store.declare("$b", VariableType.NUMBER, 0)
        self.store.declare("$a", VariableType.NUMBER, 0)

        assert self.store.names() == ["$b", "$a"]


if __name__ == "__main__":
    unittest.main()
