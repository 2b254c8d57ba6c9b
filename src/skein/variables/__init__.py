"""Variable storage for dialogue scripts."""

from skein.variables.store import Value, VariableStore, VariableType, normalize

__all__ = ["Value", "VariableStore", "VariableType", "normalize"]
