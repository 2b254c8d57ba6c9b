"""Exceptions raised by the dialogue runtime.

All of these describe authoring or programming mistakes rather than transient
faults. They are raised synchronously by the call that triggered them, and the
interpreter restores its previous state before letting them propagate, so a
host can log the failure and carry on or stop the dialogue.
"""


class DialogueError(Exception):
    """Base exception for the dialogue runtime."""


class UnknownNodeError(DialogueError):
    """Raised when a node title does not exist in the loaded script."""

    def __init__(self, title: str) -> None:
        """Initialize with the missing node title."""
        super().__init__(f"Unknown node '{title}'")
        self.title = title


class DuplicateDeclarationError(DialogueError):
    """Raised when a variable is declared again with a different type or default."""


class UndeclaredVariableError(DialogueError):
    """Raised when a variable is read or written before being declared."""

    def __init__(self, name: str) -> None:
        """Initialize with the undeclared variable name."""
        super().__init__(f"Variable '{name}' has not been declared")
        self.name = name


class TypeMismatchError(DialogueError):
    """Raised when a value or operand does not have the required type."""


class DialogueArithmeticError(DialogueError, ArithmeticError):
    """Raised for invalid arithmetic such as division by zero."""


class InvalidOptionIndexError(DialogueError):
    """Raised when a selected option index is outside the eligible options."""


class InvalidStateTransitionError(DialogueError):
    """Raised when an operation is not allowed in the interpreter's current state."""


class ExecutionLimitError(DialogueError):
    """Raised when a single step runs too many silent statements without output."""


class ScriptLoadError(DialogueError):
    """Raised when compiled script data is missing or malformed."""


class ExpressionSyntaxError(ScriptLoadError):
    """Raised when expression text cannot be parsed."""
