"""Evaluation of expression trees against a variable store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skein.errors import DialogueArithmeticError, TypeMismatchError
from skein.expressions.tree import BinaryOp, Expression, Literal, UnaryOp, VariableRef
from skein.variables import Value, VariableType

if TYPE_CHECKING:
    from skein.variables import VariableStore

logger = logging.getLogger(__name__)

_RELATIONAL = frozenset({"<", "<=", ">", ">="})
_ARITHMETIC = frozenset({"+", "-", "*", "/"})


def _type_name(value: Value) -> str:
    return VariableType.of_value(value).value


class ExpressionEvaluator:
    """Evaluates expressions with runtime type checking.

    The evaluator only reads from the variable store; it never changes the
    store or any interpreter state.

    Type rules:
    - ``==`` and ``!=`` need operands of the same type.
    - ``<``, ``<=``, ``>``, ``>=``, ``-``, ``*``, ``/`` and unary ``-`` need numbers.
    - ``+`` adds two numbers or concatenates two strings.
    - ``&&``, ``||`` and ``!`` need booleans; ``&&`` and ``||`` short-circuit.

    Example usage:
        evaluator = ExpressionEvaluator(store)
        evaluator.evaluate(parse_expression("$gold * 2"))
        evaluator.evaluate_condition(parse_expression("$my_var == true"))
    """

    def __init__(self, variables: VariableStore) -> None:
        """Initialize the evaluator.

        Args:
            variables: Store used to resolve variable references.
        """
        self.variables = variables

    def evaluate(self, expression: Expression) -> Value:
        """Evaluate an expression and return its value.

        Raises:
            UndeclaredVariableError: If the expression reads an undeclared variable.
            TypeMismatchError: If an operator is applied to operands of the wrong type.
            DialogueArithmeticError: On division by zero.
        """
        if isinstance(expression, Literal):
            return expression.value
        if isinstance(expression, VariableRef):
            return self.variables.get(expression.name)
        if isinstance(expression, UnaryOp):
            return self._evaluate_unary(expression)
        if isinstance(expression, BinaryOp):
            return self._evaluate_binary(expression)
        msg = f"Cannot evaluate {expression!r}"
        raise TypeMismatchError(msg)

    def evaluate_condition(self, expression: Expression) -> bool:
        """Evaluate an expression that must produce a boolean.

        Raises:
            TypeMismatchError: If the result is not a boolean.
        """
        result = self.evaluate(expression)
        if not isinstance(result, bool):
            msg = f"Condition must be a bool, got {_type_name(result)} {result!r}"
            raise TypeMismatchError(msg)
        return result

    def _evaluate_unary(self, expression: UnaryOp) -> Value:
        operand = self.evaluate(expression.operand)
        if expression.op == "!":
            return not self._require_bool(operand, "!")
        return -self._require_number(operand, expression.op)

    def _evaluate_binary(self, expression: BinaryOp) -> Value:
        op = expression.op

        if op in ("&&", "||"):
            left = self._require_bool(self.evaluate(expression.left), op)
            if (op == "&&" and not left) or (op == "||" and left):
                return left
            return self._require_bool(self.evaluate(expression.right), op)

        left = self.evaluate(expression.left)
        right = self.evaluate(expression.right)

        if op in ("==", "!="):
            if VariableType.of_value(left) is not VariableType.of_value(right):
                msg = f"Cannot compare {_type_name(left)} {left!r} with {_type_name(right)} {right!r} using '{op}'"
                raise TypeMismatchError(msg)
            return (left == right) if op == "==" else (left != right)

        if op == "+" and isinstance(left, str) and isinstance(right, str):
            return left + right

        if op in _RELATIONAL or op in _ARITHMETIC:
            left_number = self._require_number(left, op)
            right_number = self._require_number(right, op)
            return self._apply_numeric(op, left_number, right_number)

        msg = f"Unknown operator '{op}'"
        raise TypeMismatchError(msg)

    @staticmethod
    def _apply_numeric(op: str, left: float, right: float) -> Value:
        if op == "<":
            return left < right
        if op == "<=":
            return left <= right
        if op == ">":
            return left > right
        if op == ">=":
            return left >= right
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if right == 0:
            msg = f"Division by zero ({left} / {right})"
            raise DialogueArithmeticError(msg)
        return left / right

    @staticmethod
    def _require_bool(value: Value, op: str) -> bool:
        if not isinstance(value, bool):
            msg = f"Operator '{op}' needs bool operands, got {_type_name(value)} {value!r}"
            raise TypeMismatchError(msg)
        return value

    @staticmethod
    def _require_number(value: Value, op: str) -> float:
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"Operator '{op}' needs number operands, got {_type_name(value)} {value!r}"
            raise TypeMismatchError(msg)
        return float(value)
