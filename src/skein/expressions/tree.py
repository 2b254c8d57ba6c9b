"""Expression tree nodes and conversion from compiled data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from skein.errors import ScriptLoadError

UNARY_OPERATORS = frozenset({"!", "-"})
BINARY_OPERATORS = frozenset({"==", "!=", "&&", "||", "<", "<=", ">", ">=", "+", "-", "*", "/"})


@dataclass(frozen=True)
class Literal:
    """A constant boolean, number or string."""

    value: bool | float | str


@dataclass(frozen=True)
class VariableRef:
    """A read of a ``$``-prefixed variable."""

    name: str


@dataclass(frozen=True)
class UnaryOp:
    """Logical negation (``!``) or numeric negation (``-``)."""

    op: str
    operand: Expression


@dataclass(frozen=True)
class BinaryOp:
    """An operator applied to a left and right operand."""

    op: str
    left: Expression
    right: Expression


Expression = Literal | VariableRef | UnaryOp | BinaryOp


def expression_from_data(data: Any) -> Expression:  # noqa: ANN401
    """Build an expression from its compiled representation.

    Accepted forms:
        - An expression string, parsed with parse_expression(): ``"$gold >= 10"``
        - A bare literal: ``true``, ``3``, but not a string (strings are parsed)
        - A tagged tree:
            {"type": "literal", "value": 3}
            {"type": "variable", "name": "$gold"}
            {"type": "unary", "op": "!", "operand": {...}}
            {"type": "binary", "op": "+", "lhs": {...}, "rhs": {...}}

    Raises:
        ScriptLoadError: If the data does not describe a valid expression.
    """
    # Imported here to avoid a cycle: the parser builds tree nodes
    from skein.expressions.parser import parse_expression  # noqa: PLC0415

    if isinstance(data, str):
        return parse_expression(data)
    if isinstance(data, bool | int | float):
        return Literal(float(data) if not isinstance(data, bool) else data)
    if not isinstance(data, dict):
        msg = f"Invalid expression data: {data!r}"
        raise ScriptLoadError(msg)

    kind = data.get("type")
    if kind == "literal":
        value = data.get("value")
        if not isinstance(value, bool | int | float | str):
            msg = f"Invalid literal value: {value!r}"
            raise ScriptLoadError(msg)
        if isinstance(value, int | float) and not isinstance(value, bool):
            value = float(value)
        return Literal(value)
    if kind == "variable":
        name = data.get("name")
        if not isinstance(name, str):
            msg = f"Variable expression missing 'name': {data!r}"
            raise ScriptLoadError(msg)
        return VariableRef(name)
    if kind == "unary":
        op = data.get("op")
        if op not in UNARY_OPERATORS:
            msg = f"Unknown unary operator: {op!r}"
            raise ScriptLoadError(msg)
        return UnaryOp(op, expression_from_data(data.get("operand")))
    if kind == "binary":
        op = data.get("op")
        if op not in BINARY_OPERATORS:
            msg = f"Unknown binary operator: {op!r}"
            raise ScriptLoadError(msg)
        return BinaryOp(op, expression_from_data(data.get("lhs")), expression_from_data(data.get("rhs")))

    msg = f"Unknown expression type: {kind!r}"
    raise ScriptLoadError(msg)
