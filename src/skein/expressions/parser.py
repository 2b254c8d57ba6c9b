"""Parser for compiled expression text.

Compiled scripts may carry guards and assignments as plain expression text,
for example ``$my_var == true`` or ``($gold + 5) * 2 >= $price``. This module
turns that text into the tree defined in skein.expressions.tree.

Precedence, lowest to highest:
    ||  (or)
    &&  (and)
    ==  !=
    <  <=  >  >=
    +  -
    *  /
    unary !  (not)  and unary -
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NoReturn

from skein.errors import ExpressionSyntaxError
from skein.expressions.tree import BinaryOp, Expression, Literal, UnaryOp, VariableRef

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<number>\d+(?:\.\d+)?|\.\d+)
    | (?P<string>"(?:[^"\\]|\\.)*")
    | (?P<variable>\$[A-Za-z_][A-Za-z0-9_]*)
    | (?P<operator>==|!=|<=|>=|&&|\|\||[<>!+\-*/()])
    | (?P<word>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)

_WORD_OPERATORS = {"and": "&&", "or": "||", "not": "!"}

_BINARY_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 4,
    "<=": 4,
    ">": 4,
    ">=": 4,
    "+": 5,
    "-": 5,
    "*": 6,
    "/": 6,
}


@dataclass(frozen=True)
class Token:
    """A lexical token with its position in the source text."""

    kind: str
    value: str
    position: int


def tokenize(text: str) -> list[Token]:
    """Split expression text into tokens.

    Raises:
        ExpressionSyntaxError: On characters that start no valid token.
    """
    tokens: list[Token] = []
    position = 0
    while position < len(text):
        if text[position].isspace():
            position += 1
            continue
        match = _TOKEN_PATTERN.match(text, position)
        if not match:
            msg = f"Unexpected character {text[position]!r} at {position} in {text!r}"
            raise ExpressionSyntaxError(msg)
        kind = match.lastgroup or ""
        value = match.group()
        if kind == "word" and value in _WORD_OPERATORS:
            kind, value = "operator", _WORD_OPERATORS[value]
        tokens.append(Token(kind, value, position))
        position = match.end()
    return tokens


class _Parser:
    """Precedence-climbing parser over a token list."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    def parse(self) -> Expression:
        if not self.tokens:
            self._fail("Empty expression")
        expression = self._parse_binary(1)
        if self.index < len(self.tokens):
            token = self.tokens[self.index]
            self._fail(f"Unexpected {token.value!r} at {token.position}")
        return expression

    def _peek(self) -> Token | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            self._fail("Unexpected end of expression")
        self.index += 1
        return token

    def _parse_binary(self, min_precedence: int) -> Expression:
        left = self._parse_unary()
        while True:
            token = self._peek()
            if token is None or token.kind != "operator" or token.value not in _BINARY_PRECEDENCE:
                return left
            precedence = _BINARY_PRECEDENCE[token.value]
            if precedence < min_precedence:
                return left
            self.index += 1
            right = self._parse_binary(precedence + 1)
            left = BinaryOp(token.value, left, right)

    def _parse_unary(self) -> Expression:
        token = self._peek()
        if token is not None and token.kind == "operator" and token.value in ("!", "-"):
            self.index += 1
            return UnaryOp(token.value, self._parse_unary())
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        token = self._next()
        if token.kind == "number":
            return Literal(float(token.value))
        if token.kind == "string":
            return Literal(re.sub(r"\\(.)", r"\1", token.value[1:-1]))
        if token.kind == "variable":
            return VariableRef(token.value)
        if token.kind == "word":
            if token.value == "true":
                return Literal(True)  # noqa: FBT003
            if token.value == "false":
                return Literal(False)  # noqa: FBT003
            self._fail(f"Unknown identifier {token.value!r} at {token.position}")
        if token.value == "(":
            expression = self._parse_binary(1)
            closing = self._next()
            if closing.value != ")":
                self._fail(f"Expected ')' at {closing.position}")
            return expression
        self._fail(f"Unexpected {token.value!r} at {token.position}")

    def _fail(self, message: str) -> NoReturn:
        msg = f"{message} in expression {self.text!r}"
        raise ExpressionSyntaxError(msg)


def parse_expression(text: str) -> Expression:
    """Parse expression text into an expression tree.

    Args:
        text: Expression source, e.g. ``"$my_var == true"``.

    Returns:
        The root node of the parsed tree.

    Raises:
        ExpressionSyntaxError: If the text is not a valid expression.
    """
    return _Parser(text).parse()
