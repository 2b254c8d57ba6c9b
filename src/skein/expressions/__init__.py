"""Expressions used by guards, conditionals and assignments."""

from skein.expressions.evaluator import ExpressionEvaluator
from skein.expressions.parser import parse_expression, tokenize
from skein.expressions.tree import BinaryOp, Expression, Literal, UnaryOp, VariableRef, expression_from_data

__all__ = [
    "BinaryOp",
    "Expression",
    "ExpressionEvaluator",
    "Literal",
    "UnaryOp",
    "VariableRef",
    "expression_from_data",
    "parse_expression",
    "tokenize",
]
