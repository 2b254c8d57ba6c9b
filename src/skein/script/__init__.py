"""Compiled script model and loading."""

from skein.script.loader import load_script_data, load_script_file
from skein.script.model import (
    Command,
    Conditional,
    ConditionalClause,
    Jump,
    Line,
    Node,
    Option,
    OptionBlock,
    Script,
    SetVariable,
    Statement,
    VariableDeclaration,
)

__all__ = [
    "Command",
    "Conditional",
    "ConditionalClause",
    "Jump",
    "Line",
    "Node",
    "Option",
    "OptionBlock",
    "Script",
    "SetVariable",
    "Statement",
    "VariableDeclaration",
    "load_script_data",
    "load_script_file",
]
