"""Structured representation of a compiled dialogue script.

A script is a set of named nodes. Each node body is an ordered sequence of
statements. Everything here is immutable once built; the interpreter keeps its
own cursor and never modifies the model.

Nodes reference each other by title only (jumps and option targets are looked
up in the Script table when executed), so the node graph may contain cycles
without any node holding a reference to another.

Example:
    script = Script.from_nodes([
        Node("Start", (
            VariableDeclaration("$met", VariableType.BOOL, False),
            Line("Martin: Hello!"),
            OptionBlock((
                Option("Hi Martin", body=(SetVariable("$met", Literal(True)),)),
                Option("Leave", jump_target="End"),
            )),
        )),
        Node("End", (Line("Goodbye."),)),
    ])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from skein.errors import ScriptLoadError, UnknownNodeError
from skein.text import find_references

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from skein.expressions import Expression
    from skein.variables import Value, VariableType


@dataclass(frozen=True)
class Line:
    """A line of displayable text, possibly containing ``{$var}`` placeholders.

    Attributes:
        text: Raw text as compiled, before interpolation.
        line_id: Optional identifier assigned by the compiler (e.g. ``line:a1b2``).
        tags: Metadata tags attached to the line.
    """

    text: str
    line_id: str | None = None
    tags: tuple[str, ...] = ()

    @property
    def interpolation_refs(self) -> tuple[str, ...]:
        """Variable names referenced by the text."""
        return find_references(self.text)


@dataclass(frozen=True)
class Command:
    """A command the interpreter forwards to the host.

    Attributes:
        name: Command name, the first word of the command text.
        args: Remaining words, with double quotes removed.
        text: Raw command text, used by built-ins that parse expressions.
    """

    name: str
    args: tuple[str, ...] = ()
    text: str = ""


@dataclass(frozen=True)
class VariableDeclaration:
    """Declares a variable with a fixed type and default value."""

    name: str
    var_type: VariableType
    default: Value


@dataclass(frozen=True)
class SetVariable:
    """Assigns the value of an expression to a declared variable."""

    name: str
    expression: Expression


@dataclass(frozen=True)
class Jump:
    """Moves execution to the first statement of another node."""

    target: str


@dataclass(frozen=True)
class Option:
    """One choice within an option block.

    Attributes:
        text: Raw option text, possibly containing placeholders.
        guard: Condition that must be true for the option to be shown.
        body: Statements run when the option is selected.
        jump_target: Node entered after the option (and its body) is selected.
        line_id: Optional compiler-assigned identifier.
        tags: Metadata tags attached to the option.
    """

    text: str
    guard: Expression | None = None
    body: tuple[Statement, ...] = ()
    jump_target: str | None = None
    line_id: str | None = None
    tags: tuple[str, ...] = ()

    @property
    def interpolation_refs(self) -> tuple[str, ...]:
        """Variable names referenced by the text."""
        return find_references(self.text)


@dataclass(frozen=True)
class OptionBlock:
    """A set of options presented together to the player."""

    options: tuple[Option, ...]


@dataclass(frozen=True)
class ConditionalClause:
    """One ``if``/``elseif`` branch of a conditional."""

    condition: Expression
    body: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Conditional:
    """Runs the body of the first clause whose condition holds, else else_body."""

    clauses: tuple[ConditionalClause, ...]
    else_body: tuple[Statement, ...] = ()


Statement = Line | Command | VariableDeclaration | SetVariable | Jump | OptionBlock | Conditional


@dataclass(frozen=True)
class Node:
    """A named, independently addressable unit of dialogue."""

    title: str
    body: tuple[Statement, ...] = ()
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Script:
    """Immutable table of nodes indexed by title."""

    nodes: Mapping[str, Node] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_nodes(cls, nodes: Iterable[Node]) -> Script:
        """Build a script from nodes, rejecting duplicate titles.

        Raises:
            ScriptLoadError: If two nodes share a title.
        """
        table: dict[str, Node] = {}
        for node in nodes:
            if node.title in table:
                msg = f"Duplicate node title '{node.title}'"
                raise ScriptLoadError(msg)
            table[node.title] = node
        return cls(MappingProxyType(table))

    def get_node(self, title: str) -> Node:
        """Return the node with the given title.

        Raises:
            UnknownNodeError: If no node has that title.
        """
        try:
            return self.nodes[title]
        except KeyError:
            raise UnknownNodeError(title) from None

    def __contains__(self, title: object) -> bool:
        return title in self.nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def titles(self) -> list[str]:
        """Titles of all nodes in load order."""
        return list(self.nodes)

    def missing_references(self) -> list[tuple[str, str]]:
        """Find jumps and option targets that point at unknown nodes.

        Returns:
            List of (node title, missing target) pairs.
        """
        missing: list[tuple[str, str]] = []
        for node in self.nodes.values():
            missing.extend((node.title, target) for target in _targets(node.body) if target not in self.nodes)
        return missing


def _targets(statements: tuple[Statement, ...]) -> Iterator[str]:
    """Yield every node title referenced by the statements, recursively."""
    for statement in statements:
        if isinstance(statement, Jump):
            yield statement.target
        elif isinstance(statement, OptionBlock):
            for option in statement.options:
                if option.jump_target is not None:
                    yield option.jump_target
                yield from _targets(option.body)
        elif isinstance(statement, Conditional):
            for clause in statement.clauses:
                yield from _targets(clause.body)
            yield from _targets(statement.else_body)
