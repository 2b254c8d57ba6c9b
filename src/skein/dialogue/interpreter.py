"""Dialogue interpreter: a step-able state machine over a compiled script.

The interpreter walks the statements of a Script and hands the host one
observable event per advance() call. Silent statements (declarations,
assignments, jumps, conditionals, option blocks with no eligible option and
the built-in ``set`` command) are executed inside the same call, so the host
only ever sees what the player perceives.

States:
    NOT_STARTED -> start() -> RUNNING
    RUNNING -> advance() -> RUNNING (line or command)
                         -> AWAITING_OPTION_SELECTION (options)
                         -> COMPLETE (end of dialogue)
    AWAITING_OPTION_SELECTION -> select_option() -> RUNNING
    any state -> start() -> RUNNING

Every public operation either succeeds or raises and leaves the cursor, state
and variable values exactly as they were before the call.

Example usage:
    interpreter = DialogueInterpreter(script, VariableStore())
    interpreter.add_command("set_background", set_background)
    interpreter.start("Start")

    while not interpreter.is_complete:
        event = interpreter.advance()
        if isinstance(event, LineEvent):
            show_line(event.text)
        elif isinstance(event, OptionsEvent):
            interpreter.select_option(ask_player(event.options))
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING

from skein.commands import CommandRegistry, parse_set_command
from skein.conf import settings
from skein.constants import SET_COMMAND, STOP_COMMAND
from skein.errors import (
    ExecutionLimitError,
    InvalidOptionIndexError,
    InvalidStateTransitionError,
    UnknownNodeError,
)
from skein.events import CommandEvent, DialogueCompleteEvent, DialogueEvent, LineEvent, OptionsEvent, OptionView
from skein.expressions import ExpressionEvaluator, parse_expression
from skein.script.model import (
    Command,
    Conditional,
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
from skein.text import extract_character, interpolate
from skein.variables import VariableStore

if TYPE_CHECKING:
    from collections.abc import Iterator

    from skein.commands import CommandHandler

logger = logging.getLogger(__name__)


class DialogueState(Enum):
    """Lifecycle states of a DialogueInterpreter."""

    NOT_STARTED = auto()
    RUNNING = auto()
    AWAITING_OPTION_SELECTION = auto()
    COMPLETE = auto()


@dataclass
class _Frame:
    """A statement list being executed and the position within it.

    Node bodies, selected option bodies and conditional branches each get a
    frame. When a frame runs out, execution resumes in the frame below it, or
    at exit_jump when one is set.
    """

    statements: tuple[Statement, ...]
    index: int = 0
    exit_jump: str | None = None


@dataclass(frozen=True)
class CursorPosition:
    """Read-only view of the interpreter's execution position.

    Attributes:
        node_title: Node currently executing.
        statement_index: Index of the next statement in the innermost statement list.
        depth: Number of nested statement lists (1 when at node level).
        pending_options: Eligible options awaiting a selection, if any.
    """

    node_title: str
    statement_index: int
    depth: int
    pending_options: tuple[Option, ...] | None = None


class DialogueInterpreter:
    """Runs a compiled dialogue script one observable event at a time.

    The interpreter owns only its cursor. The variable store is passed in by the
    host (or created empty) and may be read at any time for display or
    persistence. Commands are looked up in a per-interpreter CommandRegistry.

    Attributes:
        script: The compiled script being run.
        variables: Variable store read and written by the script.
        commands: Registry of host command handlers.
        evaluator: Expression evaluator bound to the variable store.
        extract_character: Whether "Name: text" lines are split into speaker and text.
        max_silent_steps: Limit on silent statements run by one advance().
    """

    def __init__(
        self,
        script: Script,
        variables: VariableStore | None = None,
        *,
        commands: CommandRegistry | None = None,
        extract_character: bool | None = None,
        max_silent_steps: int | None = None,
    ) -> None:
        """Initialize the interpreter.

        Args:
            script: Compiled script to run.
            variables: Variable store to use; a new empty store if omitted.
            commands: Command registry to use; a new empty registry if omitted.
            extract_character: Override for the DIALOGUE_EXTRACT_CHARACTER setting.
            max_silent_steps: Override for the DIALOGUE_MAX_SILENT_STEPS setting.
        """
        self.script = script
        self.variables = variables if variables is not None else VariableStore()
        self.commands = commands if commands is not None else CommandRegistry()
        self.evaluator = ExpressionEvaluator(self.variables)
        self.extract_character = (
            settings.DIALOGUE_EXTRACT_CHARACTER if extract_character is None else extract_character
        )
        self.max_silent_steps = settings.DIALOGUE_MAX_SILENT_STEPS if max_silent_steps is None else max_silent_steps

        self._state = DialogueState.NOT_STARTED
        self._node_title: str | None = None
        self._frames: list[_Frame] = []
        self._eligible: tuple[Option, ...] = ()
        self._option_views: tuple[OptionView, ...] = ()

    @property
    def state(self) -> DialogueState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_complete(self) -> bool:
        """True once the dialogue has ended."""
        return self._state is DialogueState.COMPLETE

    @property
    def current_node(self) -> str | None:
        """Title of the node being executed, or None before start()."""
        return self._node_title

    @property
    def current_options(self) -> tuple[OptionView, ...]:
        """Options awaiting selection; empty unless AWAITING_OPTION_SELECTION."""
        return self._option_views

    @property
    def cursor(self) -> CursorPosition | None:
        """Current execution position, or None when not running."""
        if self._node_title is None or self._state in (DialogueState.NOT_STARTED, DialogueState.COMPLETE):
            return None
        index = self._frames[-1].index if self._frames else 0
        pending = self._eligible if self._state is DialogueState.AWAITING_OPTION_SELECTION else None
        return CursorPosition(self._node_title, index, len(self._frames), pending)

    def add_command(self, name: str, handler: CommandHandler) -> None:
        """Register a host handler for a command name."""
        self.commands.register(name, handler)

    def start(self, title: str) -> None:
        """Begin (or restart) the dialogue at the first statement of a node.

        Declarations are not run here; they run as advance() passes over them.

        Args:
            title: Title of the node to start at.

        Raises:
            UnknownNodeError: If no node has that title.
        """
        node = self.script.get_node(title)
        self._eligible = ()
        self._option_views = ()
        self._enter(node)
        self._state = DialogueState.RUNNING
        logger.info("DialogueInterpreter: Starting dialogue at node '%s'", title)

    def advance(self) -> DialogueEvent:
        """Run until the next observable event and return it.

        Returns:
            A LineEvent, CommandEvent, OptionsEvent or DialogueCompleteEvent.

        Raises:
            InvalidStateTransitionError: If the interpreter is not RUNNING.
            UnknownNodeError: If a jump targets a missing node.
            DuplicateDeclarationError: On a conflicting declaration.
            UndeclaredVariableError: If a statement reads or writes an undeclared variable.
            TypeMismatchError: On a badly typed expression or assignment.
            DialogueArithmeticError: On division by zero.
            ExecutionLimitError: If too many silent statements run without output.
        """
        if self._state is not DialogueState.RUNNING:
            msg = f"Cannot advance while {self._state.name}"
            raise InvalidStateTransitionError(msg)
        with self.transaction():
            return self._run()

    def select_option(self, index: int) -> None:
        """Choose one of the options from the last OptionsEvent.

        Args:
            index: Zero-based index into the eligible options.

        Raises:
            InvalidStateTransitionError: If no options are awaiting selection.
            InvalidOptionIndexError: If index is outside the eligible options.
            UnknownNodeError: If the option jumps to a missing node.
        """
        if self._state is not DialogueState.AWAITING_OPTION_SELECTION:
            msg = f"Cannot select an option while {self._state.name}"
            raise InvalidStateTransitionError(msg)
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._eligible):
            msg = f"Option index {index!r} is invalid; expected 0 to {len(self._eligible) - 1}"
            raise InvalidOptionIndexError(msg)

        option = self._eligible[index]
        if option.jump_target is not None and option.jump_target not in self.script:
            raise UnknownNodeError(option.jump_target)

        logger.debug("DialogueInterpreter: Selected option %d '%s'", index, option.text)
        self._eligible = ()
        self._option_views = ()
        self._state = DialogueState.RUNNING
        if option.body:
            self._frames.append(_Frame(option.body, exit_jump=option.jump_target))
        elif option.jump_target is not None:
            self._jump(option.jump_target)

    def _run(self) -> DialogueEvent:
        silent_steps = 0
        while True:
            statement = self._next_statement()
            if statement is None:
                return self._complete()
            event = self._execute(statement)
            if event is not None:
                return event
            silent_steps += 1
            if silent_steps > self.max_silent_steps:
                msg = (
                    f"Ran {silent_steps} statements in node '{self._node_title}' without producing output; "
                    "the script probably loops"
                )
                raise ExecutionLimitError(msg)

    def _next_statement(self) -> Statement | None:
        while self._frames:
            frame = self._frames[-1]
            if frame.index < len(frame.statements):
                statement = frame.statements[frame.index]
                frame.index += 1
                return statement
            self._frames.pop()
            if frame.exit_jump is not None:
                self._jump(frame.exit_jump)
        return None

    def _execute(self, statement: Statement) -> DialogueEvent | None:  # noqa: PLR0911
        if isinstance(statement, Line):
            character, text = self._render(statement.text)
            return LineEvent(text, character, statement.line_id, statement.tags, self._node_title or "")
        if isinstance(statement, Command):
            return self._run_command(statement)
        if isinstance(statement, VariableDeclaration):
            self.variables.declare(statement.name, statement.var_type, statement.default)
            return None
        if isinstance(statement, SetVariable):
            self.variables.set(statement.name, self.evaluator.evaluate(statement.expression))
            logger.debug("DialogueInterpreter: Set %s = %r", statement.name, self.variables.get(statement.name))
            return None
        if isinstance(statement, Jump):
            self._jump(statement.target)
            return None
        if isinstance(statement, OptionBlock):
            return self._offer_options(statement)
        if isinstance(statement, Conditional):
            self._branch(statement)
            return None
        msg = f"Unknown statement {statement!r}"
        raise TypeError(msg)

    def _run_command(self, command: Command) -> DialogueEvent | None:
        if command.name == SET_COMMAND:
            name, expression_text = parse_set_command(command.text or " ".join((command.name, *command.args)))
            self.variables.set(name, self.evaluator.evaluate(parse_expression(expression_text)))
            logger.debug("DialogueInterpreter: Set %s = %r", name, self.variables.get(name))
            return None
        if command.name == STOP_COMMAND:
            logger.debug("DialogueInterpreter: Stop command in node '%s'", self._node_title)
            return self._complete()

        args = tuple(interpolate(arg, self.variables) for arg in command.args)
        handled = self.commands.dispatch(command.name, list(args))
        return CommandEvent(command.name, args, handled)

    def _offer_options(self, block: OptionBlock) -> OptionsEvent | None:
        eligible = tuple(
            option
            for option in block.options
            if option.guard is None or self.evaluator.evaluate_condition(option.guard)
        )
        if not eligible:
            logger.debug("DialogueInterpreter: No eligible options in node '%s', skipping", self._node_title)
            return None

        views = []
        for index, option in enumerate(eligible):
            character, text = self._render(option.text)
            views.append(OptionView(index, text, character, option.line_id, option.tags, option.jump_target))

        self._eligible = eligible
        self._option_views = tuple(views)
        self._state = DialogueState.AWAITING_OPTION_SELECTION
        return OptionsEvent(self._option_views)

    def _branch(self, conditional: Conditional) -> None:
        for clause in conditional.clauses:
            if self.evaluator.evaluate_condition(clause.condition):
                body = clause.body
                break
        else:
            body = conditional.else_body
        if body:
            self._frames.append(_Frame(body))

    def _render(self, raw_text: str) -> tuple[str | None, str]:
        # Split before substituting so variable values never create a speaker
        if not self.extract_character:
            return None, interpolate(raw_text, self.variables)
        character, text = extract_character(raw_text)
        return character, interpolate(text, self.variables)

    def _jump(self, target: str) -> None:
        node = self.script.get_node(target)
        logger.debug("DialogueInterpreter: Move from node '%s' to node '%s'", self._node_title, target)
        self._enter(node)

    def _enter(self, node: Node) -> None:
        self._node_title = node.title
        self._frames = [_Frame(node.body)]

    def _complete(self) -> DialogueCompleteEvent:
        self._frames.clear()
        self._eligible = ()
        self._option_views = ()
        self._state = DialogueState.COMPLETE
        logger.info("DialogueInterpreter: Dialogue complete in node '%s'", self._node_title)
        return DialogueCompleteEvent(self._node_title or "")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Roll back cursor, state and variables if the wrapped block raises.

        Hosts can wrap several calls in one transaction, for example start()
        followed by advance(), so that a failure leaves the dialogue where it was.
        """
        checkpoint = (
            self._state,
            self._node_title,
            [replace(frame) for frame in self._frames],
            self._eligible,
            self._option_views,
            self.variables.snapshot(),
        )
        try:
            yield
        except Exception:
            state, node_title, frames, eligible, option_views, variables = checkpoint
            self._state = state
            self._node_title = node_title
            self._frames = frames
            self._eligible = eligible
            self._option_views = option_views
            self.variables.rollback(variables)
            raise
