"""Host-facing runner that drives an interpreter and publishes its events.

The DialogueRunner wraps a DialogueInterpreter the way a game engine plugin
would: it starts at the configured start node, steps the interpreter, tracks
how many choices are on offer and publishes every event on an EventBus so UI
code can subscribe instead of polling.

Example usage:
    runner = (
        DialogueRunnerBuilder()
        .with_command("set_background", set_background)
        .with_variables({"$gold": 10})
        .build(script)
    )

    event = runner.start()
    while not runner.is_complete:
        if runner.num_choices:
            event = runner.choose(0)
        else:
            event = runner.step()
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Self

from skein.commands import CommandRegistry
from skein.conf import settings
from skein.dialogue.interpreter import DialogueInterpreter, DialogueState
from skein.events import DialogueCompleteEvent, EventBus, OptionsEvent
from skein.variables import VariableStore

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from skein.commands import CommandHandler
    from skein.events import DialogueEvent
    from skein.script import Script

logger = logging.getLogger(__name__)


class DialogueRunner:
    """Drives a DialogueInterpreter and publishes the events it produces.

    Attributes:
        interpreter: The wrapped interpreter.
        event_bus: Bus every produced event is published on.
    """

    def __init__(self, interpreter: DialogueInterpreter, event_bus: EventBus | None = None) -> None:
        """Initialize the runner.

        Args:
            interpreter: Interpreter to drive.
            event_bus: Bus to publish events on; a new one if omitted.
        """
        self.interpreter = interpreter
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self._num_choices = 0

    @property
    def variables(self) -> VariableStore:
        """The interpreter's variable store."""
        return self.interpreter.variables

    @property
    def state(self) -> DialogueState:
        """The interpreter's lifecycle state."""
        return self.interpreter.state

    @property
    def num_choices(self) -> int:
        """Number of options awaiting a choice; 0 when no choice is pending."""
        return self._num_choices

    @property
    def is_complete(self) -> bool:
        """True once the dialogue has ended."""
        return self.interpreter.is_complete

    def add_command(self, name: str, handler: CommandHandler) -> None:
        """Register a host handler for a command name."""
        self.interpreter.add_command(name, handler)

    def start(self, title: str | None = None) -> DialogueEvent:
        """Start the dialogue and return the first event.

        Args:
            title: Node to start at. Defaults to the DIALOGUE_START_NODE setting.

        If producing the first event fails, the interpreter is left where it
        was before the call.

        Returns:
            The first observable event, already published.
        """
        with self._all_or_nothing():
            self.interpreter.start(title if title is not None else settings.DIALOGUE_START_NODE)
            self._num_choices = 0
            return self.step()

    def step(self) -> DialogueEvent:
        """Advance the interpreter, publish the event and return it."""
        event = self.interpreter.advance()
        self._num_choices = len(event.options) if isinstance(event, OptionsEvent) else 0
        self.event_bus.publish(event)
        return event

    def choose(self, index: int) -> DialogueEvent:
        """Select an option and return the event that follows it.

        Args:
            index: Zero-based index of the option, as given by OptionView.index.

        If the event after the option fails, the options stay on offer.
        """
        with self._all_or_nothing():
            self.interpreter.select_option(index)
            self._num_choices = 0
            return self.step()

    @contextmanager
    def _all_or_nothing(self) -> Iterator[None]:
        num_choices = self._num_choices
        try:
            with self.interpreter.transaction():
                yield
        except Exception:
            self._num_choices = num_choices
            raise

    def step_until_input(self) -> list[DialogueEvent]:
        """Step until the dialogue needs a choice or ends.

        Returns:
            Every event produced, the last being an OptionsEvent or a
            DialogueCompleteEvent.
        """
        events = [self.step()]
        while not isinstance(events[-1], (OptionsEvent, DialogueCompleteEvent)):
            events.append(self.step())
        return events


class DialogueRunnerBuilder:
    """Fluent builder for a DialogueRunner.

    Example usage:
        runner = (
            DialogueRunnerBuilder()
            .with_commands([("shake", shake), ("play_sound", play_sound)])
            .with_variables({"$player_name": "Ada"})
            .build(script)
        )
    """

    def __init__(self) -> None:
        """Initialize an empty builder."""
        self._commands: list[tuple[str, CommandHandler]] = []
        self._variables: dict[str, Any] = {}
        self._event_bus: EventBus | None = None
        self._interpreter_options: dict[str, Any] = {}

    def with_command(self, name: str, handler: CommandHandler) -> Self:
        """Add one command handler."""
        self._commands.append((name, handler))
        return self

    def with_commands(self, commands: Iterable[tuple[str, CommandHandler]]) -> Self:
        """Add several (name, handler) command handlers."""
        self._commands.extend(commands)
        return self

    def with_variables(self, variables: dict[str, Any]) -> Self:
        """Seed host variables into the store the runner will use."""
        self._variables.update(variables)
        return self

    def with_event_bus(self, event_bus: EventBus) -> Self:
        """Publish events on an existing bus."""
        self._event_bus = event_bus
        return self

    def with_options(self, **options: Any) -> Self:  # noqa: ANN401
        """Pass keyword options (extract_character, max_silent_steps) to the interpreter."""
        self._interpreter_options.update(options)
        return self

    def build(self, script: Script) -> DialogueRunner:
        """Create the runner for a compiled script."""
        commands = CommandRegistry(dict(self._commands))
        variables = VariableStore(self._variables)
        interpreter = DialogueInterpreter(script, variables, commands=commands, **self._interpreter_options)
        logger.debug(
            "DialogueRunnerBuilder: Built runner with %d commands and %d variables", len(commands), len(variables)
        )
        return DialogueRunner(interpreter, self._event_bus)
