"""Helper functions for setting up and running dialogues.

This module provides convenience functions for hosts:
- setup_logging: Configure rich console logging
- create_runner: Load a compiled script and build a DialogueRunner for it
- run_dialogue: Play a compiled script interactively in the terminal
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import IntPrompt

from skein.conf import settings
from skein.dialogue import DialogueRunnerBuilder
from skein.events import CommandEvent, DialogueCompleteEvent, LineEvent, OptionsEvent
from skein.script import load_script_file

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from skein.commands import CommandHandler
    from skein.dialogue import DialogueRunner

logger = logging.getLogger(__name__)


def setup_logging(log_level: str | None = None) -> None:
    """Configure logging for dialogue hosts.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to the LOG_LEVEL setting.

    Side effects:
        - Configures the root logger with RichHandler
        - Sets the specified log level
    """
    level = log_level if log_level is not None else settings.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, markup=True)],
    )


def create_runner(
    script_path: str | Path,
    *,
    commands: Iterable[tuple[str, CommandHandler]] = (),
    variables: dict[str, Any] | None = None,
) -> DialogueRunner:
    """Load a compiled script file and build a runner for it.

    Args:
        script_path: Path to a compiled JSON script.
        commands: (name, handler) pairs to register.
        variables: Host values to seed into the variable store.

    Returns:
        A DialogueRunner that has not been started yet.

    Raises:
        ScriptLoadError: If the file is missing or malformed.
        UnknownNodeError: If reference validation is enabled and a jump is unresolved.
    """
    script = load_script_file(script_path)
    return DialogueRunnerBuilder().with_commands(commands).with_variables(variables or {}).build(script)


def _prompt_choice(console: Console, event: OptionsEvent) -> int:
    choice = IntPrompt.ask(
        "Choose an option",
        console=console,
        choices=[str(option.index + 1) for option in event.options],
    )
    return choice - 1


def run_dialogue(
    script_path: str | Path,
    start: str | None = None,
    console: Console | None = None,
    *,
    chooser: Callable[[OptionsEvent], int] | None = None,
) -> DialogueRunner:
    """Play a compiled script in the terminal until it completes.

    Lines with a character are printed as "Name said: text". Options are
    numbered from 1 over the eligible options only. Commands with no handler
    are reported as warnings since a terminal has nothing to run them with.

    Args:
        script_path: Path to a compiled JSON script.
        start: Node to start at. Defaults to the DIALOGUE_START_NODE setting.
        console: Rich console to print to; a new one if omitted.
        chooser: Callable returning the zero-based index of the chosen option.
            Defaults to prompting on the console.

    Returns:
        The completed runner, so callers can inspect the final variables.

    Example:
        >>> from skein import run_dialogue
        >>> run_dialogue("dialogue.json", start="Start")
    """
    console = console if console is not None else Console()
    runner = create_runner(script_path)

    def choose(event: OptionsEvent) -> int:
        if chooser is not None:
            return chooser(event)
        return _prompt_choice(console, event)

    event = runner.start(start)
    while True:
        if isinstance(event, LineEvent):
            if event.character:
                console.print(f"[bold]{escape(event.character)}[/bold] said: {escape(event.text)}")
            else:
                console.print(escape(event.text))
        elif isinstance(event, CommandEvent):
            if not event.handled:
                args = " ".join(event.args)
                console.print(f"[yellow]Unhandled command:[/yellow] {escape(event.name)} {escape(args)}".rstrip())
                logger.warning("run_dialogue: Unhandled command '%s'", event.name)
        elif isinstance(event, OptionsEvent):
            for option in event.options:
                console.print(f"\\[{option.index + 1}] {escape(option.text)}")
            event = runner.choose(choose(event))
            continue
        elif isinstance(event, DialogueCompleteEvent):
            console.print("[dim]Dialogue complete[/dim]")
            return runner
        event = runner.step()
