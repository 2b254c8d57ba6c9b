"""Skein - a step-able interpreter for branching dialogue scripts.

This package runs compiled dialogue scripts made of named nodes, with
features like:
- Lines with speaker extraction and {$variable} interpolation
- Options guarded by conditions
- Typed variables, assignments and conditionals
- Host commands dispatched to registered handlers
- Event publishing for UI integration

Quick start:
    from skein import DialogueRunnerBuilder, LineEvent, load_script_file

    runner = DialogueRunnerBuilder().build(load_script_file("dialogue.json"))
    event = runner.start()
    while not runner.is_complete:
        if isinstance(event, LineEvent):
            print(event.text)
        event = runner.choose(0) if runner.num_choices else runner.step()

Alternative usage:
    # Play a script in the terminal
    from skein import run_dialogue

    run_dialogue("dialogue.json")

    # Or customize settings programmatically
    from skein.conf import settings

    settings.configure(DIALOGUE_START_NODE="Intro")
"""

__version__ = "0.1.0"

from skein.commands import CommandRegistry
from skein.conf import settings
from skein.dialogue import (
    CursorPosition,
    DialogueInterpreter,
    DialogueRunner,
    DialogueRunnerBuilder,
    DialogueState,
)
from skein.errors import (
    DialogueArithmeticError,
    DialogueError,
    DuplicateDeclarationError,
    ExecutionLimitError,
    ExpressionSyntaxError,
    InvalidOptionIndexError,
    InvalidStateTransitionError,
    ScriptLoadError,
    TypeMismatchError,
    UndeclaredVariableError,
    UnknownNodeError,
)
from skein.events import (
    CommandEvent,
    DialogueCompleteEvent,
    EventBus,
    LineEvent,
    OptionsEvent,
    OptionView,
)
from skein.helpers import create_runner, run_dialogue, setup_logging
from skein.script import Script, load_script_data, load_script_file
from skein.variables import VariableStore, VariableType

__all__ = [
    "CommandEvent",
    "CommandRegistry",
    "CursorPosition",
    "DialogueArithmeticError",
    "DialogueCompleteEvent",
    "DialogueError",
    "DialogueInterpreter",
    "DialogueRunner",
    "DialogueRunnerBuilder",
    "DialogueState",
    "DuplicateDeclarationError",
    "EventBus",
    "ExecutionLimitError",
    "ExpressionSyntaxError",
    "InvalidOptionIndexError",
    "InvalidStateTransitionError",
    "LineEvent",
    "OptionView",
    "OptionsEvent",
    "Script",
    "ScriptLoadError",
    "TypeMismatchError",
    "UndeclaredVariableError",
    "UnknownNodeError",
    "VariableStore",
    "VariableType",
    "__version__",
    "create_runner",
    "load_script_data",
    "load_script_file",
    "run_dialogue",
    "settings",
    "setup_logging",
]
