"""Dialogue interpreter and host-facing runner."""

from skein.dialogue.interpreter import CursorPosition, DialogueInterpreter, DialogueState
from skein.dialogue.runner import DialogueRunner, DialogueRunnerBuilder

__all__ = [
    "CursorPosition",
    "DialogueInterpreter",
    "DialogueRunner",
    "DialogueRunnerBuilder",
    "DialogueState",
]
