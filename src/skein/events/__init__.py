"""Module for events."""

from skein.events.base import Event, EventBus
from skein.events.dialogue import (
    CommandEvent,
    DialogueCompleteEvent,
    DialogueEvent,
    LineEvent,
    OptionsEvent,
    OptionView,
)

__all__ = [
    "CommandEvent",
    "DialogueCompleteEvent",
    "DialogueEvent",
    "Event",
    "EventBus",
    "LineEvent",
    "OptionView",
    "OptionsEvent",
]
