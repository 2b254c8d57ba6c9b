"""Event system for decoupled dialogue event handling.

This module provides a publish/subscribe event system that lets a host react
to dialogue output without polling the interpreter. The DialogueRunner
publishes each event the interpreter produces; the host subscribes per event
type.

The event system consists of:
- Event: Base class for all dialogue events
- EventBus: Central hub for subscribing to and publishing events

Example usage:
    # Create an event bus
    event_bus = EventBus()

    # Subscribe to line events
    def handle_line(event: LineEvent):
        print(f"{event.character}: {event.text}")

    event_bus.subscribe(LineEvent, handle_line)

    # Publish an event
    event_bus.publish(LineEvent("Hello!", character="Martin"))

    # Clean up when done
    event_bus.clear()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class Event:
    """Base event class."""


class EventBus:
    """Central event bus for publish/subscribe event handling.

    The EventBus provides a decoupled communication system where publishers emit events
    without knowing who (if anyone) will handle them, and subscribers can listen for
    events without knowing who publishes them.

    Thread safety: This implementation is NOT thread-safe. All subscribe, publish, and
    unsubscribe calls should happen on the thread driving the dialogue.

    Example usage:
        bus = EventBus()

        def on_complete(event: DialogueCompleteEvent):
            print(f"Dialogue ended in {event.node_title}")

        bus.subscribe(DialogueCompleteEvent, on_complete)
        bus.publish(DialogueCompleteEvent("Start"))
        bus.unsubscribe(DialogueCompleteEvent, on_complete)
    """

    def __init__(self) -> None:
        """Initialize the event bus with no registered listeners."""
        self.listeners: dict[type[Event], list[Callable[[Event], None]]] = {}

    def subscribe(self, event_type: type[Event], handler: Callable[[Event], None]) -> None:
        """Subscribe a handler to an event type.

        Multiple handlers can be subscribed to the same event type, and they will be
        called in the order they were registered. The same handler subscribed twice is
        called twice.

        Args:
            event_type: The type of event to listen for (e.g., LineEvent).
            handler: Callback function that takes the event as parameter.
        """
        if event_type not in self.listeners:
            self.listeners[event_type] = []
        self.listeners[event_type].append(handler)

    def unsubscribe(self, event_type: type[Event], handler: Callable[[Event], None]) -> None:
        """Unsubscribe a handler from an event type.

        Removes ALL subscriptions of the handler for that type. Unknown handlers are
        ignored.
        """
        if event_type in self.listeners:
            self.listeners[event_type] = [h for h in self.listeners[event_type] if h != handler]

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed handlers.

        Handlers are called synchronously in registration order. Events nobody
        subscribed to are ignored. A handler that raises stops later handlers from
        running and the exception propagates to the publisher.

        Args:
            event: The event instance to publish. The event's type determines which
                  handlers will be called.
        """
        event_type = type(event)
        if event_type in self.listeners:
            for handler in list(self.listeners[event_type]):
                handler(event)

    def clear(self) -> None:
        """Clear all event listeners."""
        self.listeners.clear()

    def unregister_all(self, subscriber: object) -> None:
        """Unregister all handlers for a specific subscriber.

        Args:
            subscriber: The instance whose handlers should be removed. Matches handlers
                       by their __self__ attribute if they are bound methods.
        """
        for event_type in self.listeners:
            self.listeners[event_type] = [
                h for h in self.listeners[event_type] if not (hasattr(h, "__self__") and h.__self__ == subscriber)
            ]
