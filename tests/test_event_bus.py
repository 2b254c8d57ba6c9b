"""Unit tests for EventBus."""

import unittest
from unittest.mock import MagicMock

import pytest

from skein.events import CommandEvent, DialogueCompleteEvent, EventBus, LineEvent, OptionsEvent, OptionView


class TestEventBus(unittest.TestCase):
    """Unit test class for EventBus."""

    def setUp(self) -> None:
        """Create an empty event bus."""
        self.bus = EventBus()

    def test_publish_calls_subscribers_in_order(self) -> None:
        """Test that handlers run in registration order."""
        calls = []
        self.bus.subscribe(LineEvent, lambda event: calls.append(("first", event.text)))
        self.bus.subscribe(LineEvent, lambda event: calls.append(("second", event.text)))

        self.bus.publish(LineEvent("Hi"))

        assert calls == [("first", "Hi"), ("second", "Hi")]

    def test_publish_only_matching_type(self) -> None:
        """Test that handlers only receive their own event type."""
        handler = MagicMock()
        self.bus.subscribe(CommandEvent, handler)

        self.bus.publish(LineEvent("Hi"))
        self.bus.publish(CommandEvent("wave"))

        handler.assert_called_once_with(CommandEvent("wave"))

    def test_publish_without_subscribers(self) -> None:
        """Test that events nobody listens to are ignored."""
        self.bus.publish(DialogueCompleteEvent("Start"))

    def test_unsubscribe(self) -> None:
        """Test that unsubscribed handlers are not called."""
        handler = MagicMock()
        self.bus.subscribe(LineEvent, handler)
        self.bus.unsubscribe(LineEvent, handler)
        self.bus.unsubscribe(CommandEvent, handler)

        self.bus.publish(LineEvent("Hi"))

        handler.assert_not_called()

    def test_handler_can_unsubscribe_during_publish(self) -> None:
        """Test that changing subscriptions inside a handler is safe."""
        later = MagicMock()

        def once(event: LineEvent) -> None:
            self.bus.unsubscribe(LineEvent, once)

        self.bus.subscribe(LineEvent, once)
        self.bus.subscribe(LineEvent, later)

        self.bus.publish(LineEvent("Hi"))
        self.bus.publish(LineEvent("Again"))

        assert later.call_count == 2

    def test_handler_exception_propagates(self) -> None:
        """Test that a failing handler raises to the publisher."""
        self.bus.subscribe(LineEvent, MagicMock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError):
            self.bus.publish(LineEvent("Hi"))

    def test_unregister_all(self) -> None:
        """Test removing every bound-method handler of one subscriber."""

        class Listener:
            def __init__(self) -> None:
                self.events = []

            def on_line(self, event: LineEvent) -> None:
                self.events.append(event)

            def on_options(self, event: OptionsEvent) -> None:
                self.events.append(event)

        listener, other = Listener(), Listener()
        self.bus.subscribe(LineEvent, listener.on_line)
        self.bus.subscribe(OptionsEvent, listener.on_options)
        self.bus.subscribe(LineEvent, other.on_line)

        self.bus.unregister_all(listener)
        self.bus.publish(LineEvent("Hi"))
        self.bus.publish(OptionsEvent((OptionView(0, "Go"),)))

        assert listener.events == []
        assert len(other.events) == 1

    def test_clear(self) -> None:
        """Test that clear() removes all handlers."""
        handler = MagicMock()
        self.bus.subscribe(LineEvent, handler)

        self.bus.clear()
        self.bus.publish(LineEvent("Hi"))

        handler.assert_not_called()


if __name__ == "__main__":
    unittest.main()
