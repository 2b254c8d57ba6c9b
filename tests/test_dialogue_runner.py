"""Unit tests for DialogueRunner and DialogueRunnerBuilder."""

import unittest
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from skein.conf import settings
from skein.dialogue import DialogueInterpreter, DialogueRunner, DialogueRunnerBuilder, DialogueState
from skein.errors import UnknownNodeError
from skein.events import CommandEvent, DialogueCompleteEvent, EventBus, LineEvent, OptionsEvent
from skein.script import Command, Line, Node, Option, OptionBlock, Script, VariableDeclaration, load_script_file
from skein.variables import VariableType

DATA_DIR = Path(__file__).parent / "data"


class TestDialogueRunner(unittest.TestCase):
    """Unit test class for DialogueRunner."""

    def setUp(self) -> None:
        """Create a runner over the sample script with a mock event bus."""
        self.script = load_script_file(DATA_DIR / "kitchen_sink.json")
        self.mock_event_bus = MagicMock()
        self.runner = DialogueRunner(DialogueInterpreter(self.script), self.mock_event_bus)

    def test_start_uses_default_node(self) -> None:
        """Test that start() begins at DIALOGUE_START_NODE and returns the first event."""
        event = self.runner.start()

        assert isinstance(event, LineEvent)
        assert event.node_title == "Start"
        self.mock_event_bus.publish.assert_called_once_with(event)

    def test_start_node_from_settings(self) -> None:
        """Test that the default start node can be configured."""
        settings.configure(DIALOGUE_START_NODE="End")

        assert self.runner.start().text == "Goodbye."

    def test_start_unknown_node(self) -> None:
        """Test that an unknown start node raises."""
        with pytest.raises(UnknownNodeError):
            self.runner.start("Nowhere")
        self.mock_event_bus.publish.assert_not_called()

    def test_num_choices_tracks_options(self) -> None:
        """Test that num_choices is set while options are pending."""
        self.runner.start()
        assert self.runner.num_choices == 0

        self.runner.step()
        event = self.runner.step()

        assert isinstance(event, OptionsEvent)
        assert self.runner.num_choices == 2
        assert self.runner.state is DialogueState.AWAITING_OPTION_SELECTION

        self.runner.choose(0)
        assert self.runner.num_choices == 0

    def test_every_event_is_published(self) -> None:
        """Test that each step publishes the event it returns."""
        events = [self.runner.start(), self.runner.step(), self.runner.step()]

        published = [call.args[0] for call in self.mock_event_bus.publish.call_args_list]
        assert published == events

    def test_step_until_input(self) -> None:
        """Test stepping until a choice is needed, then until completion."""
        self.runner.start()
        events = self.runner.step_until_input()

        assert isinstance(events[0], CommandEvent)
        assert isinstance(events[-1], OptionsEvent)

        assert self.runner.choose(1).text == "You picked option 2."
        events = self.runner.step_until_input()
        assert len(events) == 1
        assert isinstance(events[-1], OptionsEvent)

        assert self.runner.choose(0).text == "Goodbye."
        events = self.runner.step_until_input()
        assert isinstance(events[-1], DialogueCompleteEvent)
        assert self.runner.is_complete

    def test_add_command(self) -> None:
        """Test that commands added on the runner reach the interpreter."""
        handler = MagicMock()
        self.runner.add_command("a_command_that_doesnt_exist", handler)

        self.runner.start()
        event = self.runner.step()

        assert event.handled is True
        handler.assert_called_once_with(["1", "two words"])

    def test_real_event_bus(self) -> None:
        """Test subscribing to events on a real bus."""
        bus = EventBus()
        lines = []
        bus.subscribe(LineEvent, lines.append)
        runner = DialogueRunner(DialogueInterpreter(Script.from_nodes([Node("Start", (Line("Hi"),))])), bus)

        runner.start()
        runner.step()

        assert [event.text for event in lines] == ["Hi"]
        assert runner.is_complete

    def test_failed_start_keeps_position(self) -> None:
        """Test that start() leaves the dialogue untouched if its first event fails."""
        script = Script.from_nodes(
            [
                Node("Start", (Line("Hi"), Line("Bye"))),
                Node("Trap", (VariableDeclaration("$sprung", VariableType.BOOL, True), Command("explode"))),
            ]
        )
        runner = DialogueRunner(DialogueInterpreter(script), self.mock_event_bus)
        runner.add_command("explode", MagicMock(side_effect=RuntimeError("boom")))
        runner.start()
        cursor = runner.interpreter.cursor

        with pytest.raises(RuntimeError, match="boom"):
            runner.start("Trap")

        assert runner.state is DialogueState.RUNNING
        assert runner.interpreter.cursor == cursor
        assert "$sprung" not in runner.variables
        assert self.mock_event_bus.publish.call_count == 1
        assert runner.step().text == "Bye"

    def test_failed_choice_keeps_options(self) -> None:
        """Test that choose() keeps the options on offer if the chosen branch fails."""
        script = Script.from_nodes(
            [
                Node(
                    "Start",
                    (OptionBlock((Option("Fight", body=(Command("explode"),)), Option("Flee"))), Line("After")),
                )
            ]
        )
        runner = DialogueRunner(DialogueInterpreter(script), self.mock_event_bus)
        runner.add_command("explode", MagicMock(side_effect=RuntimeError("boom")))
        runner.start()

        with pytest.raises(RuntimeError, match="boom"):
            runner.choose(0)

        assert runner.state is DialogueState.AWAITING_OPTION_SELECTION
        assert runner.num_choices == 2
        assert runner.choose(1).text == "After"


class TestDialogueRunnerBuilder(unittest.TestCase):
    """Unit test class for DialogueRunnerBuilder."""

    def setUp(self) -> None:
        """Load the sample script."""
        self.script = load_script_file(DATA_DIR / "kitchen_sink.json")

    def test_build_defaults(self) -> None:
        """Test that a bare builder produces a working runner."""
        runner = DialogueRunnerBuilder().build(self.script)

        assert isinstance(runner.event_bus, EventBus)
        assert runner.state is DialogueState.NOT_STARTED
        assert len(runner.variables) == 0

    def test_with_commands(self) -> None:
        """Test registering handlers through the builder."""
        first, second = MagicMock(), MagicMock()
        runner = (
            DialogueRunnerBuilder()
            .with_command("a_command_that_doesnt_exist", first)
            .with_commands([("other", second)])
            .build(self.script)
        )

        runner.start()
        runner.step()

        first.assert_called_once_with(["1", "two words"])
        assert runner.interpreter.commands.is_registered("other")

    def test_with_variables(self) -> None:
        """Test that seeded variables survive the script's declaration."""
        runner = DialogueRunnerBuilder().with_variables({"$my_var": True}).build(self.script)

        runner.start()
        runner.step()
        runner.step()
        runner.choose(1)
        options = runner.step()

        assert [option.text for option in options.options] == ["Secret option", "Leave"]

    def test_with_event_bus(self) -> None:
        """Test publishing on a provided bus."""
        bus = EventBus()
        handler = MagicMock()
        bus.subscribe(DialogueCompleteEvent, handler)
        runner = DialogueRunnerBuilder().with_event_bus(bus).build(self.script)

        runner.start("End")
        runner.step()

        handler.assert_called_once_with(DialogueCompleteEvent("End"))

    def test_with_options(self) -> None:
        """Test passing interpreter options through the builder."""
        runner = DialogueRunnerBuilder().with_options(extract_character=False).build(self.script)

        assert runner.start().text == "Martin: Hello there!"


if __name__ == "__main__":
    unittest.main()
