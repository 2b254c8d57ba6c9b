"""Unit tests for the host helpers and the terminal player."""

import io
import logging
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from rich.console import Console
from rich.logging import RichHandler

from skein.__main__ import main
from skein.errors import ScriptLoadError
from skein.events import OptionsEvent
from skein.helpers import create_runner, run_dialogue, setup_logging

DATA_DIR = Path(__file__).parent / "data"
SAMPLE = DATA_DIR / "kitchen_sink.json"


class TestSetupLogging(unittest.TestCase):
    """Unit test class for setup_logging."""

    def test_configures_rich_handler(self) -> None:
        """Test that the root logger is configured with a RichHandler."""
        with patch("skein.helpers.logging.basicConfig") as basic_config:
            setup_logging("debug")

        kwargs = basic_config.call_args.kwargs
        assert kwargs["level"] == logging.DEBUG
        assert isinstance(kwargs["handlers"][0], RichHandler)

    def test_level_defaults_to_setting(self) -> None:
        """Test that LOG_LEVEL is used when no level is given."""
        with patch("skein.helpers.logging.basicConfig") as basic_config:
            setup_logging()

        assert basic_config.call_args.kwargs["level"] == logging.INFO


class TestCreateRunner(unittest.TestCase):
    """Unit test class for create_runner."""

    def test_commands_and_variables(self) -> None:
        """Test that the runner gets the given handlers and values."""
        handler = MagicMock()
        runner = create_runner(
            SAMPLE,
            commands=[("a_command_that_doesnt_exist", handler)],
            variables={"$my_var": True},
        )

        runner.start()
        runner.step()

        handler.assert_called_once_with(["1", "two words"])
        assert runner.variables.get("$my_var") is True


class TestRunDialogue(unittest.TestCase):
    """Unit test class for run_dialogue."""

    def setUp(self) -> None:
        """Create a console that records output."""
        self.output = io.StringIO()
        self.console = Console(file=self.output, width=120, color_system=None)

    def test_plays_to_completion(self) -> None:
        """Test a full terminal session choosing the first option each time."""
        offered = []

        def chooser(event: OptionsEvent) -> int:
            offered.append([option.text for option in event.options])
            return 0

        runner = run_dialogue(SAMPLE, console=self.console, chooser=chooser)

        text = self.output.getvalue()
        assert "Martin said: Hello there!" in text
        assert "Unhandled command: a_command_that_doesnt_exist 1 two words" in text
        assert "[1] Option 1" in text
        assert "[2] Option 2" in text
        assert "Narrator said: my_var is true" in text
        assert "Goodbye." in text
        assert offered == [["Option 1", "Option 2"], ["Secret option", "Leave"]]
        assert runner.is_complete

    def test_only_eligible_options_are_numbered(self) -> None:
        """Test that hidden options do not take a number."""
        run_dialogue(SAMPLE, console=self.console, chooser=lambda event: len(event.options) - 1)

        text = self.output.getvalue()
        assert "[1] Leave" in text
        assert "Secret option" not in text

    def test_start_node(self) -> None:
        """Test starting somewhere other than the default node."""
        run_dialogue(SAMPLE, start="End", console=self.console, chooser=lambda event: 0)

        assert self.output.getvalue().splitlines()[0] == "Goodbye."

    def test_prompts_on_console(self) -> None:
        """Test that the default chooser asks for a 1-based number."""
        with patch("skein.helpers.IntPrompt.ask", side_effect=[2, 1]) as ask:
            run_dialogue(SAMPLE, console=self.console)

        assert ask.call_args_list[0].kwargs["choices"] == ["1", "2"]
        assert ask.call_args_list[1].kwargs["choices"] == ["1"]


class TestMain(unittest.TestCase):
    """Unit test class for the command line entry point."""

    def test_runs_script(self) -> None:
        """Test that arguments are passed to run_dialogue."""
        with (
            patch("skein.__main__.setup_logging") as setup,
            patch("skein.__main__.run_dialogue") as run,
        ):
            assert main([str(SAMPLE), "--start", "End", "--log-level", "DEBUG"]) == 0

        setup.assert_called_once_with("DEBUG")
        run.assert_called_once_with(str(SAMPLE), start="End")

    def test_dialogue_error_exit_code(self) -> None:
        """Test that dialogue errors are reported with a non-zero exit code."""
        with (
            patch("skein.__main__.setup_logging"),
            patch("skein.__main__.run_dialogue", side_effect=ScriptLoadError("bad")),
        ):
            assert main([str(SAMPLE)]) == 1


if __name__ == "__main__":
    unittest.main()
