"""Parsing of raw command text into a name and arguments."""

from __future__ import annotations

import re

from skein.constants import VARIABLE_PREFIX
from skein.errors import ScriptLoadError

_ARGUMENT_PATTERN = re.compile(r'"[^"]*"|\S+')
_SET_PATTERN = re.compile(r"^\s*set\s+(\S+)\s*(?:=|\bto\b)\s*(.+?)\s*$", re.DOTALL)


def parse_command_text(text: str) -> tuple[str, list[str]]:
    """Split command text into its name and arguments.

    Arguments are separated by whitespace; a double-quoted argument may contain
    spaces and has its quotes removed.

    Example:
        parse_command_text('set_background "forest at night" fade')
        # ("set_background", ["forest at night", "fade"])

    Raises:
        ScriptLoadError: If the text is empty.
    """
    parts = [part.replace('"', "") for part in _ARGUMENT_PATTERN.findall(text)]
    if not parts:
        msg = "Empty command text"
        raise ScriptLoadError(msg)
    return parts[0], parts[1:]


def parse_set_command(text: str) -> tuple[str, str]:
    """Parse the built-in ``set`` command into a variable name and expression text.

    Both ``set $gold to $gold + 1`` and ``set $gold = $gold + 1`` are accepted.

    Raises:
        ScriptLoadError: If the text is not a valid set command.
    """
    match = _SET_PATTERN.match(text)
    if not match or not match.group(1).startswith(VARIABLE_PREFIX):
        msg = f"Invalid set command: {text!r}"
        raise ScriptLoadError(msg)
    return match.group(1), match.group(2)
