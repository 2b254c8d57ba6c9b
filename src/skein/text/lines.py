"""Helpers for splitting displayable lines into speaker and text."""

import re

_CHARACTER_PATTERN = re.compile(r"^([A-Za-z0-9_]+):\s*(.*)$", re.DOTALL)


def extract_character(text: str) -> tuple[str | None, str]:
    """Pull the character name out of a line written as ``Name: text``.

    Returns:
        Tuple of (character or None, remaining text).

    Example:
        extract_character("Martin: Hello there")  # ("Martin", "Hello there")
        extract_character("Hello there")          # (None, "Hello there")
    """
    match = _CHARACTER_PATTERN.match(text)
    if not match:
        return None, text
    return match.group(1), match.group(2)
