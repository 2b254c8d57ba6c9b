"""Dialogue constants.

Names reserved by the runtime and the conventions compiled scripts follow.
"""

VARIABLE_PREFIX = "$"
"""Every variable name starts with this prefix, e.g. ``$gold``."""

SET_COMMAND = "set"
"""Built-in command performing an inline assignment: ``<<set $gold to 10>>``."""

STOP_COMMAND = "stop"
"""Built-in command ending the dialogue immediately."""

BUILTIN_COMMANDS = frozenset({SET_COMMAND, STOP_COMMAND})
"""Command names handled by the interpreter itself; hosts cannot register these."""
