"""Command dispatch between the interpreter and its host."""

from skein.commands.parsing import parse_command_text, parse_set_command
from skein.commands.registry import CommandHandler, CommandRegistry

__all__ = ["CommandHandler", "CommandRegistry", "parse_command_text", "parse_set_command"]
