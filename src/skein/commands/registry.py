"""Registry of host-provided command handlers.

The interpreter never knows what a command does. When it reaches a command
it looks the name up here; if a handler is registered it is called with the
command's arguments, and either way the command is forwarded to the host as a
CommandEvent whose ``handled`` flag says whether a handler ran.

Unlike the class-level registries used for pluggable systems, a
CommandRegistry is an instance owned by one interpreter, so independent
dialogues can register different vocabularies.

Example:
    registry = CommandRegistry()

    @registry.register("set_background")
    def set_background(args: list[str]) -> None:
        scene.set_background(args[0])

    registry.register("echo", lambda args: print(*args))
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import overload

from skein.constants import BUILTIN_COMMANDS

logger = logging.getLogger(__name__)

CommandHandler = Callable[[list[str]], object]


class CommandRegistry:
    """Maps command names to handler callables."""

    def __init__(self, handlers: dict[str, CommandHandler] | None = None) -> None:
        """Initialize the registry.

        Args:
            handlers: Optional initial mapping of command names to handlers.
        """
        self._handlers: dict[str, CommandHandler] = {}
        for name, handler in (handlers or {}).items():
            self.register(name, handler)

    @overload
    def register(self, name: str) -> Callable[[CommandHandler], CommandHandler]: ...

    @overload
    def register(self, name: str, handler: CommandHandler) -> CommandHandler: ...

    def register(
        self,
        name: str,
        handler: CommandHandler | None = None,
    ) -> CommandHandler | Callable[[CommandHandler], CommandHandler]:
        """Register a handler for a command name.

        Registering an existing name replaces its handler. Can be used directly or
        as a decorator.

        Args:
            name: Command name as written in the script.
            handler: Callable receiving the command's arguments.

        Returns:
            The handler, or a decorator when handler is omitted.

        Raises:
            ValueError: If the name is empty or reserved by the interpreter.
        """
        if not name:
            msg = "Command name must not be empty"
            raise ValueError(msg)
        if name in BUILTIN_COMMANDS:
            msg = f"'{name}' is a built-in command and cannot be registered"
            raise ValueError(msg)

        def decorator(func: CommandHandler) -> CommandHandler:
            if name in self._handlers:
                logger.warning("CommandRegistry: Re-registering command handler: %s", name)
            self._handlers[name] = func
            logger.debug("CommandRegistry: Registered command handler: %s", name)
            return func

        if handler is None:
            return decorator
        return decorator(handler)

    def unregister(self, name: str) -> None:
        """Remove a handler. Unknown names are ignored."""
        self._handlers.pop(name, None)

    def get(self, name: str) -> CommandHandler | None:
        """Get the handler registered for a name."""
        return self._handlers.get(name)

    def get_all(self) -> dict[str, CommandHandler]:
        """Get all registered handlers."""
        return self._handlers.copy()

    def is_registered(self, name: str) -> bool:
        """Check if a handler is registered for a name."""
        return name in self._handlers

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()

    def dispatch(self, name: str, args: list[str]) -> bool:
        """Call the handler registered for a command, if any.

        Exceptions raised by the handler propagate to the caller.

        Returns:
            True if a handler was called, False if the command is unregistered.
        """
        handler = self._handlers.get(name)
        if handler is None:
            logger.info("CommandRegistry: Found unregistered command %s with args %s", name, args)
            return False
        logger.info("CommandRegistry: Calling registered command %s with args %s", name, args)
        handler(list(args))
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
