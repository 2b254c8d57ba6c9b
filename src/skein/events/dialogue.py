"""Events produced by the dialogue interpreter.

These are the only things a host observes: a line to show, options to offer,
a command to run, and the end of the dialogue. Declarations, assignments,
jumps and conditionals never produce events.
"""

from dataclasses import dataclass

from skein.events.base import Event


@dataclass(frozen=True)
class LineEvent(Event):
    """Fired when a line of dialogue should be shown.

    Attributes:
        text: Interpolated text, without the character prefix when one was extracted.
        character: Name of the speaker for lines written as "Name: text", else None.
        line_id: Compiler-assigned identifier of the line, if any.
        tags: Metadata tags attached to the line.
        node_title: Title of the node the line belongs to.
    """

    text: str
    character: str | None = None
    line_id: str | None = None
    tags: tuple[str, ...] = ()
    node_title: str = ""


@dataclass(frozen=True)
class OptionView:
    """An eligible option as presented to the host.

    Attributes:
        index: Zero-based position among the eligible options; pass it to select_option().
        text: Interpolated option text.
        character: Speaker name extracted from the text, if any.
        line_id: Compiler-assigned identifier of the option, if any.
        tags: Metadata tags attached to the option.
        destination: Node the option jumps to, if it has one.
    """

    index: int
    text: str
    character: str | None = None
    line_id: str | None = None
    tags: tuple[str, ...] = ()
    destination: str | None = None


@dataclass(frozen=True)
class OptionsEvent(Event):
    """Fired when the player must choose between options.

    Only options whose guard holds are included, numbered contiguously from 0.
    The interpreter waits in AWAITING_OPTION_SELECTION until select_option() is called.
    """

    options: tuple[OptionView, ...]

    def __len__(self) -> int:
        return len(self.options)


@dataclass(frozen=True)
class CommandEvent(Event):
    """Fired when the script runs a command.

    Attributes:
        name: Command name.
        args: Command arguments.
        handled: True if a registered handler already ran for this command. Unhandled
            commands are the host's responsibility; they are not errors.
    """

    name: str
    args: tuple[str, ...] = ()
    handled: bool = False


@dataclass(frozen=True)
class DialogueCompleteEvent(Event):
    """Fired once when the dialogue ends.

    Attributes:
        node_title: Title of the node the dialogue ended in.
    """

    node_title: str = ""


DialogueEvent = LineEvent | OptionsEvent | CommandEvent | DialogueCompleteEvent
