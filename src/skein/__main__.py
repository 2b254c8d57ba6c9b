"""Play a compiled dialogue script in the terminal.

Usage:
    python -m skein dialogue.json --start Start --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging

from skein.errors import DialogueError
from skein.helpers import run_dialogue, setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the terminal player and return a process exit code."""
    parser = argparse.ArgumentParser(prog="skein", description="Play a compiled dialogue script.")
    parser.add_argument("script", help="path to a compiled JSON script")
    parser.add_argument("--start", default=None, help="node to start at (defaults to DIALOGUE_START_NODE)")
    parser.add_argument("--log-level", default=None, help="logging level, e.g. DEBUG or WARNING")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    try:
        run_dialogue(args.script, start=args.start)
    except DialogueError:
        logger.exception("Dialogue failed")
        return 1
    except (KeyboardInterrupt, EOFError):
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
