"""Default settings for Skein.

Users can override these in their project's settings.py file.

Example:
    # In your project's settings.py:
    DIALOGUE_START_NODE = "Intro"
    DIALOGUE_VALIDATE_REFERENCES = False
"""

# Dialogue settings
DIALOGUE_START_NODE = "Start"
"""Title of the node a runner starts from when no title is given."""

DIALOGUE_EXTRACT_CHARACTER = True
"""Split lines written as "Name: text" into a character name and the spoken text."""

DIALOGUE_VALIDATE_REFERENCES = True
"""Fail at load time when a jump or option points at a node that does not exist.

When False, unresolved references are only logged and fail when executed.
"""

DIALOGUE_MAX_SILENT_STEPS = 10000
"""Maximum number of silent statements a single advance() may run.

Guards against scripts that jump between nodes forever without producing output.
"""

# Logging settings
LOG_LEVEL = "INFO"
"""Logging level used by skein.helpers.setup_logging() when none is given."""
