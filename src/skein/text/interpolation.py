"""Variable interpolation for displayable text.

Placeholders are written ``{$name}``. Any other brace, such as ``{not a var}``
or a lone ``}``, is left untouched. Interpolation reads the store every time it
runs, so text shown after an assignment reflects the new value.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skein.variables import Value, VariableStore

PLACEHOLDER_PATTERN = re.compile(r"\{(\$[A-Za-z_][A-Za-z0-9_]*)\}")


def format_value(value: Value) -> str:
    """Format a variable value for display.

    Booleans render as ``true``/``false``, whole numbers without a decimal
    part and strings unchanged.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return str(value)


def find_references(text: str) -> tuple[str, ...]:
    """Return the variable names referenced by placeholders, in order of first use."""
    return tuple(dict.fromkeys(PLACEHOLDER_PATTERN.findall(text)))


def interpolate(text: str, variables: VariableStore) -> str:
    """Substitute every ``{$name}`` placeholder with the variable's current value.

    Raises:
        UndeclaredVariableError: If a placeholder names an undeclared variable.
    """
    return PLACEHOLDER_PATTERN.sub(lambda match: format_value(variables.get(match.group(1))), text)
