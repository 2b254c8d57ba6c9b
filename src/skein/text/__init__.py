"""Text processing for lines and options."""

from skein.text.interpolation import PLACEHOLDER_PATTERN, find_references, format_value, interpolate
from skein.text.lines import extract_character

__all__ = ["PLACEHOLDER_PATTERN", "extract_character", "find_references", "format_value", "interpolate"]
