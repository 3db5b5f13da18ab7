"""
Input Validation Utilities

This module provides validation helpers for the presentational tags
attached to whispers:
1. is_valid_icon_color: Whether a colour name belongs to the icon palette
2. normalize_icon / normalize_icon_color: Coerce stored values into what
   the cards can display

Whispers written by older clients may carry empty icons or colours that
were later removed from the palette, so every read path goes through these.
"""


# Icon palette, in the order the compose form offers it
ICON_COLORS = (
    "blue",
    "indigo",
    "purple",
    "pink",
    "red",
    "orange",
    "yellow",
    "green",
)

DEFAULT_ICON_COLOR = "blue"


def is_valid_icon_color(color) -> bool:
    """
    Check if a value names a colour of the icon palette.

    Examples:
        >>> is_valid_icon_color("indigo")
        True
        >>> is_valid_icon_color("teal")
        False
        >>> is_valid_icon_color(None)
        False
    """
    if not color or not isinstance(color, str):
        return False
    return color in ICON_COLORS


def normalize_icon_color(color) -> str:
    """Return the colour if it is in the palette, the default colour otherwise."""
    return color if is_valid_icon_color(color) else DEFAULT_ICON_COLOR


def normalize_icon(icon) -> str | None:
    """
    Trim an icon name, mapping blank or non-string values to None.

    Examples:
        >>> normalize_icon("  moon ")
        'moon'
        >>> normalize_icon("   ") is None
        True
    """
    if isinstance(icon, str) and icon.strip():
        return icon.strip()
    return None
