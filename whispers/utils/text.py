"""
Text Processing Utilities

This module provides display helpers for whisper content:
1. format_date: Long US-style date shown under each whisper
2. preview_content: Shortened content for card lists

These are shared by the server-rendered pages and the whisper viewer so a
whisper reads the same wherever it appears.
"""

from datetime import date, datetime


# Cards show at most this many characters before cutting at a word boundary
MAX_PREVIEW_LENGTH = 280


def format_date(value) -> str:
    """
    Format a timestamp as a long US date.

    Accepts datetime/date objects or ISO 8601 strings (a trailing "Z" is
    understood as UTC).

    Args:
        value: The timestamp to format

    Returns:
        The formatted date, or an empty string if the value can't be parsed

    Example:
        >>> format_date("2026-10-19T08:30:00Z")
        'October 19, 2026'
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return ""

    if not isinstance(value, date):
        return ""

    return f"{value:%B} {value.day}, {value.year}"


def preview_content(text: str) -> str:
    """
    Shorten long whisper content for list views.

    Content longer than MAX_PREVIEW_LENGTH is cut at the last space inside the
    limit and suffixed with an ellipsis. The full text stays available in the
    expanded viewer.
    """
    if len(text) <= MAX_PREVIEW_LENGTH:
        return text

    preview = text[:MAX_PREVIEW_LENGTH]
    last_space = preview.rfind(" ")
    if last_space > 0:
        preview = preview[:last_space]
    return preview + "..."
