"""
Input sanitization utilities.

Shared sanitization functions for free-text fields attached to logged outcomes.
This module has no dependencies on models or services to avoid circular imports.
"""

import re

from core.constants import MAX_NOTE_LENGTH


def sanitize_note(value: str, max_length: int = MAX_NOTE_LENGTH) -> str:
    """
    Sanitize a user note by removing control characters and limiting length.

    - Replaces newlines, carriage returns, tabs, and control characters with spaces
    - Collapses multiple spaces into one
    - Strips leading/trailing whitespace
    - Truncates to a maximum length

    Args:
        value: Raw user-provided string
        max_length: Maximum allowed length (default: MAX_NOTE_LENGTH)

    Returns:
        Sanitized note text
    """
    sanitized = re.sub(r"[\n\r\t\x00-\x1f\x7f-\x9f]", " ", value)
    sanitized = re.sub(r" +", " ", sanitized)
    sanitized = sanitized.strip()
    return sanitized[:max_length]
