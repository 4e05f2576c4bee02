"""Shared validation utilities"""

import re
from typing import Optional

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50

# Letters, digits, spaces, quotes and common punctuation
NAME_PATTERN = re.compile(r"^[a-zA-Z0-9 '\"’.,!?@#&()\-_:;\\/\[\]{}<>|`~$%^*=+]+$")

FOCUS_LEVELS = ("High", "Medium", "Low")


def validate_name(value: Optional[str]) -> str:
    """
    Validate a display name (outcome, output, job or task title).

    Raises:
        ValueError: If the name is missing, blank, too short, too long
            or contains characters outside the allowed set
    """
    if not value:
        raise ValueError("missing required field")
    if not isinstance(value, str):
        raise ValueError("field must be string")
    if value.strip() == "":
        raise ValueError("field cannot be empty")
    if len(value) < NAME_MIN_LENGTH:
        raise ValueError(f"field must be at least {NAME_MIN_LENGTH} characters long")
    if len(value) > NAME_MAX_LENGTH:
        raise ValueError(f"field must be at most {NAME_MAX_LENGTH} characters long")
    if not NAME_PATTERN.match(value):
        raise ValueError("field contains invalid characters")
    return value


def validate_level(value: Optional[str]) -> Optional[str]:
    """Validate a focus/joy level"""
    if value is None:
        return value
    if value not in FOCUS_LEVELS:
        raise ValueError(f"level must be one of {', '.join(FOCUS_LEVELS)}")
    return value
