"""Resource name validation and filesystem-safe filename derivation."""

from __future__ import annotations

import re

from reve.errors import InvalidNameError

MAX_FILENAME_LENGTH = 255

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_ ]+$")

_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_filename(name: str) -> str:
    """Derive an on-disk identifier from a resource name.

    Removes characters that are illegal in filenames (control characters
    and ``< > : " / \\ | ? *``), replaces the first space with ``_``,
    strips surrounding whitespace and truncates to 255 characters.

    Two different names may produce the same result; callers that need
    unique filenames must check for collisions themselves.

    Args:
        name: Human readable resource name.

    Returns:
        Sanitized filename without extension.
    """
    sanitized = _ILLEGAL_CHARS.sub("", name).replace(" ", "_", 1)
    return sanitized.strip()[:MAX_FILENAME_LENGTH]


def validate_name(name: str) -> None:
    """Raise ``InvalidNameError`` unless *name* is a legal resource name."""
    if len(name) == 0:
        raise InvalidNameError(name, "Resource name length must not be 0")
    if not NAME_PATTERN.fullmatch(name):
        raise InvalidNameError(name)
