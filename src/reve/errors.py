"""Exceptions raised by reve.

Registration errors are raised synchronously from ``add_resource``.
Per-resource processing failures are logged and reported in the
``BuildReport`` instead of being raised; only pipeline-level failures
surface as ``BuildError``.
"""

from pathlib import Path
from typing import Optional


class ReveError(Exception):
    """Base class for all reve errors."""


class InvalidNameError(ReveError, ValueError):
    """Raised when a resource name is empty or contains illegal characters."""

    def __init__(self, name: str, message: Optional[str] = None) -> None:
        self.name = name
        if message is None:
            message = (
                f"Invalid resource name {name!r}: "
                "name must be alphanumeric, '_' or ' '"
            )
        super().__init__(message)


class NameCollisionError(ReveError, ValueError):
    """Raised when two resource names sanitize to the same filename."""

    def __init__(self, name: str, conflicting_name: str, filename: str) -> None:
        self.name = name
        self.conflicting_name = conflicting_name
        self.filename = filename
        super().__init__(
            f"Resource '{name}', when sanitized, has the same file name as "
            f"'{conflicting_name}' ({filename}.py)"
        )


class BuildError(ReveError, RuntimeError):
    """Raised when the output directory or the index module cannot be written."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        super().__init__(message)
