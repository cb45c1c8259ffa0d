"""Result models returned by builds and rebuilds."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class ResourceOutcome(BaseModel):
    """Outcome of processing a single resource.

    Args:
        name: Resource name.
        filename: Sanitized filename of the generated module (no extension).
        path: Path of the generated per-resource module.
        ok: Whether the module was written during this pass.
        error: Failure description when ``ok`` is False.
        size: Length of the embedded payload text.
    """

    name: str
    filename: str
    path: Path
    ok: bool
    error: Optional[str] = None
    size: int = 0


class BuildReport(BaseModel):
    """Aggregated outcome of a full build."""

    outcomes: list[ResourceOutcome] = Field(default_factory=list)
    index_path: Path
    compression: bool = False
    elapsed: float = 0.0

    @property
    def succeeded(self) -> list[ResourceOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[ResourceOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed
