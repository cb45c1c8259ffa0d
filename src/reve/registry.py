"""Resource registry with filename collision detection and a build lock."""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from typing import Iterator, Mapping, Optional, Union

from reve.errors import NameCollisionError
from reve.naming import sanitize_filename, validate_name

logger = logging.getLogger(__name__)

StrPath = Union[str, "PathLike[str]"]


class ResourceRegistry:
    """Ordered mapping from resource name to source file.

    Keeps a reverse index from sanitized filename to resource name so
    collisions are detected when a resource is added rather than when it
    is built.  Once ``lock()`` has been called the resource set is frozen:
    ``add`` and ``remove`` silently do nothing.

    Iteration order is insertion order and determines the order of build
    log lines and of entries in the generated index.
    """

    def __init__(self, base_dir: StrPath) -> None:
        self.base_dir = Path(base_dir)
        self._resources: dict[str, Path] = {}
        self._filename_index: dict[str, str] = {}
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        """Freeze the registry for the rest of the process lifetime."""
        if not self._locked:
            logger.debug(f"Registry locked with {len(self._resources)} resource(s)")
        self._locked = True

    def resolve(self, source: StrPath) -> Path:
        """Resolve *source* against the registry's base directory."""
        return (self.base_dir / Path(source)).resolve()

    def add(self, name: str, source: StrPath) -> None:
        """Register *name* to be built from *source*.

        Args:
            name: Resource name matching ``^[A-Za-z0-9_ ]+$``.
            source: Path of the source file, relative to the base directory
                or absolute.

        Raises:
            InvalidNameError: If *name* is empty or has illegal characters.
            NameCollisionError: If another resource already sanitizes to the
                same filename.
        """
        if self._locked:
            logger.debug(f"Registry is locked, ignoring add of '{name}'")
            return

        validate_name(name)
        filename = sanitize_filename(name)
        conflicting = self._filename_index.get(filename)
        if conflicting is not None and conflicting != name:
            raise NameCollisionError(name, conflicting, filename)

        self._filename_index[filename] = name
        self._resources[name] = self.resolve(source)

    def remove(self, name: str) -> None:
        """Unregister *name*; unknown names are ignored."""
        if self._locked:
            logger.debug(f"Registry is locked, ignoring removal of '{name}'")
            return
        if self._resources.pop(name, None) is None:
            return
        del self._filename_index[sanitize_filename(name)]

    def filename_for(self, name: str) -> str:
        """Return the sanitized filename of a registered resource."""
        if name not in self._resources:
            raise KeyError(name)
        return sanitize_filename(name)

    def get(self, name: str) -> Optional[Path]:
        return self._resources.get(name)

    def items(self) -> list[tuple[str, Path]]:
        return list(self._resources.items())

    def names(self) -> list[str]:
        return list(self._resources)

    def as_mapping(self) -> Mapping[str, Path]:
        """Snapshot of name to source location."""
        return dict(self._resources)

    def filenames(self) -> Mapping[str, str]:
        """Snapshot of sanitized filename to name."""
        return dict(self._filename_index)

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._resources))

    def __len__(self) -> int:
        return len(self._resources)

    def __repr__(self) -> str:
        state = "locked" if self._locked else "open"
        return f"ResourceRegistry({self.names()!r}, {state})"
