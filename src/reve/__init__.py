import os
import warnings
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

from reve._version import __version__
from reve.config import ReveConfig, load_config
from reve.errors import BuildError, InvalidNameError, NameCollisionError, ReveError
from reve.naming import sanitize_filename
from reve.pipeline import BuildPipeline
from reve.processor import ResourceProcessor
from reve.registry import ResourceRegistry
from reve.report import BuildReport, ResourceOutcome
from reve.watch import WatchLoop
from reve.watch.loop import Subscribe

__all__ = [
    "__version__",
    "BuildError",
    "BuildReport",
    "InvalidNameError",
    "NameCollisionError",
    "ResourceOutcome",
    "Reve",
    "ReveConfig",
    "ReveError",
    "create_reve",
    "load_config",
    "resolve_base",
    "sanitize_filename",
]

BaseLocation = Union[str, "os.PathLike[str]"]


def resolve_base(base_location: BaseLocation) -> Path:
    """Return the directory that relative paths are resolved against.

    Accepts a directory, a file (its parent is used, so ``__file__`` works)
    or a ``file://`` URL.  A URL ending in ``/`` names a directory; any
    other URL names a file whose directory is used.

    Args:
        base_location: Directory, file path or file URL.

    Returns:
        Absolute directory path.
    """
    text = os.fspath(base_location)
    if text.startswith("file:"):
        path = Path(url2pathname(urlparse(text).path))
        return path if text.endswith("/") else path.parent

    path = Path(text).resolve()
    if path.is_file():
        return path.parent
    return path


class Reve:
    """Embeds binary files into importable Python modules.

    Register resources with ``add_resource``, then run ``build()`` once or
    ``watch()`` to keep the generated modules up to date.  Output goes to
    ``<base>/reve/``: one ``source/<name>.py`` module per resource holding
    its base64 payload, and an ``index.py`` exposing ``RESOURCES``, a
    mapping from resource name to decoded bytes.

    Example::

        import asyncio
        from reve import Reve, ReveConfig

        reve = Reve(
            __file__,
            enable_compression=True,
            config=ReveConfig(output_dir="embedded"),
        )
        reve.add_resource("logo", "./assets/logo.png")
        asyncio.run(reve.build())

        # later, in application code
        from embedded.index import RESOURCES
        png = RESOURCES["logo"]

    The default output directory is ``reve``; pick another name when the
    generated package must be importable next to this library.
    """

    def __init__(
        self,
        base_location: BaseLocation,
        enable_compression: Optional[bool] = None,
        *,
        config: Optional[ReveConfig] = None,
        subscribe: Optional[Subscribe] = None,
    ) -> None:
        """Initialize a Reve instance.

        Args:
            base_location: Anchor for relative source paths and the output
                directory (directory, file path or ``file://`` URL).
            enable_compression: Gzip payloads before encoding.  Fixed for the
                lifetime of the instance; defaults to ``config.compression``.
            config: Build settings (default: ``ReveConfig()``).
            subscribe: Factory creating change subscriptions for ``watch()``
                (default: watchdog).
        """
        self.config = config or ReveConfig()
        if enable_compression is None:
            enable_compression = self.config.compression
        self.compression = enable_compression
        self.base_dir = resolve_base(base_location)
        self.output_root = self.base_dir / self.config.output_dir

        self._registry = ResourceRegistry(self.base_dir)
        self._pipeline = BuildPipeline(
            self._registry,
            ResourceProcessor(self.output_root, compression=self.compression),
        )
        self._subscribe = subscribe

    @property
    def resources(self) -> Mapping[str, Path]:
        """Read-only snapshot of resource name to resolved source path."""
        return MappingProxyType(self._registry.as_mapping())

    @property
    def locked(self) -> bool:
        return self._registry.locked

    def add_resource(self, name: str, source: BaseLocation) -> None:
        """Add a resource to be embedded.

        Does nothing once ``build()`` or ``watch()`` has started.

        Args:
            name: Resource name, alphanumeric, ``_`` or space.
            source: Source file, relative to the base location.

        Raises:
            InvalidNameError: If the name is empty or has illegal characters.
            NameCollisionError: If the name sanitizes to the same filename as
                an existing resource.
        """
        self._registry.add(name, source)

    def remove_resource(self, name: str) -> None:
        """Remove an existing resource.

        Does nothing for unknown names or once building has started.
        """
        self._registry.remove(name)

    async def build(self) -> BuildReport:
        """Build every resource and the index module.

        Raises:
            BuildError: If the output directory or index cannot be written.
        """
        return await self._pipeline.build()

    async def watch(self) -> None:
        """Build, then rebuild resources whenever their source files change.

        Runs until the change subscriptions are closed or the task is
        cancelled.
        """
        self._registry.lock()
        loop = WatchLoop(
            self._pipeline,
            delay=self.config.debounce,
            subscribe=self._subscribe,
            use_polling=self.config.watch_polling,
        )
        await loop.run()

    def __repr__(self) -> str:
        return (
            f"Reve({str(self.base_dir)!r}, enable_compression={self.compression}, "
            f"resources={self._registry.names()!r})"
        )


def create_reve(base_location: BaseLocation) -> Reve:
    """Create a Reve instance.

    .. deprecated::
        Instantiate ``Reve`` directly.
    """
    warnings.warn(
        "create_reve() is deprecated, use Reve(base_location) instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return Reve(base_location)
