"""Per-resource processing: read, compress, encode and write a module."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from rich.markup import escape

from reve import codec
from reve.naming import sanitize_filename
from reve.report import ResourceOutcome
from reve.utils.fs import write_text_atomic

logger = logging.getLogger(__name__)

MODULE_EXT = "py"
SOURCE_DIR = "source"
PAYLOAD_NAME = "PAYLOAD"

GENERATED_HEADER = "# Generated by reve. Do not edit.\n"


def render_resource_module(payload: str) -> str:
    """Return the text of a per-resource module exporting *payload*."""
    return f'{GENERATED_HEADER}{PAYLOAD_NAME} = "{payload}"\n'


class ResourceProcessor:
    """Turns one source file into a generated module under ``source/``.

    Blocking file I/O is pushed to worker threads so many resources can be
    processed concurrently from a single event loop.  Failures never
    propagate: they are logged and returned as a failed outcome, leaving
    whatever module was previously on disk untouched.
    """

    def __init__(
        self,
        output_root: Path,
        compression: bool = False,
        module_ext: str = MODULE_EXT,
    ) -> None:
        self.output_root = Path(output_root)
        self.compression = compression
        self.module_ext = module_ext

    @property
    def source_dir(self) -> Path:
        return self.output_root / SOURCE_DIR

    def module_path(self, name: str) -> Path:
        return self.source_dir / f"{sanitize_filename(name)}.{self.module_ext}"

    def _read_and_pack(self, source: Path) -> str:
        return codec.pack(source.read_bytes(), self.compression)

    async def process(self, name: str, source: Path) -> ResourceOutcome:
        """Build the module for resource *name* from *source*.

        Args:
            name: Registered resource name.
            source: Resolved path of the source file.

        Returns:
            ResourceOutcome describing what was written.
        """
        filename = sanitize_filename(name)
        path = self.module_path(name)
        logger.info(f"Building resource [bold]'{name}'[/bold]")

        try:
            payload = await asyncio.to_thread(self._read_and_pack, source)
            await asyncio.to_thread(
                write_text_atomic, path, render_resource_module(payload)
            )
        except Exception as e:
            logger.warning(
                f"[yellow]⚠[/yellow] Unable to process '{name}' "
                f"({escape(str(source))}), ignoring: {escape(str(e))}"
            )
            return ResourceOutcome(
                name=name, filename=filename, path=path, ok=False, error=str(e)
            )

        logger.info(f"[green]✓[/green] Built resource [bold]'{name}'[/bold]")
        return ResourceOutcome(
            name=name, filename=filename, path=path, ok=True, size=len(payload)
        )
