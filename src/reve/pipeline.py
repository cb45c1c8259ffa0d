"""Build orchestration: lock, clear, process every resource, emit the index."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from reve.emitter import render_index, write_index
from reve.errors import BuildError
from reve.processor import ResourceProcessor
from reve.registry import ResourceRegistry
from reve.report import BuildReport, ResourceOutcome
from reve.utils.fs import empty_dir

logger = logging.getLogger(__name__)


class BuildPipeline:
    """Runs full builds and single-resource rebuilds for a registry.

    Per-resource work runs concurrently, but the index is only rendered
    after every resource has finished, so its key set always matches the
    registry at the moment it is written.
    """

    def __init__(
        self,
        registry: ResourceRegistry,
        processor: ResourceProcessor,
    ) -> None:
        self.registry = registry
        self.processor = processor

    @property
    def output_root(self) -> Path:
        return self.processor.output_root

    @property
    def compression(self) -> bool:
        return self.processor.compression

    def render_index(self) -> str:
        return render_index(self.registry.names(), compression=self.compression)

    def emit_index(self) -> Path:
        """Render and write the index for the registry's current names."""
        return write_index(self.output_root, self.render_index())

    async def build(self) -> BuildReport:
        """Build every registered resource and the index.

        Returns:
            BuildReport with one outcome per resource.

        Raises:
            BuildError: If the source directory cannot be cleared or the
                index cannot be written.
        """
        self.registry.lock()
        started = time.perf_counter()

        source_dir = self.processor.source_dir
        try:
            await asyncio.to_thread(empty_dir, source_dir)
        except OSError as e:
            raise BuildError(
                f"Unable to clear output directory {source_dir}: {e}", source_dir
            ) from e

        outcomes = await asyncio.gather(
            *(
                self.processor.process(name, source)
                for name, source in self.registry.items()
            )
        )
        index = await asyncio.to_thread(self.emit_index)

        report = BuildReport(
            outcomes=list(outcomes),
            index_path=index,
            compression=self.compression,
            elapsed=time.perf_counter() - started,
        )
        if report.failed:
            logger.warning(
                f"[yellow]⚠[/yellow] Built {len(report.succeeded)}/{len(outcomes)} "
                f"resource(s), {len(report.failed)} skipped"
            )
        else:
            logger.info(f"[green]✓[/green] Built {len(outcomes)} resource(s)")
        return report

    async def rebuild(self, name: str) -> ResourceOutcome:
        """Re-process one resource and rewrite the index.

        Raises:
            KeyError: If *name* is not registered.
            BuildError: If the index cannot be written.
        """
        source = self.registry.get(name)
        if source is None:
            raise KeyError(name)
        outcome = await self.processor.process(name, source)
        await asyncio.to_thread(self.emit_index)
        return outcome
