"""Watch loop: build once, then rebuild resources as their sources change."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from rich.markup import escape

from reve.errors import BuildError
from reve.pipeline import BuildPipeline
from reve.report import BuildReport
from reve.watch.debounce import Debouncer
from reve.watch.subscription import FileSubscription, WatchdogSubscriber

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.1

TRIGGER_KINDS = frozenset({"create", "modify", "move"})

Subscribe = Callable[[Path], FileSubscription]


class WatchLoop:
    """Keeps generated modules in sync with their source files.

    After an initial full build, every resource gets its own subscription
    and its own debouncer.  A burst of changes to one source results in a
    single rebuild of that resource followed by a rewrite of the index.
    Resources never share state, so changes to different files are handled
    independently.

    ``run()`` returns once every subscription has been closed, either via
    ``close()`` or by whoever created the subscriptions.
    """

    def __init__(
        self,
        pipeline: BuildPipeline,
        delay: float = DEFAULT_DEBOUNCE,
        subscribe: Optional[Subscribe] = None,
        use_polling: bool = False,
    ) -> None:
        self.pipeline = pipeline
        self.delay = delay
        self.use_polling = use_polling
        self._subscribe = subscribe
        self._subscriptions: dict[str, FileSubscription] = {}
        self._debouncers: dict[str, Debouncer] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._ready = asyncio.Event()
        self.report: Optional[BuildReport] = None

    @property
    def subscriptions(self) -> dict[str, FileSubscription]:
        return dict(self._subscriptions)

    @property
    def debouncers(self) -> dict[str, Debouncer]:
        return dict(self._debouncers)

    async def wait_ready(self) -> None:
        """Wait until the initial build is done and subscriptions exist."""
        await self._ready.wait()

    async def run(self) -> None:
        self.report = await self.pipeline.build()

        owned: Optional[WatchdogSubscriber] = None
        subscribe = self._subscribe
        if subscribe is None:
            owned = WatchdogSubscriber(use_polling=self.use_polling)
            subscribe = owned.subscribe

        try:
            consumers = []
            for name, source in self.pipeline.registry.items():
                try:
                    subscription = subscribe(source)
                except OSError as e:
                    logger.warning(
                        f"[yellow]⚠[/yellow] Unable to watch '{name}' "
                        f"({escape(str(source))}): {escape(str(e))}"
                    )
                    continue
                debouncer = Debouncer(partial(self._rebuild, name), self.delay)
                self._subscriptions[name] = subscription
                self._debouncers[name] = debouncer
                self._locks[name] = asyncio.Lock()
                consumers.append(
                    asyncio.create_task(self._consume(subscription, debouncer))
                )

            logger.info(f"Watching {len(consumers)} resource(s) for changes")
            self._ready.set()
            await asyncio.gather(*consumers)
            for debouncer in self._debouncers.values():
                await debouncer.drain()
        finally:
            self.close()
            for debouncer in self._debouncers.values():
                debouncer.cancel()
            if owned is not None:
                owned.close()

    def close(self) -> None:
        """Dispose every subscription, which ends ``run()``."""
        for subscription in self._subscriptions.values():
            subscription.close()

    async def _consume(
        self, subscription: FileSubscription, debouncer: Debouncer
    ) -> None:
        async for event in subscription:
            if event.kind in TRIGGER_KINDS:
                debouncer.trigger()

    async def _rebuild(self, name: str) -> None:
        async with self._locks[name]:
            try:
                outcome = await self.pipeline.rebuild(name)
            except BuildError as e:
                logger.error(
                    f"[red]✗[/red] Rebuild of '{name}' failed: {escape(str(e))}"
                )
                return
        if outcome.ok:
            logger.info(f"[green]✓[/green] Rebuilt resource [bold]'{name}'[/bold]")
