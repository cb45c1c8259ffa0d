"""Trailing-edge debouncer driven by the asyncio event loop."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Literal, Optional

DebounceState = Literal["idle", "pending"]


class Debouncer:
    """Collapses bursts of triggers into a single trailing callback.

    The debouncer is either ``idle`` or ``pending`` with a deadline.  Every
    ``trigger()`` moves it to ``pending`` and pushes the deadline to
    ``now + delay``.  When the deadline passes without another trigger, the
    callback is dispatched exactly once and the state returns to ``idle``.

    Must be used from within a running event loop.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        delay: float,
    ) -> None:
        if delay <= 0:
            raise ValueError(f"delay must be positive, got {delay}")
        self.delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._running: set[asyncio.Task[Any]] = set()
        self.dispatched = 0

    @property
    def state(self) -> DebounceState:
        return "idle" if self._handle is None else "pending"

    @property
    def deadline(self) -> Optional[float]:
        """Loop time at which the pending callback fires, if any."""
        return None if self._handle is None else self._handle.when()

    def trigger(self) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self.dispatched += 1
        task = asyncio.get_running_loop().create_task(self._callback())
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    def cancel(self) -> None:
        """Drop a pending callback without running it."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def drain(self) -> None:
        """Wait for callbacks that have already been dispatched."""
        if self._running:
            await asyncio.gather(*self._running)
