"""Per-file change subscriptions backed by watchdog.

A ``FileSubscription`` is an unbounded async iterator of ``ChangeEvent``
values for a single path.  Iteration ends only when the subscription is
closed.  Events are produced on the watchdog observer thread and handed to
the event loop with ``call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Callable, Literal, Optional, Union

from pydantic import BaseModel
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)

ChangeKind = Literal["create", "modify", "delete", "move"]


class ChangeEvent(BaseModel):
    """A filesystem change affecting a watched file."""

    kind: ChangeKind
    path: Path

    model_config = {"frozen": True}


class FileSubscription:
    """Cancellable stream of change events for one file."""

    def __init__(
        self,
        path: Path,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.path = Path(path)
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[Optional[ChangeEvent]] = asyncio.Queue()
        self._closed = False
        self._close_callbacks: list[Callable[[], None]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    def on_close(self, callback: Callable[[], None]) -> None:
        self._close_callbacks.append(callback)

    def push(self, event: ChangeEvent) -> None:
        """Deliver *event* to the iterator; safe to call from any thread."""
        if self._closed:
            return
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event)
        except RuntimeError:
            logger.debug(f"Event loop closed, dropping {event.kind} on {self.path}")

    def close(self) -> None:
        """Dispose the subscription; pending iteration finishes."""
        if self._closed:
            return
        self._closed = True
        for callback in self._close_callbacks:
            callback()
        self._loop.call_soon_threadsafe(self._queue.put_nowait, None)

    def __aiter__(self) -> "FileSubscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        event = await self._queue.get()
        if event is None:
            raise StopAsyncIteration
        return event

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"FileSubscription({str(self.path)!r}, {state})"


def _same_file(raw: Union[str, bytes], target: Path) -> bool:
    try:
        return Path(os.fsdecode(raw)).resolve() == target
    except OSError:
        return False


class _FileEventHandler(FileSystemEventHandler):
    """Forwards events for one file in a watched directory."""

    def __init__(self, subscription: FileSubscription) -> None:
        super().__init__()
        self.subscription = subscription
        self.target = subscription.path.resolve()

    def _forward(self, kind: ChangeKind, raw: Union[str, bytes]) -> None:
        if _same_file(raw, self.target):
            self.subscription.push(ChangeEvent(kind=kind, path=self.target))

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward("create", event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward("modify", event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._forward("delete", event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        # Editors that save via rename replace the file with a move onto it
        self._forward("move", event.dest_path)
        self._forward("delete", event.src_path)


def create_observer(use_polling: bool = False) -> BaseObserver:
    """Create a watchdog observer, optionally the polling variant."""
    if use_polling:
        from watchdog.observers.polling import PollingObserver

        logger.info("Using polling observer for filesystem events")
        return PollingObserver()
    return Observer()


class WatchdogSubscriber:
    """Creates ``FileSubscription`` objects sharing one watchdog observer.

    Each file gets its own handler on its parent directory, so closing one
    subscription never affects another, even for files in the same
    directory.
    """

    def __init__(
        self,
        observer: Optional[BaseObserver] = None,
        use_polling: bool = False,
    ) -> None:
        self._observer = observer or create_observer(use_polling)
        self._started = False

    def subscribe(self, path: Path) -> FileSubscription:
        """Start watching *path*.

        Raises:
            OSError: If the parent directory cannot be watched.
        """
        subscription = FileSubscription(path)
        handler = _FileEventHandler(subscription)
        watch = self._observer.schedule(
            handler, str(subscription.path.parent), recursive=False
        )
        subscription.on_close(
            lambda: self._observer.remove_handler_for_watch(handler, watch)
        )
        if not self._started:
            self._observer.start()
            self._started = True
        return subscription

    __call__ = subscribe

    def close(self) -> None:
        if self._started:
            self._observer.stop()
            self._observer.join()
            self._started = False
