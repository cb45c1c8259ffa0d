"""Filesystem watching and debounced rebuilds."""

from reve.watch.debounce import Debouncer
from reve.watch.loop import DEFAULT_DEBOUNCE, WatchLoop
from reve.watch.subscription import (
    ChangeEvent,
    FileSubscription,
    WatchdogSubscriber,
    create_observer,
)

__all__ = [
    "DEFAULT_DEBOUNCE",
    "ChangeEvent",
    "Debouncer",
    "FileSubscription",
    "WatchLoop",
    "WatchdogSubscriber",
    "create_observer",
]
