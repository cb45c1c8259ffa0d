"""Test cases for Debouncer."""

import asyncio

import pytest

from reve.watch.debounce import Debouncer


class TestDebouncer:
    """Test cases for the idle/pending debounce state machine."""

    def test_starts_idle(self) -> None:
        async def noop() -> None:
            return None

        debouncer = Debouncer(noop, 0.05)
        assert debouncer.state == "idle"
        assert debouncer.deadline is None

    def test_rejects_non_positive_delay(self) -> None:
        async def noop() -> None:
            return None

        with pytest.raises(ValueError):
            Debouncer(noop, 0)

    def test_burst_dispatches_once(self) -> None:
        calls: list[int] = []

        async def scenario() -> Debouncer:
            async def callback() -> None:
                calls.append(1)

            debouncer = Debouncer(callback, 0.05)
            for _ in range(5):
                debouncer.trigger()
                await asyncio.sleep(0.01)
            assert debouncer.state == "pending"
            await asyncio.sleep(0.15)
            await debouncer.drain()
            return debouncer

        debouncer = asyncio.run(scenario())

        assert calls == [1]
        assert debouncer.dispatched == 1
        assert debouncer.state == "idle"

    def test_trigger_resets_deadline(self) -> None:
        async def scenario() -> tuple[float, float]:
            async def callback() -> None:
                return None

            debouncer = Debouncer(callback, 0.5)
            debouncer.trigger()
            first = debouncer.deadline
            await asyncio.sleep(0.02)
            debouncer.trigger()
            second = debouncer.deadline
            debouncer.cancel()
            assert first is not None and second is not None
            return first, second

        first, second = asyncio.run(scenario())
        assert second > first

    def test_separate_bursts_dispatch_separately(self) -> None:
        calls: list[int] = []

        async def scenario() -> None:
            async def callback() -> None:
                calls.append(1)

            debouncer = Debouncer(callback, 0.03)
            debouncer.trigger()
            await asyncio.sleep(0.1)
            debouncer.trigger()
            debouncer.trigger()
            await asyncio.sleep(0.1)
            await debouncer.drain()

        asyncio.run(scenario())
        assert calls == [1, 1]

    def test_cancel_drops_pending_callback(self) -> None:
        calls: list[int] = []

        async def scenario() -> None:
            async def callback() -> None:
                calls.append(1)

            debouncer = Debouncer(callback, 0.03)
            debouncer.trigger()
            debouncer.cancel()
            assert debouncer.state == "idle"
            await asyncio.sleep(0.08)

        asyncio.run(scenario())
        assert calls == []

    def test_drain_waits_for_running_callback(self) -> None:
        finished: list[bool] = []

        async def scenario() -> None:
            async def callback() -> None:
                await asyncio.sleep(0.05)
                finished.append(True)

            debouncer = Debouncer(callback, 0.01)
            debouncer.trigger()
            await asyncio.sleep(0.03)
            assert debouncer.state == "idle"
            await debouncer.drain()

        asyncio.run(scenario())
        assert finished == [True]
