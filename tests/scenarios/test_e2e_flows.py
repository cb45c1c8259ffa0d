"""End-to-end flows: register, build, import the generated modules."""

import asyncio
import os
import time
from pathlib import Path
from types import ModuleType
from typing import Callable
from unittest.mock import patch

import pytest

from reve import Reve, ReveConfig, codec

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 8


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "logo.png").write_bytes(PNG_BYTES)
    (tmp_path / "a.bin").write_bytes(b"\x00" * 64 + b"tail")
    return tmp_path


def test_build_single_resource(
    project: Path, load_generated: Callable[[Path], ModuleType]
) -> None:
    """Scenario: one resource produces its module and an index entry."""
    instance = Reve(project)
    instance.add_resource("logo", "./logo.png")

    report = asyncio.run(instance.build())

    module_path = project / "reve" / "source" / "logo.py"
    assert report.ok
    assert codec.decode(load_generated(module_path).PAYLOAD) == PNG_BYTES

    index_text = (project / "reve" / "index.py").read_text()
    assert "'logo': lambda: base64.b64decode(_payload('logo', 'logo'))" in index_text
    index = load_generated(project / "reve" / "index.py")
    assert index.RESOURCES["logo"] == PNG_BYTES


def test_sanitized_artifact_path(project: Path) -> None:
    """Scenario: a name with a space is written under its sanitized filename."""
    instance = Reve(project)
    instance.add_resource("a b", "./a.bin")

    report = asyncio.run(instance.build())

    assert report.outcomes[0].path == project / "reve" / "source" / "a_b.py"
    assert (project / "reve" / "source" / "a_b.py").exists()


def test_compressed_builds_are_identical(
    project: Path, load_generated: Callable[[Path], ModuleType]
) -> None:
    """Scenario: compressed output is stable across builds and round-trips."""
    first = Reve(project, enable_compression=True)
    first.add_resource("logo", "./logo.png")
    asyncio.run(first.build())
    module_path = project / "reve" / "source" / "logo.py"
    index_path = project / "reve" / "index.py"
    module_before = module_path.read_bytes()
    index_before = index_path.read_bytes()

    second = Reve(project, enable_compression=True)
    second.add_resource("logo", "./logo.png")
    asyncio.run(second.build())

    assert module_path.read_bytes() == module_before
    assert index_path.read_bytes() == index_before
    assert load_generated(index_path).RESOURCES["logo"] == PNG_BYTES


def test_failed_resource_still_listed(
    project: Path, load_generated: Callable[[Path], ModuleType]
) -> None:
    """Scenario: a missing source is skipped but the rest of the build works."""
    instance = Reve(project)
    instance.add_resource("logo", "./logo.png")
    instance.add_resource("ghost", "./missing.bin")

    report = asyncio.run(instance.build())

    assert [o.name for o in report.failed] == ["ghost"]
    index = load_generated(project / "reve" / "index.py")
    assert set(index.RESOURCES) == {"logo", "ghost"}
    assert index.RESOURCES["logo"] == PNG_BYTES
    with pytest.raises(KeyError):
        index.RESOURCES["ghost"]


@pytest.mark.skipif(
    os.environ.get("REVE_SKIP_FS_WATCH") == "1",
    reason="native filesystem notifications disabled",
)
def test_watch_rapid_writes_rebuild_once(project: Path) -> None:
    """Scenario: several quick writes to a watched file cause one rebuild."""
    instance = Reve(project, config=ReveConfig(debounce_ms=100, watch_polling=False))
    instance.add_resource("logo", "./logo.png")
    source = project / "logo.png"

    async def scenario() -> int:
        calls: list[str] = []
        pipeline = instance._pipeline
        original = pipeline.rebuild

        async def counting_rebuild(name: str):  # type: ignore[no-untyped-def]
            calls.append(name)
            return await original(name)

        with patch.object(pipeline, "rebuild", side_effect=counting_rebuild):
            task = asyncio.create_task(instance.watch())
            deadline = time.monotonic() + 5
            while not (project / "reve" / "index.py").exists():
                assert time.monotonic() < deadline
                await asyncio.sleep(0.02)
            # let the observer settle before generating events
            await asyncio.sleep(0.3)

            for i in range(5):
                source.write_bytes(PNG_BYTES + bytes([i]))
                await asyncio.sleep(0.01)
            await asyncio.sleep(0.6)

            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
        return len(calls)

    assert asyncio.run(scenario()) == 1
    module = (project / "reve" / "source" / "logo.py").read_text()
    assert codec.encode(PNG_BYTES + bytes([4])) in module
