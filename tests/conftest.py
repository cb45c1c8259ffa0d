import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Callable, Generator

import pytest


@pytest.fixture(autouse=True)
def reset_reve_logger() -> Generator[None, None, None]:
    """Undo handlers installed by the CLI so caplog keeps working."""
    yield
    logger = logging.getLogger("reve")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def _load_module(path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(f"_generated_{path.stem}", path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def load_generated() -> Callable[[Path], ModuleType]:
    """Import a generated module from its file path."""
    return _load_module
