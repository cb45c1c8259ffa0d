"""Rendering and writing of the aggregate ``index`` module.

The index exposes every resource through ``RESOURCES``, a read-only
mapping whose values are produced on first access: the per-resource module
is loaded from ``source/``, its ``PAYLOAD`` is base64-decoded and, when the
build used compression, gunzipped.  Results are cached per name.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from reve.errors import BuildError
from reve.naming import sanitize_filename
from reve.processor import GENERATED_HEADER, MODULE_EXT, PAYLOAD_NAME, SOURCE_DIR
from reve.utils.fs import write_text_atomic

logger = logging.getLogger(__name__)

INDEX_NAME = "index"

_PRELUDE = '''import importlib.util
from collections.abc import Mapping
from pathlib import Path

_SOURCE_DIR = Path(__file__).resolve().parent / {source_dir!r}


def _payload(filename, name):
    path = _SOURCE_DIR / (filename + {suffix!r})
    if not path.is_file():
        raise KeyError(f"resource {{name!r}} has no generated module at {{path}}")
    spec = importlib.util.spec_from_file_location("_reve_resource_" + filename, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.{payload}


class _LazyResources(Mapping):
    def __init__(self, loaders):
        self._loaders = loaders
        self._cache = {{}}

    def __getitem__(self, name):
        if name not in self._cache:
            self._cache[name] = self._loaders[name]()
        return self._cache[name]

    def __contains__(self, name):
        return name in self._loaders

    def __iter__(self):
        return iter(self._loaders)

    def __len__(self):
        return len(self._loaders)

    def __repr__(self):
        return f"RESOURCES({{list(self._loaders)!r}})"

'''


def _loader_expression(name: str, compression: bool) -> str:
    expr = f"base64.b64decode(_payload({sanitize_filename(name)!r}, {name!r}))"
    if compression:
        expr = f"gzip.decompress({expr})"
    return f"lambda: {expr}"


def render_index(names: Iterable[str], compression: bool = False) -> str:
    """Render the aggregate module for *names*.

    Args:
        names: Resource names, in the order they should appear.
        compression: Whether payloads were gzipped before encoding.

    Returns:
        Source text of the index module.
    """
    imports = ["import base64"]
    if compression:
        imports.append("import gzip")

    lines = [GENERATED_HEADER.rstrip("\n")]
    lines.extend(imports)
    lines.append(
        _PRELUDE.format(
            source_dir=SOURCE_DIR,
            suffix=f".{MODULE_EXT}",
            payload=PAYLOAD_NAME,
        )
    )

    entries = [
        f"    {name!r}: {_loader_expression(name, compression)},\n" for name in names
    ]
    if entries:
        lines.append("RESOURCES = _LazyResources({\n" + "".join(entries) + "})\n")
    else:
        lines.append("RESOURCES = _LazyResources({})\n")

    return "\n".join(lines)


def index_path(output_root: Path) -> Path:
    return Path(output_root) / f"{INDEX_NAME}.{MODULE_EXT}"


def write_index(output_root: Path, text: str) -> Path:
    """Write the aggregate module under *output_root*, replacing any old one.

    Raises:
        BuildError: If the directory or file cannot be written.
    """
    path = index_path(output_root)
    try:
        write_text_atomic(path, text)
    except OSError as e:
        raise BuildError(f"Unable to write index module {path}: {e}", path) from e
    logger.debug(f"Wrote index module {path}")
    return path
