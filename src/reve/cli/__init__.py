"""CLI module for reve.

This module provides the ``build`` and ``watch`` commands.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from reve.cli.commands import build_config, run_build, run_watch

app = typer.Typer(
    name="reve",
    help="Reve - embed binary files as importable Python modules",
    add_completion=False,
)
console = Console()

_BASE_OPTION = typer.Option(
    Path("."), "--base", "-b", help="Base directory for sources and output"
)
_RESOURCE_OPTION = typer.Option(
    None, "--resource", "-r", help="Resource as NAME=PATH (repeatable)"
)
_OUTPUT_OPTION = typer.Option(
    None, "--output-dir", "-o", help="Output directory relative to the base"
)
_COMPRESS_OPTION = typer.Option(
    None, "--compress/--no-compress", help="Gzip payloads before encoding"
)
_VERBOSE_OPTION = typer.Option(
    None, "--verbose", "-v", help="Enable verbose output"
)


@app.command()
def build(
    base: Path = _BASE_OPTION,
    resource: Optional[List[str]] = _RESOURCE_OPTION,
    output_dir: Optional[str] = _OUTPUT_OPTION,
    compress: Optional[bool] = _COMPRESS_OPTION,
    verbose: Optional[bool] = _VERBOSE_OPTION,
) -> None:
    """Build every resource and the index module once."""
    config = build_config(
        base,
        resource_specs=resource or [],
        output_dir=output_dir,
        compression=compress,
        verbose=verbose,
    )
    run_build(base=base, config=config, console=console)


@app.command()
def watch(
    base: Path = _BASE_OPTION,
    resource: Optional[List[str]] = _RESOURCE_OPTION,
    output_dir: Optional[str] = _OUTPUT_OPTION,
    compress: Optional[bool] = _COMPRESS_OPTION,
    verbose: Optional[bool] = _VERBOSE_OPTION,
) -> None:
    """Build, then rebuild resources whenever their sources change."""
    config = build_config(
        base,
        resource_specs=resource or [],
        output_dir=output_dir,
        compression=compress,
        verbose=verbose,
    )
    run_watch(base=base, config=config, console=console)


if __name__ == "__main__":
    app()
