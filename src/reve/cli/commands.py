"""Implementation of the build and watch CLI commands.

Resources come from ``[tool.reve.resources]`` in the nearest
pyproject.toml, extended or overridden by ``--resource NAME=PATH``
options on the command line.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

import typer
from rich.console import Console

from reve import Reve
from reve.config import ReveConfig, load_config
from reve.errors import ReveError
from reve.utils.logging import configure_module_logger
from reve.utils.rich_output import log_build_summary


def parse_resource_specs(specs: Sequence[str]) -> dict[str, str]:
    """Parse ``NAME=PATH`` options into a mapping.

    Raises:
        typer.BadParameter: If an option has no ``=`` or an empty path.
    """
    resources: dict[str, str] = {}
    for spec in specs:
        name, sep, path = spec.partition("=")
        if not sep or not path.strip():
            raise typer.BadParameter(
                f"Expected NAME=PATH, got {spec!r}", param_hint="--resource"
            )
        resources[name.strip()] = path.strip()
    return resources


def build_config(
    base: Path,
    resource_specs: Sequence[str] = (),
    output_dir: Optional[str] = None,
    compression: Optional[bool] = None,
    verbose: Optional[bool] = None,
) -> ReveConfig:
    """Merge project, environment and command line settings."""
    config = load_config(
        output_dir=output_dir,
        compression=compression,
        verbose=verbose,
        project_dir=base,
    )
    if resource_specs:
        resources = dict(config.resources)
        resources.update(parse_resource_specs(resource_specs))
        config = config.model_copy(update={"resources": resources})
    return config


def create_from_config(base: Path, config: ReveConfig) -> Reve:
    """Create a Reve instance with every configured resource registered."""
    reve = Reve(base, config=config)
    for name, source in config.resources.items():
        reve.add_resource(name, source)
    return reve


def _prepare(base: Path, config: ReveConfig, console: Console) -> Reve:
    configure_module_logger(
        "reve", level=logging.DEBUG if config.verbose else logging.INFO
    )
    if not config.resources:
        console.print("[yellow]⚠[/yellow] No resources configured.")
        console.print(
            "  Add a [bold]\\[tool.reve.resources][/bold] table to pyproject.toml "
            "or pass --resource NAME=PATH"
        )
    try:
        return create_from_config(base, config)
    except ReveError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(code=1) from e


def run_build(
    base: Path,
    config: ReveConfig,
    console: Optional[Console] = None,
) -> None:
    """Build all configured resources once and print a summary.

    Args:
        base: Base directory for sources and output.
        config: Merged configuration.
        console: Rich console instance for output.
    """
    if console is None:
        console = Console()

    reve = _prepare(base, config, console)
    try:
        report = asyncio.run(reve.build())
    except ReveError as e:
        console.print(f"[red]✗[/red] Build failed: {e}")
        raise typer.Exit(code=1) from e

    log_build_summary(report, console=console)


def run_watch(
    base: Path,
    config: ReveConfig,
    console: Optional[Console] = None,
) -> None:
    """Build, then keep rebuilding on changes until interrupted.

    Args:
        base: Base directory for sources and output.
        config: Merged configuration.
        console: Rich console instance for output.
    """
    if console is None:
        console = Console()

    reve = _prepare(base, config, console)
    console.print(
        f"[bold]Watching[/bold] {len(reve.resources)} resource(s), "
        "press Ctrl+C to stop"
    )
    try:
        asyncio.run(reve.watch())
    except ReveError as e:
        console.print(f"[red]✗[/red] Watch failed: {e}")
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        console.print("[dim]Stopped watching.[/dim]")
