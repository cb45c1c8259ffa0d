"""Rich rendering of build reports."""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table

from reve.report import BuildReport

logger = logging.getLogger(__name__)


def get_rich_console() -> Optional[Console]:
    """
    Get the Console of the package or root RichHandler if one is installed.

    Returns:
        Console instance if a RichHandler is found, a new stderr Console
        when attached to a TTY, None otherwise.
    """
    for name in ("reve", ""):
        for handler in logging.getLogger(name).handlers:
            if hasattr(handler, "console"):
                return handler.console

    if sys.stderr.isatty():
        return Console(stderr=True)
    return None


def _format_size(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    if size >= 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size} B"


def log_build_summary(
    report: BuildReport,
    console: Optional[Console] = None,
) -> None:
    """
    Show one row per resource plus totals.

    Falls back to plain log lines when no console is available.

    Args:
        report: Report returned by a build.
        console: Optional Console instance (uses get_rich_console() if None).
    """
    if console is None:
        console = get_rich_console()

    total = len(report.outcomes)
    if console is None:
        logger.info(
            f"Build Summary: {len(report.succeeded)}/{total} resource(s) built "
            f"in {report.elapsed:.2f}s, index at {report.index_path}"
        )
        for outcome in report.failed:
            logger.warning(f"  - {outcome.name}: {outcome.error}")
        return

    title = "✓ Build Summary" if report.ok else "⚠ Build Summary"
    style = "bold green" if report.ok else "bold yellow"
    table = Table(
        title=f"[{style}]{title}[/{style}]",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Resource", style="cyan", no_wrap=True)
    table.add_column("Module", style="white")
    table.add_column("Payload", style="yellow", justify="right")
    table.add_column("Status", justify="right")

    for outcome in report.outcomes:
        if outcome.ok:
            status = "[green]built[/green]"
            size = _format_size(outcome.size)
        else:
            status = f"[red]skipped[/red] [dim]{outcome.error}[/dim]"
            size = "-"
        table.add_row(outcome.name, f"{outcome.filename}.py", size, status)

    table.add_row(
        "[dim]Index[/dim]",
        f"[dim]{report.index_path.name}[/dim]",
        "[dim]gzip[/dim]" if report.compression else "",
        f"[dim]{report.elapsed:.2f}s[/dim]",
    )

    console.print(table)
