"""Rich console output for the command-line entrypoint.

The build pipeline itself only logs; this module renders the human-facing
pieces (the build summary table and the preview banner) with Rich.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from grafe.pipeline.site_builder.runner import BuildStats

_CONSOLE = Console()

_SUMMARY_LABELS: dict[str, str] = {
    "pages_rendered": "Pages rendered",
    "drafts_skipped": "Drafts skipped",
    "content_files_copied": "Content files copied",
    "theme_assets_copied": "Theme assets copied",
    "static_assets_copied": "Static assets copied",
    "scripts_transpiled": "Scripts transpiled",
}


def get_console() -> Console:
    """Return the shared console instance."""
    return _CONSOLE


def build_summary_table(stats: BuildStats) -> Table:
    """Return a two-column table describing ``stats``."""
    table = Table(title="Build summary", show_header=True, header_style="bold")
    table.add_column("Step")
    table.add_column("Files", justify="right")
    for key, value in stats.as_dict().items():
        table.add_row(_SUMMARY_LABELS.get(key, key), str(value))
    return table


def print_build_summary(stats: BuildStats, console: Console | None = None) -> None:
    """Print the summary table for a finished build."""
    (console or _CONSOLE).print(build_summary_table(stats))


def print_server_banner(url: str, directory: str, console: Console | None = None) -> None:
    """Announce where the preview server is listening."""
    (console or _CONSOLE).print(
        Panel(
            f"Serving [bold]{directory}[/bold] at [link={url}]{url}[/link]\n"
            "Press Ctrl+C to stop.",
            title="Preview",
            border_style="green",
        )
    )


def print_failure(message: str, console: Console | None = None) -> None:
    """Report a failed build."""
    (console or _CONSOLE).print(f"[bold red]Build failed:[/bold red] {escape(message)}")


__all__ = [
    "build_summary_table",
    "get_console",
    "print_build_summary",
    "print_failure",
    "print_server_banner",
]
