"""Shared utility functions for the deliverable parser.

Provides async text loading and Rich-based console reporting. The parsing
core never prints; these helpers are for the command line layer.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console
from rich.table import Table

console = Console()

TEXT_SUFFIXES = (".md", ".markdown", ".txt", ".json", "")


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


async def read_text_file(path: str | Path) -> str:
    """Read an LLM response saved to disk without blocking the event loop.

    Args:
        path: Path to a markdown, text, or JSON file.

    Returns:
        The file contents decoded as UTF-8.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file suffix is not a text format.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Response file not found: {path}")
    if file_path.suffix.lower() not in TEXT_SUFFIXES:
        raise ValueError(f"Expected a text or markdown file, got: {file_path.suffix}")
    return await asyncio.to_thread(file_path.read_text, "utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
