"""Output formatting for glacierctl.

Tables, key/value listings and JSON on stdout; status lines and the upload
progress bar on stderr.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TransferSpeedColumn,
)
from rich.table import Table

if TYPE_CHECKING:
    from glacierctl.models.progress import UploadSummary

console = Console()
err_console = Console(stderr=True)


class OutputFormat(Enum):
    """Output format options."""

    JSON = "json"
    TABLE = "table"

    @classmethod
    def from_string(cls, value: str) -> OutputFormat:
        """Create from string value."""
        return cls(value.lower())


def format_bytes(size: int) -> str:
    """Human-readable size in binary units, e.g. ``2.00 MiB``."""
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if value < 1024 or unit == "TiB":
            break
        value /= 1024
    if unit == "B":
        return f"{size} B"
    return f"{value:.2f} {unit}"


# =============================================================================
# Tables and Key/Value
# =============================================================================


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def print_table(
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    *,
    column_labels: dict[str, str] | None = None,
) -> None:
    """Print rows as a Rich table, one column per key in ``columns``."""
    if not rows:
        console.print("[dim]No results[/dim]")
        return

    labels = column_labels or {}
    table = Table(show_header=True, header_style="bold")
    for col in columns:
        table.add_column(labels.get(col, col.replace("_", " ").title()))
    for row in rows:
        table.add_row(*(_cell(row.get(col)) for col in columns))

    console.print(table)


def print_key_value(
    data: dict[str, Any],
    *,
    title: str | None = None,
    key_labels: dict[str, str] | None = None,
) -> None:
    """Print key-value pairs, labels padded to a common width."""
    if title:
        console.print(f"[bold]{title}[/bold]")

    labels = {k: (key_labels or {}).get(k, k.replace("_", " ").title()) for k in data}
    width = max((len(label) for label in labels.values()), default=0)

    for key, value in data.items():
        if value is None:
            value = "[dim]-[/dim]"
        elif isinstance(value, (list, dict)):
            value = json.dumps(value)
        console.print(f"  {labels[key]:<{width}}  {_cell(value)}")


# =============================================================================
# Unified Output
# =============================================================================


def print_output(
    data: Any,
    *,
    format: OutputFormat = OutputFormat.TABLE,
    columns: Sequence[str] | None = None,
    column_labels: dict[str, str] | None = None,
    quiet: bool = False,
    id_field: str = "id",
) -> None:
    """Print a dict or a list of dicts in the requested format.

    Args:
        data: A dict, or a list of dicts when ``columns`` is given.
        format: Output format.
        columns: Columns for table format.
        column_labels: Display labels for columns or keys.
        quiet: If True, print only ``id_field`` of each item.
        id_field: Field printed in quiet mode.
    """
    if quiet:
        items = data if isinstance(data, list) else [data]
        for item in items:
            print(item.get(id_field) or "")
        return

    if format == OutputFormat.JSON:
        print(json.dumps(data, indent=2, default=str))
    elif columns:
        rows = data if isinstance(data, list) else [data]
        print_table(rows, columns, column_labels=column_labels)
    else:
        print_key_value(data, key_labels=column_labels)


def print_upload_summary(summary: UploadSummary) -> None:
    """Print the result of an archive upload for a person to read."""
    if summary.dry_run:
        print_success(f"Dry run complete: {summary.parts_total} parts hashed")
    else:
        print_success("Archive successfully uploaded.")

    parts = f"{summary.parts_total} ({summary.parts_submitted} sent"
    if summary.parts_skipped:
        parts += f", {summary.parts_skipped} skipped"
    parts += ")"

    rows: dict[str, Any] = {
        "Archive ID": summary.archive_id or None,
        "Upload ID": summary.upload_id or None,
        "Vault": summary.vault,
        "Tree Hash": summary.checksum,
        "Size": f"{format_bytes(summary.archive_size)} ({summary.archive_size} bytes)",
        "Parts": parts,
        "Duration": f"{summary.duration:.2f}s ({summary.throughput_mbps:.2f} MiB/s)",
    }
    print_key_value(
        {k: v for k, v in rows.items() if v is not None},
        key_labels={k: k for k in rows},
    )


# =============================================================================
# Status Messages
# =============================================================================


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message to stderr."""
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓[/green] {message}")


def print_info(message: str) -> None:
    """Print info message."""
    console.print(f"[blue]Info:[/blue] {message}")


def create_progress() -> Progress:
    """Byte-based progress bar for part uploads.

    Drawn on stderr so stdout stays clean for JSON output. Tasks with
    ``total=None`` (stdin) show a pulsing bar.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(binary_units=True),
        TransferSpeedColumn(),
        console=err_console,
    )
