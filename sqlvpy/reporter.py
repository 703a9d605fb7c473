from __future__ import annotations

from typing import Any, Dict, List

from rich import box
from rich.console import Console
from rich.table import Table


def _is_aggregated(res: Dict[str, Any]) -> bool:
    return isinstance(res.get("duration_seconds"), dict)


def _duration_ms(res: Dict[str, Any]) -> str:
    if _is_aggregated(res):
        median = res["duration_seconds"]["median"] * 1000
        stddev = res["duration_seconds"]["stddev"] * 1000
        return f"{median:,.2f} ± {stddev:,.2f}"
    return f"{res.get('duration_seconds', 0.0) * 1000:,.2f}"


def _peak_mb(res: Dict[str, Any]) -> str:
    peak = res.get("peak_rss_bytes")
    if isinstance(peak, dict):
        peak = peak.get("median")
    if not peak:
        return "N/A"
    return f"{peak / (1024 * 1024):.2f}"


def print_results(results: List[Dict[str, Any]], console: Console | None = None) -> None:
    """
    Render benchmark results as a rich table, grouped by record count.

    Handles both single-run results and aggregated multi-run results; for
    aggregated rows the duration column shows median ± stddev.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(
        title="SQL vs. Python Filtering Results",
        box=box.ROUNDED,
        caption="Sorted by duration within each record count",
    )
    table.add_column("Records", justify="right", style="magenta")
    table.add_column("Variant", style="cyan", no_wrap=True)
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("Runs", justify="right", style="blue")
    table.add_column("Duration (ms)", justify="right", style="green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")

    def sort_key(r: Dict[str, Any]) -> tuple:
        duration = r["duration_seconds"]["median"] if _is_aggregated(r) else r.get("duration_seconds", 0.0)
        return (r.get("record_count", 0), duration)

    previous_count = None
    for res in sorted(results, key=sort_key):
        record_count = res.get("record_count", 0)
        if previous_count is not None and record_count != previous_count:
            table.add_section()
        previous_count = record_count
        table.add_row(
            f"{record_count:,}",
            res.get("variant", "Unknown"),
            f"{res.get('rows', 0):,}",
            str(res.get("runs", 1)),
            _duration_ms(res),
            _peak_mb(res),
        )

    console.print(table)


__all__ = ["print_results"]
