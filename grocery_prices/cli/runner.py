# grocery_prices/cli/runner.py

"""Headless command runners for ``sync`` and ``analysis``."""

import argparse
import logging
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.table import Table

from grocery_prices.errors import GroceryPricesError
from grocery_prices.models.product import Store
from grocery_prices.services.analysis import AnalysisResult, do_analysis
from grocery_prices.services.sync import do_sync, save_path

logger = logging.getLogger("grocery_prices.cli")

# Stderr console for status messages so stdout stays clean for scripts
_err = Console(stderr=True)


def resolve_store(store_id: str | None) -> Store | None:
    """Map a store id to the :class:`Store` enum.

    Returns ``None`` when *store_id* is ``None``.
    Raises ``SystemExit`` on unknown IDs.
    """
    if store_id is None:
        return None
    try:
        return Store(store_id)
    except ValueError:
        valid = ", ".join(s.value for s in Store)
        _err.print(f"[red]Unknown store: {store_id}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(1) from None


def parse_day(text: str) -> date:
    """Parse a ``YYYY-MM-DD`` string for argparse."""
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(
            "Error parsing date, use format year-month-day "
            f"(e.g. 2023-12-31), got {text!r}"
        ) from None


def run_sync(
    store_id: str,
    output_dir: Path,
    cache_dir: Path,
    quick: bool = False,
    skip_existing: bool = False,
    print_save_path: bool = False,
) -> int:
    """Run a store sync and return an exit code (0=ok, 1=fail)."""
    store = resolve_store(store_id)
    if store is None:
        _err.print("[red]A store is required for sync[/red]")
        return 1

    if print_save_path:
        print(save_path(store, date.today()))
        return 0

    _err.print(f"[bold]Syncing:[/bold] {store.value}")
    try:
        result = do_sync(
            store,
            output_dir,
            cache_dir,
            quick=quick,
            skip_existing=skip_existing,
        )
    except GroceryPricesError as exc:
        logger.error("Sync of %s failed: %s", store, exc, exc_info=True)
        _err.print(f"[red]Sync failed: {exc}[/red]")
        return 1

    if result.skipped:
        _err.print(f"[yellow]Already synced → {result.path}[/yellow]")
    else:
        _err.print(
            f"[green]✓ {result.products:,} products from "
            f"{result.categories} categories → {result.path}[/green]"
        )
    return 0


def _print_summary(result: AnalysisResult) -> None:
    """Render per-store merge counters as a Rich table."""
    table = Table(
        title="Price History Merge",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Store", style="magenta")
    table.add_column("New prices", justify="right", style="green")
    table.add_column("New products", justify="right")
    table.add_column("Unchanged", justify="right", style="dim")
    table.add_column("Not seen", justify="right", style="yellow")
    table.add_column("Duplicates", justify="right", style="dim")

    for store in Store:
        table.add_row(
            store.value,
            str(sum(m.new_prices[store] for m in result.merges)),
            str(sum(m.new_products[store] for m in result.merges)),
            str(sum(m.unchanged[store] for m in result.merges)),
            str(result.merges[-1].retained[store] if result.merges else 0),
            str(sum(m.duplicates[store] for m in result.merges)),
        )

    _err.print(table)


def run_analysis(
    day: date | None,
    store_id: str | None,
    compress: bool,
    history: bool,
    output_dir: Path,
    data_dir: Path,
) -> int:
    """Run conversion + merge and return an exit code (0=ok, 1=fail)."""
    store = resolve_store(store_id)
    label = "full history rebuild" if history else str(day or date.today())
    _err.print(f"[bold]Analysis:[/bold] {label}")

    try:
        result = do_analysis(
            day, store, compress, history, output_dir, data_dir
        )
    except GroceryPricesError as exc:
        logger.error("Failed to perform analysis: %s", exc, exc_info=True)
        _err.print(f"[red]Analysis failed: {exc}[/red]")
        return 1

    _print_summary(result)
    _err.print(
        f"[green]✓ {result.products:,} products across "
        f"{len(result.days)} day(s)[/green]"
    )
    return 0
