# main.py

"""Entry point for the grocery_prices tracker (sync / analysis)."""

import argparse
import logging
import sys
from pathlib import Path

from grocery_prices.cli.runner import parse_day, run_analysis, run_sync
from grocery_prices.config.logging_config import setup_logging
from grocery_prices.config.settings import Settings

logger = logging.getLogger("grocery_prices.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_STORES)

    parser = argparse.ArgumentParser(
        prog="grocery_prices",
        description="Daily grocery price tracker for Australian retailers.",
        epilog=f"Available stores: {valid_ids}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print debug messages to the console.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Settings.OUTPUT_DIR,
        help="Directory for raw archives and canonical history.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser(
        "sync", help="Fetch a store's catalogue and archive it."
    )
    sync.add_argument("store", help="Store ID to sync.")
    sync.add_argument(
        "--quick",
        action="store_true",
        default=False,
        help="Only fetch the first category.",
    )
    sync.add_argument(
        "--skip-existing",
        action="store_true",
        default=False,
        help="Do nothing if today's archive already exists.",
    )
    sync.add_argument(
        "--print-save-path",
        action="store_true",
        default=False,
        help="Print today's archive path relative to --output-dir and exit.",
    )
    sync.add_argument(
        "--cache-dir",
        type=Path,
        default=Settings.CACHE_DIR,
        help="Root of the per-day page cache.",
    )

    analysis = subparsers.add_parser(
        "analysis", help="Convert archives and merge the price history."
    )
    analysis.add_argument(
        "--day",
        type=parse_day,
        default=None,
        help="Capture date to merge, YYYY-MM-DD (default: today).",
    )
    analysis.add_argument(
        "--store",
        default=None,
        help="Only merge this store (default: all).",
    )
    analysis.add_argument(
        "--compress",
        action="store_true",
        default=False,
        help="Gzip the public per-store output files.",
    )
    analysis.add_argument(
        "--history",
        action="store_true",
        default=False,
        help="Rebuild the history by replaying every archived day.",
    )
    analysis.add_argument(
        "--data-dir",
        type=Path,
        default=Settings.DATA_DIR,
        help="Directory for the public per-store output.",
    )
    return parser


def main() -> None:
    """Route to the sync or analysis runner."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(debug=args.debug)
    logger.info("grocery_prices starting, log file: %s", log_file)

    try:
        if args.command == "sync":
            exit_code = run_sync(
                args.store,
                args.output_dir,
                args.cache_dir,
                quick=args.quick,
                skip_existing=args.skip_existing,
                print_save_path=args.print_save_path,
            )
        else:
            exit_code = run_analysis(
                args.day,
                args.store,
                args.compress,
                args.history,
                args.output_dir,
                args.data_dir,
            )
    except Exception:
        logger.critical("Unexpected error from program", exc_info=True)
        raise
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
