# grocery_prices/config/logging_config.py

"""Logging for sync and analysis runs.

A cron-driven ``sync`` or ``analysis`` run leaves one log file behind,
``logs/run_<YYYYMMDD_HHMMSS>.log``, holding every DEBUG record of the
``grocery_prices`` logger tree: retries, cache hits, per-item conversion
failures.  The console only shows progress (INFO) unless ``--debug`` is
given.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from grocery_prices.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(
    handler: logging.Handler, level: int, fmt: str,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(debug: bool = False) -> Path:
    """Attach the run's file and console handlers to ``grocery_prices``.

    Safe to call more than once: a logger that already has handlers is
    left alone.

    Args:
        debug: Show DEBUG records on the console as well.

    Returns:
        Path of this run's log file.
    """
    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Settings.LOGS_DIR / f"run_{stamp}.log"

    project_logger = logging.getLogger("grocery_prices")
    project_logger.setLevel(logging.DEBUG)
    if project_logger.handlers:
        return log_file

    project_logger.addHandler(_handler(
        logging.FileHandler(log_file, encoding="utf-8"),
        logging.DEBUG,
        _FILE_FORMAT,
    ))
    project_logger.addHandler(_handler(
        logging.StreamHandler(sys.stderr),
        logging.DEBUG if debug else logging.INFO,
        _CONSOLE_FORMAT,
    ))

    project_logger.debug("Writing run log to %s", log_file)
    return log_file
