# grocery_prices/scrapers/retry_policy.py

"""Exponential-backoff retry policy applied to every outbound request."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from grocery_prices.config.settings import Settings
from grocery_prices.errors import RetryExhaustedError, TransportError

logger = logging.getLogger("grocery_prices.retry")

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Stateless retry configuration, safe to share between requests.

    Attempt ``n`` (0-based) that fails is followed by a sleep of
    ``min(max_backoff, 2 ** n)`` seconds, unless it was the last attempt.
    """

    max_attempts: int = Settings.MAX_RETRIES
    max_backoff: float = Settings.MAX_BACKOFF

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def backoff(self, attempt: int) -> float:
        """Seconds to wait after the failed attempt with index *attempt*."""
        return min(self.max_backoff, float(2 ** attempt))

    def execute(self, request: Callable[[], T]) -> T:
        """Run *request* until it succeeds or attempts are exhausted.

        Only :class:`TransportError` is retried; anything else is a bug
        or an environment failure and propagates immediately.

        Raises:
            RetryExhaustedError: carrying the attempt count and the last
                transport error.
        """
        for attempt in range(self.max_attempts):
            try:
                return request()
            except TransportError as exc:
                if attempt < self.max_attempts - 1:
                    sleep_time = self.backoff(attempt)
                    logger.warning(
                        "Retrying request after %.0fs (attempt %d/%d) "
                        "due to error: %s",
                        sleep_time,
                        attempt + 1,
                        self.max_attempts,
                        exc,
                    )
                    time.sleep(sleep_time)
                    continue
                logger.error(
                    "Failed request after %d attempts, giving up: %s",
                    self.max_attempts,
                    exc,
                )
                raise RetryExhaustedError(self.max_attempts, exc) from exc
        raise AssertionError("retry loop ended without a result")
