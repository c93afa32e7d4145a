# tests/test_retry_policy.py

"""Tests for the exponential-backoff retry policy."""

import unittest
from unittest.mock import MagicMock, call, patch

from grocery_prices.errors import RetryExhaustedError, TransportError
from grocery_prices.scrapers.retry_policy import RetryPolicy


def _flaky(failures: int) -> MagicMock:
    """A request that fails *failures* times and then returns 'OK'."""
    errors: list[object] = [
        TransportError("https://example.com", status=500)
        for _ in range(failures)
    ]
    return MagicMock(side_effect=[*errors, "OK"])


class TestRetryPolicy(unittest.TestCase):
    """RetryPolicy.execute attempt accounting."""

    def test_no_retry_on_success(self) -> None:
        """A successful first attempt returns immediately."""
        request = MagicMock(return_value="OK")
        result = RetryPolicy(max_attempts=1, max_backoff=0).execute(request)
        self.assertEqual(result, "OK")
        self.assertEqual(request.call_count, 1)

    def test_succeeds_on_last_attempt(self) -> None:
        """Two failures then success needs exactly three calls."""
        request = _flaky(2)
        result = RetryPolicy(max_attempts=3, max_backoff=0).execute(request)
        self.assertEqual(result, "OK")
        self.assertEqual(request.call_count, 3)

    def test_gives_up_after_max_attempts(self) -> None:
        """Two failures under max_attempts=2 is a wrapped failure."""
        request = _flaky(2)
        with self.assertRaises(RetryExhaustedError) as ctx:
            RetryPolicy(max_attempts=2, max_backoff=0).execute(request)
        self.assertEqual(request.call_count, 2)
        self.assertEqual(ctx.exception.attempts, 2)
        self.assertIsInstance(ctx.exception.last_error, TransportError)
        self.assertEqual(ctx.exception.last_error.status, 500)

    def test_counter_resets_between_calls(self) -> None:
        """Independent execute() calls do not share attempt counts."""
        policy = RetryPolicy(max_attempts=2, max_backoff=0)
        first = _flaky(1)
        second = _flaky(1)
        self.assertEqual(policy.execute(first), "OK")
        self.assertEqual(policy.execute(second), "OK")
        self.assertEqual(first.call_count, 2)
        self.assertEqual(second.call_count, 2)

    def test_non_transport_errors_propagate(self) -> None:
        """Errors other than TransportError are not retried."""
        request = MagicMock(side_effect=KeyError("boom"))
        with self.assertRaises(KeyError):
            RetryPolicy(max_attempts=5).execute(request)
        self.assertEqual(request.call_count, 1)

    def test_invalid_attempts(self) -> None:
        """Zero attempts is a configuration error."""
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)


class TestBackoff(unittest.TestCase):
    """Sleep durations between attempts."""

    def test_backoff_is_capped(self) -> None:
        """Backoff doubles per attempt up to max_backoff."""
        policy = RetryPolicy(max_attempts=10, max_backoff=5)
        self.assertEqual(
            [policy.backoff(i) for i in range(5)],
            [1.0, 2.0, 4.0, 5.0, 5.0],
        )

    @patch("grocery_prices.scrapers.retry_policy.time.sleep")
    def test_sleeps_between_attempts_only(
        self, mock_sleep: MagicMock,
    ) -> None:
        """No sleep follows the final failed attempt."""
        request = _flaky(3)
        with self.assertRaises(RetryExhaustedError):
            RetryPolicy(max_attempts=3, max_backoff=120).execute(request)
        self.assertEqual(mock_sleep.call_args_list, [call(1.0), call(2.0)])
