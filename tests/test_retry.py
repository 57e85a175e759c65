"""Tests for retry logic."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from structlog.testing import capture_logs

from testledger.retry import compute_delay, retry_with_backoff


class TestRetryDecorator:
    """Test suite for retry decorator."""

    def test_retry_succeeds_on_first_attempt(self) -> None:
        # Given
        mock_func = MagicMock(return_value="success")

        @retry_with_backoff(max_retries=3)
        def test_func():
            return mock_func()

        # When
        result = test_func()

        # Then
        assert result == "success"
        assert mock_func.call_count == 1

    def test_retry_retries_on_failure(self) -> None:
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0)
        def test_func():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise TimeoutError("Connection timeout")
            return "success"

        assert test_func() == "success"
        assert call_count == 3

    def test_retry_respects_max_retries(self) -> None:
        @retry_with_backoff(max_retries=2, base_delay=0)
        def always_fails():
            raise ConnectionError("Always fails")

        with capture_logs() as logs, pytest.raises(ConnectionError, match="Always fails"):
            always_fails()

        events = [e["event"] for e in logs]
        assert events == ["retry_attempt", "retry_attempt", "retry_exhausted"]

    def test_non_retryable_exception_propagates_immediately(self) -> None:
        mock_func = MagicMock(side_effect=ValueError("bad data"))

        @retry_with_backoff(max_retries=3, base_delay=0)
        def test_func():
            return mock_func()

        with pytest.raises(ValueError, match="bad data"):
            test_func()
        assert mock_func.call_count == 1

    def test_sleeps_with_exponential_backoff(self) -> None:
        mock_func = MagicMock(side_effect=[TimeoutError(), TimeoutError(), TimeoutError(), "ok"])

        @retry_with_backoff(max_retries=3, base_delay=1.0, jitter=False)
        def test_func():
            return mock_func()

        with patch("testledger.retry.time.sleep") as mock_sleep:
            assert test_func() == "ok"

        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0, 4.0]

    def test_custom_retryable_exceptions(self) -> None:
        class TransientError(Exception):
            pass

        mock_func = MagicMock(side_effect=[TransientError(), "ok"])

        @retry_with_backoff(max_retries=1, base_delay=0, retryable_exceptions=(TransientError,))
        def test_func():
            return mock_func()

        assert test_func() == "ok"

    def test_should_retry_false_raises_at_once(self) -> None:
        mock_func = MagicMock(side_effect=ConnectionError("refused"))

        @retry_with_backoff(max_retries=3, base_delay=0, should_retry=lambda e: False)
        def test_func():
            return mock_func()

        with pytest.raises(ConnectionError):
            test_func()
        assert mock_func.call_count == 1

    def test_events_go_to_given_logger(self) -> None:
        log = MagicMock()

        @retry_with_backoff(max_retries=1, base_delay=0, log=log)
        def always_fails():
            raise TimeoutError("slow")

        with pytest.raises(TimeoutError):
            always_fails()

        assert log.warning.call_args.args == ("retry_attempt",)
        assert log.error.call_args.args == ("retry_exhausted",)

    def test_preserves_function_name(self) -> None:
        @retry_with_backoff()
        def store_row():
            return None

        assert store_row.__name__ == "store_row"


class TestComputeDelay:
    """Tests for backoff delay calculation."""

    def test_capped_at_max_delay(self) -> None:
        assert compute_delay(10, base_delay=1.0, max_delay=5.0, jitter=False) == 5.0

    def test_jitter_stays_within_bounds(self) -> None:
        for _ in range(50):
            delay = compute_delay(2, base_delay=1.0, max_delay=60.0, jitter=True)
            assert 2.0 <= delay < 6.0
