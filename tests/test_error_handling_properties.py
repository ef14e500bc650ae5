"""
Property-based tests for error handling.

These tests verify universal properties that should hold for the retry
handler and the exception taxonomy.
"""

import pytest
import asyncio
from unittest.mock import patch
from hypothesis import given, settings, strategies as st
from catalog_core.error_handling import (
    CatalogCoreError,
    CatalogUnavailable,
    EmptySelectionError,
    ErrorHandler,
    InvalidQuantityOperation,
    MalformedPayloadError,
    RetryConfig,
)


retry_counts = st.integers(min_value=1, max_value=10)
base_delays = st.floats(min_value=0.01, max_value=5.0)
attempt_numbers = st.integers(min_value=0, max_value=9)


@given(base_delay=base_delays, attempt=attempt_numbers)
@settings(max_examples=100)
def test_backoff_delay_exponential_growth(base_delay, attempt):
    """
    **Property: Backoff delay doubles per attempt**

    For any base delay, delay(attempt) == base * 2^attempt and the next
    attempt waits exactly twice as long.
    """
    config = RetryConfig(base_delay_seconds=base_delay)

    delay = config.get_backoff_delay(attempt)
    assert delay == base_delay * (2 ** attempt)
    assert config.get_backoff_delay(attempt + 1) == pytest.approx(delay * 2)


@given(max_retries=retry_counts)
@settings(max_examples=50, deadline=None)
def test_retry_exhaustion_termination(max_retries):
    """
    **Property: Retry exhaustion termination**

    An operation that always fails is attempted exactly max_retries times
    and the last failure is raised.
    """
    handler = ErrorHandler(max_retries=max_retries)
    call_count = 0

    async def always_fails():
        nonlocal call_count
        call_count += 1
        raise ValueError(f"Simulated failure #{call_count}")

    with patch('asyncio.sleep', return_value=None):
        with pytest.raises(ValueError) as exc_info:
            asyncio.run(handler.retry_with_backoff(always_fails))

    assert call_count == max_retries
    assert f"#{max_retries}" in str(exc_info.value)


@given(
    max_retries=retry_counts,
    success_on_attempt=st.integers(min_value=1, max_value=10)
)
@settings(max_examples=50, deadline=None)
def test_retry_succeeds_before_exhaustion(max_retries, success_on_attempt):
    """
    An operation succeeding on attempt N <= max_retries returns its result
    without further attempts.
    """
    if success_on_attempt > max_retries:
        return

    handler = ErrorHandler(max_retries=max_retries)
    call_count = 0

    async def fails_then_succeeds():
        nonlocal call_count
        call_count += 1
        if call_count < success_on_attempt:
            raise ValueError(f"Failure #{call_count}")
        return f"Success on attempt {call_count}"

    with patch('asyncio.sleep', return_value=None):
        result = asyncio.run(handler.retry_with_backoff(fails_then_succeeds))

    assert call_count == success_on_attempt
    assert result == f"Success on attempt {success_on_attempt}"


def test_retry_passes_arguments_through():
    """Positional and keyword arguments reach the operation unchanged."""
    handler = ErrorHandler(max_retries=1)

    async def echo(query, limit=0):
        return (query, limit)

    assert asyncio.run(handler.retry_with_backoff(echo, "suite", limit=5)) == ("suite", 5)


def test_error_handler_rejects_zero_retries():
    with pytest.raises(ValueError):
        ErrorHandler(max_retries=0)


def test_error_taxonomy():
    """All engine errors share a base class; the quantity error is an assertion."""
    for error_type in (
        CatalogUnavailable,
        EmptySelectionError,
        InvalidQuantityOperation,
        MalformedPayloadError,
    ):
        assert issubclass(error_type, CatalogCoreError)

    assert issubclass(InvalidQuantityOperation, AssertionError)
    assert "at least one item" in str(EmptySelectionError())
