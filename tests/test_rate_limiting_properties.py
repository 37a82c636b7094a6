"""
Property-based tests for rate limiting.

These tests verify universal properties that should hold for all rate limiting
operations across randomly generated inputs.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock
from hypothesis import given, settings, strategies as st

from frete_search.rate_limiting.rate_limiter import RateLimiter


# Strategy for generating delays
delays = st.floats(min_value=0, max_value=5, allow_nan=False)

# Strategy for generating batch caps
batch_sizes = st.integers(min_value=0, max_value=200)


@given(delay=delays)
@settings(max_examples=100)
def test_wait_uses_configured_delay(delay):
    """
    Every pause between requests sleeps exactly the configured delay.
    """
    sleep = AsyncMock()
    limiter = RateLimiter(delay_seconds=delay, sleep=sleep)

    asyncio.run(limiter.wait_between_requests())

    sleep.assert_awaited_once_with(delay)


@given(
    items=st.lists(st.integers(), max_size=300),
    max_batch_size=batch_sizes
)
@settings(max_examples=100)
def test_batch_is_capped_prefix(items, max_batch_size):
    """
    A limited batch is the first ``max_batch_size`` items in order.
    """
    limiter = RateLimiter(max_batch_size=max_batch_size)

    batch = limiter.limit_batch(items)

    assert len(batch) == min(len(items), max_batch_size)
    assert batch == items[:len(batch)]


@given(count=st.integers(min_value=0, max_value=100))
@settings(max_examples=50)
def test_request_count_tracking(count):
    limiter = RateLimiter()

    for _ in range(count):
        limiter.record_request()

    assert limiter.request_count == count


def test_defaults():
    limiter = RateLimiter()
    assert limiter.delay_seconds == 0.35
    assert limiter.max_batch_size == 80
    assert limiter.request_count == 0


@pytest.mark.parametrize("kwargs", [{"delay_seconds": -0.1}, {"max_batch_size": -1}])
def test_negative_configuration_rejected(kwargs):
    with pytest.raises(ValueError):
        RateLimiter(**kwargs)


def test_limit_batch_accepts_tuples():
    limiter = RateLimiter(max_batch_size=2)
    assert limiter.limit_batch(("a", "b", "c")) == ["a", "b"]
