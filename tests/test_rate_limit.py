# File: tests/test_rate_limit.py
import asyncio

import pytest

from style_scraper.utils.rate_limit import RateLimiter, get_default_limiter


@pytest.mark.asyncio
async def test_first_request_does_not_wait():
    limiter = RateLimiter(10.0)
    assert await limiter.wait() == 0.0
    assert limiter.last_request is not None


@pytest.mark.asyncio
async def test_second_request_waits_for_interval():
    limiter = RateLimiter(0.05)
    await limiter.wait()
    slept = await limiter.wait()
    assert 0 < slept <= 0.05


@pytest.mark.asyncio
async def test_concurrent_callers_are_serialized():
    limiter = RateLimiter(0.02)
    results = await asyncio.gather(*(limiter.wait() for _ in range(3)))
    # Only the first caller goes through without sleeping
    assert sorted(results)[0] == 0.0
    assert sum(1 for r in results if r > 0) == 2


def test_default_limiter_is_process_wide():
    assert get_default_limiter() is get_default_limiter()
