"""Tests for the Redis-backed round tracker."""

from __future__ import annotations

import pytest

from warden.services.rounds import ROUND_KEY, RoundTracker


@pytest.mark.asyncio
async def test_no_round(fake_redis):
    assert await RoundTracker(fake_redis).current_round_id() is None


@pytest.mark.asyncio
async def test_round_published_then_cleared(fake_redis):
    tracker = RoundTracker(fake_redis)

    await fake_redis.set(ROUND_KEY, "42")
    assert await tracker.current_round_id() == 42

    await fake_redis.delete(ROUND_KEY)
    assert await tracker.current_round_id() is None


@pytest.mark.asyncio
async def test_round_zero_is_unassigned(fake_redis):
    await fake_redis.set(ROUND_KEY, "0")
    assert await RoundTracker(fake_redis).current_round_id() is None


@pytest.mark.asyncio
async def test_bytes_value(fake_redis):
    await fake_redis.set(ROUND_KEY, b"17")
    assert await RoundTracker(fake_redis).current_round_id() == 17
