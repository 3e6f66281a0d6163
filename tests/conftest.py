"""Shared fixtures for Warden tests."""

from __future__ import annotations

import os
from unittest.mock import AsyncMock, MagicMock

# Ensure BOT_TOKEN is set before any warden module triggers Settings validation
os.environ.setdefault("BOT_TOKEN", "0:TEST_TOKEN")

import pytest

from tests.fakes import (
    ALICE_ID,
    FIXED_NOW,
    FakeEnforcer,
    FakeLocator,
    FakePlaytime,
    FakeRounds,
    FakeStore,
)
from warden.services.ban_issuer import BanIssuer
from warden.services.ban_record import LocatedPlayer


@pytest.fixture
def alice() -> LocatedPlayer:
    return LocatedPlayer(
        account_id=ALICE_ID,
        user_name="Alice",
        last_address="::ffff:192.0.2.5",
        last_hardware_id=b"\x01\x02\x03",
    )


@pytest.fixture
def collaborators(alice):
    """Fresh fakes for every BanIssuer collaborator, keyed by constructor name."""
    return {
        "locator": FakeLocator({"Alice": alice}),
        "store": FakeStore(),
        "playtime": FakePlaytime(),
        "rounds": FakeRounds(),
        "enforcer": FakeEnforcer(),
    }


@pytest.fixture
def make_issuer(collaborators):
    """Factory building a BanIssuer over the fakes, with a frozen clock."""

    def _make(**overrides) -> BanIssuer:
        kwargs = {**collaborators, "clock": lambda: FIXED_NOW}
        kwargs.update(overrides)
        return BanIssuer(**kwargs)

    return _make


@pytest.fixture
def fake_redis():
    """In-memory mock that behaves like redis.asyncio.Redis for the subset we use."""

    store: dict[str, str] = {}

    redis = AsyncMock()

    async def _set(key, value, ex=None, nx=False):
        if nx and key in store:
            return None
        store[key] = value
        return True

    async def _get(key):
        return store.get(key)

    async def _delete(*keys):
        count = 0
        for k in keys:
            if k in store:
                del store[k]
                count += 1
        return count

    redis.set = AsyncMock(side_effect=_set)
    redis.get = AsyncMock(side_effect=_get)
    redis.delete = AsyncMock(side_effect=_delete)
    redis.ping = AsyncMock(return_value=True)

    redis._store = store  # Expose for assertions
    return redis


@pytest.fixture
def make_message():
    """Factory to create a mock aiogram Message sent by *from_user_id*."""

    def _make(text: str = "/ban", from_user_id: int = 42):
        msg = MagicMock()
        msg.text = text
        msg.from_user = MagicMock()
        msg.from_user.id = from_user_id
        msg.answer = AsyncMock()
        return msg

    return _make


@pytest.fixture
def make_ws():
    """Factory for a mock aiohttp WebSocketResponse."""

    def _make(closed: bool = False):
        ws = MagicMock()
        ws.closed = closed
        ws.send_json = AsyncMock()
        ws.close = AsyncMock()
        return ws

    return _make
