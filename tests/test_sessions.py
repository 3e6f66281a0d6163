"""Tests for the live session registry and the session enforcer."""

from __future__ import annotations

import threading
import uuid

import pytest

from tests.fakes import ALICE_ID
from warden.services.enforcer import SessionEnforcer
from warden.services.sessions import PlayerSession, SessionRegistry


def _session(make_ws, account_id=ALICE_ID, name="Alice", closed=False) -> PlayerSession:
    return PlayerSession(account_id, name, "192.0.2.5", b"\x01", make_ws(closed=closed))


# ── SessionRegistry ──────────────────────────────────────────────────


def test_add_and_find(make_ws):
    registry = SessionRegistry()
    session = _session(make_ws)

    assert registry.add(session) is None
    assert registry.find_by_account(ALICE_ID) is session
    assert registry.find_by_name("aLiCe") is session
    assert len(registry) == 1


def test_add_replaces_previous(make_ws):
    registry = SessionRegistry()
    first = _session(make_ws)
    second = _session(make_ws)

    registry.add(first)
    assert registry.add(second) is first
    assert registry.find_by_account(ALICE_ID) is second


def test_remove_ignores_stale_session(make_ws):
    registry = SessionRegistry()
    first = _session(make_ws)
    second = _session(make_ws)
    registry.add(first)
    registry.add(second)

    registry.remove(first)
    assert registry.find_by_account(ALICE_ID) is second

    registry.remove(second)
    assert registry.find_by_account(ALICE_ID) is None
    assert len(registry) == 0


def test_find_missing():
    registry = SessionRegistry()
    assert registry.find_by_account(uuid.uuid4()) is None
    assert registry.find_by_name("Ghost") is None


def test_concurrent_join_and_leave(make_ws):
    registry = SessionRegistry()
    sessions = [_session(make_ws, uuid.uuid4(), f"p{i}") for i in range(200)]

    def churn(chunk):
        for s in chunk:
            registry.add(s)
            registry.find_by_name(s.user_name)
            registry.remove(s)

    threads = [threading.Thread(target=churn, args=(sessions[i::4],)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(registry) == 0


# ── PlayerSession.disconnect ─────────────────────────────────────────


@pytest.mark.asyncio
async def test_disconnect_sends_reason_then_closes(make_ws):
    session = _session(make_ws)
    await session.disconnect("You are banned.")

    session._ws.send_json.assert_awaited_once_with(
        {"type": "disconnect", "reason": "You are banned."}
    )
    session._ws.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_disconnect_already_closed(make_ws):
    session = _session(make_ws, closed=True)
    await session.disconnect("bye")

    session._ws.send_json.assert_not_called()
    assert session.connected is False


# ── SessionEnforcer ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_kick_online(make_ws):
    registry = SessionRegistry()
    session = _session(make_ws)
    registry.add(session)

    kicked = await SessionEnforcer(registry).kick_if_online(ALICE_ID, "Banned: Griefing")

    assert kicked is True
    session._ws.send_json.assert_awaited_once_with(
        {"type": "disconnect", "reason": "Banned: Griefing"}
    )


@pytest.mark.asyncio
async def test_kick_offline():
    kicked = await SessionEnforcer(SessionRegistry()).kick_if_online(ALICE_ID, "Banned")
    assert kicked is False
