"""Game gateway – websocket endpoint that game clients stay connected to.

Protocol: the client opens ``/connect`` and sends a JSON hello::

    {"user_id": "<uuid>", "user_name": "Alice", "hwid": "<hex or null>"}

The gateway registers the session, refreshes the player's last-seen record and
keeps the socket open until either side closes it.  A kick arrives as
``{"type": "disconnect", "reason": "..."}`` followed by a close frame.
"""

from __future__ import annotations

import logging
import uuid

from aiohttp import WSMsgType, web
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.db.repositories.player_repo import PlayerRepo
from warden.services.sessions import PlayerSession, SessionRegistry

logger = logging.getLogger(__name__)

HELLO_TIMEOUT = 10.0

REGISTRY_KEY = web.AppKey("session_registry", SessionRegistry)
SESSION_FACTORY_KEY = web.AppKey("session_factory", async_sessionmaker[AsyncSession])


def parse_hello(data: dict) -> tuple[uuid.UUID, str, bytes | None]:
    """Validate a hello payload; raises ValueError on anything malformed."""
    user_id = uuid.UUID(str(data["user_id"]))
    user_name = str(data["user_name"]).strip()
    if not user_name:
        raise ValueError("empty user_name")
    raw_hwid = data.get("hwid")
    hwid = bytes.fromhex(raw_hwid) if raw_hwid else None
    return user_id, user_name, hwid


async def connect_handler(request: web.Request) -> web.WebSocketResponse:
    ws = web.WebSocketResponse(heartbeat=30)
    await ws.prepare(request)

    try:
        hello = await ws.receive_json(timeout=HELLO_TIMEOUT)
        user_id, user_name, hwid = parse_hello(hello)
    except (TimeoutError, TypeError, ValueError, KeyError) as e:
        logger.info("Rejected connection from %s: bad hello (%s).", request.remote, e)
        await ws.close(message=b"Bad hello")
        return ws

    registry = request.app[REGISTRY_KEY]
    session = PlayerSession(user_id, user_name, request.remote, hwid, ws)

    async with request.app[SESSION_FACTORY_KEY]() as db:
        await PlayerRepo(db).record_seen(user_id, user_name, request.remote, hwid)

    previous = registry.add(session)
    if previous is not None:
        await previous.disconnect("You connected from another location.")
    logger.info("%s (%s) connected from %s.", user_name, user_id, request.remote)

    try:
        async for msg in ws:
            if msg.type == WSMsgType.ERROR:
                logger.warning("Connection error for %s: %s", user_id, ws.exception())
    finally:
        registry.remove(session)
        logger.info("%s (%s) disconnected.", user_name, user_id)

    return ws
