"""Application factory – wires the ban services, starts the game gateway and
the admin bot (long polling)."""

from __future__ import annotations

import logging

import aiohttp
import redis.asyncio as aioredis
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiohttp import web

from warden.config import settings
from warden.handlers.connections import (
    REGISTRY_KEY,
    SESSION_FACTORY_KEY,
    connect_handler,
)
from warden.services.sessions import SessionRegistry

logger = logging.getLogger(__name__)

REDIS_KEY = web.AppKey("redis", aioredis.Redis)


def _register_routers(dp: Dispatcher) -> None:
    from warden.handlers.admin import admin_router

    dp.include_router(admin_router)


def _register_middleware(dp: Dispatcher) -> None:
    from warden.middleware.logging_mw import LoggingMiddleware

    dp.update.outer_middleware(LoggingMiddleware())


def build_ban_issuer(
    registry: SessionRegistry,
    session_factory,
    redis: aioredis.Redis,
    http: aiohttp.ClientSession | None,
):
    """Construct a BanIssuer wired to the real collaborators."""
    from warden.services.ban_issuer import BanIssuer
    from warden.services.ban_record import parse_severity
    from warden.services.ban_store import DbBanStore
    from warden.services.enforcer import SessionEnforcer
    from warden.services.locator import PlayerLocator
    from warden.services.playtime import DbPlaytimeTracker
    from warden.services.rounds import RoundTracker

    return BanIssuer(
        locator=PlayerLocator(
            registry, session_factory, http=http, auth_server_url=settings.AUTH_SERVER_URL
        ),
        store=DbBanStore(session_factory),
        playtime=DbPlaytimeTracker(session_factory),
        rounds=RoundTracker(redis),
        enforcer=SessionEnforcer(registry),
        default_severity=parse_severity(settings.BAN_DEFAULT_SEVERITY),
        appeal_url=settings.BAN_APPEAL_URL,
    )


async def _health_handler(request: web.Request) -> web.Response:
    """Health check endpoint for monitoring / container probes."""
    info: dict = {
        "status": "ok",
        "sessions": len(request.app[REGISTRY_KEY]),
    }
    try:
        await request.app[REDIS_KEY].ping()
        info["redis"] = "ok"
    except aioredis.RedisError:
        info["redis"] = "error"
    return web.json_response(info)


def build_gateway(
    registry: SessionRegistry, session_factory, redis: aioredis.Redis
) -> web.Application:
    app = web.Application()
    app[REGISTRY_KEY] = registry
    app[SESSION_FACTORY_KEY] = session_factory
    app[REDIS_KEY] = redis
    app.router.add_get("/connect", connect_handler)
    app.router.add_get("/health", _health_handler)
    return app


async def _ensure_tables() -> None:
    from warden.db.base import Base
    from warden.db.engine import engine

    # Import models so they register on metadata
    from warden.models.play_time import PlayTime  # noqa: F401
    from warden.models.player import Player  # noqa: F401
    from warden.models.server_ban import ServerBan, ServerUnban  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured.")


async def main() -> None:
    """Entry point."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    from warden.db.engine import async_session, engine

    await _ensure_tables()

    registry = SessionRegistry()
    redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    http = aiohttp.ClientSession()

    bot = Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = Dispatcher()
    _register_middleware(dp)
    _register_routers(dp)
    dp["ban_issuer"] = build_ban_issuer(registry, async_session, redis, http)

    runner = web.AppRunner(build_gateway(registry, async_session, redis))
    await runner.setup()
    site = web.TCPSite(runner, host=settings.GATEWAY_HOST, port=settings.GATEWAY_PORT)
    await site.start()
    logger.info("Game gateway listening on %s:%d", settings.GATEWAY_HOST, settings.GATEWAY_PORT)

    try:
        logger.info("Starting admin bot in POLLING mode.")
        await bot.delete_webhook(drop_pending_updates=True)
        await dp.start_polling(bot, allowed_updates=["message"])
    finally:
        logger.info("Shutting down…")
        await runner.cleanup()
        await http.close()
        await redis.aclose()
        await bot.session.close()
        await engine.dispose()
        logger.info("Shutdown complete.")
