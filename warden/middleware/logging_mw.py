"""Logging middleware – one log line per admin update, with timing."""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware
from aiogram.types import Message, TelegramObject, Update

logger = logging.getLogger("warden.updates")


def _describe(event: TelegramObject) -> tuple[int | None, str | None]:
    """Return (sender id, command text) for message updates."""
    message: Message | None = None
    if isinstance(event, Update):
        message = event.message
    elif isinstance(event, Message):
        message = event
    if message is None:
        return None, None
    sender = message.from_user.id if message.from_user else None
    parts = (message.text or "").split(maxsplit=1)
    return sender, parts[0] if parts else None


class LoggingMiddleware(BaseMiddleware):
    """Log each update with the issuing user, command and elapsed time."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        start = time.perf_counter()
        sender, command = _describe(event)

        try:
            result = await handler(event, data)
        except Exception as e:
            elapsed = (time.perf_counter() - start) * 1000
            logger.error(
                "user=%s command=%s elapsed=%.1fms error=%s",
                sender,
                command,
                elapsed,
                e,
            )
            raise
        elapsed = (time.perf_counter() - start) * 1000
        logger.info("user=%s command=%s elapsed=%.1fms", sender, command, elapsed)
        return result
