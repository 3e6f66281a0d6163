"""Admin command handler – restricted to ADMIN_USER_IDS."""

from __future__ import annotations

import html
import logging
import shlex

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from warden.config import settings
from warden.services.ban_issuer import USAGE, BanIssuer
from warden.services.ban_message import format_expiry
from warden.services.errors import (
    InvalidArgumentError,
    PersistenceError,
    TargetNotFoundError,
)

logger = logging.getLogger(__name__)

admin_router = Router(name="admin")


def _is_admin(user_id: int | None) -> bool:
    """Check if user_id is in the admin list."""
    if user_id is None:
        return False
    return user_id in settings.admin_ids


def _split_args(args: str | None) -> list[str] | None:
    """Tokenize command arguments, honouring quotes. None on unbalanced quotes."""
    try:
        return shlex.split(args or "")
    except ValueError:
        return None


# ── /ban ─────────────────────────────────────────────────────────────


@admin_router.message(Command("ban"))
async def cmd_ban(
    message: Message, command: CommandObject, ban_issuer: BanIssuer
) -> None:
    """Ban a player. Usage: /ban <target> <reason> [minutes] [severity]"""
    tg_id = message.from_user.id if message.from_user else None
    if not _is_admin(tg_id):
        return

    usage = html.escape(USAGE)
    args = _split_args(command.args)
    if args is None:
        await message.answer(f"Unbalanced quotes in arguments.\n{usage}")
        return

    try:
        requester = settings.admin_accounts.get(tg_id)
        record = await ban_issuer.issue_ban_from_args(requester, args)
    except InvalidArgumentError as e:
        await message.answer(f"{html.escape(str(e))}\n{usage}")
        return
    except TargetNotFoundError as e:
        await message.answer(html.escape(str(e)))
        return
    except PersistenceError as e:
        await message.answer(f"⚠️ {html.escape(str(e))}")
        return
    except Exception as e:
        logger.exception("Unexpected error while handling /ban %r", command.args)
        await message.answer(
            f"⚠️ Ban failed unexpectedly and was NOT recorded: {html.escape(str(e))}"
        )
        return

    await message.answer(
        f"Banned <code>{html.escape(args[0])}</code> with reason "
        f"\"{html.escape(record.reason)}\" {format_expiry(record)}."
    )
