"""Player repository – last-seen identity lookups and updates."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.models.player import Player


class PlayerRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._s = session

    async def get_by_user_name(self, user_name: str) -> Player | None:
        """Return the most recently seen player with *user_name* (case-insensitive)."""
        result = await self._s.execute(
            select(Player)
            .where(func.lower(Player.last_seen_user_name) == user_name.lower())
            .order_by(Player.last_seen_time.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: uuid.UUID) -> Player | None:
        return await self._s.get(Player, user_id)

    async def record_seen(
        self,
        user_id: uuid.UUID,
        user_name: str,
        address: str | None,
        hwid: bytes | None,
    ) -> Player:
        """Create or refresh the player's last-seen name, address and hwid."""
        now = datetime.now(timezone.utc)
        player = await self._s.get(Player, user_id)
        if player is None:
            player = Player(user_id=user_id, last_seen_user_name=user_name)
            self._s.add(player)
        player.last_seen_user_name = user_name
        player.last_seen_address = address
        player.last_seen_hwid = hwid
        player.last_seen_time = now
        await self._s.commit()
        return player
