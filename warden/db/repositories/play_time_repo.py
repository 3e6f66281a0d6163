"""Play time repository – read access to the play_time table."""

from __future__ import annotations

import uuid
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.models.play_time import PlayTime


class PlayTimeRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._s = session

    async def get_time_spent(
        self, player_id: uuid.UUID, tracker: str
    ) -> timedelta | None:
        """Return the time tracked for *player_id* under *tracker*, or None."""
        result = await self._s.execute(
            select(PlayTime.time_spent).where(
                PlayTime.player_id == player_id,
                PlayTime.tracker == tracker,
            )
        )
        return result.scalar_one_or_none()
