"""Play time lookups for ban context."""

from __future__ import annotations

import uuid
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.db.repositories.play_time_repo import PlayTimeRepo
from warden.models.play_time import TRACKER_OVERALL


class DbPlaytimeTracker:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_total_playtime(self, account_id: uuid.UUID) -> timedelta:
        """Return the overall tracked play time, zero if never tracked."""
        async with self._session_factory() as session:
            repo = PlayTimeRepo(session)
            spent = await repo.get_time_spent(account_id, TRACKER_OVERALL)
        return spent or timedelta(0)
