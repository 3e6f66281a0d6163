"""Durable ban store backed by the server_ban table."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.db.repositories.ban_repo import BanRepo
from warden.services.ban_record import BanRecord


class DbBanStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, record: BanRecord) -> BanRecord:
        """Persist *record*; the returned copy carries its new id."""
        async with self._session_factory() as session:
            repo = BanRepo(session)
            return await repo.add_ban(record)
