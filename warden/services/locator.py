"""Player locator – resolve an admin-typed name or account id to an identity.

Lookup order:
1. A connected session by name (freshest address and hwid).
2. The player table by last-seen name.
3. If the target parses as a UUID: a connected session, then the player table.
4. The auth server, when ``AUTH_SERVER_URL`` is configured.  An account found
   only there has no known address or hwid.
"""

from __future__ import annotations

import logging
import uuid

import aiohttp
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.db.repositories.player_repo import PlayerRepo
from warden.models.player import Player
from warden.services.ban_record import LocatedPlayer
from warden.services.sessions import PlayerSession, SessionRegistry

logger = logging.getLogger(__name__)

AUTH_QUERY_TIMEOUT = aiohttp.ClientTimeout(total=5)


def _from_session(session: PlayerSession) -> LocatedPlayer:
    return LocatedPlayer(
        account_id=session.account_id,
        user_name=session.user_name,
        last_address=session.address,
        last_hardware_id=session.hwid,
    )


def _from_player(player: Player) -> LocatedPlayer:
    return LocatedPlayer(
        account_id=player.user_id,
        user_name=player.last_seen_user_name,
        last_address=str(player.last_seen_address) if player.last_seen_address else None,
        last_hardware_id=player.last_seen_hwid,
    )


class PlayerLocator:
    def __init__(
        self,
        registry: SessionRegistry,
        session_factory: async_sessionmaker[AsyncSession],
        http: aiohttp.ClientSession | None = None,
        auth_server_url: str | None = None,
    ) -> None:
        self._registry = registry
        self._session_factory = session_factory
        self._http = http
        self._auth_server_url = (auth_server_url or "").rstrip("/")

    async def lookup(self, name_or_id: str) -> LocatedPlayer | None:
        """Return the identity behind *name_or_id*, or None if nobody matches."""
        target = name_or_id.strip()
        if not target:
            return None

        online = self._registry.find_by_name(target)
        if online is not None:
            return _from_session(online)

        async with self._session_factory() as session:
            repo = PlayerRepo(session)
            player = await repo.get_by_user_name(target)
            if player is not None:
                return _from_player(player)

            try:
                user_id = uuid.UUID(target)
            except ValueError:
                user_id = None

            if user_id is not None:
                online = self._registry.find_by_account(user_id)
                if online is not None:
                    return _from_session(online)
                player = await repo.get_by_user_id(user_id)
                if player is not None:
                    return _from_player(player)

        if user_id is not None:
            return await self._query_auth_server("userid", "userid", str(user_id))
        return await self._query_auth_server("name", "name", target)

    async def _query_auth_server(
        self, endpoint: str, param: str, value: str
    ) -> LocatedPlayer | None:
        if self._http is None or not self._auth_server_url:
            return None

        url = f"{self._auth_server_url}/api/query/{endpoint}"
        async with self._http.get(
            url, params={param: value}, timeout=AUTH_QUERY_TIMEOUT
        ) as resp:
            if resp.status == 404:
                return None
            resp.raise_for_status()
            data = await resp.json()

        logger.debug("Auth server resolved %s to %s.", value, data.get("userId"))
        return LocatedPlayer(
            account_id=uuid.UUID(data["userId"]),
            user_name=data.get("userName"),
        )
