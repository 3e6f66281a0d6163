"""Live session registry – who is connected to the game gateway right now."""

from __future__ import annotations

import logging
import threading
import uuid

from aiohttp import WSCloseCode, web

logger = logging.getLogger(__name__)


class PlayerSession:
    """A connected player and the websocket that carries their traffic."""

    def __init__(
        self,
        account_id: uuid.UUID,
        user_name: str,
        address: str | None,
        hwid: bytes | None,
        ws: web.WebSocketResponse,
    ) -> None:
        self.account_id = account_id
        self.user_name = user_name
        self.address = address
        self.hwid = hwid
        self._ws = ws

    @property
    def connected(self) -> bool:
        return not self._ws.closed

    async def disconnect(self, reason: str) -> None:
        """Send *reason* to the client, then close the connection."""
        if self._ws.closed:
            return
        await self._ws.send_json({"type": "disconnect", "reason": reason})
        await self._ws.close(code=WSCloseCode.POLICY_VIOLATION, message=b"Disconnected")
        logger.info("Disconnected %s (%s).", self.user_name, self.account_id)

    def __repr__(self) -> str:
        return f"<PlayerSession {self.account_id} name={self.user_name}>"


class SessionRegistry:
    """Thread-safe map of account id → live session.

    Sessions join and leave on the gateway's own schedule, so every access
    goes through the lock.
    """

    def __init__(self) -> None:
        self._sessions: dict[uuid.UUID, PlayerSession] = {}
        self._lock = threading.Lock()

    def add(self, session: PlayerSession) -> PlayerSession | None:
        """Register *session*; return the session it replaced, if any."""
        with self._lock:
            previous = self._sessions.get(session.account_id)
            self._sessions[session.account_id] = session
            return previous

    def remove(self, session: PlayerSession) -> None:
        """Unregister *session* unless a newer one already replaced it."""
        with self._lock:
            if self._sessions.get(session.account_id) is session:
                del self._sessions[session.account_id]

    def find_by_account(self, account_id: uuid.UUID) -> PlayerSession | None:
        with self._lock:
            return self._sessions.get(account_id)

    def find_by_name(self, user_name: str) -> PlayerSession | None:
        wanted = user_name.lower()
        with self._lock:
            for session in self._sessions.values():
                if session.user_name.lower() == wanted:
                    return session
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
