"""Session enforcer – kick a freshly banned player who is still connected."""

from __future__ import annotations

import logging
import uuid

from warden.services.sessions import SessionRegistry

logger = logging.getLogger(__name__)


class SessionEnforcer:
    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    async def kick_if_online(self, account_id: uuid.UUID, message: str) -> bool:
        """Disconnect *account_id* with *message*; return False if not connected."""
        session = self._registry.find_by_account(account_id)
        if session is None:
            return False
        await session.disconnect(message)
        return True
