"""Round tracker – the id of the game round currently being played.

The game server publishes its round id to Redis under ``round:current`` when
a round starts and clears it when the round ends.
"""

from __future__ import annotations

import redis.asyncio as aioredis

ROUND_KEY = "round:current"


class RoundTracker:
    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def current_round_id(self) -> int | None:
        """Return the active round id, or None between rounds or before one is assigned."""
        raw = await self._redis.get(ROUND_KEY)
        if raw is None:
            return None
        round_id = int(raw if isinstance(raw, str) else raw.decode())
        return round_id or None
