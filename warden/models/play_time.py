"""PlayTime model – accumulated play time per account and tracker."""

from __future__ import annotations

import uuid
from datetime import timedelta

from sqlalchemy import BigInteger, Interval, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from warden.db.base import Base

TRACKER_OVERALL = "Overall"


class PlayTime(Base):
    __tablename__ = "play_time"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    player_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    tracker: Mapped[str] = mapped_column(String(64), nullable=False)
    time_spent: Mapped[timedelta] = mapped_column(Interval, nullable=False)

    __table_args__ = (
        UniqueConstraint("player_id", "tracker", name="uq_play_time_player_tracker"),
    )

    def __repr__(self) -> str:
        return f"<PlayTime player={self.player_id} tracker={self.tracker} spent={self.time_spent}>"
