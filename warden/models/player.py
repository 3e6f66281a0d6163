"""Player model – last-seen identity of every account that has connected."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, LargeBinary, String, Uuid, func
from sqlalchemy.dialects.postgresql import INET
from sqlalchemy.orm import Mapped, mapped_column

from warden.db.base import Base


class Player(Base):
    __tablename__ = "player"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    last_seen_user_name: Mapped[str] = mapped_column(String(32), nullable=False)
    last_seen_address: Mapped[str | None] = mapped_column(INET, nullable=True)
    last_seen_hwid: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    first_seen_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    last_seen_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("idx_player_last_seen_user_name", "last_seen_user_name"),
    )

    def __repr__(self) -> str:
        return f"<Player {self.user_id} name={self.last_seen_user_name}>"
