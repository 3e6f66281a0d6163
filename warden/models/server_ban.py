"""ServerBan / ServerUnban models – persisted bans and their lifting."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Interval,
    LargeBinary,
    String,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import INET
from sqlalchemy.orm import Mapped, mapped_column, relationship

from warden.db.base import Base


class ServerBan(Base):
    __tablename__ = "server_ban"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    player_user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    # "base/prefix"; host bits are kept, so INET rather than CIDR
    address: Mapped[str | None] = mapped_column(INET, nullable=True)
    hwid: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    ban_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expiration_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )  # NULL = permanent
    round_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    playtime_at_note: Mapped[timedelta] = mapped_column(Interval, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(String(10), nullable=False)
    banning_admin: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    unban: Mapped[ServerUnban | None] = relationship(
        back_populates="ban", uselist=False, lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint(
            "player_user_id IS NOT NULL OR address IS NOT NULL OR hwid IS NOT NULL",
            name="ck_server_ban_has_criteria",
        ),
        Index("idx_server_ban_player", "player_user_id"),
        Index("idx_server_ban_address", "address", postgresql_using="gist", postgresql_ops={"address": "inet_ops"}),
        Index("idx_server_ban_hwid", "hwid"),
    )

    def __repr__(self) -> str:
        return (
            f"<ServerBan id={self.id} player={self.player_user_id} "
            f"address={self.address} expires={self.expiration_time}>"
        )


class ServerUnban(Base):
    __tablename__ = "server_unban"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    ban_id: Mapped[int] = mapped_column(
        ForeignKey("server_ban.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    unbanning_admin: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    unban_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    ban: Mapped[ServerBan] = relationship(back_populates="unban")
