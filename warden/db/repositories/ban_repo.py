"""Ban repository – inserts and match queries for the server_ban table."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import cast, or_, select
from sqlalchemy.dialects.postgresql import INET
from sqlalchemy.ext.asyncio import AsyncSession

from warden.models.server_ban import ServerBan
from warden.services.address import (
    format_address_range,
    normalize_address,
    parse_address_range,
)
from warden.services.ban_record import BanRecord, UnbanInfo
from warden.utils.enums import BanSeverity


def _to_row(record: BanRecord) -> ServerBan:
    return ServerBan(
        player_user_id=record.target_account_id,
        address=(
            format_address_range(record.address_range)
            if record.address_range is not None
            else None
        ),
        hwid=record.hardware_id,
        ban_time=record.issued_at,
        expiration_time=record.expires_at,
        round_id=record.round_id,
        playtime_at_note=record.playtime_at_issuance,
        reason=record.reason,
        severity=record.severity.value,
        banning_admin=record.issued_by_account_id,
    )


def _to_record(row: ServerBan) -> BanRecord:
    unban = None
    if row.unban is not None:
        unban = UnbanInfo(
            unbanned_by_account_id=row.unban.unbanning_admin,
            unbanned_at=row.unban.unban_time,
        )
    return BanRecord(
        id=row.id,
        target_account_id=row.player_user_id,
        address_range=parse_address_range(row.address) if row.address is not None else None,
        hardware_id=row.hwid,
        issued_at=row.ban_time,
        expires_at=row.expiration_time,
        round_id=row.round_id,
        playtime_at_issuance=row.playtime_at_note,
        reason=row.reason,
        severity=BanSeverity(row.severity),
        issued_by_account_id=row.banning_admin,
        unban_info=unban,
    )


class BanRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._s = session

    async def add_ban(self, record: BanRecord) -> BanRecord:
        """Insert *record* and return it with the database-assigned id."""
        row = _to_row(record)
        self._s.add(row)
        # id comes back from the INSERT ... RETURNING; nothing may fail after commit
        await self._s.flush()
        ban_id = row.id
        await self._s.commit()
        return record.with_id(ban_id)

    async def find_active_bans(
        self,
        account_id: uuid.UUID | None = None,
        address: str | None = None,
        hwid: bytes | None = None,
    ) -> list[BanRecord]:
        """Return unexpired, un-lifted bans matching any of the given criteria.

        Address matching is containment: a ban on ``2001:db8::1/64`` matches
        every address in that /64.
        """
        criteria = []
        if account_id is not None:
            criteria.append(ServerBan.player_user_id == account_id)
        normalized = normalize_address(address)
        if normalized is not None:
            criteria.append(
                ServerBan.address.op(">>=")(cast(str(normalized[0]), INET))
            )
        if hwid:
            criteria.append(ServerBan.hwid == hwid)
        if not criteria:
            return []

        now = datetime.now(timezone.utc)
        result = await self._s.execute(
            select(ServerBan)
            .where(
                or_(*criteria),
                ~ServerBan.unban.has(),
                or_(
                    ServerBan.expiration_time.is_(None),
                    ServerBan.expiration_time > now,
                ),
            )
            .order_by(ServerBan.ban_time.desc())
        )
        return [_to_record(row) for row in result.scalars()]
