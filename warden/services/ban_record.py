"""Ban record model – the immutable unit a ban is persisted and enforced as."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from uuid import UUID

from warden.services.address import AddressRange
from warden.services.errors import InvalidBanRecordError, InvalidSeverityError
from warden.utils.enums import BanSeverity


def parse_severity(token: str) -> BanSeverity:
    """Parse a severity name case-insensitively.

    Raises ``InvalidSeverityError`` naming *token* when it is not one of
    ``none``, ``minor``, ``medium`` or ``high``.
    """
    try:
        return BanSeverity(token.strip().lower())
    except ValueError:
        raise InvalidSeverityError(token) from None


@dataclass(frozen=True)
class UnbanInfo:
    unbanned_by_account_id: UUID | None
    unbanned_at: datetime


@dataclass(frozen=True)
class LocatedPlayer:
    """A lookup target resolved to a canonical account."""

    account_id: UUID
    user_name: str | None = None
    last_address: str | None = None
    last_hardware_id: bytes | None = None


@dataclass(frozen=True)
class BanRecord:
    """A ban and the criteria it matches on.

    At least one of ``target_account_id``, ``address_range`` and
    ``hardware_id`` must be present.  ``id`` stays ``None`` until the store
    assigns one; ``unban_info`` is ``None`` at issuance.
    """

    target_account_id: UUID | None
    address_range: AddressRange | None
    hardware_id: bytes | None
    issued_at: datetime
    expires_at: datetime | None
    round_id: int | None
    playtime_at_issuance: timedelta
    reason: str
    severity: BanSeverity
    issued_by_account_id: UUID | None
    unban_info: UnbanInfo | None = None
    id: int | None = None

    def __post_init__(self) -> None:
        if (
            self.target_account_id is None
            and self.address_range is None
            and not self.hardware_id
        ):
            raise InvalidBanRecordError(
                "A ban must match on an account, an address range or a hardware id."
            )
        if not self.reason.strip():
            raise InvalidBanRecordError("A ban needs a reason.")

    @property
    def is_permanent(self) -> bool:
        return self.expires_at is None

    @property
    def duration(self) -> timedelta | None:
        if self.expires_at is None:
            return None
        return self.expires_at - self.issued_at

    def with_id(self, ban_id: int) -> BanRecord:
        """Return a copy carrying the store-assigned ``id``."""
        return replace(self, id=ban_id)
