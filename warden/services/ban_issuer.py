"""Ban issuance workflow – validate, resolve, record, persist, enforce.

``BanIssuer`` receives every collaborator through its constructor.  A single
``issue_ban`` call runs start to finish as one coroutine:

    validate → locate target → normalize address → compute expiry
    → gather round id / play time → build BanRecord → persist → kick

Nothing is written and nobody is kicked unless every earlier step succeeded,
and the kick only happens after the store confirmed the write.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol, Sequence

from warden.services.address import normalize_address
from warden.services.ban_message import format_ban_message
from warden.services.ban_record import BanRecord, LocatedPlayer, parse_severity
from warden.services.errors import (
    InvalidArgumentError,
    InvalidDurationError,
    PersistenceError,
    TargetNotFoundError,
    UsageError,
)
from warden.utils.enums import BanSeverity

logger = logging.getLogger(__name__)

# uint32, the widest duration the ban command has ever accepted
MAX_DURATION_MINUTES = 2**32 - 1

USAGE = (
    "Usage: /ban <name or user ID> <reason> [duration in minutes, 0 = permanent] "
    "[severity: none|minor|medium|high]\n"
    "Common durations: 0 (permanent), 1440 (1 day), 4320 (3 days), "
    "10080 (1 week), 20160 (2 weeks), 43800 (1 month)"
)


class IdentityResolver(Protocol):
    async def lookup(self, name_or_id: str) -> LocatedPlayer | None: ...


class BanStore(Protocol):
    async def insert(self, record: BanRecord) -> BanRecord: ...


class PlaytimeTracker(Protocol):
    async def get_total_playtime(self, account_id: uuid.UUID) -> timedelta: ...


class ActiveRoundProvider(Protocol):
    async def current_round_id(self) -> int | None: ...


class Enforcer(Protocol):
    async def kick_if_online(self, account_id: uuid.UUID, message: str) -> bool: ...


def parse_duration_minutes(token: str | None) -> int:
    """Parse a non-negative whole number of minutes; ``None`` means 0 (permanent)."""
    if token is None:
        return 0
    text = token.strip()
    if not text.isascii() or not text.isdigit():
        raise InvalidDurationError(token)
    minutes = int(text)
    if minutes > MAX_DURATION_MINUTES:
        raise InvalidDurationError(token)
    return minutes


def compute_expiry(issued_at: datetime, minutes: int) -> datetime | None:
    """Return ``issued_at + minutes``, or None for a permanent (0-minute) ban."""
    if minutes == 0:
        return None
    return issued_at + timedelta(minutes=minutes)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BanIssuer:
    def __init__(
        self,
        locator: IdentityResolver,
        store: BanStore,
        playtime: PlaytimeTracker,
        rounds: ActiveRoundProvider,
        enforcer: Enforcer,
        default_severity: BanSeverity = BanSeverity.HIGH,
        appeal_url: str = "",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._locator = locator
        self._store = store
        self._playtime = playtime
        self._rounds = rounds
        self._enforcer = enforcer
        self._default_severity = default_severity
        self._appeal_url = appeal_url
        self._clock = clock

    async def issue_ban_from_args(
        self, requester: uuid.UUID | None, args: Sequence[str]
    ) -> BanRecord:
        """Apply the ``target reason [minutes [severity]]`` argument contract."""
        if not 2 <= len(args) <= 4:
            raise UsageError("Expected 2 to 4 arguments.")
        target, reason = args[0], args[1]
        duration = args[2] if len(args) > 2 else None
        severity = args[3] if len(args) > 3 else None
        return await self.issue_ban(requester, target, reason, duration, severity)

    async def issue_ban(
        self,
        requester: uuid.UUID | None,
        target: str,
        reason: str,
        duration_minutes: str | int | None = None,
        severity: str | BanSeverity | None = None,
    ) -> BanRecord:
        """Ban *target* and kick them if they are online.

        Returns the persisted record.  Raises ``InvalidArgumentError`` (and
        subclasses), ``TargetNotFoundError`` or ``PersistenceError``.
        """
        # 1. Validate everything before touching any collaborator.
        if not target or not target.strip():
            raise InvalidArgumentError("A target is required.", target)
        if not reason or not reason.strip():
            raise InvalidArgumentError("A reason is required.", reason)
        if isinstance(duration_minutes, int):
            if duration_minutes < 0:
                raise InvalidDurationError(str(duration_minutes))
            minutes = duration_minutes
        else:
            minutes = parse_duration_minutes(duration_minutes)
        if severity is None:
            ban_severity = self._default_severity
        elif isinstance(severity, BanSeverity):
            ban_severity = severity
        else:
            ban_severity = parse_severity(severity)

        # 2. Resolve.
        located = await self._locator.lookup(target)
        if located is None:
            raise TargetNotFoundError(target)

        # 3-4. Match criteria and expiry.
        address_range = normalize_address(located.last_address)
        issued_at = self._clock()
        expires_at = compute_expiry(issued_at, minutes)

        # 5. Context; failures here only lose information.
        round_id = await self._current_round_id()
        playtime = await self._total_playtime(located.account_id)

        # 6. Record.
        record = BanRecord(
            target_account_id=located.account_id,
            address_range=address_range,
            hardware_id=located.last_hardware_id,
            issued_at=issued_at,
            expires_at=expires_at,
            round_id=round_id,
            playtime_at_issuance=playtime,
            reason=reason,
            severity=ban_severity,
            issued_by_account_id=requester,
        )

        # 7. Persist.
        try:
            stored = await self._store.insert(record)
        except Exception as exc:
            logger.error("Failed to persist ban on %s: %s", located.account_id, exc)
            raise PersistenceError(
                f"The ban on {target} could not be saved and was NOT recorded."
            ) from exc

        logger.info(
            "Ban %s issued on %s (address=%s, hwid=%s) by %s, expires %s.",
            stored.id,
            located.account_id,
            address_range,
            "yes" if located.last_hardware_id else "no",
            requester or "system",
            stored.expires_at or "never",
        )

        # 8. Enforce.
        await self._enforce(stored)
        return stored

    async def _current_round_id(self) -> int | None:
        try:
            return await self._rounds.current_round_id()
        except Exception as exc:
            logger.warning("Could not read the current round id: %s", exc)
            return None

    async def _total_playtime(self, account_id: uuid.UUID) -> timedelta:
        try:
            return await self._playtime.get_total_playtime(account_id)
        except Exception as exc:
            logger.warning("Could not read play time for %s: %s", account_id, exc)
            return timedelta(0)

    async def _enforce(self, record: BanRecord) -> None:
        if record.target_account_id is None:
            return
        message = format_ban_message(record, self._appeal_url)
        try:
            kicked = await self._enforcer.kick_if_online(record.target_account_id, message)
        except Exception:
            logger.exception(
                "Ban %s is recorded but kicking %s failed.",
                record.id,
                record.target_account_id,
            )
            return
        if kicked:
            logger.info("Kicked %s after ban %s.", record.target_account_id, record.id)
        else:
            logger.info(
                "%s is not connected; ban %s applies on their next connection.",
                record.target_account_id,
                record.id,
            )
