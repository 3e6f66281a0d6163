"""Ban issuance errors.

Every failure that ``BanIssuer`` reports to its caller derives from
``BanError``.  Argument errors carry the offending token so the command
surface can tell the admin exactly what was wrong.
"""

from __future__ import annotations


class BanError(Exception):
    """Base class for all ban issuance failures."""


class InvalidArgumentError(BanError):
    """A caller-supplied argument was missing or malformed."""

    def __init__(self, message: str, token: str | None = None) -> None:
        super().__init__(message)
        self.token = token


class UsageError(InvalidArgumentError):
    """Wrong number of command arguments."""


class InvalidDurationError(InvalidArgumentError):
    def __init__(self, token: str) -> None:
        super().__init__(f"{token} is not a valid amount of minutes.", token)


class InvalidSeverityError(InvalidArgumentError):
    def __init__(self, token: str) -> None:
        super().__init__(f"{token} is not a valid severity.", token)


class InvalidBanRecordError(InvalidArgumentError):
    """A ban record would match nothing."""


class TargetNotFoundError(BanError):
    def __init__(self, target: str) -> None:
        super().__init__(f"Unable to find a player with the name or id {target}.")
        self.target = target


class PersistenceError(BanError):
    """The ban could not be written to the store and was NOT recorded."""
