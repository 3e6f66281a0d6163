"""Ban message formatting – the text a kicked player sees."""

from __future__ import annotations

from warden.services.ban_record import BanRecord


def format_expiry(record: BanRecord) -> str:
    """Return ``"permanently"`` or ``"until <UTC time>"`` for admin replies."""
    if record.expires_at is None:
        return "permanently"
    return f"until {record.expires_at.strftime('%d %b %Y %H:%M')} UTC"


def format_ban_message(record: BanRecord, appeal_url: str = "") -> str:
    """Render the disconnect reason for *record*.

    Built from the persisted record so the client sees exactly what was stored.
    """
    lines = [
        "You, or another user of this computer or connection, are banned from playing here.",
        f"The ban reason is: \"{record.reason}\"",
    ]
    if record.expires_at is None:
        lines.append("This is a permanent ban.")
    else:
        minutes = int(record.duration.total_seconds() // 60)  # type: ignore[union-attr]
        lines.append(
            f"This ban is for {minutes:,} minutes and will expire at "
            f"{record.expires_at.strftime('%d %b %Y %H:%M')} UTC."
        )
    if appeal_url:
        lines.append(f"You can appeal this ban at {appeal_url}")
    return "\n".join(lines)
