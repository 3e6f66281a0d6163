"""Address normalizer – turn a last-known address into a ban range."""

from __future__ import annotations

import ipaddress
import logging
from ipaddress import IPv4Address, IPv6Address

logger = logging.getLogger(__name__)

IPV4_BAN_PREFIX = 32
IPV6_BAN_PREFIX = 64

IPAddress = IPv4Address | IPv6Address
AddressRange = tuple[IPAddress, int]


def normalize_address(
    raw: IPAddress | str | None,
) -> AddressRange | None:
    """Return ``(base, prefix)`` for *raw*, or ``None`` when no address is known.

    IPv4-mapped IPv6 addresses (``::ffff:a.b.c.d``) are rewritten to plain
    IPv4 first.  IPv4 bans cover a /32, native IPv6 bans a /64.  The base is
    the address itself; host bits are not cleared.
    """
    if raw is None:
        return None

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            address: IPAddress = ipaddress.ip_address(text)
        except ValueError:
            logger.warning("Ignoring unparsable address %r.", raw)
            return None
    else:
        address = raw

    if isinstance(address, IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped

    prefix = IPV6_BAN_PREFIX if isinstance(address, IPv6Address) else IPV4_BAN_PREFIX
    return address, prefix


def normalize_address_range(address_range: AddressRange | None) -> AddressRange | None:
    """Re-normalize an existing range; a normalized range maps to itself."""
    if address_range is None:
        return None
    return normalize_address(address_range[0])


def format_address_range(address_range: AddressRange) -> str:
    """Render a range the way PostgreSQL ``inet`` stores it, e.g. ``10.0.0.1/32``."""
    base, prefix = address_range
    return f"{base}/{prefix}"


def parse_address_range(value: str) -> AddressRange:
    """Inverse of :func:`format_address_range`; a bare address gets its default prefix."""
    text, sep, prefix = str(value).partition("/")
    address = ipaddress.ip_address(text)
    if sep:
        return address, int(prefix)
    normalized = normalize_address(address)
    if normalized is None:
        raise ValueError(f"{value!r} is not an address range")
    return normalized
