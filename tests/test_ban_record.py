"""Tests for BanRecord, severity parsing and the ban message."""

from __future__ import annotations

import dataclasses
from datetime import timedelta
from ipaddress import IPv4Address

import pytest

from tests.fakes import ADMIN_ID, ALICE_ID, FIXED_NOW
from warden.services.ban_message import format_ban_message, format_expiry
from warden.services.ban_record import BanRecord, parse_severity
from warden.services.errors import InvalidBanRecordError, InvalidSeverityError
from warden.utils.enums import BanSeverity


def _record(**overrides) -> BanRecord:
    fields = dict(
        target_account_id=ALICE_ID,
        address_range=(IPv4Address("192.0.2.5"), 32),
        hardware_id=b"\xaa",
        issued_at=FIXED_NOW,
        expires_at=None,
        round_id=3,
        playtime_at_issuance=timedelta(hours=1),
        reason="Griefing",
        severity=BanSeverity.HIGH,
        issued_by_account_id=ADMIN_ID,
    )
    fields.update(overrides)
    return BanRecord(**fields)


# ── parse_severity ───────────────────────────────────────────────────


@pytest.mark.parametrize(
    "token, expected",
    [
        ("none", BanSeverity.NONE),
        ("Minor", BanSeverity.MINOR),
        ("MEDIUM", BanSeverity.MEDIUM),
        (" high ", BanSeverity.HIGH),
    ],
)
def test_parse_severity(token, expected):
    assert parse_severity(token) == expected


@pytest.mark.parametrize("token", ["extreme", "3", ""])
def test_parse_severity_rejects(token):
    with pytest.raises(InvalidSeverityError) as exc_info:
        parse_severity(token)
    assert exc_info.value.token == token


# ── BanRecord invariants ─────────────────────────────────────────────


def test_record_matching_nothing_rejected():
    with pytest.raises(InvalidBanRecordError):
        _record(target_account_id=None, address_range=None, hardware_id=None)


def test_empty_hwid_counts_as_absent():
    with pytest.raises(InvalidBanRecordError):
        _record(target_account_id=None, address_range=None, hardware_id=b"")


@pytest.mark.parametrize(
    "overrides",
    [
        dict(address_range=None, hardware_id=None),
        dict(target_account_id=None, hardware_id=None),
        dict(target_account_id=None, address_range=None),
    ],
)
def test_any_single_criterion_is_enough(overrides):
    assert _record(**overrides).reason == "Griefing"


def test_blank_reason_rejected():
    with pytest.raises(InvalidBanRecordError):
        _record(reason=" ")


def test_record_is_frozen():
    record = _record()
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.reason = "changed"  # type: ignore[misc]


def test_with_id_copies():
    record = _record()
    stored = record.with_id(12)
    assert stored.id == 12
    assert record.id is None
    assert stored.reason == record.reason


def test_duration():
    assert _record().duration is None
    assert _record(expires_at=FIXED_NOW + timedelta(days=1)).duration == timedelta(days=1)


# ── ban message ──────────────────────────────────────────────────────


def test_permanent_message():
    message = format_ban_message(_record())
    assert '"Griefing"' in message
    assert "permanent ban" in message
    assert "appeal" not in message


def test_temporary_message():
    record = _record(expires_at=FIXED_NOW + timedelta(minutes=1440))
    message = format_ban_message(record)
    assert "1,440 minutes" in message
    assert "19 Oct 2026 12:00 UTC" in message


def test_message_with_appeal_link():
    message = format_ban_message(_record(), appeal_url="https://forum.example/appeals")
    assert message.endswith("You can appeal this ban at https://forum.example/appeals")


def test_format_expiry():
    assert format_expiry(_record()) == "permanently"
    assert (
        format_expiry(_record(expires_at=FIXED_NOW + timedelta(minutes=60)))
        == "until 18 Oct 2026 13:00 UTC"
    )
