"""Enums used across Warden."""

from __future__ import annotations

from enum import Enum


class BanSeverity(str, Enum):
    NONE = "none"
    MINOR = "minor"
    MEDIUM = "medium"
    HIGH = "high"
