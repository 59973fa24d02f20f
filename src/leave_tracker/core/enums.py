from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access checks."""

    ADMIN = "admin"
    USER = "user"


class AttendanceOutcome(str, Enum):
    """Kind of result produced by the attendance calculator."""

    NOT_AVAILABLE = "NOT_AVAILABLE"
    PERCENTAGE = "PERCENTAGE"
    EXCEEDED = "EXCEEDED"
