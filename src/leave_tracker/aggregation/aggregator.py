"""Attendance aggregation.

Pure functions consumed by the leave service and the JSON API:

- `summarize` groups a user's leave records per subject name.
- `evaluate_attendance` / `compute_percentage` turn a leave count and a
  user-entered class total into an attendance percentage.

Nothing here touches the database or the request; callers pass plain
records in and get plain values back.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from ..core.constants import NOT_AVAILABLE
from ..core.enums import AttendanceOutcome
from ..leaves.model import LeaveRecord


@dataclass(frozen=True)
class SubjectSummary:
    """Per-subject view of a user's leaves. Derived, never persisted."""

    subject: str
    count: int
    dates: list[date] = field(default_factory=list)
    duty_leave_count: int = 0


@dataclass(frozen=True)
class AttendanceResult:
    outcome: AttendanceOutcome
    leaves_taken: int
    total_classes: Optional[float] = None
    percentage: Optional[float] = None

    @property
    def display(self) -> str:
        if self.outcome == AttendanceOutcome.NOT_AVAILABLE or self.percentage is None:
            return NOT_AVAILABLE
        return f"{self.percentage:.2f}%"

    @property
    def exceeded(self) -> bool:
        return self.outcome == AttendanceOutcome.EXCEEDED


def summarize(records: Iterable[LeaveRecord]) -> list[SubjectSummary]:
    """Group records by their literal subject string.

    Groups are ordered by leave count, highest first; equal counts keep the
    order in which each subject was first seen.
    """
    groups: dict[str, dict[str, Any]] = {}

    for r in records:
        g = groups.get(r.subject)
        if g is None:
            g = {"count": 0, "dates": [], "duty": 0}
            groups[r.subject] = g
        g["count"] += 1
        g["dates"].append(r.leave_date)
        if r.duty_leave is True:
            g["duty"] += 1

    summary = [
        SubjectSummary(subject=name, count=g["count"], dates=g["dates"], duty_leave_count=g["duty"])
        for name, g in groups.items()
    ]
    # sorted() is stable, so ties stay in first-encounter order.
    return sorted(summary, key=lambda s: s.count, reverse=True)


def _parse_total(total_classes: Any) -> Optional[float]:
    if total_classes is None or isinstance(total_classes, bool):
        return None
    try:
        value = float(str(total_classes).strip()) if isinstance(total_classes, str) else float(total_classes)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def evaluate_attendance(total_classes: Any, records_for_subject: Sequence[LeaveRecord]) -> AttendanceResult:
    """Attendance for one subject given the total number of classes held.

    A missing, non-numeric, zero or negative total yields NOT_AVAILABLE.
    More leaves than classes is reported as EXCEEDED and carries the
    (negative) percentage unchanged.
    """
    leaves_taken = len(records_for_subject)
    total = _parse_total(total_classes)
    if total is None:
        return AttendanceResult(outcome=AttendanceOutcome.NOT_AVAILABLE, leaves_taken=leaves_taken)

    percentage = ((total - leaves_taken) / total) * 100
    outcome = AttendanceOutcome.EXCEEDED if leaves_taken > total else AttendanceOutcome.PERCENTAGE
    return AttendanceResult(
        outcome=outcome,
        leaves_taken=leaves_taken,
        total_classes=total,
        percentage=percentage,
    )


def compute_percentage(total_classes: Any, records_for_subject: Sequence[LeaveRecord]) -> str:
    """Formatted attendance percentage, e.g. "90.00%", or "N/A"."""
    return evaluate_attendance(total_classes, records_for_subject).display
