from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class LeaveRecord:
    """Domain entity: one absence entry owned by a user.

    `subject` is the subject name copied when the record was written.
    `subject_id` is set for records created through the service and is the
    key used to resolve the current display name at read time.
    """

    leave_id: int
    user_id: int
    subject: str
    leave_date: date
    period: Optional[int] = None
    duty_leave: Optional[bool] = None
    reason: Optional[str] = None
    certificate_url: Optional[str] = None
    subject_id: Optional[int] = None
    created_at: Optional[datetime] = None
