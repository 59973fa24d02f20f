from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import LeaveRecord


class LeaveRepository(Protocol):
    def list_for_user(self, user_id: int) -> Sequence[LeaveRecord]:
        raise NotImplementedError

    def get_by_id(self, leave_id: int) -> Optional[LeaveRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        subject_id: int,
        subject: str,
        leave_date: date,
        period: int,
        duty_leave: bool,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        leave_id: int,
        subject_id: int,
        subject: str,
        leave_date: date,
        period: int,
        duty_leave: bool,
        reason: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_certificate(self, *, leave_id: int, certificate_url: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, leave_id: int) -> bool:
        raise NotImplementedError
