from __future__ import annotations

import logging
import mimetypes
import os
from dataclasses import dataclass, replace
from datetime import date
from typing import Mapping, Optional

from ..aggregation.aggregator import AttendanceResult, SubjectSummary, evaluate_attendance, summarize
from ..common.data_url import parse_data_url, to_data_url
from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_yes_no, require_period
from ..core.constants import CERTIFICATE_EXTENSIONS, MAX_CERTIFICATE_BYTES, UNKNOWN_SUBJECT
from ..core.exceptions import AuthorizationError, ValidationError
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from ..subjects.service import find_subject
from .model import LeaveRecord
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardData:
    records: list[LeaveRecord]
    summary: list[SubjectSummary]
    duty_leaves: list[LeaveRecord]
    subjects: list[Subject]
    total_leaves: int
    total_duty_leaves: int
    max_count: int


@dataclass(frozen=True)
class SubjectAttendance:
    subject: Subject
    result: AttendanceResult


@dataclass(frozen=True)
class _LeaveInput:
    subject: Subject
    leave_date: date
    period: int
    duty_leave: bool
    reason: Optional[str]


def resolve_record(record: LeaveRecord, subjects_by_id: Mapping[int, Subject]) -> LeaveRecord:
    """Swap the stored subject name for the current one, looked up by id.

    Records without a subject id keep their stored name. Records whose
    subject was deleted are labelled UNKNOWN_SUBJECT.
    """
    if record.subject_id is None:
        return record
    subject = subjects_by_id.get(record.subject_id)
    name = subject.name if subject else UNKNOWN_SUBJECT
    if name == record.subject:
        return record
    return replace(record, subject=name)


def _by_date_desc(records) -> list[LeaveRecord]:
    return sorted(records, key=lambda r: r.leave_date, reverse=True)


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        subjects: SubjectRepository,
        *,
        max_certificate_bytes: int = MAX_CERTIFICATE_BYTES,
    ):
        self._leaves = leaves
        self._subjects = subjects
        self._max_certificate_bytes = int(max_certificate_bytes)

    def _resolved_records(self, user_id: int) -> list[LeaveRecord]:
        subjects_by_id = {s.subject_id: s for s in self._subjects.list_all()}
        return [resolve_record(r, subjects_by_id) for r in self._leaves.list_for_user(int(user_id))]

    def _get_owned(self, *, user_id: int, leave_id: int) -> LeaveRecord:
        record = self._leaves.get_by_id(int(leave_id))
        if not record:
            raise ValidationError("Leave record does not exist")
        if record.user_id != int(user_id):
            raise AuthorizationError("You can only change your own leave records")
        return record

    def _resolve_subject(self, value) -> Optional[Subject]:
        # The leave form posts the subject id; names are accepted for free-text callers.
        text = "" if value is None else str(value).strip()
        if text.isdigit():
            subject = self._subjects.get_by_id(int(text))
            if subject:
                return subject
        return find_subject(self._subjects.list_all(), value)

    def _validate(self, *, subject, leave_date, period, duty_leave, reason) -> _LeaveInput:
        matched = self._resolve_subject(subject)
        if not matched:
            raise ValidationError("Please select a subject")

        if not isinstance(leave_date, date):
            leave_date = parse_iso_date(str(leave_date or ""))

        return _LeaveInput(
            subject=matched,
            leave_date=leave_date,
            period=require_period(period),
            duty_leave=parse_yes_no(duty_leave, "Duty leave"),
            reason=(reason or "").strip() or None,
        )

    def get_leave(self, *, user_id: int, leave_id: int) -> LeaveRecord:
        return self._get_owned(user_id=user_id, leave_id=leave_id)

    def add_leave(self, *, user_id: int, subject, leave_date, period, duty_leave, reason: str = "") -> int:
        data = self._validate(subject=subject, leave_date=leave_date, period=period, duty_leave=duty_leave, reason=reason)
        leave_id = self._leaves.create(
            user_id=int(user_id),
            subject_id=data.subject.subject_id,
            subject=data.subject.name,
            leave_date=data.leave_date,
            period=data.period,
            duty_leave=data.duty_leave,
            reason=data.reason,
        )
        logger.info("User %s added leave %s (%s, %s)", user_id, leave_id, data.subject.name, data.leave_date)
        return leave_id

    def update_leave(
        self,
        *,
        user_id: int,
        leave_id: int,
        subject,
        leave_date,
        period,
        duty_leave,
        reason: str = "",
    ) -> None:
        self._get_owned(user_id=user_id, leave_id=leave_id)
        data = self._validate(subject=subject, leave_date=leave_date, period=period, duty_leave=duty_leave, reason=reason)

        ok = self._leaves.update(
            leave_id=int(leave_id),
            subject_id=data.subject.subject_id,
            subject=data.subject.name,
            leave_date=data.leave_date,
            period=data.period,
            duty_leave=data.duty_leave,
            reason=data.reason,
        )
        if not ok:
            raise ValidationError("Failed to update leave record")

    def delete_leave(self, *, user_id: int, leave_id: int) -> None:
        self._get_owned(user_id=user_id, leave_id=leave_id)
        if not self._leaves.delete_by_id(int(leave_id)):
            raise ValidationError("Failed to delete leave record")
        logger.info("User %s deleted leave %s", user_id, leave_id)

    def attach_certificate(
        self,
        *,
        user_id: int,
        leave_id: int,
        filename: str,
        content: bytes,
    ) -> None:
        record = self._get_owned(user_id=user_id, leave_id=leave_id)
        if record.duty_leave is not True:
            raise ValidationError("Certificates can only be attached to duty leaves")

        ext = os.path.splitext((filename or "").lower())[1]
        if ext not in CERTIFICATE_EXTENSIONS:
            raise ValidationError(f"Allowed file types: {', '.join(CERTIFICATE_EXTENSIONS)}")
        if not content:
            raise ValidationError("The uploaded file is empty")
        if len(content) > self._max_certificate_bytes:
            raise ValidationError(f"File is larger than {self._max_certificate_bytes // 1024} KB")

        # Client-sent content types are ignored; the extension is already checked.
        mimetype = mimetypes.guess_type(filename.lower())[0] or "application/octet-stream"
        if not self._leaves.set_certificate(leave_id=int(leave_id), certificate_url=to_data_url(content, mimetype)):
            raise ValidationError("Failed to upload certificate")
        logger.info("User %s attached certificate to leave %s (%d bytes)", user_id, leave_id, len(content))

    def get_certificate(self, *, user_id: int, leave_id: int) -> tuple[bytes, str]:
        record = self._get_owned(user_id=user_id, leave_id=leave_id)
        if not record.certificate_url:
            raise ValidationError("No certificate attached")
        return parse_data_url(record.certificate_url)

    def dashboard(self, *, user_id: int) -> DashboardData:
        records = self._resolved_records(user_id)
        summary = summarize(records)
        duty_leaves = [r for r in records if r.duty_leave is True]
        return DashboardData(
            records=_by_date_desc(records),
            summary=summary,
            duty_leaves=_by_date_desc(duty_leaves),
            subjects=sorted(self._subjects.list_all(), key=lambda s: s.name.lower()),
            total_leaves=len(records),
            total_duty_leaves=len(duty_leaves),
            max_count=max((s.count for s in summary), default=0),
        )

    def details_for_subject(self, *, user_id: int, subject: str) -> list[LeaveRecord]:
        return _by_date_desc(r for r in self._resolved_records(user_id) if r.subject == subject)

    def attendance_for_subject(self, *, user_id: int, subject_id, total_classes) -> SubjectAttendance:
        try:
            subject = self._subjects.get_by_id(int(subject_id))
        except (TypeError, ValueError):
            subject = None
        if not subject:
            raise ValidationError("Please select a subject")

        records = [r for r in self._resolved_records(user_id) if r.subject == subject.name]
        result = evaluate_attendance(total_classes, records)
        if result.exceeded:
            logger.warning(
                "User %s has %d leaves in %r but only %s classes",
                user_id,
                result.leaves_taken,
                subject.name,
                total_classes,
            )
        return SubjectAttendance(subject=subject, result=result)
