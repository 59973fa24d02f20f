from __future__ import annotations

from datetime import date

import pytest

from leave_tracker.core.constants import UNKNOWN_SUBJECT
from leave_tracker.core.enums import AttendanceOutcome
from leave_tracker.core.exceptions import AuthorizationError, ValidationError


def _add(svc, user_id=1, subject="1", leave_date="2025-03-10", period="2", duty_leave="no", reason=""):
    return svc.add_leave(
        user_id=user_id,
        subject=subject,
        leave_date=leave_date,
        period=period,
        duty_leave=duty_leave,
        reason=reason,
    )


def test_add_leave_stores_subject_id_and_name(leave_service, leaves_repo):
    lid = _add(leave_service, subject="1", duty_leave="yes", reason="  sick  ")

    rec = leaves_repo.get_by_id(lid)
    assert rec.subject_id == 1
    assert rec.subject == "Mathematics"
    assert rec.leave_date == date(2025, 3, 10)
    assert rec.period == 2
    assert rec.duty_leave is True
    assert rec.reason == "sick"


def test_add_leave_matches_subject_name_case_insensitively(leave_service, leaves_repo):
    lid = _add(leave_service, subject="  physics ")

    assert leaves_repo.get_by_id(lid).subject_id == 2


def test_add_leave_prefers_subject_id_over_numeric_name(leave_service, leaves_repo, subjects_repo):
    course_code = subjects_repo.create(name="2")

    lid = _add(leave_service, subject="2")

    rec = leaves_repo.get_by_id(lid)
    assert (rec.subject_id, rec.subject) == (2, "Physics")
    assert course_code != rec.subject_id


def test_numeric_name_still_matches_when_no_subject_has_that_id(leave_service, leaves_repo, subjects_repo):
    course_code = subjects_repo.create(name="101")

    lid = _add(leave_service, subject="101")

    assert leaves_repo.get_by_id(lid).subject_id == course_code


@pytest.mark.parametrize(
    "overrides",
    [
        {"subject": ""},
        {"subject": "History"},
        {"leave_date": "10/03/2025"},
        {"period": ""},
        {"period": "7"},
        {"period": "0"},
        {"duty_leave": ""},
    ],
)
def test_add_leave_rejects_missing_or_invalid_fields(leave_service, overrides):
    with pytest.raises(ValidationError):
        _add(leave_service, **overrides)


def test_only_owner_can_edit_or_delete(leave_service):
    lid = _add(leave_service, user_id=1)

    with pytest.raises(AuthorizationError):
        leave_service.update_leave(
            user_id=2, leave_id=lid, subject="2", leave_date="2025-03-11", period="1", duty_leave="no"
        )
    with pytest.raises(AuthorizationError):
        leave_service.delete_leave(user_id=2, leave_id=lid)


def test_update_leave_changes_fields(leave_service, leaves_repo):
    lid = _add(leave_service)

    leave_service.update_leave(
        user_id=1, leave_id=lid, subject="Chemistry", leave_date="2025-04-01", period="6", duty_leave="yes", reason=""
    )

    rec = leaves_repo.get_by_id(lid)
    assert (rec.subject_id, rec.subject, rec.period, rec.duty_leave) == (3, "Chemistry", 6, True)
    assert rec.reason is None


def test_delete_missing_leave_is_validation_error(leave_service):
    with pytest.raises(ValidationError):
        leave_service.delete_leave(user_id=1, leave_id=999)


def test_dashboard_summarizes_only_own_records(leave_service):
    _add(leave_service, subject="1", duty_leave="yes", leave_date="2025-03-01")
    _add(leave_service, subject="2", leave_date="2025-03-05")
    _add(leave_service, subject="1", leave_date="2025-03-07")
    _add(leave_service, user_id=2, subject="2")

    data = leave_service.dashboard(user_id=1)

    assert [(s.subject, s.count, s.duty_leave_count) for s in data.summary] == [
        ("Mathematics", 2, 1),
        ("Physics", 1, 0),
    ]
    assert data.total_leaves == 3
    assert data.total_duty_leaves == 1
    assert data.max_count == 2
    assert [r.leave_date for r in data.records] == [date(2025, 3, 7), date(2025, 3, 5), date(2025, 3, 1)]


def test_renamed_subject_keeps_its_records(leave_service, subjects_repo):
    _add(leave_service, subject="1")
    subjects_repo.rename(1, "Maths")

    data = leave_service.dashboard(user_id=1)

    assert [s.subject for s in data.summary] == ["Maths"]


def test_deleted_subject_is_reported_as_unknown(leave_service, subjects_repo):
    _add(leave_service, subject="3")
    subjects_repo.delete_by_id(3)

    data = leave_service.dashboard(user_id=1)

    assert [s.subject for s in data.summary] == [UNKNOWN_SUBJECT]


def test_legacy_records_keep_their_literal_name(leave_service, leaves_repo):
    leaves_repo.add_legacy(user_id=1, subject="physics", leave_date=date(2025, 2, 1))
    _add(leave_service, subject="2")

    data = leave_service.dashboard(user_id=1)

    assert sorted(s.subject for s in data.summary) == ["Physics", "physics"]


def test_details_for_subject_sorted_newest_first(leave_service):
    _add(leave_service, subject="1", leave_date="2025-01-05")
    _add(leave_service, subject="1", leave_date="2025-02-05")
    _add(leave_service, subject="2", leave_date="2025-03-05")

    records = leave_service.details_for_subject(user_id=1, subject="Mathematics")

    assert [r.leave_date for r in records] == [date(2025, 2, 5), date(2025, 1, 5)]


def test_attendance_for_subject(leave_service):
    for day in range(1, 6):
        _add(leave_service, subject="1", leave_date=f"2025-03-0{day}")
    _add(leave_service, subject="2")

    attendance = leave_service.attendance_for_subject(user_id=1, subject_id="1", total_classes="50")

    assert attendance.subject.name == "Mathematics"
    assert attendance.result.display == "90.00%"


def test_attendance_exceeded_and_not_available(leave_service):
    _add(leave_service, subject="2")
    _add(leave_service, subject="2")

    assert leave_service.attendance_for_subject(user_id=1, subject_id=2, total_classes=1).result.outcome == (
        AttendanceOutcome.EXCEEDED
    )
    assert leave_service.attendance_for_subject(user_id=1, subject_id=2, total_classes="").result.display == "N/A"


def test_attendance_unknown_subject_is_validation_error(leave_service):
    with pytest.raises(ValidationError):
        leave_service.attendance_for_subject(user_id=1, subject_id="nope", total_classes=10)
    with pytest.raises(ValidationError):
        leave_service.attendance_for_subject(user_id=1, subject_id=42, total_classes=10)


def test_certificate_roundtrip_on_duty_leave(leave_service):
    lid = _add(leave_service, duty_leave="yes")

    leave_service.attach_certificate(user_id=1, leave_id=lid, filename="note.PDF", content=b"%PDF-1.4 hello")

    content, mimetype = leave_service.get_certificate(user_id=1, leave_id=lid)
    assert content == b"%PDF-1.4 hello"
    assert mimetype == "application/pdf"


def test_certificate_rules(leave_service):
    regular = _add(leave_service, duty_leave="no")
    duty = _add(leave_service, duty_leave="yes")

    with pytest.raises(ValidationError):
        leave_service.attach_certificate(user_id=1, leave_id=regular, filename="a.pdf", content=b"x")
    with pytest.raises(ValidationError):
        leave_service.attach_certificate(user_id=1, leave_id=duty, filename="a.exe", content=b"x")
    with pytest.raises(ValidationError):
        leave_service.attach_certificate(user_id=1, leave_id=duty, filename="a.png", content=b"")
    with pytest.raises(ValidationError):
        # fixture limit is 1024 bytes
        leave_service.attach_certificate(user_id=1, leave_id=duty, filename="a.png", content=b"x" * 2048)
    with pytest.raises(AuthorizationError):
        leave_service.attach_certificate(user_id=2, leave_id=duty, filename="a.png", content=b"x")
    with pytest.raises(ValidationError):
        leave_service.get_certificate(user_id=1, leave_id=duty)
