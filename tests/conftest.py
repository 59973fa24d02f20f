from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from leave_tracker.container import Container
from leave_tracker.core.enums import Role
from leave_tracker.leaves.model import LeaveRecord
from leave_tracker.leaves.service import LeaveService
from leave_tracker.subjects.model import Subject
from leave_tracker.subjects.service import SubjectService
from leave_tracker.users.model import User
from leave_tracker.users.service import AuthService, UserService


class InMemoryUsers:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, *, full_name, username, password_hash, role):
        uid = self._next_id
        self._next_id += 1
        self.users[uid] = User(
            user_id=uid,
            full_name=full_name,
            username=username,
            password_hash=password_hash,
            role=role,
        )
        return uid

    def set_role(self, user_id, *, role):
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[int(user_id)] = replace(user, role=role)
        return True

    def add(self, username: str, password: str, role: Role = Role.USER) -> int:
        return self.create_user(
            full_name=username.title(),
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
        )


class InMemorySubjects:
    def __init__(self, names=()):
        self._next_id = 1
        self.subjects: dict[int, Subject] = {}
        for name in names:
            self.create(name=name)

    def list_all(self):
        return list(self.subjects.values())

    def get_by_id(self, subject_id):
        return self.subjects.get(int(subject_id))

    def create(self, *, name):
        sid = self._next_id
        self._next_id += 1
        self.subjects[sid] = Subject(subject_id=sid, name=name, created_at=datetime(2025, 1, 1, 9, 0))
        return sid

    def delete_by_id(self, subject_id):
        return self.subjects.pop(int(subject_id), None) is not None

    def rename(self, subject_id, name):
        self.subjects[subject_id] = replace(self.subjects[subject_id], name=name)


class InMemoryLeaves:
    def __init__(self):
        self._next_id = 1
        self.records: dict[int, LeaveRecord] = {}

    def list_for_user(self, user_id):
        return [r for r in self.records.values() if r.user_id == int(user_id)]

    def get_by_id(self, leave_id):
        return self.records.get(int(leave_id))

    def create(self, *, user_id, subject_id, subject, leave_date, period, duty_leave, reason):
        lid = self._next_id
        self._next_id += 1
        self.records[lid] = LeaveRecord(
            leave_id=lid,
            user_id=int(user_id),
            subject=subject,
            leave_date=leave_date,
            period=period,
            duty_leave=duty_leave,
            reason=reason,
            subject_id=subject_id,
        )
        return lid

    def update(self, *, leave_id, subject_id, subject, leave_date, period, duty_leave, reason):
        rec = self.records.get(int(leave_id))
        if not rec:
            return False
        self.records[int(leave_id)] = replace(
            rec,
            subject_id=subject_id,
            subject=subject,
            leave_date=leave_date,
            period=period,
            duty_leave=duty_leave,
            reason=reason,
        )
        return True

    def set_certificate(self, *, leave_id, certificate_url):
        rec = self.records.get(int(leave_id))
        if not rec:
            return False
        self.records[int(leave_id)] = replace(rec, certificate_url=certificate_url)
        return True

    def delete_by_id(self, leave_id):
        return self.records.pop(int(leave_id), None) is not None

    def add_legacy(self, *, user_id: int, subject: str, leave_date: date, duty_leave=None) -> int:
        """Insert a row written before subject ids were stored."""
        lid = self._next_id
        self._next_id += 1
        self.records[lid] = LeaveRecord(
            leave_id=lid,
            user_id=user_id,
            subject=subject,
            leave_date=leave_date,
            duty_leave=duty_leave,
        )
        return lid


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def subjects_repo():
    # ids: Mathematics=1, Physics=2, Chemistry=3
    return InMemorySubjects(["Mathematics", "Physics", "Chemistry"])


@pytest.fixture
def leaves_repo():
    return InMemoryLeaves()


@pytest.fixture
def leave_service(leaves_repo, subjects_repo):
    return LeaveService(leaves_repo, subjects_repo, max_certificate_bytes=1024)


@pytest.fixture
def subject_service(subjects_repo):
    return SubjectService(subjects_repo)


@pytest.fixture
def container(users_repo, subjects_repo, leave_service, subject_service):
    return Container(
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        subject_service=subject_service,
        leave_service=leave_service,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from leave_tracker.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()
