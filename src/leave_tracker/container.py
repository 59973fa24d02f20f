from __future__ import annotations

from dataclasses import dataclass

from .core.constants import MAX_CERTIFICATE_BYTES
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.service import SubjectService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    user_service: UserService
    subject_service: SubjectService
    leave_service: LeaveService


def build_container(*, db_config: dict, max_certificate_bytes: int = MAX_CERTIFICATE_BYTES) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    subjects_repo = MySQLSubjectRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)

    return Container(
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        subject_service=SubjectService(subjects_repo),
        leave_service=LeaveService(leaves_repo, subjects_repo, max_certificate_bytes=max_certificate_bytes),
    )
