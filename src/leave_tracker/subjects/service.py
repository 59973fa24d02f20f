from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Subject
from .repository import SubjectRepository

logger = logging.getLogger(__name__)


def _name_key(name: str) -> str:
    return (name or "").strip().lower()


def find_subject(subjects: Iterable[Subject], value) -> Optional[Subject]:
    """Match a subject by name (case-insensitive, trimmed), falling back to its id."""
    subjects = list(subjects)
    key = _name_key(str(value or ""))
    if not key:
        return None
    for s in subjects:
        if _name_key(s.name) == key:
            return s
    for s in subjects:
        if str(s.subject_id) == str(value).strip():
            return s
    return None


class SubjectService:
    """Use case: admin-managed subject list."""

    def __init__(self, subjects: SubjectRepository):
        self._subjects = subjects

    def list_subjects(self) -> list[Subject]:
        return sorted(self._subjects.list_all(), key=lambda s: _name_key(s.name))

    def add_subject(self, *, current_role: Role, name: str) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage subjects")

        name = require_non_empty(name, "Subject name")
        existing: Sequence[Subject] = self._subjects.list_all()
        if any(_name_key(s.name) == _name_key(name) for s in existing):
            # Names are expected to be unique but the rule is not enforced.
            logger.warning("Subject %r already exists (case-insensitive match)", name)

        subject_id = self._subjects.create(name=name)
        logger.info("Added subject %r (id=%s)", name, subject_id)
        return subject_id

    def delete_subject(self, *, current_role: Role, subject_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage subjects")

        if not self._subjects.delete_by_id(int(subject_id)):
            raise ValidationError("Subject does not exist")
        logger.info("Deleted subject id=%s", subject_id)
