from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Subject
from .repository import SubjectRepository


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subject_id, name, created_at FROM subjects ORDER BY name")
            return [
                Subject(subject_id=int(r["subject_id"]), name=r["name"], created_at=r.get("created_at"))
                for r in fetchall(cur)
            ]

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT subject_id, name, created_at FROM subjects WHERE subject_id=%s", (subject_id,))
            r = fetchone(cur)
            if not r:
                return None
            return Subject(subject_id=int(r["subject_id"]), name=r["name"], created_at=r.get("created_at"))

    def create(self, *, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO subjects(name) VALUES(%s)", (name,))
            return int(cur.lastrowid)

    def delete_by_id(self, subject_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE subject_id=%s", (subject_id,))
            return cur.rowcount > 0
