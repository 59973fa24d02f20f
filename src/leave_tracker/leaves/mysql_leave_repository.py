from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    normalize_mysql_bool,
    normalize_mysql_date,
)
from .model import LeaveRecord
from .repository import LeaveRepository

_LEAVE_COLUMNS = (
    "leave_id, user_id, subject_id, subject, leave_date, period, duty_leave, reason, certificate_url, created_at"
)


def _to_record(r: dict) -> LeaveRecord:
    return LeaveRecord(
        leave_id=int(r["leave_id"]),
        user_id=int(r["user_id"]),
        subject=r["subject"],
        leave_date=normalize_mysql_date(r["leave_date"]),
        period=int(r["period"]) if r.get("period") is not None else None,
        duty_leave=normalize_mysql_bool(r.get("duty_leave")),
        reason=r.get("reason"),
        certificate_url=r.get("certificate_url"),
        subject_id=int(r["subject_id"]) if r.get("subject_id") is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int) -> Sequence[LeaveRecord]:
        # Insertion order: the summary keeps first-seen order for ties.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE user_id=%s ORDER BY leave_id",
                (user_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, leave_id: int) -> Optional[LeaveRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE leave_id=%s", (leave_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(user_id, subject_id, subject, leave_date, period, duty_leave, reason)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (user_id, subject_id, subject, leave_date, period, int(duty_leave), reason),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET subject_id=%s, subject=%s, leave_date=%s, period=%s, duty_leave=%s, reason=%s
                WHERE leave_id=%s
                """,
                (subject_id, subject, leave_date, period, int(duty_leave), reason, leave_id),
            )
            return cur.rowcount > 0

    def set_certificate(self, *, leave_id: int, certificate_url: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE leaves SET certificate_url=%s WHERE leave_id=%s", (certificate_url, leave_id))
            return cur.rowcount > 0

    def delete_by_id(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leaves WHERE leave_id=%s", (leave_id,))
            return cur.rowcount > 0
