from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveCategory, LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, employee_id, leave_type, start_date, end_date, reason,
    status, reject_reason, decided_by, created_at, updated_at
"""


def _to_entity(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        requester_id=int(r["employee_id"]),
        category=LeaveCategory(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
        decided_by=r.get("decided_by"),
        reject_reason=r.get("reject_reason"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        requester_id: int,
        category: LeaveCategory,
        start_date: date,
        end_date: date,
        reason: str,
        status: LeaveStatus,
        decided_by: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, reason, status, decided_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(requester_id), category.value, start_date, end_date, reason, status.value, decided_by),
            )
            return int(cur.lastrowid)

    def get_by_id(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_entity(r) if r else None

    def list_by_requester(self, *, requester_id: int, limit: int = 200) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE employee_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(requester_id), int(limit)),
            )
            return [_to_entity(r) for r in fetchall(cur)]

    def list_pending_by_requesters(self, *, requester_ids: Sequence[int], limit: int = 500) -> Sequence[LeaveRequest]:
        ids = [int(i) for i in requester_ids]
        if not ids:
            return []

        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE employee_id IN ({placeholders}) AND status=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(ids + [LeaveStatus.PENDING.value, int(limit)]),
            )
            return [_to_entity(r) for r in fetchall(cur)]

    def transition(
        self,
        *,
        request_id: int,
        from_status: LeaveStatus,
        to_status: LeaveStatus,
        decided_by: Optional[int] = None,
        reject_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=COALESCE(%s, decided_by),
                    reject_reason=COALESCE(%s, reject_reason), updated_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (
                    to_status.value,
                    decided_by,
                    reject_reason,
                    int(request_id),
                    from_status.value,
                ),
            )
            return cur.rowcount > 0
