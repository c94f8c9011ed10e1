from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, role, supervisor_id, is_active
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                employee_id=int(row["employee_id"]),
                full_name=row["full_name"],
                role=Role(row["role"]),
                supervisor_id=(int(row["supervisor_id"]) if row.get("supervisor_id") is not None else None),
                is_active=bool(row.get("is_active", True)),
            )

    def get_supervisor_id(self, employee_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT supervisor_id FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            if not row or row.get("supervisor_id") is None:
                return None
            return int(row["supervisor_id"])

    def list_subordinate_ids(self, supervisor_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id FROM employees WHERE supervisor_id=%s ORDER BY employee_id",
                (int(supervisor_id),),
            )
            return [int(r["employee_id"]) for r in fetchall(cur)]

    def list_unsupervised_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM employees WHERE supervisor_id IS NULL ORDER BY employee_id")
            return [int(r["employee_id"]) for r in fetchall(cur)]
