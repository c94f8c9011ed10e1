from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import DeviceRequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Device, DeviceRequest
from .repository import CollectOutcome, DeviceRepository, DeviceRequestRepository

logger = logging.getLogger(__name__)

_DEVICE_COLUMNS = """
    device_id, name, device_type, total_quantity, available_quantity,
    description, created_at, updated_at
"""

_REQUEST_SELECT = """
    SELECT r.request_id, r.employee_id, r.device_id, r.status, r.reject_reason,
           r.created_at, r.updated_at, d.name AS device_name
    FROM device_requests r
    JOIN devices d ON d.device_id = r.device_id
"""


def _to_device(r: dict) -> Device:
    return Device(
        device_id=int(r["device_id"]),
        name=r["name"],
        category=r.get("device_type") or "",
        total_quantity=int(r["total_quantity"]),
        available_quantity=int(r["available_quantity"]),
        description=r.get("description") or "",
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _to_request(r: dict) -> DeviceRequest:
    return DeviceRequest(
        request_id=int(r["request_id"]),
        requester_id=int(r["employee_id"]),
        device_id=int(r["device_id"]),
        status=DeviceRequestStatus(r["status"]),
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
        reject_reason=r.get("reject_reason"),
        device_name=r.get("device_name"),
    )


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, name: str, category: str, total_quantity: int, description: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO devices(name, device_type, total_quantity, available_quantity, description)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, category, int(total_quantity), int(total_quantity), description),
            )
            return int(cur.lastrowid)

    def get_by_id(self, *, device_id: int) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_DEVICE_COLUMNS} FROM devices WHERE device_id=%s", (int(device_id),))
            r = fetchone(cur)
            return _to_device(r) if r else None

    def list_all(self, *, available_only: bool = False) -> Sequence[Device]:
        where = "WHERE available_quantity > 0" if available_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_DEVICE_COLUMNS} FROM devices {where} ORDER BY name")
            return [_to_device(r) for r in fetchall(cur)]

    def update_info(self, *, device_id: int, name: str, category: str, description: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE devices
                SET name=%s, device_type=%s, description=%s, updated_at=NOW()
                WHERE device_id=%s
                """,
                (name, category, description, int(device_id)),
            )
            return cur.rowcount > 0

    def adjust_capacity(self, *, device_id: int, new_total: int) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT total_quantity, available_quantity FROM devices WHERE device_id=%s FOR UPDATE",
                (int(device_id),),
            )
            row = fetchone(cur)
            if not row:
                return None

            old_total = int(row["total_quantity"])
            available = int(row["available_quantity"]) + (int(new_total) - old_total)
            if available < 0:
                logger.warning(
                    "Device %s: capacity %s below outstanding units, available clamped to 0", device_id, new_total
                )
                available = 0

            cur.execute(
                """
                UPDATE devices
                SET total_quantity=%s, available_quantity=%s, updated_at=NOW()
                WHERE device_id=%s
                """,
                (int(new_total), available, int(device_id)),
            )
            cur.execute(f"SELECT {_DEVICE_COLUMNS} FROM devices WHERE device_id=%s", (int(device_id),))
            return _to_device(fetchone(cur))

    def delete(self, *, device_id: int) -> bool:
        with db_cursor(self._conn_factory) as (conn, cur):
            # Request rows before the device row, the order collect takes them in.
            cur.execute("SELECT status FROM device_requests WHERE device_id=%s FOR UPDATE", (int(device_id),))
            holding = [r for r in fetchall(cur) if DeviceRequestStatus(r["status"]).holds_unit]
            cur.execute("SELECT device_id FROM devices WHERE device_id=%s FOR UPDATE", (int(device_id),))
            if not fetchone(cur) or holding:
                conn.rollback()
                return False

            cur.execute("DELETE FROM device_requests WHERE device_id=%s", (int(device_id),))
            cur.execute("DELETE FROM devices WHERE device_id=%s", (int(device_id),))
            return cur.rowcount > 0


class MySQLDeviceRequestRepository(DeviceRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, requester_id: int, device_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO device_requests(employee_id, device_id, status) VALUES(%s,%s,%s)",
                (int(requester_id), int(device_id), DeviceRequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, *, request_id: int) -> Optional[DeviceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_REQUEST_SELECT} WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_by_requester(self, *, requester_id: int, limit: int = 200) -> Sequence[DeviceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_REQUEST_SELECT} WHERE r.employee_id=%s ORDER BY r.created_at DESC LIMIT %s",
                (int(requester_id), int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_by_status(self, *, status: DeviceRequestStatus, limit: int = 500) -> Sequence[DeviceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_REQUEST_SELECT} WHERE r.status=%s ORDER BY r.created_at ASC LIMIT %s",
                (status.value, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def count_outstanding(self, *, device_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM device_requests WHERE device_id=%s AND status IN (%s,%s)",
                (
                    int(device_id),
                    DeviceRequestStatus.COLLECTED.value,
                    DeviceRequestStatus.RETURN_PENDING.value,
                ),
            )
            return int(fetchone(cur)["n"])

    def transition(
        self,
        *,
        request_id: int,
        from_status: DeviceRequestStatus,
        to_status: DeviceRequestStatus,
        reject_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE device_requests
                SET status=%s, reject_reason=COALESCE(%s, reject_reason), updated_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (to_status.value, reject_reason, int(request_id), from_status.value),
            )
            return cur.rowcount > 0

    def collect(self, *, request_id: int, device_id: int) -> CollectOutcome:
        with db_cursor(self._conn_factory) as (conn, cur):
            cur.execute(
                """
                UPDATE device_requests
                SET status=%s, updated_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (
                    DeviceRequestStatus.COLLECTED.value,
                    int(request_id),
                    DeviceRequestStatus.APPROVED.value,
                ),
            )
            if cur.rowcount == 0:
                conn.rollback()
                return CollectOutcome.STALE_STATUS

            # Guarded decrement: zero rows means the last unit is gone.
            cur.execute(
                """
                UPDATE devices
                SET available_quantity = available_quantity - 1, updated_at=NOW()
                WHERE device_id=%s AND available_quantity > 0
                """,
                (int(device_id),),
            )
            if cur.rowcount == 0:
                conn.rollback()
                return CollectOutcome.NO_STOCK

            return CollectOutcome.COLLECTED

    def confirm_return(self, *, request_id: int, device_id: int) -> bool:
        with db_cursor(self._conn_factory) as (conn, cur):
            cur.execute(
                """
                UPDATE device_requests
                SET status=%s, updated_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (
                    DeviceRequestStatus.RETURNED.value,
                    int(request_id),
                    DeviceRequestStatus.RETURN_PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                conn.rollback()
                return False

            cur.execute(
                """
                UPDATE devices
                SET available_quantity = available_quantity + 1, updated_at=NOW()
                WHERE device_id=%s
                """,
                (int(device_id),),
            )
            return True
