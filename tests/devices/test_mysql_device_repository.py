from __future__ import annotations

from src.office_workflow.office_workflow.devices.mysql_device_repository import (
    MySQLDeviceRepository,
    MySQLDeviceRequestRepository,
)
from src.office_workflow.office_workflow.devices.repository import CollectOutcome
from tests.fakes import RecordingConnection


def _rolled_back_before_commit(conn):
    events = conn.events
    assert "rollback" in events
    if "commit" in events:
        assert events.index("rollback") < events.index("commit")


def test_collect_on_stale_status_touches_no_counter():
    conn = RecordingConnection([{"rowcount": 0}])

    out = MySQLDeviceRequestRepository(conn).collect(request_id=7, device_id=3)

    assert out == CollectOutcome.STALE_STATUS
    assert len(conn.statements) == 1
    assert conn.statements[0].startswith("UPDATE device_requests")
    assert not any(s.startswith("UPDATE devices") for s in conn.statements)
    _rolled_back_before_commit(conn)
    assert conn.events[-1] == "close"


def test_collect_without_stock_rolls_back_the_status_change():
    conn = RecordingConnection([{"rowcount": 1}, {"rowcount": 0}])

    out = MySQLDeviceRequestRepository(conn).collect(request_id=7, device_id=3)

    assert out == CollectOutcome.NO_STOCK
    status_update, decrement = conn.statements
    assert status_update.startswith("UPDATE device_requests")
    assert "available_quantity = available_quantity - 1" in decrement
    assert "available_quantity > 0" in decrement
    assert conn.events == ["connect", "execute", "execute", "rollback", "commit", "close"]


def test_collect_commits_status_and_decrement_together():
    conn = RecordingConnection([{"rowcount": 1}, {"rowcount": 1}])

    out = MySQLDeviceRequestRepository(conn).collect(request_id=7, device_id=3)

    assert out == CollectOutcome.COLLECTED
    assert conn.log[1] == ("execute", conn.statements[0], ("collected", 7, "approved"))
    assert conn.log[2][2] == (3,)
    assert conn.events.count("commit") == 1
    assert "rollback" not in conn.events


def test_confirm_return_increments_in_the_same_transaction():
    conn = RecordingConnection([{"rowcount": 1}, {"rowcount": 1}])

    assert MySQLDeviceRequestRepository(conn).confirm_return(request_id=7, device_id=3) is True

    status_update, increment = conn.statements
    assert "WHERE request_id=%s AND status=%s" in status_update
    assert "available_quantity = available_quantity + 1" in increment
    assert conn.events == ["connect", "execute", "execute", "commit", "close"]


def test_confirm_return_on_stale_status_skips_increment():
    conn = RecordingConnection([{"rowcount": 0}])

    assert MySQLDeviceRequestRepository(conn).confirm_return(request_id=7, device_id=3) is False

    assert len(conn.statements) == 1
    _rolled_back_before_commit(conn)


def test_delete_device_refused_while_a_unit_is_out():
    conn = RecordingConnection(
        [
            {"rows": [{"status": "returned"}, {"status": "return_pending"}]},
            {"rows": [{"device_id": 3}]},
        ]
    )

    assert MySQLDeviceRepository(conn).delete(device_id=3) is False

    assert not any(s.startswith("DELETE") for s in conn.statements)
    _rolled_back_before_commit(conn)


def test_delete_device_locks_requests_then_device():
    conn = RecordingConnection(
        [
            {"rows": [{"status": "returned"}, {"status": "rejected"}]},
            {"rows": [{"device_id": 3}]},
            {"rowcount": 2},
            {"rowcount": 1},
        ]
    )

    assert MySQLDeviceRepository(conn).delete(device_id=3) is True

    lock_requests, lock_device, drop_requests, drop_device = conn.statements
    assert lock_requests.startswith("SELECT status FROM device_requests") and lock_requests.endswith("FOR UPDATE")
    assert lock_device.startswith("SELECT device_id FROM devices") and lock_device.endswith("FOR UPDATE")
    assert drop_requests.startswith("DELETE FROM device_requests")
    assert drop_device.startswith("DELETE FROM devices")
    assert "rollback" not in conn.events
