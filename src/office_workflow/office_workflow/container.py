from __future__ import annotations

from dataclasses import dataclass

from .bookings.mysql_booking_repository import MySQLBookingRepository, MySQLMeetingRoomRepository
from .bookings.service import BookingConflictEngine
from .database.connection import DBConfig, DatabaseConnection
from .devices.inventory import DeviceInventory
from .devices.mysql_device_repository import MySQLDeviceRepository, MySQLDeviceRequestRepository
from .devices.service import DeviceRequestWorkflow
from .employees.hierarchy import EmployeeHierarchy
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveWorkflow


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    leave_repo: MySQLLeaveRepository
    devices_repo: MySQLDeviceRepository
    device_requests_repo: MySQLDeviceRequestRepository
    rooms_repo: MySQLMeetingRoomRepository
    bookings_repo: MySQLBookingRepository

    hierarchy: EmployeeHierarchy
    leave_workflow: LeaveWorkflow
    device_inventory: DeviceInventory
    device_workflow: DeviceRequestWorkflow
    booking_engine: BookingConflictEngine


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)
    devices_repo = MySQLDeviceRepository(conn)
    device_requests_repo = MySQLDeviceRequestRepository(conn)
    rooms_repo = MySQLMeetingRoomRepository(conn)
    bookings_repo = MySQLBookingRepository(conn)

    hierarchy = EmployeeHierarchy(employees_repo)
    leave_workflow = LeaveWorkflow(leave_repo, hierarchy)
    device_inventory = DeviceInventory(devices_repo, device_requests_repo)
    device_workflow = DeviceRequestWorkflow(device_requests_repo, device_inventory)
    booking_engine = BookingConflictEngine(rooms_repo, bookings_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        leave_repo=leave_repo,
        devices_repo=devices_repo,
        device_requests_repo=device_requests_repo,
        rooms_repo=rooms_repo,
        bookings_repo=bookings_repo,
        hierarchy=hierarchy,
        leave_workflow=leave_workflow,
        device_inventory=device_inventory,
        device_workflow=device_workflow,
        booking_engine=booking_engine,
    )
