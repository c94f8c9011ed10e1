from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    SUPER_ADMIN = "super_admin"
    HR = "hr"
    FINANCE = "finance"
    DEVICE_ADMIN = "device_admin"
    SUPERVISOR = "supervisor"
    EMPLOYEE = "employee"


class Permission(str, Enum):
    VIEW_PROFILE = "view_profile"
    VIEW_LEAVE = "view_leave"
    APPLY_LEAVE = "apply_leave"
    CANCEL_LEAVE = "cancel_leave"
    VIEW_DEVICES = "view_devices"
    APPLY_DEVICE = "apply_device"
    COLLECT_DEVICE = "collect_device"
    RETURN_DEVICE = "return_device"
    CANCEL_DEVICE_REQUEST = "cancel_device_request"
    VIEW_MEETING_ROOMS = "view_meeting_rooms"
    BOOK_MEETING_ROOM = "book_meeting_room"
    CANCEL_BOOKING = "cancel_booking"
    COMPLETE_BOOKING = "complete_booking"

    MANAGE_ROLES = "manage_roles"
    MANAGE_EMPLOYEES = "manage_employees"
    MANAGE_MEETING_ROOMS = "manage_meeting_rooms"
    MANAGE_ACCOUNTS = "manage_accounts"
    MANAGE_CONTRACTS = "manage_contracts"
    MANAGE_SALARIES = "manage_salaries"

    MANAGE_DEVICES = "manage_devices"
    APPROVE_DEVICE_REQUEST = "approve_device_request"
    CONFIRM_DEVICE_RETURN = "confirm_device_return"

    APPROVE_LEAVE = "approve_leave"


class LeaveCategory(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    MARRIAGE = "marriage"
    MATERNITY = "maternity"
    BEREAVEMENT = "bereavement"


class LeaveStatus(str, Enum):
    """Leave request lifecycle. Everything except PENDING is terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING


class DeviceRequestStatus(str, Enum):
    """Device checkout lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COLLECTED = "collected"
    RETURN_PENDING = "return_pending"
    RETURNED = "returned"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in {DeviceRequestStatus.REJECTED, DeviceRequestStatus.CANCELLED, DeviceRequestStatus.RETURNED}

    @property
    def holds_unit(self) -> bool:
        """True while the requester physically has the unit."""
        return self in {DeviceRequestStatus.COLLECTED, DeviceRequestStatus.RETURN_PENDING}


class BookingStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
