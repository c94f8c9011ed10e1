from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import DeviceRequestStatus


@dataclass(frozen=True)
class Device:
    device_id: int
    name: str
    category: str
    total_quantity: int
    available_quantity: int
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def outstanding(self) -> int:
        """Units currently out with employees, as implied by the counters."""
        return self.total_quantity - self.available_quantity

    def to_dict(self) -> dict:
        return {
            "id": self.device_id,
            "name": self.name,
            "type": self.category,
            "total_quantity": self.total_quantity,
            "available_quantity": self.available_quantity,
            "description": self.description,
        }


@dataclass(frozen=True)
class DeviceRequest:
    """One row claims one unit of one device."""

    request_id: int
    requester_id: int
    device_id: int
    status: DeviceRequestStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    reject_reason: Optional[str] = None
    device_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "employee_id": self.requester_id,
            "device_id": self.device_id,
            "device_name": self.device_name or "",
            "status": self.status.value,
            "reject_reason": self.reject_reason or "",
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
        }
