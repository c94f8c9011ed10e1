from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveCategory, LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    requester_id: int
    category: LeaveCategory
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    reject_reason: Optional[str] = None

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "employee_id": self.requester_id,
            "leave_type": self.category.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": self.days,
            "reason": self.reason,
            "status": self.status.value,
            "reject_reason": self.reject_reason or "",
            "decided_by": self.decided_by,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
        }
