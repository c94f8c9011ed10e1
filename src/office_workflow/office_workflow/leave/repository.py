from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveCategory, LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_by_requester(self, *, requester_id: int, limit: int = 200) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_pending_by_requesters(self, *, requester_ids: Sequence[int], limit: int = 500) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def transition(
        self,
        *,
        request_id: int,
        from_status: LeaveStatus,
        to_status: LeaveStatus,
        decided_by: Optional[int] = None,
        reject_reason: Optional[str] = None,
    ) -> bool:
        """Compare-and-set on status. False when the row is not in `from_status`."""

        raise NotImplementedError
