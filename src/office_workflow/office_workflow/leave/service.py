from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence, Union

from ..common.validators import require_non_empty
from ..core.constants import ADMIN_LIST_LIMIT, DEFAULT_LIST_LIMIT, TOP_LEVEL_ROLE
from ..core.enums import LeaveCategory, LeaveStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    InvalidCategoryError,
    InvalidDateRangeError,
    InvalidStateError,
    NotFoundError,
    SelfApprovalError,
)
from ..employees.hierarchy import EmployeeHierarchy
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveWorkflow:
    """Leave request lifecycle: pending -> approved | rejected | cancelled.

    Decisions belong to the requester's direct supervisor; an employee with
    no supervisor is decided by the top-level role. Every transition is a
    compare-and-set on status, so two racing decisions cannot both win.
    """

    def __init__(self, leaves: LeaveRepository, hierarchy: EmployeeHierarchy):
        self._leaves = leaves
        self._hierarchy = hierarchy

    @staticmethod
    def _parse_category(category: Union[str, LeaveCategory]) -> LeaveCategory:
        try:
            return LeaveCategory(category)
        except ValueError:
            raise InvalidCategoryError(f"Invalid leave type: {category!r}")

    def _load(self, request_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(request_id=int(request_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def _require_approver(self, leave: LeaveRequest, *, actor_id: int, current_role: Role) -> None:
        if leave.requester_id == int(actor_id):
            raise SelfApprovalError("Cannot approve/reject own leave request")
        if not self._hierarchy.can_decide_for(
            actor_id=int(actor_id), actor_role=current_role, subject_id=leave.requester_id
        ):
            raise AuthorizationError("Can only approve/reject leave requests from subordinates")

    @staticmethod
    def _require_pending(leave: LeaveRequest) -> None:
        if leave.status != LeaveStatus.PENDING:
            raise InvalidStateError(
                "Leave request status does not allow this operation",
                current_status=leave.status.value,
            )

    def _transition(
        self,
        leave: LeaveRequest,
        to_status: LeaveStatus,
        *,
        decided_by: Optional[int] = None,
        reject_reason: Optional[str] = None,
    ) -> LeaveRequest:
        ok = self._leaves.transition(
            request_id=leave.request_id,
            from_status=LeaveStatus.PENDING,
            to_status=to_status,
            decided_by=decided_by,
            reject_reason=reject_reason,
        )
        if not ok:
            current = self._load(leave.request_id)
            logger.warning(
                "Leave request %s: %s lost race (now %s)", leave.request_id, to_status.value, current.status.value
            )
            raise InvalidStateError(
                "Leave request status does not allow this operation",
                current_status=current.status.value,
            )

        logger.info("Leave request %s: pending -> %s", leave.request_id, to_status.value)
        return self._load(leave.request_id)

    def submit(
        self,
        *,
        requester_id: int,
        current_role: Role,
        category: Union[str, LeaveCategory],
        start_date: date,
        end_date: date,
        reason: str = "",
    ) -> LeaveRequest:
        if end_date < start_date:
            raise InvalidDateRangeError("Invalid date range: end date must be after or equal to start date")
        leave_type = self._parse_category(category)

        auto_approved = Role(current_role) == TOP_LEVEL_ROLE
        status = LeaveStatus.APPROVED if auto_approved else LeaveStatus.PENDING

        request_id = self._leaves.create(
            requester_id=int(requester_id),
            category=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=(reason or "").strip(),
            status=status,
            decided_by=int(requester_id) if auto_approved else None,
        )
        logger.info(
            "Leave request %s submitted by employee %s (%s)", request_id, requester_id, status.value
        )
        return self._load(request_id)

    def approve(self, *, request_id: int, actor_id: int, current_role: Role) -> LeaveRequest:
        leave = self._load(request_id)
        self._require_approver(leave, actor_id=actor_id, current_role=current_role)
        self._require_pending(leave)
        return self._transition(leave, LeaveStatus.APPROVED, decided_by=int(actor_id))

    def reject(self, *, request_id: int, actor_id: int, current_role: Role, reason: str) -> LeaveRequest:
        leave = self._load(request_id)
        self._require_approver(leave, actor_id=actor_id, current_role=current_role)
        self._require_pending(leave)
        reject_reason = require_non_empty(reason, "Reject reason")
        return self._transition(leave, LeaveStatus.REJECTED, decided_by=int(actor_id), reject_reason=reject_reason)

    def cancel(self, *, request_id: int, actor_id: int, current_role: Role) -> LeaveRequest:
        leave = self._load(request_id)
        if leave.requester_id != int(actor_id):
            if not self._hierarchy.can_decide_for(
                actor_id=int(actor_id), actor_role=current_role, subject_id=leave.requester_id
            ):
                raise AuthorizationError("Can only cancel own or subordinates' leave requests")
        self._require_pending(leave)
        decided_by = None if leave.requester_id == int(actor_id) else int(actor_id)
        return self._transition(leave, LeaveStatus.CANCELLED, decided_by=decided_by)

    def get(self, *, request_id: int) -> LeaveRequest:
        return self._load(request_id)

    def list_mine(self, *, requester_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_by_requester(requester_id=int(requester_id), limit=DEFAULT_LIST_LIMIT)

    def list_pending_for_supervisor(
        self, *, supervisor_id: int, current_role: Role = Role.SUPERVISOR
    ) -> Sequence[LeaveRequest]:
        subject_ids = self._hierarchy.decidable_subjects(actor_id=int(supervisor_id), actor_role=current_role)
        if not subject_ids:
            return []
        return self._leaves.list_pending_by_requesters(requester_ids=subject_ids, limit=ADMIN_LIST_LIMIT)
