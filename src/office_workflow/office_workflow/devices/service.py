from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import ADMIN_LIST_LIMIT, DEFAULT_LIST_LIMIT
from ..core.enums import DeviceRequestStatus, Permission, Role
from ..core.exceptions import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    NotOwnerError,
    ResourceUnavailableError,
)
from ..core.permissions import has_permission
from .inventory import DeviceInventory
from .model import DeviceRequest
from .repository import CollectOutcome, DeviceRequestRepository

logger = logging.getLogger(__name__)

S = DeviceRequestStatus


class DeviceRequestWorkflow:
    """Device checkout lifecycle.

        pending -> approved -> collected -> return_pending -> returned
        pending -> rejected | cancelled

    Only collect and confirm_return touch the device counter, each inside the
    same transaction as its status change.
    """

    def __init__(self, requests: DeviceRequestRepository, inventory: DeviceInventory):
        self._requests = requests
        self._inventory = inventory

    def _load(self, request_id: int) -> DeviceRequest:
        req = self._requests.get_by_id(request_id=int(request_id))
        if not req:
            raise NotFoundError("Device request not found")
        return req

    @staticmethod
    def _require(current_role: Role, permission: Permission) -> None:
        if not has_permission(current_role, permission):
            raise AuthorizationError("Device administrator only")

    @staticmethod
    def _require_owner(req: DeviceRequest, employee_id: int) -> None:
        if req.requester_id != int(employee_id):
            raise NotOwnerError("Can only operate on own device request")

    @staticmethod
    def _require_status(req: DeviceRequest, expected: DeviceRequestStatus) -> None:
        if req.status != expected:
            raise InvalidStateError(
                "Device request status does not allow this operation",
                current_status=req.status.value,
            )

    def _stale(self, request_id: int, attempted: DeviceRequestStatus) -> InvalidStateError:
        current = self._load(request_id)
        logger.warning(
            "Device request %s: %s lost race (now %s)", request_id, attempted.value, current.status.value
        )
        return InvalidStateError(
            "Device request status does not allow this operation",
            current_status=current.status.value,
        )

    def _transition(
        self,
        req: DeviceRequest,
        to_status: DeviceRequestStatus,
        *,
        reject_reason: Optional[str] = None,
    ) -> DeviceRequest:
        ok = self._requests.transition(
            request_id=req.request_id,
            from_status=req.status,
            to_status=to_status,
            reject_reason=reject_reason,
        )
        if not ok:
            raise self._stale(req.request_id, to_status)
        logger.info("Device request %s: %s -> %s", req.request_id, req.status.value, to_status.value)
        return self._load(req.request_id)

    def create_request(self, *, employee_id: int, device_id: int) -> DeviceRequest:
        device = self._inventory.ensure_available(device_id=device_id)
        request_id = self._requests.create(requester_id=int(employee_id), device_id=device.device_id)
        logger.info("Device request %s created by employee %s for device %s", request_id, employee_id, device_id)
        return self._load(request_id)

    def approve(self, *, request_id: int, current_role: Role) -> DeviceRequest:
        self._require(current_role, Permission.APPROVE_DEVICE_REQUEST)
        req = self._load(request_id)
        self._require_status(req, S.PENDING)
        return self._transition(req, S.APPROVED)

    def reject(self, *, request_id: int, current_role: Role, reason: str) -> DeviceRequest:
        self._require(current_role, Permission.APPROVE_DEVICE_REQUEST)
        req = self._load(request_id)
        self._require_status(req, S.PENDING)
        reject_reason = require_non_empty(reason, "Reject reason")
        return self._transition(req, S.REJECTED, reject_reason=reject_reason)

    def collect(self, *, request_id: int, employee_id: int) -> DeviceRequest:
        req = self._load(request_id)
        self._require_owner(req, employee_id)
        self._require_status(req, S.APPROVED)

        outcome = self._requests.collect(request_id=req.request_id, device_id=req.device_id)
        if outcome == CollectOutcome.STALE_STATUS:
            raise self._stale(req.request_id, S.COLLECTED)
        if outcome == CollectOutcome.NO_STOCK:
            logger.warning("Device request %s: no unit left for device %s", req.request_id, req.device_id)
            raise ResourceUnavailableError("Device not available")

        logger.info("Device request %s: approved -> collected", req.request_id)
        return self._load(req.request_id)

    def initiate_return(self, *, request_id: int, employee_id: int) -> DeviceRequest:
        req = self._load(request_id)
        self._require_owner(req, employee_id)
        self._require_status(req, S.COLLECTED)
        return self._transition(req, S.RETURN_PENDING)

    def confirm_return(self, *, request_id: int, current_role: Role) -> DeviceRequest:
        self._require(current_role, Permission.CONFIRM_DEVICE_RETURN)
        req = self._load(request_id)
        self._require_status(req, S.RETURN_PENDING)

        if not self._requests.confirm_return(request_id=req.request_id, device_id=req.device_id):
            raise self._stale(req.request_id, S.RETURNED)

        logger.info("Device request %s: return_pending -> returned", req.request_id)
        return self._load(req.request_id)

    def cancel(self, *, request_id: int, actor_id: int, current_role: Role) -> DeviceRequest:
        req = self._load(request_id)
        if req.requester_id != int(actor_id) and not has_permission(current_role, Permission.APPROVE_DEVICE_REQUEST):
            raise NotOwnerError("Can only operate on own device request")
        self._require_status(req, S.PENDING)
        return self._transition(req, S.CANCELLED)

    def get(self, *, request_id: int) -> DeviceRequest:
        return self._load(request_id)

    def list_mine(self, *, employee_id: int) -> Sequence[DeviceRequest]:
        return self._requests.list_by_requester(requester_id=int(employee_id), limit=DEFAULT_LIST_LIMIT)

    def list_pending(self) -> Sequence[DeviceRequest]:
        return self._requests.list_by_status(status=S.PENDING, limit=ADMIN_LIST_LIMIT)

    def list_return_pending(self) -> Sequence[DeviceRequest]:
        return self._requests.list_by_status(status=S.RETURN_PENDING, limit=ADMIN_LIST_LIMIT)
