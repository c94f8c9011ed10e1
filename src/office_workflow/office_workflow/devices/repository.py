from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, Sequence

from ..core.enums import DeviceRequestStatus
from .model import Device, DeviceRequest


class CollectOutcome(str, Enum):
    """Result of the coupled collect transaction."""

    COLLECTED = "collected"
    STALE_STATUS = "stale_status"
    NO_STOCK = "no_stock"


class DeviceRepository(Protocol):
    def create(self, *, name: str, category: str, total_quantity: int, description: str) -> int:
        raise NotImplementedError

    def get_by_id(self, *, device_id: int) -> Optional[Device]:
        raise NotImplementedError

    def list_all(self, *, available_only: bool = False) -> Sequence[Device]:
        raise NotImplementedError

    def update_info(self, *, device_id: int, name: str, category: str, description: str) -> bool:
        raise NotImplementedError

    def adjust_capacity(self, *, device_id: int, new_total: int) -> Optional[Device]:
        """Atomically set total and shift available by the same delta (floor 0).

        Returns the updated device, or None if it does not exist.
        """

        raise NotImplementedError

    def delete(self, *, device_id: int) -> bool:
        """Remove the device and its request history in one transaction.

        Refuses (returns False) when the device is missing or a request
        still holds one of its units.
        """

        raise NotImplementedError


class DeviceRequestRepository(Protocol):
    def create(self, *, requester_id: int, device_id: int) -> int:
        raise NotImplementedError

    def get_by_id(self, *, request_id: int) -> Optional[DeviceRequest]:
        raise NotImplementedError

    def list_by_requester(self, *, requester_id: int, limit: int = 200) -> Sequence[DeviceRequest]:
        raise NotImplementedError

    def list_by_status(self, *, status: DeviceRequestStatus, limit: int = 500) -> Sequence[DeviceRequest]:
        raise NotImplementedError

    def count_outstanding(self, *, device_id: int) -> int:
        """Requests on the device in collected or return_pending."""

        raise NotImplementedError

    def transition(
        self,
        *,
        request_id: int,
        from_status: DeviceRequestStatus,
        to_status: DeviceRequestStatus,
        reject_reason: Optional[str] = None,
    ) -> bool:
        """Compare-and-set on status, counters untouched."""

        raise NotImplementedError

    def collect(self, *, request_id: int, device_id: int) -> CollectOutcome:
        """approved -> collected plus guarded decrement, in one transaction."""

        raise NotImplementedError

    def confirm_return(self, *, request_id: int, device_id: int) -> bool:
        """return_pending -> returned plus increment, in one transaction."""

        raise NotImplementedError
