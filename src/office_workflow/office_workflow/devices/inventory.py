from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_non_negative
from ..core.enums import Permission, Role
from ..core.exceptions import AuthorizationError, DeviceNotFoundError, InvalidStateError, ResourceUnavailableError
from ..core.permissions import has_permission
from .model import Device
from .repository import DeviceRepository, DeviceRequestRepository

logger = logging.getLogger(__name__)


class DeviceInventory:
    """Owns the device counters.

    total/available change only here (create, adjust_capacity) and in the
    coupled collect/confirm-return transactions of DeviceRequestWorkflow.
    """

    def __init__(self, devices: DeviceRepository, requests: DeviceRequestRepository):
        self._devices = devices
        self._requests = requests

    @staticmethod
    def _require_manager(current_role: Role) -> None:
        if not has_permission(current_role, Permission.MANAGE_DEVICES):
            raise AuthorizationError("Device administrator only")

    def get_device(self, *, device_id: int) -> Device:
        device = self._devices.get_by_id(device_id=int(device_id))
        if not device:
            raise DeviceNotFoundError("Device not found")
        return device

    def list_devices(self) -> Sequence[Device]:
        return self._devices.list_all()

    def list_available(self) -> Sequence[Device]:
        return self._devices.list_all(available_only=True)

    def ensure_available(self, *, device_id: int) -> Device:
        """Optimistic pre-check; reserves nothing."""
        device = self.get_device(device_id=device_id)
        if device.available_quantity <= 0:
            raise ResourceUnavailableError("Device not available")
        return device

    def create_device(
        self,
        *,
        current_role: Role,
        name: str,
        category: str = "",
        total_quantity: int,
        description: str = "",
    ) -> Device:
        self._require_manager(current_role)
        name = require_non_empty(name, "Name")
        total = require_non_negative(total_quantity, "Quantity")

        device_id = self._devices.create(
            name=name,
            category=(category or "").strip(),
            total_quantity=total,
            description=(description or "").strip(),
        )
        logger.info("Device %s created with %d units", device_id, total)
        return self.get_device(device_id=device_id)

    def update_device(
        self,
        *,
        current_role: Role,
        device_id: int,
        name: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Device:
        """Descriptive fields only; counters go through adjust_capacity."""
        self._require_manager(current_role)
        device = self.get_device(device_id=device_id)
        self._devices.update_info(
            device_id=device.device_id,
            name=(name or "").strip() or device.name,
            category=category.strip() if category else device.category,
            description=description.strip() if description else device.description,
        )
        return self.get_device(device_id=device.device_id)

    def adjust_capacity(self, *, current_role: Role, device_id: int, new_total: int) -> Device:
        self._require_manager(current_role)
        total = require_non_negative(new_total, "Quantity")
        device = self._devices.adjust_capacity(device_id=int(device_id), new_total=total)
        if not device:
            raise DeviceNotFoundError("Device not found")
        logger.info(
            "Device %s capacity set to %d (available %d)", device.device_id, device.total_quantity, device.available_quantity
        )
        return device

    def delete_device(self, *, current_role: Role, device_id: int) -> None:
        """Drop a device with no unit out on loan, together with its request history."""
        self._require_manager(current_role)
        device = self.get_device(device_id=device_id)
        if self.outstanding_units(device_id=device.device_id) > 0:
            raise InvalidStateError("Device still has units out on loan")

        if not self._devices.delete(device_id=device.device_id):
            # Lost a race: either deleted already or a unit was collected meanwhile.
            self.get_device(device_id=device.device_id)
            raise InvalidStateError("Device still has units out on loan")
        logger.info("Device %s deleted", device.device_id)

    def outstanding_units(self, *, device_id: int) -> int:
        return self._requests.count_outstanding(device_id=int(device_id))

    def is_consistent(self, *, device_id: int) -> bool:
        """available == total - outstanding requests."""
        device = self.get_device(device_id=device_id)
        return device.available_quantity == device.total_quantity - self.outstanding_units(device_id=device_id)
