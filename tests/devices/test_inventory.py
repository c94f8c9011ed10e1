from __future__ import annotations

import pytest

from src.office_workflow.office_workflow.core.enums import Role
from src.office_workflow.office_workflow.core.exceptions import (
    AuthorizationError,
    DeviceNotFoundError,
    InvalidStateError,
    ResourceUnavailableError,
    ValidationError,
)
from src.office_workflow.office_workflow.devices.inventory import DeviceInventory
from src.office_workflow.office_workflow.devices.service import DeviceRequestWorkflow
from tests.fakes import FakeDeviceRequestsRepo, FakeDevicesRepo, FakeDeviceStore

ADMIN = Role.DEVICE_ADMIN


@pytest.fixture()
def store():
    return FakeDeviceStore()


@pytest.fixture()
def inventory(store):
    return DeviceInventory(FakeDevicesRepo(store), FakeDeviceRequestsRepo(store))


def test_new_device_starts_fully_available(inventory):
    device = inventory.create_device(current_role=ADMIN, name=" Projector ", total_quantity=3)

    assert device.name == "Projector"
    assert device.total_quantity == 3
    assert device.available_quantity == 3
    assert device.outstanding == 0


def test_only_device_managers_manage_devices(inventory):
    for role in (Role.HR, Role.SUPERVISOR, Role.EMPLOYEE):
        with pytest.raises(AuthorizationError):
            inventory.create_device(current_role=role, name="Dock", total_quantity=1)

    device = inventory.create_device(current_role=ADMIN, name="Dock", total_quantity=1)
    assert inventory.create_device(current_role=Role.SUPER_ADMIN, name="Hub", total_quantity=1).available_quantity == 1
    with pytest.raises(AuthorizationError):
        inventory.adjust_capacity(current_role=Role.HR, device_id=device.device_id, new_total=5)


def test_create_device_validates_input(inventory):
    with pytest.raises(ValidationError):
        inventory.create_device(current_role=ADMIN, name="  ", total_quantity=1)
    with pytest.raises(ValidationError):
        inventory.create_device(current_role=ADMIN, name="Dock", total_quantity=-1)


def test_update_device_keeps_counters(inventory):
    device = inventory.create_device(current_role=ADMIN, name="Dock", category="accessory", total_quantity=4)

    out = inventory.update_device(current_role=ADMIN, device_id=device.device_id, description="USB-C")

    assert out.name == "Dock"
    assert out.category == "accessory"
    assert out.description == "USB-C"
    assert (out.total_quantity, out.available_quantity) == (4, 4)


def test_adjust_capacity_shifts_available_by_delta(store, inventory):
    workflow = DeviceRequestWorkflow(FakeDeviceRequestsRepo(store), inventory)
    device = inventory.create_device(current_role=ADMIN, name="Laptop", total_quantity=3)
    req = workflow.create_request(employee_id=7, device_id=device.device_id)
    workflow.approve(request_id=req.request_id, current_role=ADMIN)
    workflow.collect(request_id=req.request_id, employee_id=7)

    grown = inventory.adjust_capacity(current_role=ADMIN, device_id=device.device_id, new_total=5)
    assert (grown.total_quantity, grown.available_quantity) == (5, 4)
    assert inventory.is_consistent(device_id=device.device_id)

    shrunk = inventory.adjust_capacity(current_role=ADMIN, device_id=device.device_id, new_total=2)
    assert (shrunk.total_quantity, shrunk.available_quantity) == (2, 1)
    assert inventory.is_consistent(device_id=device.device_id)


def test_adjust_capacity_clamps_available_at_zero(store, inventory):
    workflow = DeviceRequestWorkflow(FakeDeviceRequestsRepo(store), inventory)
    device = inventory.create_device(current_role=ADMIN, name="Laptop", total_quantity=2)
    for employee_id in (7, 8):
        req = workflow.create_request(employee_id=employee_id, device_id=device.device_id)
        workflow.approve(request_id=req.request_id, current_role=ADMIN)
        workflow.collect(request_id=req.request_id, employee_id=employee_id)

    out = inventory.adjust_capacity(current_role=ADMIN, device_id=device.device_id, new_total=0)

    assert (out.total_quantity, out.available_quantity) == (0, 0)
    assert inventory.outstanding_units(device_id=device.device_id) == 2


def test_adjust_capacity_unknown_device(inventory):
    with pytest.raises(DeviceNotFoundError):
        inventory.adjust_capacity(current_role=ADMIN, device_id=99, new_total=1)


def test_available_listing_hides_exhausted_devices(inventory):
    inventory.create_device(current_role=ADMIN, name="Projector", total_quantity=0)
    dock = inventory.create_device(current_role=ADMIN, name="Dock", total_quantity=1)

    assert [d.device_id for d in inventory.list_available()] == [dock.device_id]
    assert len(inventory.list_devices()) == 2


def test_ensure_available_reserves_nothing(inventory):
    device = inventory.create_device(current_role=ADMIN, name="Dock", total_quantity=1)

    inventory.ensure_available(device_id=device.device_id)
    assert inventory.get_device(device_id=device.device_id).available_quantity == 1

    empty = inventory.create_device(current_role=ADMIN, name="Cable", total_quantity=0)
    with pytest.raises(ResourceUnavailableError):
        inventory.ensure_available(device_id=empty.device_id)


def test_delete_device_refused_while_units_are_out(store, inventory):
    workflow = DeviceRequestWorkflow(FakeDeviceRequestsRepo(store), inventory)
    device = inventory.create_device(current_role=ADMIN, name="Laptop", total_quantity=2)
    req = workflow.create_request(employee_id=7, device_id=device.device_id)
    workflow.approve(request_id=req.request_id, current_role=ADMIN)
    workflow.collect(request_id=req.request_id, employee_id=7)

    with pytest.raises(InvalidStateError):
        inventory.delete_device(current_role=ADMIN, device_id=device.device_id)

    workflow.initiate_return(request_id=req.request_id, employee_id=7)
    with pytest.raises(InvalidStateError):
        inventory.delete_device(current_role=ADMIN, device_id=device.device_id)
    assert inventory.is_consistent(device_id=device.device_id)

    workflow.confirm_return(request_id=req.request_id, current_role=ADMIN)
    inventory.delete_device(current_role=ADMIN, device_id=device.device_id)

    with pytest.raises(DeviceNotFoundError):
        inventory.get_device(device_id=device.device_id)
    assert workflow.list_mine(employee_id=7) == []


def test_delete_device_permissions_and_unknown_id(inventory):
    device = inventory.create_device(current_role=ADMIN, name="Dock", total_quantity=1)

    with pytest.raises(AuthorizationError):
        inventory.delete_device(current_role=Role.EMPLOYEE, device_id=device.device_id)
    with pytest.raises(DeviceNotFoundError):
        inventory.delete_device(current_role=ADMIN, device_id=99)

    inventory.delete_device(current_role=Role.SUPER_ADMIN, device_id=device.device_id)
    assert inventory.list_devices() == []
