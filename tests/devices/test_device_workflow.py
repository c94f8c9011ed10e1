from __future__ import annotations

import threading

import pytest

from src.office_workflow.office_workflow.core.enums import DeviceRequestStatus, Role
from src.office_workflow.office_workflow.core.exceptions import (
    AuthorizationError,
    DeviceNotAvailableError,
    DeviceNotFoundError,
    InvalidStateError,
    NotOwnerError,
    ResourceUnavailableError,
    ValidationError,
)
from src.office_workflow.office_workflow.devices.inventory import DeviceInventory
from src.office_workflow.office_workflow.devices.service import DeviceRequestWorkflow
from tests.fakes import FakeDeviceRequestsRepo, FakeDevicesRepo, FakeDeviceStore

S = DeviceRequestStatus
ADMIN = Role.DEVICE_ADMIN
ALICE, BOB = 10, 11


@pytest.fixture()
def store():
    return FakeDeviceStore()


@pytest.fixture()
def inventory(store):
    return DeviceInventory(FakeDevicesRepo(store), FakeDeviceRequestsRepo(store))


@pytest.fixture()
def workflow(store, inventory):
    return DeviceRequestWorkflow(FakeDeviceRequestsRepo(store), inventory)


def _device(inventory, quantity=2):
    return inventory.create_device(current_role=ADMIN, name="Laptop", category="laptop", total_quantity=quantity)


def _collected(workflow, device, employee_id=ALICE):
    req = workflow.create_request(employee_id=employee_id, device_id=device.device_id)
    workflow.approve(request_id=req.request_id, current_role=ADMIN)
    return workflow.collect(request_id=req.request_id, employee_id=employee_id)


def test_full_lifecycle_moves_one_unit_out_and_back(workflow, inventory):
    device = _device(inventory, quantity=2)

    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)
    assert req.status == S.PENDING
    assert inventory.get_device(device_id=device.device_id).available_quantity == 2

    assert workflow.approve(request_id=req.request_id, current_role=ADMIN).status == S.APPROVED
    assert inventory.get_device(device_id=device.device_id).available_quantity == 2

    assert workflow.collect(request_id=req.request_id, employee_id=ALICE).status == S.COLLECTED
    assert inventory.get_device(device_id=device.device_id).available_quantity == 1

    assert workflow.initiate_return(request_id=req.request_id, employee_id=ALICE).status == S.RETURN_PENDING
    assert inventory.get_device(device_id=device.device_id).available_quantity == 1

    assert workflow.confirm_return(request_id=req.request_id, current_role=ADMIN).status == S.RETURNED
    assert inventory.get_device(device_id=device.device_id).available_quantity == 2
    assert inventory.is_consistent(device_id=device.device_id)


def test_create_request_requires_available_unit(workflow, inventory):
    device = _device(inventory, quantity=1)
    _collected(workflow, device)

    with pytest.raises(DeviceNotAvailableError):
        workflow.create_request(employee_id=BOB, device_id=device.device_id)


def test_create_request_for_unknown_device(workflow):
    with pytest.raises(DeviceNotFoundError):
        workflow.create_request(employee_id=ALICE, device_id=404)


def test_collect_fails_when_stock_ran_out_after_approval(workflow, inventory):
    device = _device(inventory, quantity=1)
    first = workflow.create_request(employee_id=ALICE, device_id=device.device_id)
    second = workflow.create_request(employee_id=BOB, device_id=device.device_id)
    workflow.approve(request_id=first.request_id, current_role=ADMIN)
    workflow.approve(request_id=second.request_id, current_role=ADMIN)

    workflow.collect(request_id=first.request_id, employee_id=ALICE)
    with pytest.raises(ResourceUnavailableError):
        workflow.collect(request_id=second.request_id, employee_id=BOB)

    assert workflow.get(request_id=second.request_id).status == S.APPROVED
    assert inventory.get_device(device_id=device.device_id).available_quantity == 0


def test_only_owner_collects_and_returns(workflow, inventory):
    device = _device(inventory)
    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)
    workflow.approve(request_id=req.request_id, current_role=ADMIN)

    with pytest.raises(NotOwnerError):
        workflow.collect(request_id=req.request_id, employee_id=BOB)

    workflow.collect(request_id=req.request_id, employee_id=ALICE)
    with pytest.raises(NotOwnerError):
        workflow.initiate_return(request_id=req.request_id, employee_id=BOB)


def test_admin_actions_require_device_admin(workflow, inventory):
    device = _device(inventory)
    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)

    with pytest.raises(AuthorizationError):
        workflow.approve(request_id=req.request_id, current_role=Role.SUPERVISOR)
    with pytest.raises(AuthorizationError):
        workflow.reject(request_id=req.request_id, current_role=Role.EMPLOYEE, reason="no")


def test_super_admin_can_run_device_admin_steps(workflow, inventory):
    device = inventory.create_device(current_role=Role.SUPER_ADMIN, name="Monitor", total_quantity=1)
    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)

    assert workflow.approve(request_id=req.request_id, current_role=Role.SUPER_ADMIN).status == S.APPROVED
    workflow.collect(request_id=req.request_id, employee_id=ALICE)
    workflow.initiate_return(request_id=req.request_id, employee_id=ALICE)

    out = workflow.confirm_return(request_id=req.request_id, current_role=Role.SUPER_ADMIN)
    assert out.status == S.RETURNED
    assert inventory.get_device(device_id=device.device_id).available_quantity == 1
    assert inventory.is_consistent(device_id=device.device_id)


def test_collect_requires_approval(workflow, inventory):
    device = _device(inventory)
    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)

    with pytest.raises(InvalidStateError) as exc:
        workflow.collect(request_id=req.request_id, employee_id=ALICE)
    assert exc.value.current_status == "pending"


def test_reject_needs_reason(workflow, inventory):
    device = _device(inventory)
    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)

    with pytest.raises(ValidationError):
        workflow.reject(request_id=req.request_id, current_role=ADMIN, reason="")

    out = workflow.reject(request_id=req.request_id, current_role=ADMIN, reason="out of budget")
    assert out.status == S.REJECTED
    assert out.reject_reason == "out of budget"


@pytest.mark.parametrize("final", ["rejected", "cancelled", "returned"])
def test_terminal_states_accept_no_operation(workflow, inventory, final):
    device = _device(inventory)
    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)
    if final == "rejected":
        workflow.reject(request_id=req.request_id, current_role=ADMIN, reason="no")
    elif final == "cancelled":
        workflow.cancel(request_id=req.request_id, actor_id=ALICE, current_role=Role.EMPLOYEE)
    else:
        workflow.approve(request_id=req.request_id, current_role=ADMIN)
        workflow.collect(request_id=req.request_id, employee_id=ALICE)
        workflow.initiate_return(request_id=req.request_id, employee_id=ALICE)
        workflow.confirm_return(request_id=req.request_id, current_role=ADMIN)

    attempts = [
        lambda: workflow.approve(request_id=req.request_id, current_role=ADMIN),
        lambda: workflow.collect(request_id=req.request_id, employee_id=ALICE),
        lambda: workflow.initiate_return(request_id=req.request_id, employee_id=ALICE),
        lambda: workflow.confirm_return(request_id=req.request_id, current_role=ADMIN),
        lambda: workflow.cancel(request_id=req.request_id, actor_id=ALICE, current_role=Role.EMPLOYEE),
    ]
    for attempt in attempts:
        with pytest.raises(InvalidStateError):
            attempt()

    assert workflow.get(request_id=req.request_id).status.value == final
    assert workflow.get(request_id=req.request_id).status.is_terminal
    assert inventory.is_consistent(device_id=device.device_id)


def test_cancel_only_while_pending(workflow, inventory):
    device = _device(inventory)
    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)
    workflow.approve(request_id=req.request_id, current_role=ADMIN)

    with pytest.raises(InvalidStateError):
        workflow.cancel(request_id=req.request_id, actor_id=ALICE, current_role=Role.EMPLOYEE)


def test_other_employee_cannot_cancel(workflow, inventory):
    device = _device(inventory)
    req = workflow.create_request(employee_id=ALICE, device_id=device.device_id)

    with pytest.raises(NotOwnerError):
        workflow.cancel(request_id=req.request_id, actor_id=BOB, current_role=Role.EMPLOYEE)


def test_listings_by_owner_and_status(workflow, inventory):
    device = _device(inventory, quantity=3)
    a = workflow.create_request(employee_id=ALICE, device_id=device.device_id)
    b = workflow.create_request(employee_id=BOB, device_id=device.device_id)
    c = _collected(workflow, device, employee_id=BOB)
    workflow.initiate_return(request_id=c.request_id, employee_id=BOB)

    assert [r.request_id for r in workflow.list_mine(employee_id=ALICE)] == [a.request_id]
    assert [r.request_id for r in workflow.list_pending()] == [a.request_id, b.request_id]
    assert [r.request_id for r in workflow.list_return_pending()] == [c.request_id]


def test_concurrent_collects_never_oversell(workflow, inventory):
    device = _device(inventory, quantity=2)
    employees = list(range(100, 106))
    requests = []
    for employee_id in employees:
        req = workflow.create_request(employee_id=employee_id, device_id=device.device_id)
        workflow.approve(request_id=req.request_id, current_role=ADMIN)
        requests.append(req)

    outcomes = []
    barrier = threading.Barrier(len(requests))

    def collect(req):
        barrier.wait()
        try:
            workflow.collect(request_id=req.request_id, employee_id=req.requester_id)
            outcomes.append("collected")
        except ResourceUnavailableError:
            outcomes.append("unavailable")

    threads = [threading.Thread(target=collect, args=(r,)) for r in requests]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("collected") == 2
    assert outcomes.count("unavailable") == 4
    assert inventory.get_device(device_id=device.device_id).available_quantity == 0
    assert inventory.is_consistent(device_id=device.device_id)
