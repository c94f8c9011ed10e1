"""Role -> permission table.

Built once at import time; the mapping and its values are immutable.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping

from .enums import Permission, Role

_EMPLOYEE_BASE: FrozenSet[Permission] = frozenset(
    {
        Permission.VIEW_PROFILE,
        Permission.VIEW_LEAVE,
        Permission.APPLY_LEAVE,
        Permission.CANCEL_LEAVE,
        Permission.VIEW_DEVICES,
        Permission.APPLY_DEVICE,
        Permission.COLLECT_DEVICE,
        Permission.RETURN_DEVICE,
        Permission.CANCEL_DEVICE_REQUEST,
        Permission.VIEW_MEETING_ROOMS,
        Permission.BOOK_MEETING_ROOM,
        Permission.CANCEL_BOOKING,
        Permission.COMPLETE_BOOKING,
    }
)

_EXTRA: dict[Role, FrozenSet[Permission]] = {
    Role.EMPLOYEE: frozenset(),
    Role.SUPER_ADMIN: frozenset(
        {
            Permission.MANAGE_ROLES,
            Permission.MANAGE_EMPLOYEES,
            Permission.MANAGE_MEETING_ROOMS,
            Permission.MANAGE_ACCOUNTS,
            Permission.APPROVE_LEAVE,
            Permission.MANAGE_DEVICES,
            Permission.APPROVE_DEVICE_REQUEST,
            Permission.CONFIRM_DEVICE_RETURN,
        }
    ),
    Role.HR: frozenset(
        {
            Permission.MANAGE_EMPLOYEES,
            Permission.MANAGE_ACCOUNTS,
            Permission.MANAGE_CONTRACTS,
            Permission.MANAGE_ROLES,
        }
    ),
    Role.FINANCE: frozenset({Permission.MANAGE_SALARIES}),
    Role.DEVICE_ADMIN: frozenset(
        {
            Permission.MANAGE_DEVICES,
            Permission.APPROVE_DEVICE_REQUEST,
            Permission.CONFIRM_DEVICE_RETURN,
        }
    ),
    Role.SUPERVISOR: frozenset({Permission.APPROVE_LEAVE}),
}


def _build_table() -> Mapping[Role, FrozenSet[Permission]]:
    return MappingProxyType({role: _EMPLOYEE_BASE | _EXTRA[role] for role in Role})


ROLE_PERMISSIONS: Mapping[Role, FrozenSet[Permission]] = _build_table()


def permissions_for(role: Role) -> FrozenSet[Permission]:
    return ROLE_PERMISSIONS.get(Role(role), frozenset())


def has_permission(role: Role, permission: Permission) -> bool:
    return permission in permissions_for(role)
