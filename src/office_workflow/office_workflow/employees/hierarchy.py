from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import TOP_LEVEL_ROLE
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from .model import Employee
from .repository import EmployeeRepository


class EmployeeHierarchy:
    """Direct supervisor / direct subordinate lookups.

    Supervision is a directed relation employee -> supervisor id (possibly
    absent). `can_decide_for` is the single place where the missing
    supervisor falls back to the top-level role.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def supervisor_of(self, employee_id: int) -> Optional[int]:
        return self._employees.get_supervisor_id(int(employee_id))

    def subordinates_of(self, employee_id: int) -> Sequence[int]:
        return list(self._employees.list_subordinate_ids(int(employee_id)))

    def is_direct_supervisor(self, actor_id: int, employee_id: int) -> bool:
        supervisor_id = self.supervisor_of(employee_id)
        return supervisor_id is not None and supervisor_id == int(actor_id)

    def can_decide_for(self, *, actor_id: int, actor_role: Role, subject_id: int) -> bool:
        supervisor_id = self.supervisor_of(subject_id)
        if supervisor_id is None:
            return Role(actor_role) == TOP_LEVEL_ROLE
        return supervisor_id == int(actor_id)

    def decidable_subjects(self, *, actor_id: int, actor_role: Role) -> Sequence[int]:
        """Employees whose requests `actor_id` may decide, per `can_decide_for`."""
        subjects = self.subordinates_of(actor_id)
        if Role(actor_role) == TOP_LEVEL_ROLE:
            extra = [e for e in self._employees.list_unsupervised_ids() if e != int(actor_id)]
            subjects = sorted(set(subjects) | set(extra))
        return subjects
