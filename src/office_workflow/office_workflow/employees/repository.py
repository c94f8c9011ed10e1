from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Read-only access to the supervision relation (employee -> supervisor id)."""

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_supervisor_id(self, employee_id: int) -> Optional[int]:
        raise NotImplementedError

    def list_subordinate_ids(self, supervisor_id: int) -> Sequence[int]:
        raise NotImplementedError

    def list_unsupervised_ids(self) -> Sequence[int]:
        raise NotImplementedError
