from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: the part of an employee record the workflows need."""

    employee_id: int
    full_name: str
    role: Role
    supervisor_id: Optional[int] = None
    is_active: bool = True
