from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Read access to the employee directory.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_active_by_org(self, org_id: str) -> Sequence[Employee]:
        raise NotImplementedError

    def list_reports(self, manager_id: str) -> Sequence[Employee]:
        raise NotImplementedError
