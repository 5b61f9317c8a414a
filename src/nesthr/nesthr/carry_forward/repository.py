from __future__ import annotations

from typing import Protocol

from .model import EmployeeRollover


class CarryForwardRepository(Protocol):
    def processed_employee_ids(self, *, org_id: str, from_year: int) -> set[str]:
        raise NotImplementedError

    def is_processed(self, *, employee_id: str, from_year: int) -> bool:
        raise NotImplementedError

    def apply(self, rollover: EmployeeRollover) -> None:
        """Write the next-year rows and the log entry in one transaction.

        Must fail (and write nothing) if the employee is already logged for
        ``from_year``.
        """

        raise NotImplementedError

    def add_late_release(
        self,
        *,
        employee_id: str,
        type_id: str,
        from_year: int,
        carried_days: int,
        forfeited_days: int,
    ) -> None:
        """Days given back to ``from_year`` after its rollover.

        Tops up the ``from_year + 1`` row by ``carried_days`` and adds both
        amounts to the employee's log entry, in one transaction.
        """

        raise NotImplementedError
