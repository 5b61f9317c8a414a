from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveEntitlement


class EntitlementRepository(Protocol):
    """Storage for per-employee, per-year, per-type balances.

    The ``try_*`` methods are compare-and-swap updates: they return False
    instead of writing when the guard does not hold at write time.
    """

    def get(self, *, employee_id: str, type_id: str, year: int) -> Optional[LeaveEntitlement]:
        raise NotImplementedError

    def list_for_year(self, *, employee_id: str, year: int) -> Sequence[LeaveEntitlement]:
        raise NotImplementedError

    def insert_if_missing(self, entitlement: LeaveEntitlement) -> bool:
        """Create the row unless one already exists for its key. True if created."""

        raise NotImplementedError

    def try_decrement(self, *, employee_id: str, type_id: str, year: int, days: int) -> bool:
        """remaining -= days, only if remaining >= days."""

        raise NotImplementedError

    def try_increment(self, *, employee_id: str, type_id: str, year: int, days: int) -> bool:
        """remaining += days, only if remaining + days <= total."""

        raise NotImplementedError
