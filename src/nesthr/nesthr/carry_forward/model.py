from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class YearOpening:
    """Next-year row for one leave type.

    ``total_days`` is used when the row does not exist yet; an existing row
    is topped up by ``carried_days`` instead.
    """

    type_id: str
    total_days: int
    carried_days: int = 0


@dataclass(frozen=True)
class EmployeeRollover:
    employee_id: str
    org_id: str
    from_year: int
    openings: tuple[YearOpening, ...]
    carried_days: int
    forfeited_days: int

    @property
    def to_year(self) -> int:
        return self.from_year + 1


@dataclass(frozen=True)
class CarryForwardFailure:
    employee_id: str
    error_code: str
    message: str

    def to_dict(self) -> dict:
        return {"employee_id": self.employee_id, "error": self.error_code, "message": self.message}


@dataclass
class CarryForwardReport:
    org_id: str
    from_year: int
    processed: int = 0
    skipped: int = 0
    failed: list[CarryForwardFailure] = field(default_factory=list)

    @property
    def to_year(self) -> int:
        return self.from_year + 1

    @property
    def failed_employee_ids(self) -> list[str]:
        return [f.employee_id for f in self.failed]

    def to_dict(self) -> dict:
        return {
            "org_id": self.org_id,
            "from_year": self.from_year,
            "to_year": self.to_year,
            "processed": self.processed,
            "skipped": self.skipped,
            "failed": self.failed_employee_ids,
            "failures": [f.to_dict() for f in self.failed],
        }
