from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Gender


@dataclass(frozen=True)
class Employee:
    """Directory entry as the leave engine sees it.

    Plain data object, no DB access.
    """

    employee_id: str
    org_id: str
    full_name: str
    gender: Optional[Gender] = None
    manager_id: Optional[str] = None
    is_active: bool = True
