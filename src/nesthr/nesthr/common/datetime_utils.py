from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """``"2026-01-05"`` -> ``date(2026, 1, 5)``; anything else is a ValidationError."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def now_local() -> datetime:
    # Single clock for timestamps on events; tests patch this.
    return datetime.now()


def current_year() -> int:
    return now_local().year
