import os
from datetime import date


def get_settings_module() -> str:
    # APP_ENV selects the settings module, development by default.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def parse_weekend_days(value: str) -> tuple[int, ...]:
    """"5,6" -> (5, 6). Monday is 0."""
    return tuple(int(part) for part in value.split(",") if part.strip())


def parse_holidays(value: str) -> tuple[date, ...]:
    """"2026-01-26,2026-08-15" -> (date, date)."""
    return tuple(date.fromisoformat(part.strip()) for part in value.split(",") if part.strip())
