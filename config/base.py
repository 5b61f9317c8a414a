import os

from config import parse_holidays, parse_weekend_days

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "nesthr"),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# "calendar": every day in the range counts; "working": weekends and holidays are skipped
LEAVE_DAY_COUNTING = os.getenv("LEAVE_DAY_COUNTING", "calendar")
WEEKEND_DAYS = parse_weekend_days(os.getenv("WEEKEND_DAYS", "5,6"))
HOLIDAYS = parse_holidays(os.getenv("HOLIDAYS", ""))

LEDGER_LOCK_TIMEOUT_SECONDS = float(os.getenv("LEDGER_LOCK_TIMEOUT_SECONDS", "5"))
