import os

from config.base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

LEDGER_LOCK_TIMEOUT_SECONDS = 0.5

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
