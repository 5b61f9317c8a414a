"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0
DEFAULT_REQUEST_LIST_LIMIT = 200
DEFAULT_PENDING_LIST_LIMIT = 500

# Monday=0 ... Sunday=6
DEFAULT_WEEKEND_DAYS = (5, 6)

DAY_COUNTING_CALENDAR = "calendar"
DAY_COUNTING_WORKING = "working"

SPECIAL_LEAVE_REASONS = (
    "Birthday",
    "Parent's Birthday",
    "Spouse Birthday",
    "Child's Birthday",
    "Other",
)
