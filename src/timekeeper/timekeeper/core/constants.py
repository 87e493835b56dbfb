"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_LATE_GRACE_PERIOD_COUNT = 3

OVERTIME_THRESHOLD_MINUTES = 20
UNDERTIME_THRESHOLD_MINUTES = 5

LEAVE_REASON_MIN_LENGTH = 15
LEAVE_REASON_MAX_LENGTH = 200
OVERTIME_REASON_MAX_LENGTH = 500

DEFAULT_BUSINESS_TIMEZONE = "Asia/Manila"
ABSENCE_SWEEP_HOUR = 22
ABSENCE_SWEEP_MINUTE = 0

DEFAULT_PAGE_SIZE = 10
DEFAULT_HISTORY_LIMIT = 30
