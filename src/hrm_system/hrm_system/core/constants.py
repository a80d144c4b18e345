"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_HALF_DAY_THRESHOLD_HOURS = 4.0
DEFAULT_OVERTIME_THRESHOLD_HOURS = 8.0
DEFAULT_STANDARD_DAILY_HOURS = 8.0
DEFAULT_OVERTIME_MULTIPLIER = "1.5"

# Monday=0 ... Sunday=6 (date.weekday()).
DEFAULT_WORKING_DAYS = (0, 1, 2, 3, 4)

MONEY_PLACES = "0.01"
