"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOTAL_WORKING_DAYS = 22
DEFAULT_PAGE_SIZE = 100
MAX_ATTENDANCE_PAGE_SIZE = 5000

DEFAULT_API_PORT = 5001
REQUEST_TIMEOUT_SECONDS = 10.0

# Client-side read cache lifetimes (seconds)
EMPLOYEES_CACHE_TTL = 5 * 60
DEDUCTIONS_CACHE_TTL = 2 * 60
STATS_CACHE_TTL = 60

UNKNOWN_SITE = "Unknown Site"
UNASSIGNED = "Not assigned"
GENERAL_DEPARTMENT = "General"

SLIP_NUMBER_PREFIX = "SS"
