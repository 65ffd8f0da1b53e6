"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

EXPORT_ROW_LIMIT = 10000
MAX_EXPORT_DAYS = 31

RECENT_LOGS_LIMIT = 10

DEFAULT_ORG_TIMEZONE = "Asia/Tokyo"

UNKNOWN_USER_NAME = "Unknown"
