"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000
COORDINATE_PRECISION = 6

DEFAULT_HISTORY_PAGE_SIZE = 10
DEFAULT_LOGS_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
MAX_NOTE_LENGTH = 1000
MAX_EXTERNAL_ID_LENGTH = 191

WEEK_WINDOW_DAYS = 7
AVERAGE_WINDOW_DAYS = 30

PRIMARY_LOCATION_KEY = "primary"
