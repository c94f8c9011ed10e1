"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

from .enums import Role

# Requests from this role skip review, and it approves for unsupervised employees.
TOP_LEVEL_ROLE = Role.SUPER_ADMIN

DEFAULT_LIST_LIMIT = 200
ADMIN_LIST_LIMIT = 500

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

# Window used when listing free slots of a room; bookings outside it are still allowed.
AVAILABILITY_DAY_START = time(8, 0)
AVAILABILITY_DAY_END = time(20, 0)
