"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# mysql-connector errno for ER_DUP_ENTRY
MYSQL_DUPLICATE_ENTRY = 1062

PERCENTAGE_DIGITS = 2
DEFAULT_ALLOW_ATTENDANCE_UPDATE = False
CSV_ENCODING = "utf-8-sig"

# attendance_entries.remark is VARCHAR(255)
REMARK_MAX_LENGTH = 255
