"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

FACTOR_MIN_LENGTH = 3
DEFAULT_AUDIT_ACTOR = "system"
DEFAULT_AUDIT_LOG_PATH = "logs/audit.log"
MYSQL_DUPLICATE_ENTRY = 1062
UPDATABLE_THRESHOLD_FIELDS = ("operator", "value", "description")
