"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_KEY_SEPARATOR = "|"
TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"

# Placeholder division id used by the roster screens for "every division".
ALL_DIVISIONS_PLACEHOLDER = "default-division"

STUDENT_ID_PREFIX = "S"
SLOT_ID_PREFIX = "TS"
SUBJECT_ID_PREFIX = "SUB"
PRACTICAL_ID_PREFIX = "PRAC"
