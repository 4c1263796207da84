from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used by the admin gate."""

    ADMIN = "admin"


class Operator(str, Enum):
    """Comparison applied between a factor's value and the threshold value."""

    LT = "LT"
    GT = "GT"
    EQ = "EQ"


class AuditAction(str, Enum):
    CREATE_THRESHOLD = "CREATE_THRESHOLD"
    UPDATE_THRESHOLD = "UPDATE_THRESHOLD"
    RESET_THRESHOLDS = "RESET_THRESHOLDS"
