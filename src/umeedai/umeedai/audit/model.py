from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..common.datetime_utils import iso_timestamp
from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    """One immutable line of the audit trail."""

    timestamp: datetime
    action: AuditAction
    user: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "timestamp": iso_timestamp(self.timestamp),
            "action": self.action.value,
            "user": self.user,
            "details": self.details,
        }
