from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso_timestamp
from ..core.enums import Operator


@dataclass(frozen=True)
class RiskThreshold:
    """A rule comparing a factor's value against a numeric bound.

    Note: ``factor`` is the natural key and never changes after creation.
    """

    threshold_id: int
    factor: str
    operator: Operator
    value: float
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.threshold_id,
            "factor": self.factor,
            "operator": self.operator.value,
            "value": self.value,
            "description": self.description,
            "created_at": iso_timestamp(self.created_at),
            "updated_at": iso_timestamp(self.updated_at),
        }
