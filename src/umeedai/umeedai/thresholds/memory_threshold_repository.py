from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import UPDATABLE_THRESHOLD_FIELDS
from ..core.enums import Operator
from ..core.exceptions import DuplicateFactorError
from .model import RiskThreshold
from .repository import ThresholdRepository


class InMemoryThresholdRepository(ThresholdRepository):
    """Process-local store keyed by factor.

    The lock makes check-and-insert atomic, the same guarantee the MySQL unique key gives.
    """

    def __init__(self, clock: Callable[[], datetime] = now_utc):
        self._clock = clock
        self._lock = threading.Lock()
        self._by_factor: dict[str, RiskThreshold] = {}
        self._next_id = 1

    def create(
        self,
        *,
        factor: str,
        operator: Operator,
        value: float,
        description: Optional[str] = None,
    ) -> RiskThreshold:
        with self._lock:
            if factor in self._by_factor:
                raise DuplicateFactorError(factor)

            now = self._clock()
            threshold = RiskThreshold(
                threshold_id=self._next_id,
                factor=factor,
                operator=Operator(operator),
                value=value,
                description=description,
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            self._by_factor[factor] = threshold
            return threshold

    def find_by_factor(self, factor: str) -> Optional[RiskThreshold]:
        return self._by_factor.get(factor)

    def update_by_factor(self, factor: str, *, changes: Mapping[str, Any]) -> Optional[RiskThreshold]:
        fields = {k: v for k, v in changes.items() if k in UPDATABLE_THRESHOLD_FIELDS}
        if "operator" in fields:
            fields["operator"] = Operator(fields["operator"])

        with self._lock:
            current = self._by_factor.get(factor)
            if current is None:
                return None

            updated = replace(current, updated_at=self._clock(), **fields)
            self._by_factor[factor] = updated
            return updated

    def list_all(self) -> Sequence[RiskThreshold]:
        return sorted(self._by_factor.values(), key=lambda t: t.factor)

    def delete_all(self) -> int:
        with self._lock:
            removed = len(self._by_factor)
            self._by_factor.clear()
            return removed
