from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Operator
from .model import RiskThreshold


class ThresholdRepository(Protocol):
    """Persistence contract for risk thresholds.

    Pure storage: no business rules and no audit logging. The service layer depends
    on this interface, not on a concrete database.
    """

    def create(
        self,
        *,
        factor: str,
        operator: Operator,
        value: float,
        description: Optional[str] = None,
    ) -> RiskThreshold:
        """Insert a new threshold.

        Raises DuplicateFactorError when ``factor`` already exists.
        """

        raise NotImplementedError

    def find_by_factor(self, factor: str) -> Optional[RiskThreshold]:
        raise NotImplementedError

    def update_by_factor(self, factor: str, *, changes: Mapping[str, Any]) -> Optional[RiskThreshold]:
        """Apply ``changes`` (operator/value/description) and bump ``updated_at``.

        Returns None when no threshold matches; never creates one.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[RiskThreshold]:
        raise NotImplementedError

    def delete_all(self) -> int:
        """Remove every threshold. Returns the number removed."""

        raise NotImplementedError
