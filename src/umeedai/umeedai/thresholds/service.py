from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..audit.writer import AuditLog
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_AUDIT_ACTOR, FACTOR_MIN_LENGTH, UPDATABLE_THRESHOLD_FIELDS
from ..core.enums import AuditAction, Operator
from ..core.exceptions import ValidationError
from .model import RiskThreshold
from .repository import ThresholdRepository

logger = logging.getLogger(__name__)


class ThresholdService:
    """Use case: manage configurable risk thresholds.

    Every successful mutation is followed by exactly one audit entry; failed
    mutations are never audited. Repository errors propagate unchanged.
    """

    def __init__(self, thresholds: ThresholdRepository, audit_log: AuditLog):
        self._thresholds = thresholds
        self._audit_log = audit_log

    def create_threshold(
        self,
        *,
        factor: str,
        operator: Operator,
        value: float,
        description: Optional[str] = None,
        actor: str = DEFAULT_AUDIT_ACTOR,
    ) -> RiskThreshold:
        factor = require_non_empty(factor, "factor")
        require_min_length(factor, "factor", FACTOR_MIN_LENGTH)

        created = self._thresholds.create(
            factor=factor,
            operator=Operator(operator),
            value=value,
            description=description,
        )
        logger.info("Created threshold factor=%s by %s", created.factor, actor)

        self._audit_log.write(AuditAction.CREATE_THRESHOLD, actor, {"newValue": created.to_dict()})
        return created

    def update_threshold_by_factor(
        self,
        factor: str,
        *,
        changes: Mapping[str, Any],
        actor: str = DEFAULT_AUDIT_ACTOR,
    ) -> Optional[RiskThreshold]:
        """Returns None when no threshold has this factor (nothing is audited)."""

        factor = require_non_empty(factor, "factor")
        if "factor" in changes:
            raise ValidationError("factor cannot be changed", errors=[{"field": "factor", "message": "Immutable"}])
        unknown = sorted(set(changes) - set(UPDATABLE_THRESHOLD_FIELDS))
        if unknown:
            raise ValidationError(
                "Unknown threshold fields",
                errors=[{"field": name, "message": "Unknown field"} for name in unknown],
            )
        if not changes:
            raise ValidationError(
                "Nothing to update",
                errors=[{"field": "", "message": "At least one field must be provided"}],
            )

        old = self._thresholds.find_by_factor(factor)
        if old is None:
            return None

        updated = self._thresholds.update_by_factor(factor, changes=changes)
        if updated is None:
            # Removed by a concurrent reset between the read and the write.
            return None
        logger.info("Updated threshold factor=%s fields=%s by %s", factor, ",".join(sorted(changes)), actor)

        self._audit_log.write(
            AuditAction.UPDATE_THRESHOLD,
            actor,
            {"factor": factor, "oldValue": old.to_dict(), "newValue": updated.to_dict()},
        )
        return updated

    def get_threshold_by_factor(self, factor: str) -> Optional[RiskThreshold]:
        return self._thresholds.find_by_factor(factor)

    def get_all_thresholds(self) -> Sequence[RiskThreshold]:
        return self._thresholds.list_all()

    def reset_all_thresholds(self, *, actor: str = DEFAULT_AUDIT_ACTOR) -> dict:
        deleted = self._thresholds.delete_all()
        logger.info("Reset thresholds deleted=%d by %s", deleted, actor)

        self._audit_log.write(AuditAction.RESET_THRESHOLDS, actor, {"deletedCount": deleted})
        return {"deleted_count": deleted}
