from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.umeedai.umeedai.core.enums import AuditAction, Operator
from src.umeedai.umeedai.core.exceptions import DuplicateFactorError, ValidationError
from src.umeedai.umeedai.thresholds.memory_threshold_repository import InMemoryThresholdRepository
from src.umeedai.umeedai.thresholds.service import ThresholdService


class StepClock:
    """Advances one second per call so updated_at always moves."""

    def __init__(self):
        self._now = datetime(2026, 2, 1, 8, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


class RecordingAuditLog:
    def __init__(self):
        self.entries: list[dict] = []

    def write(self, action, user, details):
        self.entries.append({"action": action, "user": user, "details": details})


class SpyRepo:
    def __init__(self):
        self.calls: list[str] = []

    def find_by_factor(self, factor):
        self.calls.append("find_by_factor")
        return None

    def update_by_factor(self, factor, *, changes):
        self.calls.append("update_by_factor")
        return None


def _service():
    repo = InMemoryThresholdRepository(clock=StepClock())
    audit = RecordingAuditLog()
    return ThresholdService(repo, audit), repo, audit


def test_creates_are_listed_and_each_audited_once():
    svc, _, audit = _service()
    svc.create_threshold(factor="attendance_pct", operator=Operator.LT, value=75)
    svc.create_threshold(factor="failed_attempts", operator=Operator.GT, value=2, description="exam retries")
    svc.create_threshold(factor="gpa_drop", operator=Operator.EQ, value=1.5)

    factors = {t.factor for t in svc.get_all_thresholds()}
    assert factors == {"attendance_pct", "failed_attempts", "gpa_drop"}

    assert [e["action"] for e in audit.entries] == [AuditAction.CREATE_THRESHOLD] * 3
    assert audit.entries[1]["details"]["newValue"]["description"] == "exam retries"
    assert audit.entries[0]["user"] == "system"


def test_duplicate_factor_is_rejected_without_audit():
    svc, repo, audit = _service()
    svc.create_threshold(factor="attendance_pct", operator=Operator.LT, value=75)

    with pytest.raises(DuplicateFactorError):
        svc.create_threshold(factor="attendance_pct", operator=Operator.GT, value=10)

    assert len(repo.list_all()) == 1
    assert repo.find_by_factor("attendance_pct").operator == Operator.LT
    assert len(audit.entries) == 1


def test_update_missing_factor_returns_none_and_is_not_audited():
    svc, _, audit = _service()

    assert svc.update_threshold_by_factor("ghost_factor", changes={"value": 1}) is None
    assert audit.entries == []


def test_empty_update_never_reaches_repository():
    repo = SpyRepo()
    audit = RecordingAuditLog()
    svc = ThresholdService(repo, audit)

    with pytest.raises(ValidationError):
        svc.update_threshold_by_factor("attendance_pct", changes={})

    assert repo.calls == []
    assert audit.entries == []


def test_update_cannot_change_factor():
    svc, _, audit = _service()
    svc.create_threshold(factor="attendance_pct", operator=Operator.LT, value=75)

    with pytest.raises(ValidationError):
        svc.update_threshold_by_factor("attendance_pct", changes={"factor": "renamed"})

    assert svc.get_threshold_by_factor("attendance_pct") is not None
    assert len(audit.entries) == 1


def test_update_changes_only_supplied_fields_and_audits_old_and_new():
    svc, _, audit = _service()
    created = svc.create_threshold(
        factor="attendance_pct", operator=Operator.LT, value=75, description="Low attendance"
    )

    updated = svc.update_threshold_by_factor("attendance_pct", changes={"value": 50}, actor="admin")

    assert updated.factor == "attendance_pct"
    assert updated.value == 50
    assert updated.operator == created.operator
    assert updated.description == created.description
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at

    entry = audit.entries[-1]
    assert entry["action"] == AuditAction.UPDATE_THRESHOLD
    assert entry["user"] == "admin"
    assert entry["details"]["factor"] == "attendance_pct"
    old, new = entry["details"]["oldValue"], entry["details"]["newValue"]
    assert {k for k in old if old[k] != new[k]} == {"value", "updated_at"}


def test_reset_removes_everything_and_audits_count():
    svc, _, audit = _service()
    for factor in ("attendance_pct", "failed_attempts", "gpa_drop", "fee_overdue_days"):
        svc.create_threshold(factor=factor, operator=Operator.GT, value=1)

    result = svc.reset_all_thresholds()

    assert result == {"deleted_count": 4}
    assert list(svc.get_all_thresholds()) == []
    resets = [e for e in audit.entries if e["action"] == AuditAction.RESET_THRESHOLDS]
    assert len(resets) == 1
    assert resets[0]["details"] == {"deletedCount": 4}


def test_create_then_read_round_trip():
    svc, _, _ = _service()
    created = svc.create_threshold(factor="attendance_pct", operator=Operator.LT, value=75, description="x")

    fetched = svc.get_threshold_by_factor("attendance_pct")

    assert fetched == created
    assert svc.get_threshold_by_factor("missing") is None


def test_service_rejects_short_factor_before_persisting():
    svc, repo, audit = _service()

    with pytest.raises(ValidationError):
        svc.create_threshold(factor="ab", operator=Operator.LT, value=1)

    assert list(repo.list_all()) == []
    assert audit.entries == []
