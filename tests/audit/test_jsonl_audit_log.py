from __future__ import annotations

import atexit
import json
import logging
from datetime import datetime, timezone

from src.umeedai.umeedai.audit import writer
from src.umeedai.umeedai.audit.writer import JsonlAuditLog, close_open_audit_logs
from src.umeedai.umeedai.container import build_container
from src.umeedai.umeedai.core.enums import AuditAction, Operator
from src.umeedai.umeedai.thresholds.memory_threshold_repository import InMemoryThresholdRepository
from src.umeedai.umeedai.thresholds.service import ThresholdService

FIXED = datetime(2026, 2, 1, 8, 30, 15, 123000, tzinfo=timezone.utc)


def test_directories_are_created_lazily(tmp_path):
    path = tmp_path / "nested" / "logs" / "audit.log"
    log = JsonlAuditLog(path, clock=lambda: FIXED)

    assert not path.parent.exists()

    log.write(AuditAction.CREATE_THRESHOLD, "system", {"newValue": {"factor": "attendance_pct"}})
    log.close()

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "timestamp": "2026-02-01T08:30:15.123Z",
        "action": "CREATE_THRESHOLD",
        "user": "system",
        "details": {"newValue": {"factor": "attendance_pct"}},
    }


def test_entries_are_appended_one_per_line(tmp_path):
    path = tmp_path / "audit.log"
    path.write_text('{"existing": true}\n', encoding="utf-8")
    log = JsonlAuditLog(path)

    log.write(AuditAction.UPDATE_THRESHOLD, "admin", {"factor": "attendance_pct"})
    log.write(AuditAction.RESET_THRESHOLDS, "admin", {"deletedCount": 2})
    log.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert [json.loads(line).get("action") for line in lines] == [None, "UPDATE_THRESHOLD", "RESET_THRESHOLDS"]


def test_non_json_values_are_stringified(tmp_path):
    path = tmp_path / "audit.log"
    log = JsonlAuditLog(path)

    log.write(AuditAction.CREATE_THRESHOLD, "system", {"when": FIXED})
    log.close()

    assert json.loads(path.read_text(encoding="utf-8"))["details"]["when"] == str(FIXED)


def test_write_failure_is_logged_not_raised(tmp_path, caplog):
    # A directory where the file should be makes open() fail.
    path = tmp_path / "audit.log"
    path.mkdir()
    log = JsonlAuditLog(path)

    with caplog.at_level(logging.ERROR):
        log.write(AuditAction.CREATE_THRESHOLD, "system", {})

    assert "Failed to write audit entry" in caplog.text


def test_service_result_survives_audit_failure(tmp_path):
    path = tmp_path / "audit.log"
    path.mkdir()
    svc = ThresholdService(InMemoryThresholdRepository(), JsonlAuditLog(path))

    created = svc.create_threshold(factor="attendance_pct", operator=Operator.LT, value=75)

    assert created.factor == "attendance_pct"
    assert svc.get_threshold_by_factor("attendance_pct") is not None


def test_open_logs_are_tracked_until_closed(tmp_path):
    log = JsonlAuditLog(tmp_path / "audit.log")
    assert log not in writer._open_logs

    log.write(AuditAction.CREATE_THRESHOLD, "system", {})
    assert log in writer._open_logs

    log.close()
    assert log not in writer._open_logs


def test_exit_hook_closes_and_writer_can_reopen(tmp_path):
    path = tmp_path / "audit.log"
    log = JsonlAuditLog(path)
    log.write(AuditAction.CREATE_THRESHOLD, "system", {})

    close_open_audit_logs()
    assert log not in writer._open_logs

    log.write(AuditAction.RESET_THRESHOLDS, "system", {"deletedCount": 0})
    log.close()
    assert len(path.read_text(encoding="utf-8").splitlines()) == 2


def test_building_containers_registers_no_exit_hooks(tmp_path, monkeypatch):
    registered = []
    monkeypatch.setattr(atexit, "register", lambda fn, *a, **kw: registered.append(fn))

    for i in range(3):
        build_container(storage_backend="memory", audit_log_path=tmp_path / f"audit-{i}.log")

    assert registered == []
