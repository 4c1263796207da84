from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .audit.writer import JsonlAuditLog
from .core.constants import DEFAULT_AUDIT_LOG_PATH
from .database.connection import DBConfig, DatabaseConnection
from .thresholds.memory_threshold_repository import InMemoryThresholdRepository
from .thresholds.mysql_threshold_repository import MySQLThresholdRepository
from .thresholds.repository import ThresholdRepository
from .thresholds.service import ThresholdService

STORAGE_BACKENDS = ("mysql", "memory")


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    thresholds_repo: ThresholdRepository
    audit_log: JsonlAuditLog

    threshold_service: ThresholdService


def build_container(
    *,
    db_config: Optional[dict] = None,
    storage_backend: str = "mysql",
    audit_log_path: str | Path = DEFAULT_AUDIT_LOG_PATH,
) -> Container:
    if storage_backend not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown STORAGE_BACKEND {storage_backend!r}, expected one of {STORAGE_BACKENDS}")

    conn: Optional[DatabaseConnection] = None
    thresholds_repo: ThresholdRepository
    if storage_backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql storage backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        thresholds_repo = MySQLThresholdRepository(conn)
    else:
        thresholds_repo = InMemoryThresholdRepository()

    audit_log = JsonlAuditLog(audit_log_path)

    threshold_service = ThresholdService(thresholds_repo, audit_log)

    return Container(
        conn=conn,
        thresholds_repo=thresholds_repo,
        audit_log=audit_log,
        threshold_service=threshold_service,
    )
