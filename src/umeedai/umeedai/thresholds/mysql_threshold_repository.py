from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

import mysql.connector

from ..common.datetime_utils import now_utc
from ..core.constants import MYSQL_DUPLICATE_ENTRY, UPDATABLE_THRESHOLD_FIELDS
from ..core.enums import Operator
from ..core.exceptions import DuplicateFactorError, PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_mysql_datetime, to_mysql_datetime
from .model import RiskThreshold
from .repository import ThresholdRepository

_COLUMNS = "threshold_id, factor, operator, value, description, created_at, updated_at"


def _row_to_threshold(r: dict) -> RiskThreshold:
    return RiskThreshold(
        threshold_id=int(r["threshold_id"]),
        factor=r["factor"],
        operator=Operator(r["operator"]),
        value=float(r["value"]),
        description=r.get("description"),
        created_at=from_mysql_datetime(r["created_at"]),
        updated_at=from_mysql_datetime(r["updated_at"]),
    )


class MySQLThresholdRepository(ThresholdRepository):
    def __init__(self, conn_factory: DatabaseConnection, clock: Callable[[], datetime] = now_utc):
        self._conn_factory = conn_factory
        self._clock = clock

    def create(
        self,
        *,
        factor: str,
        operator: Operator,
        value: float,
        description: Optional[str] = None,
    ) -> RiskThreshold:
        now = self._clock()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO risk_thresholds(factor, operator, value, description, created_at, updated_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (factor, Operator(operator).value, value, description, to_mysql_datetime(now), to_mysql_datetime(now)),
                )
                # DATETIME(3) rounds timestamps; return what the table actually holds.
                cur.execute(f"SELECT {_COLUMNS} FROM risk_thresholds WHERE threshold_id=%s", (int(cur.lastrowid),))
                r = fetchone(cur)
        except mysql.connector.IntegrityError as exc:
            # The unique key on factor decides races between concurrent creates.
            if exc.errno == MYSQL_DUPLICATE_ENTRY:
                raise DuplicateFactorError(factor) from exc
            raise

        if r is None:
            raise PersistenceError(f"Threshold '{factor}' missing right after insert")
        return _row_to_threshold(r)

    def find_by_factor(self, factor: str) -> Optional[RiskThreshold]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM risk_thresholds WHERE factor=%s", (factor,))
            r = fetchone(cur)
            return _row_to_threshold(r) if r else None

    def update_by_factor(self, factor: str, *, changes: Mapping[str, Any]) -> Optional[RiskThreshold]:
        assignments: list[str] = []
        params: list[object] = []
        for field in UPDATABLE_THRESHOLD_FIELDS:
            if field not in changes:
                continue
            value = changes[field]
            if field == "operator":
                value = Operator(value).value
            assignments.append(f"{field}=%s")
            params.append(value)

        assignments.append("updated_at=%s")
        params.append(to_mysql_datetime(self._clock()))
        params.append(factor)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE risk_thresholds SET {', '.join(assignments)} WHERE factor=%s", tuple(params))
            cur.execute(f"SELECT {_COLUMNS} FROM risk_thresholds WHERE factor=%s", (factor,))
            r = fetchone(cur)
            return _row_to_threshold(r) if r else None

    def list_all(self) -> Sequence[RiskThreshold]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM risk_thresholds ORDER BY factor ASC")
            return [_row_to_threshold(r) for r in fetchall(cur)]

    def delete_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM risk_thresholds")
            return int(cur.rowcount)
