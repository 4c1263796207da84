from __future__ import annotations

import atexit
import json
import logging
import threading
import weakref
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Callable, Optional, Protocol

from ..common.datetime_utils import now_utc
from ..core.enums import AuditAction
from .model import AuditEntry

logger = logging.getLogger(__name__)

# Logs with an open file, closed together at interpreter exit. Weak refs let
# discarded writers (e.g. one per test app) be collected.
_open_logs: "weakref.WeakSet[JsonlAuditLog]" = weakref.WeakSet()


class AuditLog(Protocol):
    def write(self, action: AuditAction, user: str, details: dict[str, Any]) -> None:
        """Record one mutation. Must never raise."""

        raise NotImplementedError


class JsonlAuditLog(AuditLog):
    """Append-only audit trail, one JSON object per line.

    The file (and its directories) is opened lazily on the first write and kept open
    until ``close()`` or interpreter exit. Write failures are logged and swallowed:
    the mutation being audited has already been persisted.
    """

    def __init__(self, path: str | Path, clock: Callable[[], datetime] = now_utc):
        self._path = Path(path)
        self._clock = clock
        self._lock = threading.Lock()
        self._stream: Optional[IO[str]] = None

    def _open(self) -> IO[str]:
        if self._stream is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = self._path.open("a", encoding="utf-8")
            _open_logs.add(self)
        return self._stream

    def write(self, action: AuditAction, user: str, details: dict[str, Any]) -> None:
        entry = AuditEntry(timestamp=self._clock(), action=AuditAction(action), user=user, details=details)
        try:
            line = json.dumps(entry.to_dict(), default=str, ensure_ascii=False)
            with self._lock:
                stream = self._open()
                stream.write(line + "\n")
                stream.flush()
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to write audit entry action=%s path=%s", entry.action.value, self._path)

    def close(self) -> None:
        with self._lock:
            if self._stream is not None:
                self._stream.close()
                self._stream = None
            _open_logs.discard(self)


@atexit.register
def close_open_audit_logs() -> None:
    for audit_log in list(_open_logs):
        audit_log.close()
