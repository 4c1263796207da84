from __future__ import annotations

from typing import Any, Optional, Sequence

from flask import jsonify


def success_response(data: Any = None, message: str = "OK", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def error_response(message: str, status: int = 400, errors: Optional[Sequence[dict]] = None):
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = list(errors)
    return jsonify(body), status
