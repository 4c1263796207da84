from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .common.responses import error_response
from .container import build_container
from .core.constants import DEFAULT_AUDIT_LOG_PATH
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateFactorError,
    NotFoundError,
    ValidationError,
)
from .database.bootstrap import apply_schema, list_tables
from .thresholds.controller import register as register_thresholds

logger = logging.getLogger(__name__)


def _load_settings(overrides: Optional[dict]) -> dict[str, Any]:
    settings_module = get_settings_module()
    module = importlib.import_module(settings_module)
    settings = {name: getattr(module, name) for name in dir(module) if name.isupper()}
    settings["SETTINGS_MODULE"] = settings_module
    settings.update(overrides or {})
    return settings


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return error_response(e.message, 400, e.errors)

    @app.errorhandler(AuthenticationError)
    def handle_authentication(e: AuthenticationError):
        return error_response(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def handle_authorization(e: AuthorizationError):
        return error_response(str(e), 403)

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return error_response(str(e), 404)

    @app.errorhandler(DuplicateFactorError)
    def handle_duplicate(e: DuplicateFactorError):
        return error_response(str(e), 409, [{"field": "factor", "message": "Factor must be unique"}])

    @app.errorhandler(DomainError)
    def handle_domain(e: DomainError):
        return error_response(str(e), 400)

    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        if e.code == 404:
            return error_response("Endpoint not found", 404)
        return error_response(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error: %s", e)
        return error_response("Internal server error", 500)


def create_app(settings_overrides: Optional[dict] = None) -> Flask:
    load_dotenv(override=False)
    settings = _load_settings(settings_overrides)

    logging.basicConfig(
        level=str(settings.get("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = settings["SECRET_KEY"]
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    storage_backend = str(settings.get("STORAGE_BACKEND", "mysql")).lower()
    db_config = settings.get("DB_CONFIG")

    logger.info("settings=%s storage=%s", settings["SETTINGS_MODULE"], storage_backend)

    if storage_backend == "mysql" and bool(settings.get("AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        storage_backend=storage_backend,
        audit_log_path=settings.get("AUDIT_LOG_PATH") or DEFAULT_AUDIT_LOG_PATH,
    )
    app.extensions["umeedai"] = container

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return {"success": True, "message": "UmeedAI API is healthy"}, 200

    register_thresholds(app, container)
    _register_error_handlers(app)

    return app
