from __future__ import annotations

from functools import wraps

from flask import Flask, g, session

from ..common.responses import success_response
from ..common.validation import validate, validate_multiple
from ..core.constants import DEFAULT_AUDIT_ACTOR
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from ..container import Container
from .schemas import CreateThresholdBody, ThresholdParams, UpdateThresholdBody

URL_PREFIX = "/api/config/thresholds"


def register(app: Flask, container: Container) -> None:
    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                raise AuthenticationError("Authentication required")
            if session.get("role") != Role.ADMIN.value:
                raise AuthorizationError("Admin access required")
            return view(*args, **kwargs)

        return wrapper

    def _actor() -> str:
        return session.get("username") or DEFAULT_AUDIT_ACTOR

    @app.route(URL_PREFIX, methods=["POST"], endpoint="create_threshold")
    @admin_required
    @validate(CreateThresholdBody, "body")
    def create_threshold():
        body: CreateThresholdBody = g.validated["body"]
        threshold = container.threshold_service.create_threshold(
            factor=body.factor,
            operator=body.operator,
            value=body.value,
            description=body.description,
            actor=_actor(),
        )
        return success_response(threshold.to_dict(), "Threshold created successfully.", 201)

    @app.route(f"{URL_PREFIX}/<factor>", methods=["PUT"], endpoint="update_threshold")
    @admin_required
    @validate_multiple({"params": ThresholdParams, "body": UpdateThresholdBody})
    def update_threshold(factor: str):
        body: UpdateThresholdBody = g.validated["body"]
        updated = container.threshold_service.update_threshold_by_factor(
            factor,
            changes=body.changes(),
            actor=_actor(),
        )
        if updated is None:
            raise NotFoundError("Threshold not found")
        return success_response(updated.to_dict(), "Threshold updated successfully.")

    @app.route(f"{URL_PREFIX}/<factor>", methods=["GET"], endpoint="get_threshold")
    @admin_required
    @validate(ThresholdParams, "params")
    def get_threshold(factor: str):
        threshold = container.threshold_service.get_threshold_by_factor(factor)
        if threshold is None:
            raise NotFoundError("Threshold not found")
        return success_response(threshold.to_dict(), "Threshold retrieved successfully.")

    @app.route(URL_PREFIX, methods=["GET"], endpoint="list_thresholds")
    @admin_required
    def list_thresholds():
        thresholds = container.threshold_service.get_all_thresholds()
        return success_response([t.to_dict() for t in thresholds], "Thresholds retrieved successfully.")

    @app.route(URL_PREFIX, methods=["DELETE"], endpoint="reset_thresholds")
    @admin_required
    def reset_thresholds():
        result = container.threshold_service.reset_all_thresholds(actor=_actor())
        return success_response(result, "All thresholds reset successfully.")
