"""Request validation decorators for Flask views.

A view is wrapped with ``validate`` (one request slice) or ``validate_multiple``
(several slices, errors merged). Validated models end up in
``flask.g.validated[target]``; validated path parameters also replace the
view's keyword arguments. Failures raise ``ValidationError`` which the app
maps to a 400 response.
"""
from __future__ import annotations

from functools import wraps
from typing import Any, Mapping, Optional, Type

from flask import g, request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError

VALIDATION_TARGETS = ("body", "query", "params")


def field_errors(exc: PydanticValidationError, prefix: Optional[str] = None) -> list[dict]:
    errors: list[dict] = []
    for issue in exc.errors():
        field = ".".join(str(part) for part in issue["loc"])
        if prefix:
            field = f"{prefix}.{field}" if field else prefix
        errors.append({"field": field, "message": issue["msg"]})
    return errors


def _read_target(target: str, view_kwargs: dict) -> Any:
    if target == "body":
        return request.get_json(silent=True)
    if target == "query":
        return request.args.to_dict()
    if target == "params":
        return dict(view_kwargs)
    raise ValueError(f"Unknown validation target: {target!r}")


def _store(target: str, validated: BaseModel, view_kwargs: dict) -> None:
    g.setdefault("validated", {})[target] = validated
    if target == "params":
        view_kwargs.update(validated.model_dump())


def validate(schema: Type[BaseModel], target: str = "body"):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                validated = schema.model_validate(_read_target(target, kwargs))
            except PydanticValidationError as exc:
                raise ValidationError("Validation failed", errors=field_errors(exc)) from exc

            _store(target, validated, kwargs)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def validate_multiple(schemas: Mapping[str, Type[BaseModel]]):
    """Validate every listed target, even after an earlier one failed."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            all_errors: list[dict] = []
            for target, schema in schemas.items():
                if schema is None:
                    continue
                try:
                    validated = schema.model_validate(_read_target(target, kwargs))
                except PydanticValidationError as exc:
                    all_errors.extend(field_errors(exc, prefix=target))
                    continue
                _store(target, validated, kwargs)

            if all_errors:
                raise ValidationError("Validation failed", errors=all_errors)
            return view(*args, **kwargs)

        return wrapper

    return decorator
