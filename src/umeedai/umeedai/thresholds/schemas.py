"""Pydantic request schemas for the threshold routes."""
from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from ..core.constants import FACTOR_MIN_LENGTH
from ..core.enums import Operator


def _require_number(value: Any) -> Any:
    # bool is an int subclass and JSON numbers never arrive as strings.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError("number_type", "Value must be a number")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        finite = False
    if not finite:
        raise PydanticCustomError("finite_number", "Value must be a finite number")
    return value


def _clean_description(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


class CreateThresholdBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    factor: str
    operator: Operator
    value: float = Field(allow_inf_nan=False)
    description: Optional[str] = None

    @field_validator("factor")
    @classmethod
    def validate_factor(cls, v: str) -> str:
        v = v.strip()
        if len(v) < FACTOR_MIN_LENGTH:
            raise PydanticCustomError(
                "factor_too_short",
                "Factor must be at least {min_length} characters long",
                {"min_length": FACTOR_MIN_LENGTH},
            )
        return v

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> Any:
        return _require_number(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)


class UpdateThresholdBody(BaseModel):
    """Partial update. ``factor`` is not accepted here and is silently dropped."""

    model_config = ConfigDict(extra="ignore")

    operator: Optional[Operator] = None
    value: Optional[float] = Field(default=None, allow_inf_nan=False)
    description: Optional[str] = None

    @field_validator("operator", "value", "description", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise PydanticCustomError("null_not_allowed", "Field may be omitted but not null")
        return v

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> Any:
        return _require_number(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _clean_description(v)

    @model_validator(mode="after")
    def require_any_field(self) -> "UpdateThresholdBody":
        if not self.model_fields_set:
            raise PydanticCustomError(
                "empty_update",
                "At least one field (operator, value, or description) must be provided for an update.",
            )
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ThresholdParams(BaseModel):
    factor: str = Field(min_length=1)
