from typing import Any, Literal

from pydantic import Field

from app.schemas.base import BaseSchema


class HealthIndicatorSchema(BaseSchema):
    status: Literal["up", "down"]
    details: dict[str, Any] = Field(default_factory=dict)


class HealthSchema(BaseSchema):
    status: Literal["ok", "error"]
    info: dict[str, HealthIndicatorSchema]
    error: dict[str, HealthIndicatorSchema]
    details: dict[str, HealthIndicatorSchema]
