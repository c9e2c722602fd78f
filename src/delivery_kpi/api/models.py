"""Pydantic models for API request payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from delivery_kpi.domain.periods import ViewMode


class DailyRecordPayload(BaseModel):
    """Raw daily entries; numeric fields may arrive as numbers or strings."""

    model_config = ConfigDict(extra="allow")

    date: str


class KitchenRecordPayload(BaseModel):
    """Raw multi-site entries keyed by site name."""

    model_config = ConfigDict(extra="allow")

    date: str


class DailyDashboardRequest(BaseModel):
    view_mode: ViewMode = ViewMode.DAY
    reference_date: str | None = None
    live: dict[str, Any] | None = None


class KitchenDashboardRequest(BaseModel):
    view_mode: ViewMode = ViewMode.DAY
    selected_date: str | None = None
    live: dict[str, Any] | None = None


class ExpressionRequest(BaseModel):
    expression: str = Field(min_length=1)
