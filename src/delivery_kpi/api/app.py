"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

from fastapi import FastAPI, HTTPException, Request, status

from delivery_kpi.api.models import (
    DailyDashboardRequest,
    DailyRecordPayload,
    ExpressionRequest,
    KitchenDashboardRequest,
    KitchenRecordPayload,
)
from delivery_kpi.app_logging import configure_logging
from delivery_kpi.containers import AppContainer
from delivery_kpi.domain.aggregates import DailyDashboard, KitchenDashboard
from delivery_kpi.domain.kitchens import MultiSiteRecord
from delivery_kpi.services.expressions import ExpressionError, evaluate_expression
from delivery_kpi.services.parsing import parse_record_date
from delivery_kpi.services.records import RecordDateError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/daily/derive")
    async def derive_daily(
        payload: DailyRecordPayload, request: Request
    ) -> dict[str, object]:
        """Return the derived row for raw daily entries."""
        state_container: AppContainer = request.app.state.container
        record = state_container.daily_record_service.preview(payload.model_dump())
        return record.to_row()

    @app.post("/daily/records", status_code=status.HTTP_201_CREATED)
    async def save_daily(
        payload: DailyRecordPayload, request: Request
    ) -> dict[str, object]:
        """Derive and store a daily record."""
        state_container: AppContainer = request.app.state.container
        try:
            record = state_container.daily_record_service.save(payload.model_dump())
        except RecordDateError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        except Exception as exc:
            logger.warning("Daily record store unavailable: %s", exc)
            raise HTTPException(
                status.HTTP_502_BAD_GATEWAY, "Record store unavailable"
            ) from exc
        return record.to_row()

    @app.post("/daily/dashboard")
    async def daily_dashboard(
        payload: DailyDashboardRequest, request: Request
    ) -> dict[str, object]:
        """Aggregate the stored history merged with the edited record."""
        state_container: AppContainer = request.app.state.container
        reference = _optional_date(payload.reference_date)
        dashboard = state_container.daily_record_service.dashboard(
            payload.view_mode, reference=reference, live_inputs=payload.live
        )
        return _daily_dashboard_body(dashboard)

    @app.get("/kitchens/draft/{day}")
    async def kitchen_draft(day: str, request: Request) -> dict[str, object]:
        """Return the record to edit for a date with carried-over targets."""
        state_container: AppContainer = request.app.state.container
        try:
            record = state_container.kitchen_record_service.draft(day)
        except RecordDateError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        return record.to_row()

    @app.post("/kitchens/records", status_code=status.HTTP_201_CREATED)
    async def save_kitchens(
        payload: KitchenRecordPayload, request: Request
    ) -> dict[str, object]:
        """Store a multi-site record with its week-over-week growth."""
        state_container: AppContainer = request.app.state.container
        try:
            record = state_container.kitchen_record_service.save(payload.model_dump())
        except RecordDateError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        except Exception as exc:
            logger.warning("Kitchen record store unavailable: %s", exc)
            raise HTTPException(
                status.HTTP_502_BAD_GATEWAY, "Record store unavailable"
            ) from exc
        return record.to_row()

    @app.post("/kitchens/dashboard")
    async def kitchen_dashboard(
        payload: KitchenDashboardRequest, request: Request
    ) -> dict[str, object]:
        """Aggregate kitchen records and compare sites against last week."""
        state_container: AppContainer = request.app.state.container
        selected = _optional_date(payload.selected_date)
        dashboard = state_container.kitchen_record_service.dashboard(
            payload.view_mode, selected=selected, live_raw=payload.live
        )
        return _kitchen_dashboard_body(dashboard)

    @app.post("/expressions/evaluate")
    async def evaluate(payload: ExpressionRequest) -> dict[str, float]:
        """Evaluate an arithmetic amount such as ``=120+35.5``."""
        try:
            value = evaluate_expression(payload.expression)
        except ExpressionError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        return {"value": value}

    return app


def _optional_date(value: str | None) -> date | None:
    if value is None:
        return None
    parsed = parse_record_date(value)
    if parsed is None:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Invalid date: {value!r}")
    return parsed


def _daily_dashboard_body(dashboard: DailyDashboard) -> dict[str, object]:
    return {
        "live": dashboard.live.to_row() if dashboard.live else None,
        "series": [stats.to_row() for stats in dashboard.series],
        "reference": asdict(dashboard.reference),
        "weekAgo": dashboard.week_ago.to_row() if dashboard.week_ago else None,
    }


def _kitchen_dashboard_body(dashboard: KitchenDashboard) -> dict[str, object]:
    return {
        "live": _kitchen_row(dashboard.live),
        "series": [asdict(stats) for stats in dashboard.series],
        "current": asdict(dashboard.current) if dashboard.current else None,
        "comparisons": [asdict(item) for item in dashboard.comparisons],
        "weekAgo": _kitchen_row(dashboard.week_ago),
    }


def _kitchen_row(record: MultiSiteRecord | None) -> dict[str, object] | None:
    return record.to_row() if record is not None else None
