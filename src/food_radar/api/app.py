"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, status

from food_radar.api.schemas import DayOut, EntryOut, ScanRequest, TotalsOut
from food_radar.app_logging import configure_logging
from food_radar.containers import AppContainer
from food_radar.domain.errors import (
    AnalysisCancelled,
    AnalysisError,
    EncodingError,
    NoFoodDetected,
    NotFoundError,
)
from food_radar.services.stats import PeriodSummary


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
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

    @app.post("/scans", status_code=status.HTTP_201_CREATED)
    async def create_scan(scan: ScanRequest, request: Request) -> EntryOut:
        """Analyze a captured photo and log it."""
        state_container: AppContainer = request.app.state.container
        try:
            image = base64.b64decode(scan.image_base64, validate=True)
        except binascii.Error as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="image_base64 is not valid base64",
            ) from exc
        outcome = await state_container.scan_service.scan(image)
        if outcome.entry is None:
            error = outcome.error or AnalysisError("Scan produced no entry")
            logger.warning("Scan not logged: %s", error.kind)
            raise _analysis_http_error(error)
        return EntryOut.from_entry(outcome.entry)

    @app.get("/entries")
    async def list_entries(request: Request, limit: int = 20) -> list[EntryOut]:
        """Return the most recent entries, newest first."""
        state_container: AppContainer = request.app.state.container
        history = state_container.stats_service.get_history(limit)
        return [EntryOut.from_entry(entry) for entry in history]

    @app.get("/entries/{entry_id}")
    async def get_entry(entry_id: UUID, request: Request) -> EntryOut:
        state_container: AppContainer = request.app.state.container
        try:
            entry = state_container.food_log.get_entry(entry_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
        return EntryOut.from_entry(entry)

    @app.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(entry_id: UUID, request: Request) -> None:
        """Remove an entry from the log."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.food_log.remove_entry_by_id(entry_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc

    @app.get("/days/{day}")
    async def day_detail(day: date, request: Request) -> DayOut:
        """Return the entries and totals of one calendar day."""
        state_container: AppContainer = request.app.state.container
        food_log = state_container.food_log
        entries = food_log.entries_on_date(day)
        totals = food_log.daily_totals(day)
        return DayOut(
            day=day,
            has_entries=bool(entries),
            totals=TotalsOut(
                calories=totals.calories,
                protein=totals.protein,
                carbs=totals.carbs,
                fat=totals.fat,
            ),
            entries=[EntryOut.from_entry(entry) for entry in entries],
        )

    @app.get("/totals")
    async def all_time_totals(request: Request) -> TotalsOut:
        """Return sums over every entry logged this session."""
        food_log = request.app.state.container.food_log
        return TotalsOut(
            calories=food_log.total_calories(),
            protein=food_log.total_protein(),
            carbs=food_log.total_carbs(),
            fat=food_log.total_fat(),
        )

    @app.get("/today")
    async def today(request: Request) -> dict[str, object]:
        """Return today's totals and what is left of the daily goals."""
        state_container: AppContainer = request.app.state.container
        stats = state_container.stats_service
        return {
            "totals": asdict(stats.get_today()),
            "remaining": asdict(
                stats.get_remaining(state_container.settings.daily_goals())
            ),
        }

    @app.get("/stats/week")
    async def week(request: Request) -> PeriodSummary:
        return request.app.state.container.stats_service.get_week()

    @app.get("/stats/month")
    async def month(request: Request) -> PeriodSummary:
        return request.app.state.container.stats_service.get_month()

    @app.get("/stats/streak")
    async def streak(request: Request) -> dict[str, int]:
        return {"streak": request.app.state.container.stats_service.get_streak()}

    return app


def _analysis_http_error(error: AnalysisError) -> HTTPException:
    """Map an analysis failure to an HTTP error for the client."""
    detail = {"kind": error.kind, "message": str(error)}
    if isinstance(error, NoFoodDetected):
        return HTTPException(422, detail=detail)
    if isinstance(error, EncodingError):
        return HTTPException(status.HTTP_400_BAD_REQUEST, detail=detail)
    if isinstance(error, AnalysisCancelled):
        return HTTPException(status.HTTP_409_CONFLICT, detail=detail)
    return HTTPException(status.HTTP_502_BAD_GATEWAY, detail=detail)
