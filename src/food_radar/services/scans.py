"""Scan workflow: analyze a photo, then commit it to the food log."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from PIL import Image

from food_radar.domain.entries import FoodEntry
from food_radar.domain.errors import AnalysisCancelled, AnalysisError
from food_radar.services.analysis import FoodAnalysisService
from food_radar.services.food_log import FoodLog

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    """Result of a scan: the logged entry or the reason nothing was logged."""

    entry: FoodEntry | None = None
    error: AnalysisError | None = None

    @property
    def ok(self) -> bool:
        return self.entry is not None


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class FoodScanService:
    """Runs an analysis and appends the result only once it has resolved."""

    analysis_service: FoodAnalysisService
    food_log: FoodLog
    clock: Callable[[], datetime] = field(default=_utc_now)

    async def scan(
        self, image: "bytes | Image.Image", cancel: asyncio.Event | None = None
    ) -> ScanOutcome:
        """Analyze ``image`` and log it unless it failed or was cancelled."""
        captured_at = self.clock()
        result = await self.analysis_service.analyze(image, cancel)
        if result.error is not None:
            return ScanOutcome(error=result.error)
        if cancel is not None and cancel.is_set():
            _logger.info("Scan cancelled after analysis; result discarded")
            return ScanOutcome(error=AnalysisCancelled("Scan cancelled by caller"))

        entry = FoodEntry.from_estimate(
            result.unwrap(),
            timestamp=captured_at,
            image=image if isinstance(image, bytes) else None,
        )
        self.food_log.add_entry(entry)
        return ScanOutcome(entry=entry)
