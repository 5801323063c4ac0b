"""Shared test fixtures."""

import asyncio
import io
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest
from PIL import Image

from food_radar.config import Settings
from food_radar.containers import AppContainer
from food_radar.domain.entries import FoodEntry
from food_radar.domain.errors import AnalysisError
from food_radar.services.analysis import ChatCompletionClient, FoodAnalysisService
from food_radar.services.food_log import FoodLog
from food_radar.services.scans import FoodScanService
from food_radar.services.stats import StatsService

BANANA = {
    "foodName": "Banana",
    "calories": 105,
    "protein": 1,
    "carbs": 27,
    "fat": 0,
    "healthScore": 8,
    "ingredients": "banana",
}

NO_FOOD = {
    "foodName": "No food detected",
    "calories": 0,
    "protein": 0,
    "carbs": 0,
    "fat": 0,
    "healthScore": 0,
    "ingredients": "",
}


@dataclass
class FakeChatCompletionClient(ChatCompletionClient):
    """Fake chat-completion client returning fixed content."""

    content: str = field(default_factory=lambda: json.dumps(BANANA))
    error: AnalysisError | None = None
    delay_seconds: float = 0.0
    on_call: Callable[[], None] | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
        timeout: float,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "prompt": prompt,
                "image_data_url": image_data_url,
                "max_tokens": max_tokens,
                "timeout": timeout,
            }
        )
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.content


def make_entry(  # noqa: PLR0913
    calories: int,
    timestamp: datetime,
    protein: int = 0,
    carbs: int = 0,
    fat: int = 0,
    food_name: str = "Food",
) -> FoodEntry:
    return FoodEntry(
        food_name=food_name,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        timestamp=timestamp,
    )


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), "yellow").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key", timezone="UTC")


@pytest.fixture
def chat_client() -> FakeChatCompletionClient:
    return FakeChatCompletionClient()


@pytest.fixture
def food_log() -> FoodLog:
    return FoodLog(timezone_name="UTC")


@pytest.fixture
def analysis_service(chat_client: FakeChatCompletionClient) -> FoodAnalysisService:
    return FoodAnalysisService(client=chat_client, model="gpt-4o")


@pytest.fixture
def container(
    settings: Settings,
    chat_client: FakeChatCompletionClient,
    food_log: FoodLog,
) -> AppContainer:
    analysis_service = FoodAnalysisService(
        client=chat_client,
        model=settings.openai_model,
        max_tokens=settings.analysis_max_tokens,
        timeout_seconds=settings.analysis_timeout_seconds,
        jpeg_quality=settings.jpeg_quality,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        food_log=food_log,
        analysis_service=analysis_service,
        scan_service=FoodScanService(
            analysis_service=analysis_service,
            food_log=food_log,
            clock=lambda: datetime.now(tz=UTC),
        ),
        stats_service=StatsService(food_log),
        close_resources=close_resources,
    )
