"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from food_radar.adapters.httpx_chat_client import HttpxChatCompletionClient
from food_radar.adapters.openai_chat_client import OpenAIChatCompletionClient
from food_radar.config import Settings
from food_radar.services.analysis import FoodAnalysisService
from food_radar.services.food_log import FoodLog
from food_radar.services.scans import FoodScanService
from food_radar.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_log: FoodLog
    analysis_service: FoodAnalysisService
    scan_service: FoodScanService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    chat_client: HttpxChatCompletionClient | OpenAIChatCompletionClient
    if resolved_settings.analysis_backend == "openai":
        chat_client = OpenAIChatCompletionClient.create(
            api_key=resolved_settings.openai_api_key,
            base_url=resolved_settings.openai_base_url,
        )
    else:
        chat_client = HttpxChatCompletionClient.create(
            api_key=resolved_settings.openai_api_key,
            base_url=resolved_settings.openai_base_url,
        )
    analysis_service = FoodAnalysisService(
        client=chat_client,
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.analysis_max_tokens,
        timeout_seconds=resolved_settings.analysis_timeout_seconds,
        jpeg_quality=resolved_settings.jpeg_quality,
    )
    food_log = FoodLog(timezone_name=resolved_settings.timezone)
    scan_service = FoodScanService(analysis_service=analysis_service, food_log=food_log)
    stats_service = StatsService(food_log)

    async def close_resources() -> None:
        await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_log=food_log,
        analysis_service=analysis_service,
        scan_service=scan_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
