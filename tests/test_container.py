"""Tests for container wiring."""

import asyncio

from food_radar.adapters.httpx_chat_client import HttpxChatCompletionClient
from food_radar.adapters.openai_chat_client import OpenAIChatCompletionClient
from food_radar.config import Settings
from food_radar.containers import build_container


def test_build_container_uses_httpx_by_default(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.analysis_service.client, HttpxChatCompletionClient)
    assert container.scan_service.food_log is container.food_log
    assert container.stats_service.food_log is container.food_log
    asyncio.run(container.close_resources())


def test_build_container_with_openai_backend(settings: Settings) -> None:
    settings = settings.model_copy(update={"analysis_backend": "openai"})

    container = build_container(settings)

    assert isinstance(container.analysis_service.client, OpenAIChatCompletionClient)
    asyncio.run(container.close_resources())


def test_settings_daily_goals(settings: Settings) -> None:
    goals = settings.model_copy(update={"goal_calories": 2000}).daily_goals()

    assert goals.calories == 2000
    assert goals.protein == 120
