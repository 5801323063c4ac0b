"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from food_radar.domain.entries import DailyGoals

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-4o"
    openai_base_url: str = "https://api.openai.com/v1"
    analysis_backend: Literal["httpx", "openai"] = "httpx"
    analysis_timeout_seconds: float = 30.0
    analysis_max_tokens: int = 300
    jpeg_quality: int = 80
    timezone: str | None = None
    goal_calories: int = 2400
    goal_carbs_g: int = 330
    goal_protein_g: int = 120
    goal_fat_g: int = 66
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def daily_goals(self) -> DailyGoals:
        """Return the configured daily goals."""
        return DailyGoals(
            calories=self.goal_calories,
            carbs=self.goal_carbs_g,
            protein=self.goal_protein_g,
            fat=self.goal_fat_g,
        )
