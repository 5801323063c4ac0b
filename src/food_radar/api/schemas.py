"""Request and response models for the HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel

from food_radar.domain.entries import FoodEntry


class ScanRequest(BaseModel):
    """Captured photo submitted for analysis."""

    image_base64: str


class EntryOut(BaseModel):
    """Food entry as exposed to clients; image bytes are never echoed."""

    id: UUID
    food_name: str
    calories: int
    protein: int
    carbs: int
    fat: int
    timestamp: datetime
    health_score: int | None
    ingredients: str | None
    ingredient_list: list[str]
    has_image: bool

    @classmethod
    def from_entry(cls, entry: FoodEntry) -> "EntryOut":
        return cls(
            id=entry.id,
            food_name=entry.food_name,
            calories=entry.calories,
            protein=entry.protein,
            carbs=entry.carbs,
            fat=entry.fat,
            timestamp=entry.timestamp,
            health_score=entry.health_score,
            ingredients=entry.ingredients,
            ingredient_list=entry.ingredient_list(),
            has_image=entry.image is not None,
        )


class TotalsOut(BaseModel):
    """Macro sums."""

    calories: int
    protein: int
    carbs: int
    fat: int


class DayOut(BaseModel):
    """Entries and totals for one calendar day."""

    day: date
    has_entries: bool
    totals: TotalsOut
    entries: list[EntryOut]
