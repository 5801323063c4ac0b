"""Domain models for logged food entries and their aggregates."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from food_radar.domain.analysis import NutritionEstimate


@dataclass(frozen=True)
class FoodEntry:
    """One logged food occurrence."""

    food_name: str
    calories: int
    protein: int
    carbs: int
    fat: int
    timestamp: datetime
    image: bytes | None = field(default=None, repr=False)
    health_score: int | None = None
    ingredients: str | None = None
    id: UUID = field(default_factory=uuid4)

    @classmethod
    def from_estimate(
        cls,
        estimate: NutritionEstimate,
        timestamp: datetime,
        image: bytes | None = None,
    ) -> "FoodEntry":
        """Build an entry from a successful analysis."""
        return cls(
            food_name=estimate.foodName,
            calories=estimate.calories,
            protein=estimate.protein,
            carbs=estimate.carbs,
            fat=estimate.fat,
            timestamp=timestamp,
            image=image,
            health_score=estimate.healthScore,
            ingredients=estimate.ingredients,
        )

    def ingredient_list(self) -> list[str]:
        """Split the comma-separated ingredients, dropping blanks."""
        if not self.ingredients:
            return []
        return [part.strip() for part in self.ingredients.split(",") if part.strip()]


@dataclass(frozen=True)
class DailyTotals:
    """Macro totals for one calendar day."""

    day: date
    calories: int
    protein: int
    carbs: int
    fat: int
    entry_count: int = 0


@dataclass(frozen=True)
class DailyGoals:
    """Daily macro targets shown against the home rings."""

    calories: int = 2400
    carbs: int = 330
    protein: int = 120
    fat: int = 66


@dataclass(frozen=True)
class MacroProgress:
    """Consumed, remaining and percentage of goal for one macro."""

    consumed: int
    goal: int
    remaining: int
    percent: int


@dataclass(frozen=True)
class RemainingSummary:
    """Today's progress against the daily goals."""

    day: date
    calories: MacroProgress
    carbs: MacroProgress
    protein: MacroProgress
    fat: MacroProgress
