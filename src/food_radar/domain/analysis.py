"""Models for food analysis results."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from food_radar.domain.errors import AnalysisError


class NutritionEstimate(BaseModel):
    """Structured nutrition estimate returned by the analysis service."""

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    foodName: str  # noqa: N815
    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fat: int = Field(ge=0)
    healthScore: int | None = Field(ge=0, le=10)  # noqa: N815
    ingredients: str


@dataclass(frozen=True)
class AnalysisResult:
    """Either a nutrition estimate or the error that prevented one."""

    estimate: NutritionEstimate | None = None
    error: AnalysisError | None = None

    def __post_init__(self) -> None:
        if (self.estimate is None) == (self.error is None):
            raise ValueError("AnalysisResult needs exactly one of estimate or error")

    @classmethod
    def success(cls, estimate: NutritionEstimate) -> "AnalysisResult":
        return cls(estimate=estimate)

    @classmethod
    def failure(cls, error: AnalysisError) -> "AnalysisResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.estimate is not None

    def unwrap(self) -> NutritionEstimate:
        """Return the estimate or raise the stored error."""
        if self.error is not None:
            raise self.error
        if self.estimate is None:
            raise ValueError("AnalysisResult holds neither estimate nor error")
        return self.estimate
