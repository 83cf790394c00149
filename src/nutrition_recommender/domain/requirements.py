"""Domain models for daily nutrient requirements."""

from dataclasses import dataclass
from enum import StrEnum

from nutrition_recommender.domain.nutrients import Nutrient, NutrientVector


@dataclass(frozen=True)
class DailyRequirements:
    """Daily nutrient targets derived from a profile."""

    targets: NutrientVector
    bmr: float
    tdee: float

    def get(self, nutrient: Nutrient) -> float:
        """Return the target for a dimension."""
        return self.targets.get(nutrient)

    @property
    def calories(self) -> float:
        """Daily calorie target."""
        return self.targets.calories


class NutrientStatusLevel(StrEnum):
    """How current intake compares to the requirement."""

    DEFICIENT = "deficient"
    ADEQUATE = "adequate"
    EXCESS = "excess"


@dataclass(frozen=True)
class NutrientStatus:
    """Intake status for one nutrient dimension."""

    nutrient: Nutrient
    current: float
    required: float
    percentage: float
    status: NutrientStatusLevel
