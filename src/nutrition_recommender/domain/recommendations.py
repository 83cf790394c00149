"""Domain models for recommendations and daily packages."""

from dataclasses import dataclass, field
from enum import IntEnum

from nutrition_recommender.domain.catalog import Product
from nutrition_recommender.domain.nutrients import NutrientVector
from nutrition_recommender.domain.profile import UserProfile
from nutrition_recommender.domain.requirements import DailyRequirements
from nutrition_recommender.domain.safety import FoodSafetyResult


class Priority(IntEnum):
    """Recommendation priority bucket."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @property
    def label(self) -> str:
        """Lower-case name used in payloads."""
        return self.name.lower()


@dataclass(frozen=True)
class PersonalizedRecommendation:
    """A ranked product with a suggested daily quantity."""

    product: Product
    daily_quantity_g: float
    servings: int
    nutrition_contribution: NutrientVector
    reason: str
    benefits: tuple[str, ...]
    priority: Priority
    match_score: float
    safety_result: FoodSafetyResult


@dataclass(frozen=True)
class DailyPackage:
    """Products and quantities selected to cover daily targets."""

    recommendations: tuple[PersonalizedRecommendation, ...]
    totals: NutrientVector
    total_price: float
    coverage_percentage: float
    meets_requirements: bool
    iterations: int = 0

    @classmethod
    def empty(cls) -> "DailyPackage":
        """Return a package with no products."""
        return cls(
            recommendations=(),
            totals=NutrientVector.zero(),
            total_price=0.0,
            coverage_percentage=0.0,
            meets_requirements=False,
        )


@dataclass(frozen=True)
class RecommendationSummary:
    """Terminal output of the recommendation pipeline."""

    user_profile: UserProfile
    daily_requirements: DailyRequirements
    recommendations: tuple[PersonalizedRecommendation, ...]
    daily_package: DailyPackage
    unsafe_foods: tuple[FoodSafetyResult, ...] = field(default_factory=tuple)
    safety_advice: str = ""
