"""Scoring and ordering of safety-cleared products."""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from nutrition_recommender.domain.catalog import Product
from nutrition_recommender.domain.engine import EngineConfig
from nutrition_recommender.domain.nutrients import (
    NUTRIENT_LABELS,
    Nutrient,
    NutrientVector,
)
from nutrition_recommender.domain.profile import FitnessGoal
from nutrition_recommender.domain.recommendations import (
    PersonalizedRecommendation,
    Priority,
)
from nutrition_recommender.domain.requirements import DailyRequirements
from nutrition_recommender.domain.safety import FoodSafetyResult, SafetyLevel

_logger = logging.getLogger(__name__)

HIGH_PRIORITY_SCORE = 0.66
MEDIUM_PRIORITY_SCORE = 0.33

# A single product should supply about this share of daily calories.
TARGET_CALORIE_SHARE = 0.12
MIN_DAILY_QUANTITY_G = 30.0
RICH_IN_SHARE = 0.15

DEFAULT_REASON = "Perfect for your daily nutrition"
_REASONS: dict[Nutrient, str] = {
    Nutrient.PROTEIN_G: "Great protein source for your goals",
    Nutrient.FIBER_G: "High fiber for digestive health",
    Nutrient.CALORIES: "Energy-dense for your active lifestyle",
    Nutrient.CARBS_G: "Slow-release carbohydrates for sustained energy",
    Nutrient.FAT_G: "Healthy fats for lasting satiety",
    Nutrient.VITAMIN_C_MG: "Vitamin C to support your immunity",
    Nutrient.POTASSIUM_MG: "Potassium for muscle and heart function",
    Nutrient.MAGNESIUM_MG: "Magnesium for energy metabolism",
    Nutrient.VITAMIN_B6_MG: "Vitamin B6 for protein metabolism",
    Nutrient.ANTIOXIDANTS_ORAC: "Antioxidants for everyday wellness",
}


def fit_score(
    product: Product,
    remaining: NutrientVector,
    weights: Mapping[Nutrient, float],
) -> float:
    """Weighted share of remaining need one serving covers, in [0, 1]."""
    total_weight = sum(weights.values())
    if total_weight <= 0:
        return 0.0
    serving = product.per_serving
    score = 0.0
    for nutrient, weight in weights.items():
        need = remaining.get(nutrient)
        if need <= 0:
            continue
        score += weight * min(1.0, serving.get(nutrient) / need)
    return min(max(score / total_weight, 0.0), 1.0)


def priority_for(score: float) -> Priority:
    """Bucket a fit score into a priority."""
    if score >= HIGH_PRIORITY_SCORE:
        return Priority.HIGH
    if score >= MEDIUM_PRIORITY_SCORE:
        return Priority.MEDIUM
    return Priority.LOW


def step_grams(product: Product, config: EngineConfig) -> float:
    """Smallest quantity the product is added in."""
    if product.serving_grams and product.serving_grams > 0:
        return float(product.serving_grams)
    return float(max(config.increment_grams, 1))


def servings_for(product: Product, grams: float) -> int:
    """Number of servings a daily quantity amounts to."""
    if grams <= 0:
        return 0
    return max(1, round(grams / product.serving_size))


def suggested_quantity(
    product: Product, requirements: DailyRequirements, config: EngineConfig
) -> float:
    """Initial daily quantity covering roughly 12% of calories."""
    step = step_grams(product, config)
    calories = product.nutrients.calories
    if calories > 0:
        grams = requirements.calories * TARGET_CALORIE_SHARE / calories
        grams *= product.basis_grams
    else:
        grams = MIN_DAILY_QUANTITY_G
    grams = max(grams, MIN_DAILY_QUANTITY_G)
    grams = math.ceil(grams / step) * step
    cap = float(config.max_quantity_per_product_grams)
    if grams > cap:
        grams = math.floor(cap / step) * step or cap
    return grams


def dominant_nutrient(
    product: Product,
    remaining: NutrientVector,
    weights: Mapping[Nutrient, float],
) -> Nutrient | None:
    """Dimension with the largest weighted share of remaining need."""
    best: Nutrient | None = None
    best_share = 0.0
    serving = product.per_serving
    for nutrient in Nutrient:
        need = remaining.get(nutrient)
        if need <= 0:
            continue
        share = weights.get(nutrient, 0.0) * min(
            1.0, serving.get(nutrient) / need
        )
        if share > best_share:
            best, best_share = nutrient, share
    return best


def benefits_for(product: Product, requirements: DailyRequirements) -> tuple[str, ...]:
    """Product benefits followed by nutrients one serving is rich in."""
    benefits = list(product.benefits)
    serving = product.per_serving
    for nutrient in Nutrient:
        if nutrient is Nutrient.CALORIES:
            continue
        target = requirements.get(nutrient)
        if target <= 0:
            continue
        if serving.get(nutrient) / target >= RICH_IN_SHARE:
            label = f"Rich in {NUTRIENT_LABELS[nutrient]}"
            if label not in benefits:
                benefits.append(label)
    return tuple(benefits)


@dataclass
class RecommendationRanker:
    """Score safety-cleared products against the daily requirements."""

    config: EngineConfig = field(default_factory=EngineConfig)

    def rank(
        self,
        screened: Sequence[tuple[Product, FoodSafetyResult]],
        requirements: DailyRequirements,
        goal: FitnessGoal,
        remaining: NutrientVector | None = None,
    ) -> list[PersonalizedRecommendation]:
        """Return the top recommendations, best first.

        Products with an ``avoid`` verdict are never ranked. ``remaining``
        defaults to the full requirement vector and is not modified.
        """
        need = remaining if remaining is not None else requirements.targets
        weights = self.config.weights_for(goal)
        scored = []
        for product, safety in screened:
            if safety.safety_level is SafetyLevel.AVOID:
                continue
            scored.append((fit_score(product, need, weights), product, safety))

        scored.sort(
            key=lambda item: (-item[0], item[1].serving_price, item[1].name)
        )
        limit = max(self.config.max_recommendations, 0)
        ranked = [
            self._build(product, safety, score, requirements, need, weights)
            for score, product, safety in scored[:limit]
        ]
        _logger.info(
            "Ranked products: candidates=%s returned=%s goal=%s",
            len(scored),
            len(ranked),
            goal.value,
        )
        return ranked

    def _build(  # noqa: PLR0913
        self,
        product: Product,
        safety: FoodSafetyResult,
        score: float,
        requirements: DailyRequirements,
        remaining: NutrientVector,
        weights: Mapping[Nutrient, float],
    ) -> PersonalizedRecommendation:
        grams = suggested_quantity(product, requirements, self.config)
        dominant = dominant_nutrient(product, remaining, weights)
        reason = _REASONS.get(dominant, DEFAULT_REASON) if dominant else DEFAULT_REASON
        return PersonalizedRecommendation(
            product=product,
            daily_quantity_g=grams,
            servings=servings_for(product, grams),
            nutrition_contribution=product.contribution(grams),
            reason=reason,
            benefits=benefits_for(product, requirements),
            priority=priority_for(score),
            match_score=score,
            safety_result=safety,
        )
