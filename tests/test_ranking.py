"""Tests for recommendation ranking."""

import pytest

from nutrition_recommender.domain.engine import EngineConfig
from nutrition_recommender.domain.nutrients import Nutrient, NutrientVector
from nutrition_recommender.domain.profile import FitnessGoal
from nutrition_recommender.domain.recommendations import Priority
from nutrition_recommender.domain.requirements import DailyRequirements
from nutrition_recommender.domain.safety import FoodSafetyResult, SafetyLevel
from nutrition_recommender.services.ranking import (
    RecommendationRanker,
    fit_score,
    priority_for,
    suggested_quantity,
)
from tests.conftest import make_product


def _requirements(**targets: float) -> DailyRequirements:
    return DailyRequirements(targets=NutrientVector(**targets), bmr=1500, tdee=1800)


def _safe(product, level: SafetyLevel = SafetyLevel.SAFE) -> FoodSafetyResult:
    return FoodSafetyResult(
        food_id=product.id, food_name=product.name, safety_level=level
    )


def test_fit_score_is_bounded() -> None:
    product = make_product("p", protein_g=100, fiber_g=100)
    weights = {nutrient: 1.0 for nutrient in Nutrient}

    full = fit_score(product, NutrientVector(protein_g=10, fiber_g=10), weights)
    none = fit_score(product, NutrientVector.zero(), weights)

    assert full == pytest.approx(2 / len(Nutrient))
    assert none == 0.0
    assert fit_score(product, NutrientVector(protein_g=10), {}) == 0.0


@pytest.mark.parametrize(
    ("score", "expected"),
    [
        (0.9, Priority.HIGH),
        (0.66, Priority.HIGH),
        (0.65, Priority.MEDIUM),
        (0.33, Priority.MEDIUM),
        (0.1, Priority.LOW),
    ],
)
def test_priority_for(score, expected) -> None:
    assert priority_for(score) is expected


def test_rank_orders_by_score_then_price_then_name() -> None:
    products = [
        make_product("weak", "Weak", price=0.5, fiber_g=1),
        make_product("b", "Banana", price=2.0, fiber_g=10),
        make_product("a", "Apple", price=2.0, fiber_g=10),
        make_product("cheap", "Cheap", price=1.0, fiber_g=10),
    ]
    requirements = _requirements(fiber_g=20)

    ranked = RecommendationRanker().rank(
        [(product, _safe(product)) for product in products],
        requirements,
        FitnessGoal.WEIGHT_LOSS,
    )

    assert [item.product.id for item in ranked] == ["cheap", "a", "b", "weak"]
    scores = [item.match_score for item in ranked]
    assert scores == sorted(scores, reverse=True)


def test_rank_compares_prices_per_serving() -> None:
    per_serving = make_product("alpha", "Alpha", price=2.0, fiber_g=10)
    per_100g = make_product(
        "bravo", "Bravo", price=5.0, serving_grams=None, fiber_g=40
    )
    requirements = _requirements(fiber_g=5)

    ranked = RecommendationRanker().rank(
        [(product, _safe(product)) for product in (per_serving, per_100g)],
        requirements,
        FitnessGoal.WEIGHT_LOSS,
    )

    assert ranked[0].match_score == ranked[1].match_score
    assert per_100g.serving_price == pytest.approx(1.5)
    assert [item.product.id for item in ranked] == ["bravo", "alpha"]


def test_rank_skips_avoid_and_truncates() -> None:
    products = [make_product(f"p{index}", fiber_g=index + 1) for index in range(8)]
    screened = [(product, _safe(product)) for product in products]
    screened[-1] = (products[-1], _safe(products[-1], SafetyLevel.AVOID))
    ranker = RecommendationRanker(EngineConfig(max_recommendations=3))

    ranked = ranker.rank(screened, _requirements(fiber_g=30), FitnessGoal.ENDURANCE)

    assert [item.product.id for item in ranked] == ["p6", "p5", "p4"]


def test_rank_keeps_caution_products_with_their_result() -> None:
    product = make_product("p", fiber_g=5)
    caution = _safe(product, SafetyLevel.CAUTION)

    ranked = RecommendationRanker().rank(
        [(product, caution)], _requirements(fiber_g=30), FitnessGoal.ENDURANCE
    )

    assert ranked[0].safety_result is caution


def test_recommendation_details() -> None:
    product = make_product(
        "oats", benefits=("Whole grain",), calories=100, fiber_g=6, protein_g=1
    )
    requirements = _requirements(calories=2000, fiber_g=30, protein_g=100)

    item = RecommendationRanker().rank(
        [(product, _safe(product))], requirements, FitnessGoal.WEIGHT_LOSS
    )[0]

    assert item.daily_quantity_g == 90
    assert item.servings == 3
    assert item.nutrition_contribution.fiber_g == pytest.approx(18)
    assert item.reason == "High fiber for digestive health"
    assert item.benefits == ("Whole grain", "Rich in fiber")


def test_suggested_quantity_bounds() -> None:
    config = EngineConfig()
    requirements = _requirements(calories=2000)

    no_calories = make_product("water", serving_grams=None)
    dense = make_product("dense", serving_grams=None, calories=900)
    light = make_product("light", serving_grams=None, calories=1)

    assert suggested_quantity(no_calories, requirements, config) == 30
    assert suggested_quantity(dense, requirements, config) == 30
    assert suggested_quantity(light, requirements, config) == 500
