"""Tests for the package optimizer."""

import pytest

from nutrition_recommender.domain.engine import EngineConfig
from nutrition_recommender.domain.nutrients import NutrientVector
from nutrition_recommender.domain.profile import FitnessGoal
from nutrition_recommender.domain.recommendations import DailyPackage
from nutrition_recommender.domain.requirements import DailyRequirements
from nutrition_recommender.domain.safety import FoodSafetyResult, SafetyLevel
from nutrition_recommender.services.packaging import (
    PackageOptimizer,
    coverage_percentage,
)
from nutrition_recommender.services.ranking import RecommendationRanker
from tests.conftest import make_product


def _requirements(**targets: float) -> DailyRequirements:
    return DailyRequirements(targets=NutrientVector(**targets), bmr=1500, tdee=1800)


def _candidates(products, requirements, config=None):
    ranker = RecommendationRanker(config or EngineConfig())
    screened = [
        (
            product,
            FoodSafetyResult(
                food_id=product.id,
                food_name=product.name,
                safety_level=SafetyLevel.SAFE,
            ),
        )
        for product in products
    ]
    return ranker.rank(screened, requirements, FitnessGoal.GENERAL_WELLNESS)


def test_three_single_dimension_products_cover_everything() -> None:
    requirements = _requirements(protein_g=30, fiber_g=20, vitamin_c_mg=60)
    products = [
        make_product("protein", protein_g=10),
        make_product("fiber", fiber_g=5),
        make_product("vitamin-c", vitamin_c_mg=20),
    ]
    candidates = _candidates(products, requirements)

    package = PackageOptimizer().optimize(
        candidates, requirements, FitnessGoal.GENERAL_WELLNESS
    )

    grams = {item.product.id: item.daily_quantity_g for item in package.recommendations}
    assert grams == {"protein": 90, "fiber": 120, "vitamin-c": 90}
    assert package.meets_requirements
    assert package.coverage_percentage == 100.0
    assert package.total_price == 10.0
    assert package.iterations == 10
    assert package.totals.protein_g == pytest.approx(30)


def test_optimizer_is_deterministic() -> None:
    requirements = _requirements(calories=2000, protein_g=60, fiber_g=30)
    products = [
        make_product("a", price=1.2, calories=120, protein_g=4, fiber_g=3),
        make_product("b", price=0.8, calories=90, fiber_g=4),
        make_product("c", price=2.5, calories=200, protein_g=12),
    ]
    candidates = _candidates(products, requirements)
    optimizer = PackageOptimizer()

    first = optimizer.optimize(candidates, requirements, FitnessGoal.MUSCLE_GAIN)
    second = optimizer.optimize(candidates, requirements, FitnessGoal.MUSCLE_GAIN)

    assert first == second


def test_coverage_is_monotonic_and_bounded() -> None:
    requirements = _requirements(calories=2000, protein_g=60, fiber_g=30)
    products = [
        make_product("a", price=1.2, calories=120, protein_g=4, fiber_g=3),
        make_product("b", price=0.8, calories=90, fiber_g=4),
    ]
    candidates = _candidates(products, requirements)

    states = list(
        PackageOptimizer().iterate(candidates, requirements, FitnessGoal.ENDURANCE)
    )
    coverages = [coverage_percentage(state.totals, requirements) for state in states]

    assert coverages[0] == 0.0
    assert coverages == sorted(coverages)
    assert all(0 <= value <= 100 for value in coverages)
    assert [state.iterations for state in states] == list(range(len(states)))


def test_per_product_cap_is_respected() -> None:
    requirements = _requirements(protein_g=1000)
    candidates = _candidates(
        [make_product("big", serving_grams=200, protein_g=10)], requirements
    )

    package = PackageOptimizer().optimize(
        candidates, requirements, FitnessGoal.MUSCLE_GAIN
    )

    assert package.recommendations[0].daily_quantity_g == 400
    assert package.recommendations[0].servings == 2
    assert not package.meets_requirements
    assert package.coverage_percentage == pytest.approx(2.0)


def test_iteration_budget_bounds_the_loop() -> None:
    requirements = _requirements(protein_g=1000)
    config = EngineConfig(optimizer_iteration_budget=2)
    candidates = _candidates([make_product("p", protein_g=1)], requirements, config)

    package = PackageOptimizer(config).optimize(
        candidates, requirements, FitnessGoal.MUSCLE_GAIN
    )

    assert package.iterations == 2
    assert package.recommendations[0].daily_quantity_g == 60


def test_products_without_useful_nutrients_are_not_selected() -> None:
    requirements = _requirements(protein_g=50)
    candidates = _candidates(
        [make_product("sugar", calories=100), make_product("whey", protein_g=25)],
        requirements,
    )

    package = PackageOptimizer().optimize(
        candidates, requirements, FitnessGoal.MUSCLE_GAIN
    )

    assert [item.product.id for item in package.recommendations] == ["whey"]
    assert package.meets_requirements


def test_empty_candidates_give_empty_package() -> None:
    package = PackageOptimizer().optimize(
        [], _requirements(protein_g=50), FitnessGoal.ENDURANCE
    )

    assert package == DailyPackage.empty()
    assert package.coverage_percentage == 0.0
    assert not package.meets_requirements
