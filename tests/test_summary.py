"""Tests for summary assembly and export."""

from nutrition_recommender.domain.safety import FoodSafetyResult, SafetyLevel
from nutrition_recommender.services.export import format_summary_text, summary_to_dict
from nutrition_recommender.services.recommendations import compute_recommendations
from nutrition_recommender.services.summary import (
    ALL_SAFE_ADVICE,
    build_safety_advice,
    find_recommendation,
    recommendation_stats,
)
from tests.conftest import make_profile


def test_safety_advice_orders_by_severity() -> None:
    screening = [
        FoodSafetyResult("a", "A", SafetyLevel.CAUTION, reasons=("Watch sugar",)),
        FoodSafetyResult("b", "B", SafetyLevel.AVOID, reasons=("Too salty.",)),
        FoodSafetyResult("c", "C", SafetyLevel.CAUTION, reasons=("Watch sugar",)),
        FoodSafetyResult("d", "D", SafetyLevel.SAFE),
    ]

    advice = build_safety_advice(screening, ["Drink water"])

    assert advice == "Too salty. Watch sugar. Drink water."
    assert build_safety_advice([]) == ALL_SAFE_ADVICE


def test_recommendation_stats_and_lookup(catalog) -> None:
    summary = compute_recommendations(
        make_profile(dietary_preferences=["nut-free"]), catalog
    )

    stats = recommendation_stats(summary)

    assert stats.total_recommendations == 4
    assert (
        stats.high_priority + stats.medium_priority + stats.low_priority
        == stats.total_recommendations
    )
    assert stats.avoid_count == 1
    assert stats.caution_count == 0
    assert 0 <= stats.average_match_score <= 1
    assert find_recommendation(summary, "mango").product.name == "Dried Mango"
    assert find_recommendation(summary, "almond-mix") is None


def test_summary_to_dict_shape(catalog) -> None:
    summary = compute_recommendations(make_profile(), catalog)

    data = summary_to_dict(summary)

    assert list(data) == [
        "user_profile",
        "daily_requirements",
        "recommendations",
        "daily_package",
        "unsafe_foods",
        "safety_advice",
    ]
    assert data["user_profile"]["fitness_goal"] == "general-wellness"
    assert data["daily_requirements"]["bmr"] == 1673.75
    first = data["recommendations"][0]
    assert first["priority"] in {"high", "medium", "low"}
    assert first["safety"]["safety_level"] == "safe"
    assert set(data["daily_package"]["totals"]) == set(
        data["daily_requirements"]["targets"]
    )


def test_format_summary_text(catalog) -> None:
    summary = compute_recommendations(
        make_profile(health_conditions=["kidney"]), catalog
    )

    text = format_summary_text(summary)

    assert text.startswith("Personalized Nutrition Plan\n")
    assert "Goal: general-wellness" in text
    assert "Products to watch:" in text
    assert "Banana Chips (avoid)" in text
    assert "Safety advice:" in text
