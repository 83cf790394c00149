"""Assembly of the final recommendation summary."""

from collections.abc import Sequence
from dataclasses import dataclass

from nutrition_recommender.domain.profile import UserProfile
from nutrition_recommender.domain.recommendations import (
    DailyPackage,
    PersonalizedRecommendation,
    Priority,
    RecommendationSummary,
)
from nutrition_recommender.domain.requirements import DailyRequirements
from nutrition_recommender.domain.safety import FoodSafetyResult, SafetyLevel

ALL_SAFE_ADVICE = "All products are safe for your profile."


def build_safety_advice(
    screening: Sequence[FoodSafetyResult], tips: Sequence[str] = ()
) -> str:
    """Unique reasons, most severe first, followed by condition tips."""
    flagged = [result for result in screening if not result.is_safe]
    flagged.sort(key=lambda result: -result.safety_level)
    lines: list[str] = []
    for result in flagged:
        for reason in result.reasons:
            if reason not in lines:
                lines.append(reason)
    for tip in tips:
        if tip not in lines:
            lines.append(tip)
    if not lines:
        return ALL_SAFE_ADVICE
    return " ".join(_sentence(line) for line in lines)


def assemble_summary(  # noqa: PLR0913
    profile: UserProfile,
    requirements: DailyRequirements,
    recommendations: Sequence[PersonalizedRecommendation],
    package: DailyPackage,
    screening: Sequence[FoodSafetyResult],
    tips: Sequence[str] = (),
) -> RecommendationSummary:
    """Merge the outputs of every stage into one record."""
    return RecommendationSummary(
        user_profile=profile,
        daily_requirements=requirements,
        recommendations=tuple(recommendations),
        daily_package=package,
        unsafe_foods=tuple(result for result in screening if not result.is_safe),
        safety_advice=build_safety_advice(screening, tips),
    )


@dataclass(frozen=True)
class RecommendationStats:
    """Counts describing a summary."""

    total_recommendations: int
    high_priority: int
    medium_priority: int
    low_priority: int
    caution_count: int
    avoid_count: int
    package_products: int
    average_match_score: float


def recommendation_stats(summary: RecommendationSummary) -> RecommendationStats:
    """Count recommendations by priority and flagged products by level."""
    recommendations = summary.recommendations
    priorities = [item.priority for item in recommendations]
    levels = [result.safety_level for result in summary.unsafe_foods]
    if recommendations:
        average = sum(item.match_score for item in recommendations) / len(
            recommendations
        )
    else:
        average = 0.0
    return RecommendationStats(
        total_recommendations=len(recommendations),
        high_priority=priorities.count(Priority.HIGH),
        medium_priority=priorities.count(Priority.MEDIUM),
        low_priority=priorities.count(Priority.LOW),
        caution_count=levels.count(SafetyLevel.CAUTION),
        avoid_count=levels.count(SafetyLevel.AVOID),
        package_products=len(summary.daily_package.recommendations),
        average_match_score=round(average, 4),
    )


def find_recommendation(
    summary: RecommendationSummary, product_id: str
) -> PersonalizedRecommendation | None:
    """Return the ranked recommendation for a product, if any."""
    for item in summary.recommendations:
        if item.product.id == product_id:
            return item
    return None


def _sentence(text: str) -> str:
    text = text.strip()
    if text.endswith((".", "!", "?")):
        return text
    return f"{text}."
