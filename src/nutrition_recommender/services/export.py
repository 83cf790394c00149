"""Serialization of recommendation summaries."""

from nutrition_recommender.domain.catalog import Product
from nutrition_recommender.domain.nutrients import (
    NUTRIENT_LABELS,
    NUTRIENT_UNITS,
    Nutrient,
    NutrientVector,
)
from nutrition_recommender.domain.profile import UserProfile
from nutrition_recommender.domain.recommendations import (
    DailyPackage,
    PersonalizedRecommendation,
    RecommendationSummary,
)
from nutrition_recommender.domain.requirements import DailyRequirements
from nutrition_recommender.domain.safety import FoodSafetyResult


def nutrients_to_dict(vector: NutrientVector, digits: int = 2) -> dict[str, float]:
    """Return a vector keyed by nutrient name with rounded amounts."""
    return {key: round(value, digits) for key, value in vector.as_dict().items()}


def profile_to_dict(profile: UserProfile) -> dict[str, object]:
    """Serialize a profile."""
    return {
        "age": profile.age,
        "gender": profile.gender.value if profile.gender else None,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "fitness_goal": profile.fitness_goal.value,
        "activity_level": profile.activity_level.value,
        "health_conditions": [str(item) for item in profile.health_conditions],
        "dietary_preferences": list(profile.dietary_preferences),
    }


def requirements_to_dict(requirements: DailyRequirements) -> dict[str, object]:
    """Serialize daily requirements."""
    return {
        "bmr": round(requirements.bmr, 2),
        "tdee": round(requirements.tdee, 2),
        "targets": nutrients_to_dict(requirements.targets),
    }


def safety_to_dict(result: FoodSafetyResult) -> dict[str, object]:
    """Serialize a screening result."""
    return {
        "food_id": result.food_id,
        "food_name": result.food_name,
        "safety_level": result.safety_level.label,
        "reasons": list(result.reasons),
        "micro_copy": result.micro_copy,
        "alternatives": list(result.alternatives),
    }


def product_to_dict(product: Product) -> dict[str, object]:
    """Serialize a catalog product."""
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "serving_grams": product.serving_grams,
        "badge": product.badge,
        "safety_tags": sorted(product.safety_tags),
        "nutrients": nutrients_to_dict(product.nutrients),
    }


def recommendation_to_dict(item: PersonalizedRecommendation) -> dict[str, object]:
    """Serialize a ranked recommendation."""
    return {
        "product": product_to_dict(item.product),
        "daily_quantity_g": round(item.daily_quantity_g, 2),
        "servings": item.servings,
        "daily_price": round(item.product.price_for(item.daily_quantity_g), 2),
        "nutrition_contribution": nutrients_to_dict(item.nutrition_contribution),
        "reason": item.reason,
        "benefits": list(item.benefits),
        "priority": item.priority.label,
        "match_score": round(item.match_score, 4),
        "safety": safety_to_dict(item.safety_result),
    }


def package_to_dict(package: DailyPackage) -> dict[str, object]:
    """Serialize a daily package."""
    return {
        "recommendations": [
            recommendation_to_dict(item) for item in package.recommendations
        ],
        "totals": nutrients_to_dict(package.totals),
        "total_price": package.total_price,
        "coverage_percentage": package.coverage_percentage,
        "meets_requirements": package.meets_requirements,
        "iterations": package.iterations,
    }


def summary_to_dict(summary: RecommendationSummary) -> dict[str, object]:
    """Serialize a summary into JSON-ready data with a stable key order."""
    return {
        "user_profile": profile_to_dict(summary.user_profile),
        "daily_requirements": requirements_to_dict(summary.daily_requirements),
        "recommendations": [
            recommendation_to_dict(item) for item in summary.recommendations
        ],
        "daily_package": package_to_dict(summary.daily_package),
        "unsafe_foods": [safety_to_dict(item) for item in summary.unsafe_foods],
        "safety_advice": summary.safety_advice,
    }


def format_summary_text(summary: RecommendationSummary) -> str:
    """Render a plain-text summary for printing or sharing."""
    profile = summary.user_profile
    requirements = summary.daily_requirements
    package = summary.daily_package
    lines = [
        "Personalized Nutrition Plan",
        "",
        f"Goal: {profile.fitness_goal.value}",
        f"Activity: {profile.activity_level.value}",
        f"Age: {profile.age}, height: {profile.height_cm:g} cm, "
        f"weight: {profile.weight_kg:g} kg",
        "",
        "Daily targets:",
    ]
    for nutrient in Nutrient:
        lines.append(
            f"  {NUTRIENT_LABELS[nutrient]}: "
            f"{requirements.get(nutrient):.0f} {NUTRIENT_UNITS[nutrient]}"
        )

    lines.extend(["", "Daily package:"])
    if not package.recommendations:
        lines.append("  No products could be selected for your profile.")
    for item in package.recommendations:
        lines.append(
            f"  - {item.product.name}: {item.daily_quantity_g:g} g "
            f"({item.servings} servings), {item.priority.label} priority"
        )
        lines.append(f"    {item.reason}")
    lines.append(f"Total price: {package.total_price:.2f}")
    lines.append(f"Coverage: {package.coverage_percentage:.1f}%")
    if package.meets_requirements:
        lines.append("All daily targets are covered.")

    if summary.unsafe_foods:
        lines.extend(["", "Products to watch:"])
        for result in summary.unsafe_foods:
            lines.append(
                f"  - {result.food_name} ({result.safety_level.label}): "
                f"{result.micro_copy}"
            )

    lines.extend(["", "Safety advice:", f"  {summary.safety_advice}"])
    return "\n".join(lines) + "\n"
