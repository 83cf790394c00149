"""Validation and normalization of raw user profiles."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from nutrition_recommender.domain.profile import (
    ActivityLevel,
    FitnessGoal,
    Gender,
    HealthCondition,
    UserProfile,
    parse_condition,
)

MIN_AGE = 10
MAX_AGE = 100
MIN_HEIGHT_CM = 100.0
MAX_HEIGHT_CM = 250.0
MIN_WEIGHT_KG = 20.0
MAX_WEIGHT_KG = 300.0

_NONE_PLACEHOLDER = "none"

_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "age": ("age",),
    "gender": ("gender",),
    "height_cm": ("height_cm", "height", "heightCm"),
    "weight_kg": ("weight_kg", "weight", "weightKg"),
    "fitness_goal": ("fitness_goal", "fitnessGoal"),
    "activity_level": ("activity_level", "activityLevel"),
    "health_conditions": ("health_conditions", "healthConditions"),
    "dietary_preferences": ("dietary_preferences", "dietaryPreferences"),
}


class ProfileValidationError(ValueError):
    """Raised when the pipeline is asked to run on an invalid profile."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors) or "Invalid profile")
        self.errors = errors


@dataclass(frozen=True)
class ProfileValidationResult:
    """Either a validated profile or the ordered list of problems."""

    profile: UserProfile | None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Return True when a profile was produced."""
        return self.profile is not None

    def require_profile(self) -> UserProfile:
        """Return the profile or raise ProfileValidationError."""
        if self.profile is None:
            raise ProfileValidationError(self.errors)
        return self.profile


def validate_profile(raw: Mapping[str, object]) -> ProfileValidationResult:
    """Validate raw profile fields and normalize them into a UserProfile."""
    values = {
        name: _lookup(raw, aliases) for name, aliases in _FIELD_ALIASES.items()
    }
    errors: list[str] = []

    age = _parse_age(values["age"], errors)
    height_cm = _parse_bounded(
        values["height_cm"], "Height", "cm", MIN_HEIGHT_CM, MAX_HEIGHT_CM, errors
    )
    weight_kg = _parse_bounded(
        values["weight_kg"], "Weight", "kg", MIN_WEIGHT_KG, MAX_WEIGHT_KG, errors
    )
    gender = _parse_gender(values["gender"], errors)
    fitness_goal = _parse_enum(
        values["fitness_goal"], FitnessGoal, "fitness goal", errors
    )
    activity_level = _parse_enum(
        values["activity_level"], ActivityLevel, "activity level", errors
    )
    conditions = _parse_strings(
        values["health_conditions"], "Health conditions", errors
    )
    preferences = _parse_strings(
        values["dietary_preferences"], "Dietary preferences", errors
    )

    if (
        errors
        or age is None
        or height_cm is None
        or weight_kg is None
        or not isinstance(fitness_goal, FitnessGoal)
        or not isinstance(activity_level, ActivityLevel)
    ):
        return ProfileValidationResult(profile=None, errors=errors)

    health_conditions: tuple[HealthCondition, ...] = tuple(
        parse_condition(name) for name in conditions
    )
    profile = UserProfile(
        age=age,
        height_cm=height_cm,
        weight_kg=weight_kg,
        fitness_goal=fitness_goal,
        activity_level=activity_level,
        gender=gender,
        health_conditions=health_conditions,
        dietary_preferences=tuple(preferences),
    )
    return ProfileValidationResult(profile=profile)


def _lookup(raw: Mapping[str, object], aliases: tuple[str, ...]) -> object | None:
    for key in aliases:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _parse_age(value: object, errors: list[str]) -> int | None:
    message = f"Age must be between {MIN_AGE} and {MAX_AGE}"
    number = _to_number(value)
    if number is None or not float(number).is_integer():
        errors.append(message)
        return None
    age = int(number)
    if age < MIN_AGE or age > MAX_AGE:
        errors.append(message)
        return None
    return age


def _parse_bounded(  # noqa: PLR0913
    value: object,
    label: str,
    unit: str,
    minimum: float,
    maximum: float,
    errors: list[str],
) -> float | None:
    number = _to_number(value)
    if number is None or number <= 0 or number < minimum or number > maximum:
        errors.append(f"{label} must be between {minimum:g} and {maximum:g} {unit}")
        return None
    return float(number)


def _parse_gender(value: object, errors: list[str]) -> Gender | None:
    if value is None:
        return None
    if not isinstance(value, str):
        errors.append("Gender must be 'male' or 'female'")
        return None
    cleaned = value.strip().lower()
    if not cleaned:
        return None
    try:
        return Gender(cleaned)
    except ValueError:
        errors.append("Gender must be 'male' or 'female'")
        return None


def _parse_enum(
    value: object, enum_type: type[StrEnum], label: str, errors: list[str]
) -> StrEnum | None:
    allowed = ", ".join(member.value for member in enum_type)
    if not isinstance(value, str) or not value.strip():
        errors.append(f"Please select a {label} ({allowed})")
        return None
    try:
        return enum_type(value.strip().lower())
    except ValueError:
        errors.append(f"Unknown {label} '{value}'; expected one of: {allowed}")
        return None


def _parse_strings(value: object, label: str, errors: list[str]) -> list[str]:
    """Trim, lower-case and de-duplicate a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items: list[object] = list(value.split(","))
    elif isinstance(value, list | tuple):
        items = list(value)
    elif isinstance(value, set | frozenset):
        items = sorted(value, key=str)
    else:
        errors.append(f"{label} must be a list of strings")
        return []

    normalized: list[str] = []
    for item in items:
        if not isinstance(item, str):
            errors.append(f"{label} must be a list of strings")
            return []
        cleaned = item.strip().lower()
        if not cleaned or cleaned == _NONE_PLACEHOLDER or cleaned in normalized:
            continue
        normalized.append(cleaned)
    return normalized


def _to_number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number
