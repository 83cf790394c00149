"""User profile domain models."""

from dataclasses import dataclass, field
from enum import StrEnum


class Gender(StrEnum):
    """Biological sex used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"


class FitnessGoal(StrEnum):
    """Fitness goal selected by the user."""

    MUSCLE_GAIN = "muscle-gain"
    WEIGHT_LOSS = "weight-loss"
    ENDURANCE = "endurance"
    GENERAL_WELLNESS = "general-wellness"


class ActivityLevel(StrEnum):
    """Self-reported daily activity level."""

    SEDENTARY = "sedentary"
    MODERATE = "moderate"
    HIGH = "high"


class KnownCondition(StrEnum):
    """Health conditions covered by the safety rule table."""

    DIABETES = "diabetes"
    HYPERTENSION = "hypertension"
    HEART = "heart"
    KIDNEY = "kidney"
    ALLERGIES = "allergies"


@dataclass(frozen=True)
class CustomCondition:
    """Free-form health condition entered by the user."""

    name: str

    def __str__(self) -> str:
        return self.name


HealthCondition = KnownCondition | CustomCondition


def parse_condition(value: str) -> HealthCondition:
    """Map a normalized condition name to a known or custom condition."""
    try:
        return KnownCondition(value)
    except ValueError:
        return CustomCondition(value)


@dataclass(frozen=True)
class UserProfile:
    """Validated physiological profile of a user."""

    age: int
    height_cm: float
    weight_kg: float
    fitness_goal: FitnessGoal
    activity_level: ActivityLevel
    gender: Gender | None = None
    health_conditions: tuple[HealthCondition, ...] = field(default_factory=tuple)
    dietary_preferences: tuple[str, ...] = field(default_factory=tuple)

    @property
    def known_conditions(self) -> tuple[KnownCondition, ...]:
        """Return conditions that have safety rules."""
        return tuple(
            condition
            for condition in self.health_conditions
            if isinstance(condition, KnownCondition)
        )

    @property
    def custom_conditions(self) -> tuple[CustomCondition, ...]:
        """Return free-form conditions."""
        return tuple(
            condition
            for condition in self.health_conditions
            if isinstance(condition, CustomCondition)
        )
