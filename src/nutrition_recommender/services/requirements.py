"""Daily nutrient requirement calculations."""

import logging
import math
from dataclasses import dataclass

from nutrition_recommender.domain.nutrients import (
    NUTRIENT_LABELS,
    Nutrient,
    NutrientVector,
)
from nutrition_recommender.domain.profile import (
    ActivityLevel,
    FitnessGoal,
    Gender,
    KnownCondition,
    UserProfile,
)
from nutrition_recommender.domain.requirements import (
    DailyRequirements,
    NutrientStatus,
    NutrientStatusLevel,
)

_logger = logging.getLogger(__name__)

_GENDER_CONSTANTS: dict[Gender, float] = {
    Gender.MALE: 5.0,
    Gender.FEMALE: -161.0,
}
# No gender given: mean of both constants rather than picking one formula.
UNSPECIFIED_GENDER_CONSTANT = sum(_GENDER_CONSTANTS.values()) / len(_GENDER_CONSTANTS)

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.HIGH: 1.9,
}

GOAL_CALORIE_FACTORS: dict[FitnessGoal, float] = {
    FitnessGoal.MUSCLE_GAIN: 1.15,
    FitnessGoal.WEIGHT_LOSS: 0.80,
    FitnessGoal.ENDURANCE: 1.0,
    FitnessGoal.GENERAL_WELLNESS: 1.0,
}

# Weight-loss targets never drop below this multiple of BMR.
WEIGHT_LOSS_FLOOR_FACTOR = 1.2

PROTEIN_G_PER_KG: dict[FitnessGoal, float] = {
    FitnessGoal.MUSCLE_GAIN: 2.2,
    FitnessGoal.WEIGHT_LOSS: 1.8,
    FitnessGoal.ENDURANCE: 1.4,
    FitnessGoal.GENERAL_WELLNESS: 1.2,
}

FAT_CALORIE_SHARE: dict[FitnessGoal, float] = {
    FitnessGoal.MUSCLE_GAIN: 0.25,
    FitnessGoal.WEIGHT_LOSS: 0.30,
    FitnessGoal.ENDURANCE: 0.20,
    FitnessGoal.GENERAL_WELLNESS: 0.25,
}

KCAL_PER_G_PROTEIN = 4.0
KCAL_PER_G_CARBS = 4.0
KCAL_PER_G_FAT = 9.0

ANTIOXIDANTS_ORAC_TARGET = 5000.0


@dataclass(frozen=True)
class _ReferenceIntake:
    """Reference daily intakes for one age bracket, as (male, female)."""

    max_age: int
    fiber_g: tuple[float, float]
    vitamin_c_mg: tuple[float, float]
    potassium_mg: tuple[float, float]
    magnesium_mg: tuple[float, float]
    vitamin_b6_mg: tuple[float, float]


# Dietary Reference Intakes (adequate intake / RDA) by age bracket.
_REFERENCE_INTAKES: tuple[_ReferenceIntake, ...] = (
    _ReferenceIntake(13, (31, 26), (45, 45), (2500, 2300), (240, 240), (1.0, 1.0)),
    _ReferenceIntake(18, (38, 26), (75, 65), (3000, 2300), (410, 360), (1.3, 1.2)),
    _ReferenceIntake(30, (38, 25), (90, 75), (3400, 2600), (400, 310), (1.3, 1.3)),
    _ReferenceIntake(50, (38, 25), (90, 75), (3400, 2600), (420, 320), (1.3, 1.3)),
    _ReferenceIntake(70, (30, 21), (90, 75), (3400, 2600), (420, 320), (1.7, 1.5)),
    _ReferenceIntake(200, (30, 21), (90, 75), (3400, 2600), (420, 320), (1.7, 1.5)),
)

_CONDITION_ADJUSTMENTS: dict[KnownCondition, dict[Nutrient, float]] = {
    KnownCondition.DIABETES: {Nutrient.CARBS_G: 0.8, Nutrient.FIBER_G: 1.2},
    KnownCondition.HYPERTENSION: {Nutrient.POTASSIUM_MG: 1.2},
    KnownCondition.HEART: {Nutrient.FIBER_G: 1.3, Nutrient.FAT_G: 0.85},
    KnownCondition.KIDNEY: {Nutrient.PROTEIN_G: 0.8, Nutrient.POTASSIUM_MG: 0.7},
}

DEFICIENT_BELOW_PERCENT = 80.0
EXCESS_ABOVE_PERCENT = 120.0

_DEFICIENCY_MESSAGES: dict[Nutrient, str] = {
    Nutrient.CALORIES: "Increase your calorie intake with energy-dense products.",
    Nutrient.PROTEIN_G: "Boost protein intake to support muscle recovery.",
    Nutrient.CARBS_G: "Add more carbohydrates for sustained energy.",
    Nutrient.FIBER_G: "Increase fiber intake for digestive health.",
    Nutrient.FAT_G: "Include a source of healthy fats.",
    Nutrient.VITAMIN_C_MG: "Support immunity with vitamin C rich products.",
    Nutrient.POTASSIUM_MG: "Support muscle function with potassium rich products.",
    Nutrient.MAGNESIUM_MG: "Optimize energy metabolism with magnesium rich options.",
    Nutrient.VITAMIN_B6_MG: "Support protein metabolism with vitamin B6 rich options.",
    Nutrient.ANTIOXIDANTS_ORAC: "Add antioxidant rich products to your day.",
}


def calculate_bmr(profile: UserProfile) -> float:
    """Basal metabolic rate via the Mifflin-St Jeor equation."""
    if profile.gender is None:
        constant = UNSPECIFIED_GENDER_CONSTANT
    else:
        constant = _GENDER_CONSTANTS[profile.gender]
    bmr = (
        10 * profile.weight_kg
        + 6.25 * profile.height_cm
        - 5 * profile.age
        + constant
    )
    return max(bmr, 0.0)


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Total daily energy expenditure for an activity level."""
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def adjust_calories_for_goal(bmr: float, tdee: float, goal: FitnessGoal) -> float:
    """Scale TDEE by the goal factor, never dropping below the BMR floor."""
    calories = tdee * GOAL_CALORIE_FACTORS[goal]
    if goal is FitnessGoal.WEIGHT_LOSS:
        calories = max(calories, bmr * WEIGHT_LOSS_FLOOR_FACTOR)
    return calories


def calculate_daily_requirements(
    profile: UserProfile, *, apply_condition_adjustments: bool = True
) -> DailyRequirements:
    """Derive the full daily requirement vector for a validated profile."""
    bmr = calculate_bmr(profile)
    tdee = calculate_tdee(bmr, profile.activity_level)
    calories = adjust_calories_for_goal(bmr, tdee, profile.fitness_goal)

    protein_g = profile.weight_kg * PROTEIN_G_PER_KG[profile.fitness_goal]
    fat_g = calories * FAT_CALORIE_SHARE[profile.fitness_goal] / KCAL_PER_G_FAT
    carb_calories = (
        calories - protein_g * KCAL_PER_G_PROTEIN - fat_g * KCAL_PER_G_FAT
    )
    carbs_g = max(carb_calories, 0.0) / KCAL_PER_G_CARBS

    intake = _reference_intake(profile.age)
    index = _gender_index(profile.gender)
    amounts: dict[Nutrient, float] = {
        Nutrient.CALORIES: calories,
        Nutrient.PROTEIN_G: protein_g,
        Nutrient.CARBS_G: carbs_g,
        Nutrient.FAT_G: fat_g,
        Nutrient.FIBER_G: _pick(intake.fiber_g, index),
        Nutrient.VITAMIN_C_MG: _pick(intake.vitamin_c_mg, index),
        Nutrient.POTASSIUM_MG: _pick(intake.potassium_mg, index),
        Nutrient.MAGNESIUM_MG: _pick(intake.magnesium_mg, index),
        Nutrient.VITAMIN_B6_MG: _pick(intake.vitamin_b6_mg, index),
        Nutrient.ANTIOXIDANTS_ORAC: ANTIOXIDANTS_ORAC_TARGET,
    }

    if apply_condition_adjustments:
        for condition in profile.known_conditions:
            for nutrient, factor in _CONDITION_ADJUSTMENTS.get(condition, {}).items():
                amounts[nutrient] *= factor

    targets = NutrientVector(
        **{nutrient.value: _clean(amount) for nutrient, amount in amounts.items()}
    )
    _logger.debug(
        "Requirements computed: bmr=%.2f tdee=%.2f calories=%.2f",
        bmr,
        tdee,
        targets.calories,
    )
    return DailyRequirements(targets=targets, bmr=bmr, tdee=tdee)


def nutrient_status(
    current: NutrientVector, required: DailyRequirements
) -> list[NutrientStatus]:
    """Compare intake to requirements for every dimension."""
    statuses = []
    for nutrient in Nutrient:
        required_amount = required.get(nutrient)
        current_amount = current.get(nutrient)
        if required_amount > 0:
            percentage = current_amount / required_amount * 100
        else:
            percentage = 100.0
        if percentage < DEFICIENT_BELOW_PERCENT:
            level = NutrientStatusLevel.DEFICIENT
        elif percentage > EXCESS_ABOVE_PERCENT:
            level = NutrientStatusLevel.EXCESS
        else:
            level = NutrientStatusLevel.ADEQUATE
        statuses.append(
            NutrientStatus(
                nutrient=nutrient,
                current=current_amount,
                required=required_amount,
                percentage=round(percentage, 1),
                status=level,
            )
        )
    return statuses


def deficiency_message(statuses: list[NutrientStatus]) -> str:
    """Return advice for the first deficient dimension."""
    for status in statuses:
        if status.status is NutrientStatusLevel.DEFICIENT:
            return _DEFICIENCY_MESSAGES.get(
                status.nutrient,
                f"Focus on adding {NUTRIENT_LABELS[status.nutrient]}.",
            )
    return "Your nutrition is well-balanced!"


def _reference_intake(age: int) -> _ReferenceIntake:
    for intake in _REFERENCE_INTAKES:
        if age <= intake.max_age:
            return intake
    return _REFERENCE_INTAKES[-1]


def _gender_index(gender: Gender | None) -> int | None:
    if gender is Gender.MALE:
        return 0
    if gender is Gender.FEMALE:
        return 1
    return None


def _pick(values: tuple[float, float], index: int | None) -> float:
    if index is None:
        return max(values)
    return values[index]


def _clean(amount: float) -> float:
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount
