"""Nutrient dimensions and vectors."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum


class Nutrient(StrEnum):
    """Nutrient dimensions tracked by the engine."""

    CALORIES = "calories"
    PROTEIN_G = "protein_g"
    CARBS_G = "carbs_g"
    FAT_G = "fat_g"
    FIBER_G = "fiber_g"
    VITAMIN_C_MG = "vitamin_c_mg"
    POTASSIUM_MG = "potassium_mg"
    MAGNESIUM_MG = "magnesium_mg"
    VITAMIN_B6_MG = "vitamin_b6_mg"
    ANTIOXIDANTS_ORAC = "antioxidants_orac"


NUTRIENT_LABELS: dict[Nutrient, str] = {
    Nutrient.CALORIES: "calories",
    Nutrient.PROTEIN_G: "protein",
    Nutrient.CARBS_G: "carbohydrates",
    Nutrient.FAT_G: "fat",
    Nutrient.FIBER_G: "fiber",
    Nutrient.VITAMIN_C_MG: "vitamin C",
    Nutrient.POTASSIUM_MG: "potassium",
    Nutrient.MAGNESIUM_MG: "magnesium",
    Nutrient.VITAMIN_B6_MG: "vitamin B6",
    Nutrient.ANTIOXIDANTS_ORAC: "antioxidants",
}

NUTRIENT_UNITS: dict[Nutrient, str] = {
    Nutrient.CALORIES: "kcal",
    Nutrient.PROTEIN_G: "g",
    Nutrient.CARBS_G: "g",
    Nutrient.FAT_G: "g",
    Nutrient.FIBER_G: "g",
    Nutrient.VITAMIN_C_MG: "mg",
    Nutrient.POTASSIUM_MG: "mg",
    Nutrient.MAGNESIUM_MG: "mg",
    Nutrient.VITAMIN_B6_MG: "mg",
    Nutrient.ANTIOXIDANTS_ORAC: "ORAC",
}

# Storefront payloads use short camelCase names.
_ALIASES: dict[str, Nutrient] = {
    "protein": Nutrient.PROTEIN_G,
    "carbs": Nutrient.CARBS_G,
    "fat": Nutrient.FAT_G,
    "fiber": Nutrient.FIBER_G,
    "vitaminC": Nutrient.VITAMIN_C_MG,
    "vitamin_c": Nutrient.VITAMIN_C_MG,
    "potassium": Nutrient.POTASSIUM_MG,
    "magnesium": Nutrient.MAGNESIUM_MG,
    "vitaminB6": Nutrient.VITAMIN_B6_MG,
    "vitamin_b6": Nutrient.VITAMIN_B6_MG,
    "antioxidants": Nutrient.ANTIOXIDANTS_ORAC,
}


@dataclass(frozen=True)
class NutrientVector:
    """Non-negative amount for every nutrient dimension."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    vitamin_c_mg: float = 0.0
    potassium_mg: float = 0.0
    magnesium_mg: float = 0.0
    vitamin_b6_mg: float = 0.0
    antioxidants_orac: float = 0.0

    def __post_init__(self) -> None:
        for item in fields(self):
            object.__setattr__(
                self, item.name, _non_negative(getattr(self, item.name))
            )

    @classmethod
    def zero(cls) -> "NutrientVector":
        """Return a vector with every dimension at zero."""
        return cls()

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "NutrientVector":
        """Build a vector from a mapping keyed by nutrient name or alias."""
        amounts: dict[str, float] = {}
        for key, value in values.items():
            nutrient = _resolve_key(key)
            if nutrient is None:
                continue
            amounts[nutrient.value] = _to_float(value)
        return cls(**amounts)

    def get(self, nutrient: Nutrient) -> float:
        """Return the amount for a dimension."""
        return getattr(self, nutrient.value)

    def scaled(self, factor: float) -> "NutrientVector":
        """Return the vector multiplied by a non-negative factor."""
        factor = max(factor, 0.0)
        return NutrientVector(
            **{nutrient.value: self.get(nutrient) * factor for nutrient in Nutrient}
        )

    def plus(self, other: "NutrientVector") -> "NutrientVector":
        """Return the dimension-wise sum."""
        return NutrientVector(
            **{
                nutrient.value: self.get(nutrient) + other.get(nutrient)
                for nutrient in Nutrient
            }
        )

    def minus(self, other: "NutrientVector") -> "NutrientVector":
        """Return the dimension-wise difference floored at zero."""
        return NutrientVector(
            **{
                nutrient.value: max(self.get(nutrient) - other.get(nutrient), 0.0)
                for nutrient in Nutrient
            }
        )

    def is_zero(self) -> bool:
        """Return True when no dimension holds a positive amount."""
        return all(self.get(nutrient) <= 0 for nutrient in Nutrient)

    def as_dict(self) -> dict[str, float]:
        """Return the vector keyed by nutrient name, in dimension order."""
        return {nutrient.value: self.get(nutrient) for nutrient in Nutrient}


def _resolve_key(key: str) -> Nutrient | None:
    try:
        return Nutrient(key)
    except ValueError:
        return _ALIASES.get(key)


def _non_negative(value: object) -> float:
    amount = _to_float(value)
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def _to_float(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0
