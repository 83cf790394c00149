"""Tunables for the recommendation pipeline."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from nutrition_recommender.domain.nutrients import Nutrient
from nutrition_recommender.domain.profile import FitnessGoal

_BASE_WEIGHTS: dict[Nutrient, float] = {nutrient: 1.0 for nutrient in Nutrient}

DEFAULT_DIMENSION_WEIGHTS: Mapping[FitnessGoal, Mapping[Nutrient, float]] = (
    MappingProxyType(
        {
            FitnessGoal.MUSCLE_GAIN: MappingProxyType(
                {
                    **_BASE_WEIGHTS,
                    Nutrient.PROTEIN_G: 3.0,
                    Nutrient.FIBER_G: 2.0,
                    Nutrient.CALORIES: 1.5,
                    Nutrient.MAGNESIUM_MG: 1.5,
                }
            ),
            FitnessGoal.WEIGHT_LOSS: MappingProxyType(
                {
                    **_BASE_WEIGHTS,
                    Nutrient.FIBER_G: 3.0,
                    Nutrient.PROTEIN_G: 2.0,
                    Nutrient.CALORIES: 0.5,
                    Nutrient.FAT_G: 0.5,
                }
            ),
            FitnessGoal.ENDURANCE: MappingProxyType(
                {
                    **_BASE_WEIGHTS,
                    Nutrient.CARBS_G: 3.0,
                    Nutrient.CALORIES: 2.0,
                    Nutrient.POTASSIUM_MG: 2.0,
                    Nutrient.MAGNESIUM_MG: 1.5,
                }
            ),
            FitnessGoal.GENERAL_WELLNESS: MappingProxyType(
                {
                    **_BASE_WEIGHTS,
                    Nutrient.VITAMIN_C_MG: 3.0,
                    Nutrient.ANTIOXIDANTS_ORAC: 3.0,
                    Nutrient.FIBER_G: 1.5,
                }
            ),
        }
    )
)


@dataclass(frozen=True)
class EngineConfig:
    """Recognized tunables of the pipeline."""

    max_recommendations: int = 6
    increment_grams: int = 10
    max_quantity_per_product_grams: int = 500
    optimizer_iteration_budget: int = 500
    dimension_weights: Mapping[FitnessGoal, Mapping[Nutrient, float]] = field(
        default_factory=lambda: DEFAULT_DIMENSION_WEIGHTS
    )
    apply_condition_adjustments: bool = True

    def weights_for(self, goal: FitnessGoal) -> dict[Nutrient, float]:
        """Return non-negative weights for every dimension of a goal."""
        configured = (
            self.dimension_weights.get(goal) or DEFAULT_DIMENSION_WEIGHTS[goal]
        )
        return {
            nutrient: max(float(configured.get(nutrient, 1.0)), 0.0)
            for nutrient in Nutrient
        }
