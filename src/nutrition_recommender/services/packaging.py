"""Greedy assembly of a daily product package.

The optimizer treats the requirement vector as a multi-dimensional bin to
cover. Each step adds one increment of the product with the best marginal
value per unit price, where marginal value only counts the part of the
increment that still reduces the remaining need. Every step produces a new
:class:`OptimizerState`; nothing is mutated in place.
"""

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace

from nutrition_recommender.domain.engine import EngineConfig
from nutrition_recommender.domain.nutrients import Nutrient, NutrientVector
from nutrition_recommender.domain.profile import FitnessGoal
from nutrition_recommender.domain.recommendations import (
    DailyPackage,
    PersonalizedRecommendation,
)
from nutrition_recommender.domain.requirements import DailyRequirements
from nutrition_recommender.services.ranking import servings_for, step_grams

_logger = logging.getLogger(__name__)

MIN_INCREMENT_PRICE = 0.01


@dataclass(frozen=True)
class OptimizerState:
    """Remaining need and grams selected so far, in first-selection order."""

    remaining: NutrientVector
    selection: tuple[tuple[str, float], ...] = field(default_factory=tuple)
    totals: NutrientVector = field(default_factory=NutrientVector.zero)
    iterations: int = 0

    def grams_for(self, product_id: str) -> float:
        """Return grams selected for a product."""
        for selected_id, grams in self.selection:
            if selected_id == product_id:
                return grams
        return 0.0

    def with_increment(
        self, product_id: str, grams: float, contribution: NutrientVector
    ) -> "OptimizerState":
        """Return a new state with one more increment of a product."""
        selection = list(self.selection)
        for index, (selected_id, current) in enumerate(selection):
            if selected_id == product_id:
                selection[index] = (selected_id, current + grams)
                break
        else:
            selection.append((product_id, grams))
        return OptimizerState(
            remaining=self.remaining.minus(contribution),
            selection=tuple(selection),
            totals=self.totals.plus(contribution),
            iterations=self.iterations + 1,
        )

    @property
    def is_covered(self) -> bool:
        """Return True when no dimension has remaining need."""
        return self.remaining.is_zero()


def coverage_percentage(
    totals: NutrientVector, requirements: DailyRequirements
) -> float:
    """Mean per-dimension coverage, each dimension capped at 100."""
    shares = []
    for nutrient in Nutrient:
        required = requirements.get(nutrient)
        if required <= 0:
            continue
        shares.append(min(100.0, totals.get(nutrient) / required * 100))
    if not shares:
        return 0.0
    return round(min(max(sum(shares) / len(shares), 0.0), 100.0), 2)


@dataclass
class PackageOptimizer:
    """Select products and quantities that cover the daily requirements."""

    config: EngineConfig = field(default_factory=EngineConfig)

    def iterate(
        self,
        candidates: Sequence[PersonalizedRecommendation],
        requirements: DailyRequirements,
        goal: FitnessGoal,
    ) -> Iterator[OptimizerState]:
        """Yield the initial state and the state after every greedy step."""
        weights = self.config.weights_for(goal)
        state = OptimizerState(remaining=requirements.targets)
        yield state
        budget = max(self.config.optimizer_iteration_budget, 0)
        while state.iterations < budget and not state.is_covered:
            best: PersonalizedRecommendation | None = None
            best_value = 0.0
            for candidate in candidates:
                value = self.marginal_value(candidate, state, requirements, weights)
                if value > best_value:
                    best, best_value = candidate, value
            if best is None:
                break
            grams = step_grams(best.product, self.config)
            state = state.with_increment(
                best.product.id, grams, best.product.contribution(grams)
            )
            yield state

    def marginal_value(
        self,
        candidate: PersonalizedRecommendation,
        state: OptimizerState,
        requirements: DailyRequirements,
        weights: Mapping[Nutrient, float],
    ) -> float:
        """Weighted uncovered need one increment removes, per unit price.

        Returns 0 for products whose next increment would exceed the
        per-product quantity cap.
        """
        product = candidate.product
        grams = step_grams(product, self.config)
        selected = state.grams_for(product.id)
        if selected + grams > self.config.max_quantity_per_product_grams:
            return 0.0
        increment = product.contribution(grams)
        value = 0.0
        for nutrient, weight in weights.items():
            required = requirements.get(nutrient)
            if required <= 0:
                continue
            useful = min(state.remaining.get(nutrient), increment.get(nutrient))
            value += weight * useful / required
        if value <= 0:
            return 0.0
        price = product.price_for(grams)
        if price < MIN_INCREMENT_PRICE:
            _logger.debug("Price floor applied: product=%s", product.id)
            price = MIN_INCREMENT_PRICE
        return value / price

    def optimize(
        self,
        candidates: Sequence[PersonalizedRecommendation],
        requirements: DailyRequirements,
        goal: FitnessGoal,
    ) -> DailyPackage:
        """Run the greedy loop to completion and build the package."""
        state = OptimizerState(remaining=requirements.targets)
        for state in self.iterate(candidates, requirements, goal):
            pass
        package = self.build_package(candidates, requirements, state)
        _logger.info(
            "Package optimized: products=%s iterations=%s coverage=%s meets=%s",
            len(package.recommendations),
            package.iterations,
            package.coverage_percentage,
            package.meets_requirements,
        )
        return package

    def build_package(
        self,
        candidates: Sequence[PersonalizedRecommendation],
        requirements: DailyRequirements,
        state: OptimizerState,
    ) -> DailyPackage:
        """Turn a final optimizer state into a DailyPackage."""
        if not state.selection:
            return replace(DailyPackage.empty(), iterations=state.iterations)
        selected = dict(state.selection)
        recommendations = []
        total_price = 0.0
        for candidate in candidates:
            grams = selected.get(candidate.product.id)
            if not grams:
                continue
            recommendations.append(
                replace(
                    candidate,
                    daily_quantity_g=grams,
                    servings=servings_for(candidate.product, grams),
                    nutrition_contribution=candidate.product.contribution(grams),
                )
            )
            total_price += candidate.product.price_for(grams)
        return DailyPackage(
            recommendations=tuple(recommendations),
            totals=state.totals,
            total_price=round(total_price, 2),
            coverage_percentage=coverage_percentage(state.totals, requirements),
            meets_requirements=state.is_covered,
            iterations=state.iterations,
        )
