"""Rule-based food safety screening.

Every health condition and dietary preference of a profile is evaluated
against each product on its own. Each one yields a local verdict and the
product's final level is the most severe of them, so one ``avoid`` verdict
cannot be outweighed by any number of ``safe`` ones. Reasons from every
non-safe verdict are kept so the user sees all applicable warnings.

Only :class:`KnownCondition` values have rules. Free-form conditions, and
known conditions missing from the rule table, always produce a ``caution``
verdict: the engine cannot vouch for a product against a condition it has no
rule for. Alternatives offered for a flagged product are safe under the
whole profile.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from nutrition_recommender.domain.catalog import Product
from nutrition_recommender.domain.nutrients import (
    NUTRIENT_LABELS,
    NUTRIENT_UNITS,
    Nutrient,
)
from nutrition_recommender.domain.profile import (
    HealthCondition,
    KnownCondition,
    UserProfile,
)
from nutrition_recommender.domain.safety import FoodSafetyResult, SafetyLevel

_logger = logging.getLogger(__name__)

MAX_ALTERNATIVES = 3
SAFE_MICRO_COPY = "Safe for your profile."


@dataclass(frozen=True)
class NutrientThreshold:
    """Per-serving limit for one nutrient."""

    nutrient: Nutrient
    limit: float
    level: SafetyLevel = SafetyLevel.CAUTION

    def exceeded_by(self, product: Product) -> bool:
        """Return True if one serving of the product is above the limit."""
        return product.per_serving.get(self.nutrient) > self.limit

    def describe(self, product: Product) -> str:
        """Describe the violation for a product."""
        unit = NUTRIENT_UNITS[self.nutrient]
        amount = product.per_serving.get(self.nutrient)
        return (
            f"{NUTRIENT_LABELS[self.nutrient]} {amount:g} {unit} per serving "
            f"exceeds {self.limit:g} {unit}"
        )


@dataclass(frozen=True)
class SafetyRule:
    """Safety rule for one condition or preference."""

    label: str
    reason: str
    avoid_micro_copy: str
    caution_micro_copy: str
    avoid_tags: frozenset[str] = field(default_factory=frozenset)
    caution_tags: frozenset[str] = field(default_factory=frozenset)
    thresholds: tuple[NutrientThreshold, ...] = field(default_factory=tuple)
    advice: str | None = None

    def evaluate(self, product: Product) -> tuple[SafetyLevel, list[str]]:
        """Return the local verdict and the triggered details."""
        level = SafetyLevel.SAFE
        details: list[str] = []
        for tag in sorted(self.avoid_tags & product.safety_tags):
            level = max(level, SafetyLevel.AVOID)
            details.append(f"tagged {tag}")
        for tag in sorted(self.caution_tags & product.safety_tags):
            level = max(level, SafetyLevel.CAUTION)
            details.append(f"tagged {tag}")
        for threshold in self.thresholds:
            if threshold.exceeded_by(product):
                level = max(level, threshold.level)
                details.append(threshold.describe(product))
        return level, details

    def format_reason(self, details: list[str]) -> str:
        """Render the reason for a non-safe verdict."""
        return f"{self.label}: {self.reason} ({'; '.join(details)})"

    def micro_copy_for(self, level: SafetyLevel) -> str:
        """Return the one-sentence copy for a verdict."""
        if level is SafetyLevel.AVOID:
            return self.avoid_micro_copy
        return self.caution_micro_copy


DEFAULT_CONDITION_RULES: dict[KnownCondition, SafetyRule] = {
    KnownCondition.KIDNEY: SafetyRule(
        label="Kidney condition",
        reason="high potassium or protein can strain kidney function",
        avoid_micro_copy="Avoid: too much potassium for kidney health.",
        caution_micro_copy="Use with caution: keep portions small for kidney health.",
        avoid_tags=frozenset({"high-potassium", "high-protein"}),
        thresholds=(
            NutrientThreshold(Nutrient.POTASSIUM_MG, 300, SafetyLevel.AVOID),
            NutrientThreshold(Nutrient.PROTEIN_G, 5),
        ),
        advice="Select lower potassium options and consult your healthcare provider.",
    ),
    KnownCondition.DIABETES: SafetyRule(
        label="Diabetes",
        reason="high sugar or carbohydrate content may affect blood sugar levels",
        avoid_micro_copy="Avoid: high sugar content may spike blood sugar.",
        caution_micro_copy="Limit due to high carbs; monitor blood sugar.",
        avoid_tags=frozenset({"high-sugar"}),
        thresholds=(NutrientThreshold(Nutrient.CARBS_G, 25),),
        advice="Focus on high-fiber, lower-carb options and pair them with protein.",
    ),
    KnownCondition.HYPERTENSION: SafetyRule(
        label="Hypertension",
        reason="sodium raises blood pressure",
        avoid_micro_copy="Avoid: high sodium is not suitable for blood pressure.",
        caution_micro_copy="Use with caution: watch sodium for blood pressure.",
        avoid_tags=frozenset({"high-sodium"}),
        advice="Choose potassium-rich, naturally low-sodium options.",
    ),
    KnownCondition.HEART: SafetyRule(
        label="Heart condition",
        reason="fat and sodium should be limited for cardiovascular health",
        avoid_micro_copy="Avoid: not heart-friendly.",
        caution_micro_copy="Use with caution: higher fat content.",
        avoid_tags=frozenset({"high-fat", "high-sodium"}),
        thresholds=(NutrientThreshold(Nutrient.FAT_G, 5),),
        advice="Prioritize high-fiber, low-fat options for cardiovascular health.",
    ),
    KnownCondition.ALLERGIES: SafetyRule(
        label="Allergies",
        reason="the product contains common allergens",
        avoid_micro_copy="Avoid: contains common allergens.",
        caution_micro_copy="Check the label for possible cross-contamination.",
        avoid_tags=frozenset({"contains-nuts", "contains-allergens"}),
        caution_tags=frozenset({"may-contain-allergens"}),
        advice="Always check labels for potential cross-contamination.",
    ),
}

DEFAULT_PREFERENCE_RULES: dict[str, SafetyRule] = {
    "nut-free": SafetyRule(
        label="Nut-free preference",
        reason="the product contains nuts",
        avoid_micro_copy="Avoid: contains nuts.",
        caution_micro_copy="May contain traces of nuts.",
        avoid_tags=frozenset({"contains-nuts"}),
        caution_tags=frozenset({"may-contain-nuts"}),
    ),
    "gluten-free": SafetyRule(
        label="Gluten-free preference",
        reason="the product contains gluten",
        avoid_micro_copy="Avoid: contains gluten.",
        caution_micro_copy="May contain traces of gluten.",
        avoid_tags=frozenset({"contains-gluten"}),
        caution_tags=frozenset({"may-contain-gluten"}),
    ),
    "vegan": SafetyRule(
        label="Vegan preference",
        reason="the product is animal-derived",
        avoid_micro_copy="Avoid: not vegan.",
        caution_micro_copy="Check the label: may not be vegan.",
        avoid_tags=frozenset({"animal-derived", "contains-dairy", "contains-meat"}),
    ),
    "vegetarian": SafetyRule(
        label="Vegetarian preference",
        reason="the product contains meat",
        avoid_micro_copy="Avoid: not vegetarian.",
        caution_micro_copy="Check the label: may not be vegetarian.",
        avoid_tags=frozenset({"contains-meat"}),
    ),
    "low-sugar": SafetyRule(
        label="Low-sugar preference",
        reason="the product is high in sugar",
        avoid_micro_copy="Avoid: high in sugar.",
        caution_micro_copy="Limit portions: high in sugar.",
        caution_tags=frozenset({"high-sugar"}),
    ),
    "low-sodium": SafetyRule(
        label="Low-sodium preference",
        reason="the product is high in sodium",
        avoid_micro_copy="Avoid: high in sodium.",
        caution_micro_copy="Limit portions: high in sodium.",
        caution_tags=frozenset({"high-sodium"}),
    ),
}


def unrecognized_condition_reason(condition: HealthCondition) -> str:
    """Reason recorded for a condition without safety rules."""
    return (
        f"Condition '{condition}' is not recognized; "
        "consult your healthcare provider before adding this product."
    )


UNRECOGNIZED_MICRO_COPY = (
    "Condition not recognized; consult your healthcare provider "
    "before adding this product."
)


@dataclass(frozen=True)
class _Verdict:
    level: SafetyLevel
    reason: str
    micro_copy: str


@dataclass
class SafetyScreener:
    """Classify catalog products against a profile's conditions and preferences."""

    condition_rules: Mapping[KnownCondition, SafetyRule] = field(
        default_factory=lambda: dict(DEFAULT_CONDITION_RULES)
    )
    preference_rules: Mapping[str, SafetyRule] = field(
        default_factory=lambda: dict(DEFAULT_PREFERENCE_RULES)
    )
    max_alternatives: int = MAX_ALTERNATIVES

    def screen_catalog(
        self, profile: UserProfile, catalog: Sequence[Product]
    ) -> list[FoodSafetyResult]:
        """Screen every product, preserving catalog order."""
        results = [self.screen(profile, product, catalog) for product in catalog]
        flagged = sum(1 for result in results if not result.is_safe)
        _logger.info(
            "Safety screening: products=%s flagged=%s conditions=%s",
            len(results),
            flagged,
            len(profile.health_conditions),
        )
        return results

    def screen(
        self,
        profile: UserProfile,
        product: Product,
        catalog: Sequence[Product] = (),
    ) -> FoodSafetyResult:
        """Classify one product; alternatives are drawn from the catalog."""
        verdicts = self._verdicts(profile, product)
        non_safe = [v for v in verdicts if v.level is not SafetyLevel.SAFE]
        level = SafetyLevel.worst([v.level for v in verdicts])
        if level is SafetyLevel.SAFE:
            return FoodSafetyResult(
                food_id=product.id,
                food_name=product.name,
                safety_level=level,
                micro_copy=SAFE_MICRO_COPY,
            )

        micro_copy = next(v.micro_copy for v in non_safe if v.level is level)
        return FoodSafetyResult(
            food_id=product.id,
            food_name=product.name,
            safety_level=level,
            reasons=tuple(v.reason for v in non_safe),
            micro_copy=micro_copy,
            alternatives=self._alternatives(profile, product, catalog),
        )

    def advice_for(self, profile: UserProfile) -> list[str]:
        """Return advice tips for the profile's known conditions."""
        tips = []
        for condition in profile.known_conditions:
            rule = self.condition_rules.get(condition)
            if rule and rule.advice and rule.advice not in tips:
                tips.append(rule.advice)
        return tips

    def _verdicts(self, profile: UserProfile, product: Product) -> list[_Verdict]:
        verdicts: list[_Verdict] = []
        for condition in profile.health_conditions:
            rule: SafetyRule | None = None
            if isinstance(condition, KnownCondition):
                rule = self.condition_rules.get(condition)
            if rule is None:
                _logger.debug("No safety rule for condition: %s", condition)
                verdicts.append(_unrecognized(condition))
                continue
            verdicts.append(_evaluate(rule, product))
        for preference in profile.dietary_preferences:
            rule = self.preference_rules.get(preference)
            if rule is not None:
                verdicts.append(_evaluate(rule, product))
        return verdicts

    def _alternatives(
        self,
        profile: UserProfile,
        product: Product,
        catalog: Sequence[Product],
    ) -> tuple[str, ...]:
        names: list[str] = []
        for candidate in catalog:
            if len(names) >= self.max_alternatives:
                break
            if candidate.id == product.id or candidate.name in names:
                continue
            verdicts = self._verdicts(profile, candidate)
            if SafetyLevel.worst([v.level for v in verdicts]) is SafetyLevel.SAFE:
                names.append(candidate.name)
        return tuple(names)


def _unrecognized(condition: HealthCondition) -> _Verdict:
    return _Verdict(
        level=SafetyLevel.CAUTION,
        reason=unrecognized_condition_reason(condition),
        micro_copy=UNRECOGNIZED_MICRO_COPY,
    )


def _evaluate(rule: SafetyRule, product: Product) -> _Verdict:
    level, details = rule.evaluate(product)
    if level is SafetyLevel.SAFE:
        return _Verdict(level=level, reason="", micro_copy=SAFE_MICRO_COPY)
    return _Verdict(
        level=level,
        reason=rule.format_reason(details),
        micro_copy=rule.micro_copy_for(level),
    )
