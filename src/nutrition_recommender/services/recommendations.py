"""Recommendation pipeline entry points."""

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from nutrition_recommender.domain.catalog import Product
from nutrition_recommender.domain.engine import EngineConfig
from nutrition_recommender.domain.profile import UserProfile
from nutrition_recommender.domain.recommendations import RecommendationSummary
from nutrition_recommender.domain.requirements import DailyRequirements
from nutrition_recommender.domain.safety import FoodSafetyResult
from nutrition_recommender.services.cache import Cache, cache_key
from nutrition_recommender.services.packaging import PackageOptimizer
from nutrition_recommender.services.profiles import (
    ProfileValidationError,
    validate_profile,
)
from nutrition_recommender.services.ranking import RecommendationRanker
from nutrition_recommender.services.requirements import calculate_daily_requirements
from nutrition_recommender.services.safety import SafetyScreener
from nutrition_recommender.services.summary import assemble_summary

_logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Read-only source of catalog products."""

    def list_products(self) -> list[Product]:
        """Return every product in the catalog."""


class CatalogUnavailableError(RuntimeError):
    """Raised when the catalog cannot be loaded."""


def compute_recommendations(
    profile: UserProfile,
    catalog: Sequence[Product],
    config: EngineConfig | None = None,
    *,
    screener: SafetyScreener | None = None,
    screening: Sequence[FoodSafetyResult] | None = None,
) -> RecommendationSummary:
    """Run the full pipeline for a validated profile and a catalog snapshot.

    ``screening`` may carry precomputed safety results, one per catalog
    product in catalog order; it is recomputed when omitted.
    """
    config = config or EngineConfig()
    screener = screener or SafetyScreener()
    requirements = calculate_daily_requirements(
        profile, apply_condition_adjustments=config.apply_condition_adjustments
    )
    if screening is None or len(screening) != len(catalog):
        screening = screener.screen_catalog(profile, catalog)

    ranked = RecommendationRanker(config=config).rank(
        list(zip(catalog, screening, strict=True)),
        requirements,
        profile.fitness_goal,
    )
    package = PackageOptimizer(config=config).optimize(
        ranked, requirements, profile.fitness_goal
    )
    return assemble_summary(
        profile,
        requirements,
        ranked,
        package,
        screening,
        screener.advice_for(profile),
    )


@dataclass
class RecommendationService:
    """Application service running the pipeline on raw profile input."""

    repository: CatalogRepository
    cache: Cache
    config: EngineConfig = field(default_factory=EngineConfig)
    screener: SafetyScreener = field(default_factory=SafetyScreener)
    catalog_ttl_seconds: int = 300
    safety_ttl_seconds: int = 900

    def validate(self, raw: Mapping[str, object]) -> UserProfile:
        """Validate raw input or raise ProfileValidationError."""
        result = validate_profile(raw)
        if not result.is_valid:
            _logger.info("Profile rejected: errors=%s", len(result.errors))
            raise ProfileValidationError(result.errors)
        return result.require_profile()

    def requirements(self, raw: Mapping[str, object]) -> DailyRequirements:
        """Compute daily requirements for raw profile input."""
        profile = self.validate(raw)
        return calculate_daily_requirements(
            profile,
            apply_condition_adjustments=self.config.apply_condition_adjustments,
        )

    def screen(self, raw: Mapping[str, object]) -> list[FoodSafetyResult]:
        """Screen the whole catalog for raw profile input."""
        profile = self.validate(raw)
        return self._screen(profile, self.load_catalog())

    def recommend(self, raw: Mapping[str, object]) -> RecommendationSummary:
        """Validate input, load the catalog and run the pipeline."""
        profile = self.validate(raw)
        catalog = self.load_catalog()
        summary = compute_recommendations(
            profile,
            catalog,
            self.config,
            screener=self.screener,
            screening=self._screen(profile, catalog),
        )
        _logger.info(
            "Recommendations computed: goal=%s recommended=%s unsafe=%s coverage=%s",
            profile.fitness_goal.value,
            len(summary.recommendations),
            len(summary.unsafe_foods),
            summary.daily_package.coverage_percentage,
        )
        return summary

    def load_catalog(self) -> list[Product]:
        """Return the catalog, cached for a short TTL."""
        key = "catalog:products"
        cached = self.cache.get(key)
        if isinstance(cached, list):
            return cached
        try:
            products = self.repository.list_products()
        except CatalogUnavailableError:
            raise
        except Exception as exc:
            _logger.exception("Catalog load failed")
            raise CatalogUnavailableError("Product catalog is unavailable") from exc
        self.cache.set(key, products, ttl_seconds=self.catalog_ttl_seconds)
        _logger.debug("Catalog loaded: products=%s", len(products))
        return products

    def _screen(
        self, profile: UserProfile, catalog: Sequence[Product]
    ) -> list[FoodSafetyResult]:
        screened_for = json.dumps(
            [
                [str(condition) for condition in profile.health_conditions],
                list(profile.dietary_preferences),
                hash(tuple(catalog)),
            ]
        )
        key = cache_key("safety", [screened_for])
        cached = self.cache.get(key)
        if isinstance(cached, list):
            _logger.debug("Safety cache hit")
            return cached
        results = self.screener.screen_catalog(profile, catalog)
        self.cache.set(key, results, ttl_seconds=self.safety_ttl_seconds)
        return results
