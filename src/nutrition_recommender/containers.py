"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_recommender.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from nutrition_recommender.config import Settings
from nutrition_recommender.services.cache import InMemoryCache
from nutrition_recommender.services.recommendations import (
    CatalogRepository,
    RecommendationService,
)
from nutrition_recommender.services.safety import SafetyScreener


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_repository: CatalogRepository
    recommendation_service: RecommendationService
    close_resources: Callable[[], Awaitable[None]]


def build_recommendation_service(
    settings: Settings, repository: CatalogRepository
) -> RecommendationService:
    """Create the recommendation service for a catalog repository."""
    return RecommendationService(
        repository=repository,
        cache=InMemoryCache(),
        config=settings.engine_config(),
        screener=SafetyScreener(),
        catalog_ttl_seconds=settings.catalog_cache_ttl_seconds,
        safety_ttl_seconds=settings.safety_cache_ttl_seconds,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(
        supabase_client, table=resolved_settings.catalog_table
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        catalog_repository=catalog_repository,
        recommendation_service=build_recommendation_service(
            resolved_settings, catalog_repository
        ),
        close_resources=close_resources,
    )
