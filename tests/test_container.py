"""Tests for container wiring and settings."""

import asyncio

from nutrition_recommender.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from nutrition_recommender.config import Settings
from nutrition_recommender.containers import build_container
from tests.conftest import TEST_SERVICE_KEY


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.catalog_repository, SupabaseCatalogRepository)
    assert container.recommendation_service.repository is container.catalog_repository
    assert container.recommendation_service.config == settings.engine_config()
    asyncio.run(container.close_resources())


def test_settings_build_engine_config(monkeypatch) -> None:
    monkeypatch.setenv("MAX_RECOMMENDATIONS", "3")
    monkeypatch.setenv("APPLY_CONDITION_ADJUSTMENTS", "false")

    settings = Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_SERVICE_KEY,
    )
    config = settings.engine_config()

    assert config.max_recommendations == 3
    assert config.apply_condition_adjustments is False
    assert config.increment_grams == 10
    assert settings.catalog_table == "products"
