"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_recommender.domain.engine import EngineConfig

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    catalog_table: str = "products"
    catalog_cache_ttl_seconds: int = Field(default=300, ge=0)
    safety_cache_ttl_seconds: int = Field(default=900, ge=0)
    max_recommendations: int = Field(default=6, ge=0)
    increment_grams: int = Field(default=10, gt=0)
    max_quantity_per_product_grams: int = Field(default=500, gt=0)
    optimizer_iteration_budget: int = Field(default=500, ge=0)
    apply_condition_adjustments: bool = True
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def engine_config(self) -> EngineConfig:
        """Build the pipeline tunables from settings."""
        return EngineConfig(
            max_recommendations=self.max_recommendations,
            increment_grams=self.increment_grams,
            max_quantity_per_product_grams=self.max_quantity_per_product_grams,
            optimizer_iteration_budget=self.optimizer_iteration_budget,
            apply_condition_adjustments=self.apply_condition_adjustments,
        )
