"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from nutrition_recommender.config import Settings
from nutrition_recommender.containers import AppContainer, build_recommendation_service
from nutrition_recommender.domain.catalog import Product
from nutrition_recommender.domain.nutrients import NutrientVector
from nutrition_recommender.domain.profile import UserProfile
from nutrition_recommender.services.profiles import validate_profile
from nutrition_recommender.services.recommendations import CatalogRepository

TEST_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


def make_product(  # noqa: PLR0913
    product_id: str,
    name: str | None = None,
    *,
    price: float = 1.0,
    serving_grams: float | None = 30.0,
    tags: tuple[str, ...] = (),
    benefits: tuple[str, ...] = (),
    **nutrients: float,
) -> Product:
    """Build a catalog product with per-serving nutrients."""
    return Product(
        id=product_id,
        name=name or product_id,
        price=price,
        nutrients=NutrientVector(**nutrients),
        safety_tags=frozenset(tags),
        serving_grams=serving_grams,
        benefits=benefits,
    )


def make_profile(**overrides: object) -> UserProfile:
    """Validate a default profile with field overrides."""
    raw: dict[str, object] = {
        "age": 25,
        "gender": "male",
        "height_cm": 175,
        "weight_kg": 70,
        "fitness_goal": "general-wellness",
        "activity_level": "moderate",
    }
    raw.update(overrides)
    return validate_profile(raw).require_profile()


def sample_catalog() -> list[Product]:
    return [
        make_product(
            "banana-chips",
            "Banana Chips",
            price=2.0,
            tags=("high-potassium",),
            calories=150,
            carbs_g=17,
            fat_g=8,
            fiber_g=2,
            vitamin_c_mg=2,
            potassium_mg=420,
            magnesium_mg=25,
            vitamin_b6_mg=0.1,
        ),
        make_product(
            "apple-rings",
            "Dried Apple Rings",
            price=1.5,
            benefits=("Supports digestion",),
            calories=80,
            carbs_g=21,
            fiber_g=3,
            vitamin_c_mg=1,
            potassium_mg=135,
            antioxidants_orac=1200,
        ),
        make_product(
            "cranberries",
            "Dried Cranberries",
            price=2.5,
            tags=("high-sugar",),
            calories=92,
            carbs_g=24,
            fiber_g=2,
            potassium_mg=12,
            antioxidants_orac=2700,
        ),
        make_product(
            "almond-mix",
            "Almond Mix",
            price=3.0,
            tags=("contains-nuts", "high-fat"),
            calories=170,
            protein_g=6,
            fat_g=15,
            fiber_g=3.5,
            magnesium_mg=80,
        ),
        make_product(
            "mango",
            "Dried Mango",
            price=2.2,
            calories=96,
            carbs_g=24,
            fiber_g=1.5,
            vitamin_c_mg=12,
            potassium_mg=80,
            vitamin_b6_mg=0.04,
            antioxidants_orac=500,
        ),
    ]


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests."""

    products: list[Product] = field(default_factory=sample_catalog)
    calls: int = 0
    error: Exception | None = None

    def list_products(self) -> list[Product]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.products)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_SERVICE_KEY,
    )


@pytest.fixture
def catalog() -> list[Product]:
    return sample_catalog()


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def profile_payload() -> dict[str, object]:
    return {
        "age": 25,
        "gender": "male",
        "height": 175,
        "weight": 70,
        "fitnessGoal": "general-wellness",
        "activityLevel": "moderate",
        "healthConditions": [],
        "dietaryPreferences": [],
    }


@pytest.fixture
def container(
    settings: Settings, catalog_repository: InMemoryCatalogRepository
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog_repository=catalog_repository,
        recommendation_service=build_recommendation_service(
            settings, catalog_repository
        ),
        close_resources=close_resources,
    )
