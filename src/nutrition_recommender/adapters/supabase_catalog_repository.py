"""Supabase implementation of the read-only product catalog."""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass

from supabase import Client

from nutrition_recommender.domain.catalog import Product
from nutrition_recommender.domain.nutrients import Nutrient, NutrientVector
from nutrition_recommender.services.recommendations import CatalogRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed catalog; only ever selects."""

    client: Client
    table: str = "products"

    def list_products(self) -> list[Product]:
        """Return every product ordered by id."""
        response = self.client.table(self.table).select("*").order("id").execute()
        products = []
        for row in response.data or []:
            product = _parse_product(row)
            if product is None:
                _logger.warning("Skipping malformed product row: id=%s", row.get("id"))
                continue
            products.append(product)
        return products


def _parse_product(row: Mapping[str, object]) -> Product | None:
    product_id = row.get("id")
    name = row.get("name")
    if product_id is None or not isinstance(name, str) or not name.strip():
        return None
    nutrients = row.get("nutrients")
    if isinstance(nutrients, Mapping):
        vector = NutrientVector.from_mapping(nutrients)
    else:
        vector = NutrientVector.from_mapping(
            {nutrient.value: row.get(nutrient.value) for nutrient in Nutrient}
        )
    return Product(
        id=str(product_id),
        name=name.strip(),
        price=_to_price(row.get("price")),
        nutrients=vector,
        safety_tags=frozenset(_strings(row.get("safety_tags"))),
        serving_grams=_to_positive(row.get("serving_grams")),
        badge=row.get("badge") if isinstance(row.get("badge"), str) else None,
        benefits=tuple(_strings(row.get("benefits"), lower=False)),
    )


def _strings(value: object, *, lower: bool = True) -> list[str]:
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            continue
        cleaned = item.strip().lower() if lower else item.strip()
        if cleaned not in items:
            items.append(cleaned)
    return items


def _to_price(value: object) -> float:
    price = _to_positive(value)
    return price if price is not None else 0.0


def _to_positive(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number
