"""Product catalog domain models."""

from dataclasses import dataclass, field

from nutrition_recommender.domain.nutrients import NutrientVector

DEFAULT_BASIS_GRAMS = 100.0
DEFAULT_SERVING_GRAMS = 30.0


@dataclass(frozen=True)
class Product:
    """Catalog product supplied by the storefront.

    ``nutrients`` and ``price`` refer to one serving when ``serving_grams`` is
    set and to 100 g otherwise. Comparisons between products go through
    :attr:`per_serving` and :attr:`serving_price` so both cases share a basis.
    """

    id: str
    name: str
    price: float
    nutrients: NutrientVector
    safety_tags: frozenset[str] = field(default_factory=frozenset)
    serving_grams: float | None = None
    badge: str | None = None
    benefits: tuple[str, ...] = field(default_factory=tuple)

    @property
    def basis_grams(self) -> float:
        """Grams that `nutrients` and `price` refer to."""
        if self.serving_grams and self.serving_grams > 0:
            return self.serving_grams
        return DEFAULT_BASIS_GRAMS

    @property
    def serving_size(self) -> float:
        """Grams in one serving; 30 g when the catalog gives none."""
        if self.serving_grams and self.serving_grams > 0:
            return self.serving_grams
        return DEFAULT_SERVING_GRAMS

    @property
    def per_serving(self) -> NutrientVector:
        return self.contribution(self.serving_size)

    @property
    def serving_price(self) -> float:
        return self.price_for(self.serving_size)

    def contribution(self, grams: float) -> NutrientVector:
        """Return nutrients supplied by a quantity in grams."""
        if grams <= 0:
            return NutrientVector.zero()
        return self.nutrients.scaled(grams / self.basis_grams)

    def price_for(self, grams: float) -> float:
        """Return the price of a quantity in grams."""
        if grams <= 0:
            return 0.0
        return max(self.price, 0.0) * grams / self.basis_grams
