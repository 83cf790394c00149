"""Food safety domain models."""

from dataclasses import dataclass, field
from enum import IntEnum


class SafetyLevel(IntEnum):
    """Per-product safety verdict, ordered by severity."""

    SAFE = 0
    CAUTION = 1
    AVOID = 2

    @property
    def label(self) -> str:
        """Lower-case name used in payloads."""
        return self.name.lower()

    @classmethod
    def worst(cls, levels: "list[SafetyLevel]") -> "SafetyLevel":
        """Return the most severe level, or SAFE when empty."""
        return max(levels, default=cls.SAFE)


@dataclass(frozen=True)
class FoodSafetyResult:
    """Safety classification of one product for one profile."""

    food_id: str
    food_name: str
    safety_level: SafetyLevel
    reasons: tuple[str, ...] = field(default_factory=tuple)
    micro_copy: str = ""
    alternatives: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_safe(self) -> bool:
        """Return True for a SAFE verdict."""
        return self.safety_level is SafetyLevel.SAFE
