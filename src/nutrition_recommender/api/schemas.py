"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict, Field


class ProfileRequest(BaseModel):
    """Raw user profile as submitted by the storefront quiz.

    Field values are checked by the profile validator rather than here, so
    every problem is reported together.
    """

    model_config = ConfigDict(populate_by_name=True)

    age: int | float | str | None = None
    gender: str | None = None
    height_cm: float | str | None = Field(default=None, alias="height")
    weight_kg: float | str | None = Field(default=None, alias="weight")
    fitness_goal: str | None = Field(default=None, alias="fitnessGoal")
    activity_level: str | None = Field(default=None, alias="activityLevel")
    health_conditions: list[str] | str | None = Field(
        default=None, alias="healthConditions"
    )
    dietary_preferences: list[str] | str | None = Field(
        default=None, alias="dietaryPreferences"
    )

    def to_raw(self) -> dict[str, object]:
        """Return the payload keyed by profile field name."""
        return self.model_dump(by_alias=False, exclude_none=True)
