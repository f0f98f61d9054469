"""User profile data model - read-only view of a stored user document."""

from pydantic import BaseModel, ConfigDict, Field


class DietaryPreferences(BaseModel):
    """Dietary settings captured during onboarding."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_vegetarian: bool = Field(default=False, alias="isVegetarian")
    non_veg_days: list[str] | None = Field(
        default=None,
        alias="nonVegDays",
        description="Weekday names on which non-vegetarian dishes are allowed; absent means any day",
    )
    show_calories: bool | None = Field(default=None, alias="showCalories")


class DishPreferences(BaseModel):
    """Dishes the user picked during onboarding."""

    breakfast: list[str] = Field(default_factory=list)
    lunch_dinner: list[str] = Field(default_factory=list)


class EmailPreferences(BaseModel):
    """Email opt-outs. Absence of a flag means opted in."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    weekly_meal_plans: bool | None = Field(default=None, alias="weeklyMealPlans")


class MealSettings(BaseModel):
    """Which meal slots the user plans for."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled_meal_types: list[str] | None = Field(default=None, alias="enabledMealTypes")


class UserProfile(BaseModel):
    """User document as stored. Optional sections are left as None until normalized."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Opaque user identifier")
    email: str | None = Field(default=None)
    name: str | None = Field(default=None)
    onboarding_completed: bool = Field(default=False, alias="onboardingCompleted")
    email_preferences: EmailPreferences | None = Field(default=None, alias="emailPreferences")
    dietary_preferences: DietaryPreferences | None = Field(default=None, alias="dietaryPreferences")
    show_calories: bool | None = Field(
        default=None,
        alias="showCalories",
        description="Top-level calorie toggle; wins over dietaryPreferences.showCalories",
    )
    cuisine_preferences: list[str] | None = Field(default=None, alias="cuisinePreferences")
    dish_preferences: DishPreferences | None = Field(default=None, alias="dishPreferences")
    meal_settings: MealSettings | None = Field(default=None, alias="mealSettings")

    @property
    def unsubscribed_from_weekly_plans(self) -> bool:
        """True only when the opt-out flag is explicitly false."""
        return (
            self.email_preferences is not None
            and self.email_preferences.weekly_meal_plans is False
        )
