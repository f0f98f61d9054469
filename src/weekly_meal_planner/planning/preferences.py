"""Preference normalizer - stored user settings to a complete preference object."""

from pydantic import BaseModel, Field

from weekly_meal_planner.models import ALL_MEAL_TYPES, DishPreferences, UserProfile, sort_meal_types


class NormalizedPreferences(BaseModel):
    """User preferences with every default filled in."""

    is_vegetarian: bool = False
    non_veg_days: list[str] | None = None
    show_calories: bool = True
    cuisine_preferences: list[str] = Field(default_factory=list)
    dish_preferences: DishPreferences = Field(default_factory=DishPreferences)
    enabled_meal_types: list[str] = Field(default_factory=lambda: list(ALL_MEAL_TYPES))

    @property
    def has_dish_preferences(self) -> bool:
        """Both dish lists must be non-empty to count."""
        return bool(self.dish_preferences.breakfast and self.dish_preferences.lunch_dinner)


def _lower_days(days: list[str] | None) -> list[str] | None:
    if days is None:
        return None
    return [d.strip().lower() for d in days]


def normalize(profile: UserProfile) -> NormalizedPreferences:
    """Fill defaults and put meal types in canonical order. Never raises."""
    dietary = profile.dietary_preferences
    if profile.show_calories is not None:
        show_calories = profile.show_calories
    elif dietary is not None and dietary.show_calories is not None:
        show_calories = dietary.show_calories
    else:
        show_calories = True

    stored_types = profile.meal_settings.enabled_meal_types if profile.meal_settings else None
    enabled = sort_meal_types(stored_types or ALL_MEAL_TYPES) or list(ALL_MEAL_TYPES)

    dishes = profile.dish_preferences or DishPreferences()
    return NormalizedPreferences(
        is_vegetarian=dietary.is_vegetarian if dietary else False,
        non_veg_days=_lower_days(dietary.non_veg_days if dietary else None),
        show_calories=show_calories,
        cuisine_preferences=list(profile.cuisine_preferences or []),
        dish_preferences=DishPreferences(
            breakfast=list(dishes.breakfast),
            lunch_dinner=list(dishes.lunch_dinner),
        ),
        enabled_meal_types=enabled,
    )
