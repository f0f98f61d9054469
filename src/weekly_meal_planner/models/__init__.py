"""Data models."""

from weekly_meal_planner.models.meal_plan import (
    ALL_MEAL_TYPES,
    DAYS_OF_WEEK,
    Dish,
    WeeklyMealPlan,
    WeekMeals,
    sort_meal_types,
)
from weekly_meal_planner.models.report import BatchReport
from weekly_meal_planner.models.shopping_list import (
    SHOPPING_CATEGORIES,
    Ingredient,
    ShoppingList,
    canonical_category,
)
from weekly_meal_planner.models.user_profile import (
    DietaryPreferences,
    DishPreferences,
    EmailPreferences,
    MealSettings,
    UserProfile,
)

__all__ = [
    "ALL_MEAL_TYPES",
    "DAYS_OF_WEEK",
    "SHOPPING_CATEGORIES",
    "BatchReport",
    "DietaryPreferences",
    "Dish",
    "DishPreferences",
    "EmailPreferences",
    "Ingredient",
    "MealSettings",
    "ShoppingList",
    "UserProfile",
    "WeekMeals",
    "WeeklyMealPlan",
    "canonical_category",
    "sort_meal_types",
]
