"""Business logic services."""

from weekly_meal_planner.services.ai_service import AIService
from weekly_meal_planner.services.batch_service import MealPlanBatchService
from weekly_meal_planner.services.generation_service import GenerationClient, GenerationError
from weekly_meal_planner.services.shopping_list_service import PlanNotFoundError, ShoppingListService
from weekly_meal_planner.services.suggestion_service import (
    InsufficientSignalError,
    SuggestionService,
    UserNotFoundError,
)

__all__ = [
    "AIService",
    "GenerationClient",
    "GenerationError",
    "InsufficientSignalError",
    "MealPlanBatchService",
    "PlanNotFoundError",
    "ShoppingListService",
    "SuggestionService",
    "UserNotFoundError",
]
