"""Persistence layer."""

from weekly_meal_planner.persistence.factory import Stores, create_stores
from weekly_meal_planner.persistence.plan_store import PlanAlreadyExistsError, PlanStore
from weekly_meal_planner.persistence.redis_store import (
    RedisPlanStore,
    RedisShoppingListStore,
    RedisUserStore,
)
from weekly_meal_planner.persistence.shopping_list_store import ShoppingListStore
from weekly_meal_planner.persistence.user_store import UserStore, file_key

__all__ = [
    "PlanAlreadyExistsError",
    "PlanStore",
    "RedisPlanStore",
    "RedisShoppingListStore",
    "RedisUserStore",
    "ShoppingListStore",
    "Stores",
    "UserStore",
    "create_stores",
    "file_key",
]
