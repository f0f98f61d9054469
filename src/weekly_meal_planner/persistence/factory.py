"""Store factory - creates file or Redis stores based on config."""

from pathlib import Path
from typing import NamedTuple

from weekly_meal_planner.config import get_settings
from weekly_meal_planner.persistence.plan_store import PlanStore
from weekly_meal_planner.persistence.redis_store import (
    RedisPlanStore,
    RedisShoppingListStore,
    RedisUserStore,
)
from weekly_meal_planner.persistence.shopping_list_store import ShoppingListStore
from weekly_meal_planner.persistence.user_store import UserStore


class Stores(NamedTuple):
    users: UserStore | RedisUserStore
    plans: PlanStore | RedisPlanStore
    shopping_lists: ShoppingListStore | RedisShoppingListStore


def create_stores() -> Stores:
    """
    Create user, plan and shopping list stores based on REDIS_URL.
    Uses Redis when REDIS_URL is set; otherwise file-based.
    """
    settings = get_settings()
    if settings.redis_url:
        return Stores(
            users=RedisUserStore(settings.redis_url),
            plans=RedisPlanStore(settings.redis_url),
            shopping_lists=RedisShoppingListStore(settings.redis_url),
        )
    data_dir = Path(settings.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    return Stores(
        users=UserStore(data_dir),
        plans=PlanStore(data_dir),
        shopping_lists=ShoppingListStore(data_dir),
    )
