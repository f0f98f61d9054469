"""Shopping lists - ingredients for a stored weekly plan, cached until the plan or portions change."""

import logging
from datetime import datetime, timezone

from weekly_meal_planner.models import ShoppingList
from weekly_meal_planner.planning import (
    SHOPPING_SYSTEM_PROMPT,
    build_shopping_prompt,
    meal_plan_hash,
    parse_shopping_list,
)
from weekly_meal_planner.services.generation_service import GenerationClient

logger = logging.getLogger(__name__)


class PlanNotFoundError(LookupError):
    """No stored plan for this (user_id, week_start_date)."""


class ShoppingListService:
    def __init__(self, generator: GenerationClient, plan_store, list_store=None) -> None:
        self._generator = generator
        self._plans = plan_store
        self._lists = list_store

    async def build(self, user_id: str, week_start_date: str, portions: int = 1) -> tuple[ShoppingList, bool]:
        """
        Return (shopping list, cached). A stored list is reused only when its hash
        matches the current plan and portions; otherwise a new one is generated and
        replaces it. Raises PlanNotFoundError, GenerationError, ParseError.
        """
        plan = self._plans.get(user_id, week_start_date)
        if plan is None:
            raise PlanNotFoundError(f"{user_id}/{week_start_date}")

        plan_hash = meal_plan_hash(plan, portions)
        if self._lists is not None:
            cached = self._lists.get(user_id, week_start_date)
            if cached is not None and cached.meal_plan_hash == plan_hash:
                logger.info("Returning cached shopping list for %s week %s", user_id, week_start_date)
                return cached, True

        prompt = build_shopping_prompt(plan, portions)
        if prompt is None:
            logger.info("Plan %s week %s has no dishes; empty shopping list", user_id, week_start_date)
            categorized = {}
        else:
            logger.info("Generating shopping list for %s week %s (%d portions)", user_id, week_start_date, portions)
            raw = await self._generator.generate(prompt, system_prompt=SHOPPING_SYSTEM_PROMPT)
            categorized = parse_shopping_list(raw)

        shopping_list = ShoppingList(
            user_id=user_id,
            week_start_date=week_start_date,
            portions=portions,
            meal_plan_hash=plan_hash,
            categorized=categorized,
            created_at=datetime.now(timezone.utc),
        )
        if self._lists is not None and categorized:
            self._lists.save(shopping_list)
        return shopping_list, False
