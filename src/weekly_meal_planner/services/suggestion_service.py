"""On-demand suggestions - one user's week, generated but not stored."""

import logging
from datetime import date
from typing import Sequence

from weekly_meal_planner.models import WeekMeals
from weekly_meal_planner.planning import format_week, has_signal, week_start
from weekly_meal_planner.services.ai_service import AIService

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """No user with this id."""


class InsufficientSignalError(ValueError):
    """User has no history, cuisine preferences, or dish preferences to plan from."""


class SuggestionService:
    """Orchestrates a single user-requested generation. Separates transport from business logic."""

    def __init__(
        self,
        ai_service: AIService,
        user_store,
        plan_store,
        *,
        history_lookback: int = 5,
        week_start_day: int = 0,
    ) -> None:
        self._ai = ai_service
        self._users = user_store
        self._plans = plan_store
        self._history_lookback = history_lookback
        self._week_start_day = week_start_day

    async def suggest(
        self,
        user_id: str,
        week_start_date: date,
        ingredients: Sequence[str] = (),
    ) -> tuple[str, WeekMeals]:
        """Return (week start, meals). Raises UserNotFoundError, InsufficientSignalError, GenerationError, ParseError."""
        profile = self._users.get(user_id)
        if profile is None:
            raise UserNotFoundError(user_id)
        week = format_week(week_start(week_start_date, self._week_start_day))
        history = self._plans.list_before(user_id, week, self._history_lookback)
        if not has_signal(profile, bool(history)):
            raise InsufficientSignalError(
                "Need at least 1 week of meal history, cuisine preferences, or dish preferences "
                "to generate suggestions"
            )
        logger.info("Generating suggestions for user %s week %s", user_id, week)
        meals = await self._ai.generate_week_meals(profile, history, week, ingredients)
        return week, meals
