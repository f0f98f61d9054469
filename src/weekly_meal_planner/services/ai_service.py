"""AI service - preferences and history in, validated week of meals out."""

import logging
from typing import Sequence

from weekly_meal_planner.catalog import CuisineCatalog
from weekly_meal_planner.models import UserProfile, WeeklyMealPlan, WeekMeals
from weekly_meal_planner.planning import build_prompt, normalize, parse_week_meals, summarize
from weekly_meal_planner.services.generation_service import GenerationClient

logger = logging.getLogger(__name__)


class AIService:
    """Runs normalize -> summarize -> prompt -> generate -> parse for one user."""

    def __init__(self, generator: GenerationClient, catalog: CuisineCatalog) -> None:
        self._generator = generator
        self._catalog = catalog

    async def generate_week_meals(
        self,
        profile: UserProfile,
        history: Sequence[WeeklyMealPlan],
        week_start_date: str,
        ingredients: Sequence[str] = (),
    ) -> WeekMeals:
        """Raises GenerationError or ParseError; never returns a partial week."""
        prefs = normalize(profile)
        history_text = summarize(history, prefs.enabled_meal_types)
        prompt = build_prompt(prefs, history_text, week_start_date, self._catalog, ingredients)
        logger.debug("Prompt for user %s (%d chars)", profile.id, len(prompt))
        raw = await self._generator.generate(prompt)
        return parse_week_meals(raw, prefs.enabled_meal_types)
