"""Response parser - pull the weekly JSON out of model text and check its shape."""

import json
import logging
from typing import Any, Sequence

from pydantic import ValidationError

from weekly_meal_planner.models import DAYS_OF_WEEK, Dish, WeekMeals

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Model output had no usable weekly plan."""


def extract_json_object(raw: str) -> dict[str, Any]:
    """Largest {...} span: first '{' through last '}'."""
    start = raw.find("{") if raw else -1
    end = raw.rfind("}") if raw else -1
    if start == -1 or end < start:
        raise ParseError("Invalid AI response format - no JSON found in response")
    try:
        data = json.loads(raw[start : end + 1])
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse meal plan JSON: %s. Raw: %s", e, raw[:200])
        raise ParseError(f"Invalid JSON in AI response: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("AI response JSON is not an object")
    return data


def _slot(value: Any, day: str, meal_type: str) -> Dish:
    if not isinstance(value, (str, dict)):
        raise ParseError(f"{day}.{meal_type}: expected a dish name")
    try:
        dish = Dish.model_validate(value)
    except ValidationError as e:
        raise ParseError(f"{day}.{meal_type}: {e}") from e
    if dish.is_blank:
        raise ParseError(f"{day}.{meal_type}: empty dish name")
    return dish


def validate_week(data: dict[str, Any], enabled_meal_types: Sequence[str]) -> WeekMeals:
    """All 7 days with a non-empty dish for each enabled meal type. Extra keys are dropped."""
    by_day = {str(k).strip().lower(): v for k, v in data.items()}
    missing = [d for d in DAYS_OF_WEEK if d not in by_day]
    if missing:
        raise ParseError(f"Missing days in AI response: {', '.join(missing)}")

    meals: WeekMeals = {}
    for day in DAYS_OF_WEEK:
        day_slots = by_day[day]
        if not isinstance(day_slots, dict):
            raise ParseError(f"{day}: expected an object of meals")
        meals[day] = {}
        for meal_type in enabled_meal_types:
            if meal_type not in day_slots:
                raise ParseError(f"{day}: missing {meal_type}")
            meals[day][meal_type] = _slot(day_slots[meal_type], day, meal_type)
    return meals


def parse_week_meals(raw: str, enabled_meal_types: Sequence[str]) -> WeekMeals:
    """Extract and validate. Raises ParseError; never returns a partial week."""
    return validate_week(extract_json_object(raw), enabled_meal_types)
