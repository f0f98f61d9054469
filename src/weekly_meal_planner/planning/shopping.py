"""Shopping list prompt and response parsing for a stored weekly plan."""

import hashlib
import json
import logging

from pydantic import ValidationError

from weekly_meal_planner.models import (
    ALL_MEAL_TYPES,
    DAYS_OF_WEEK,
    SHOPPING_CATEGORIES,
    Ingredient,
    WeeklyMealPlan,
    canonical_category,
)
from weekly_meal_planner.planning.parser import ParseError, extract_json_object

logger = logging.getLogger(__name__)

SHOPPING_SYSTEM_PROMPT = """You are a helpful cooking assistant. You turn a week of planned meals into a
practical grocery list with realistic home-cooking quantities. Always respond with valid JSON only."""

SHOPPING_PROMPT = """Create a combined shopping list for the following weekly meal plan.

Number of portions per meal: {portions}

Meals by day:
{meal_lines}

Scale every quantity to the number of portions. Combine the same ingredient across meals into one entry.
Group the ingredients into these categories: {categories}.

Return the list in this exact JSON format:
{{
  "categorized": {{
    "Vegetables": [{{ "name": "ingredient name", "amount": number, "unit": "g" }}]
  }}
}}

Return only the JSON object, nothing else."""


def planned_meals(plan: WeeklyMealPlan) -> list[tuple[str, str, str]]:
    """(day, meal_type, dish name) for every filled slot, in canonical order."""
    meals = []
    for day in DAYS_OF_WEEK:
        for meal_type in ALL_MEAL_TYPES:
            dish = plan.dish(day, meal_type)
            if not dish.is_blank:
                meals.append((day, meal_type, dish.name))
    return meals


def meal_plan_hash(plan: WeeklyMealPlan, portions: int) -> str:
    """Stable digest of the plan's dishes and the portion count; a cached list is reused only on a match."""
    payload = json.dumps({"meals": planned_meals(plan), "portions": portions}, separators=(",", ":"))
    return hashlib.sha256(payload.encode()).hexdigest()


def build_shopping_prompt(plan: WeeklyMealPlan, portions: int) -> str | None:
    """None when the plan has no dishes to shop for."""
    meals = planned_meals(plan)
    if not meals:
        return None
    lines: list[str] = []
    current_day = None
    for day, meal_type, name in meals:
        if day != current_day:
            lines.append(f"{day.capitalize()}:")
            current_day = day
        lines.append(f"  - {meal_type}: {name}")
    return SHOPPING_PROMPT.format(
        portions=portions,
        meal_lines="\n".join(lines),
        categories=", ".join(SHOPPING_CATEGORIES),
    )


def parse_shopping_list(raw: str) -> dict[str, list[Ingredient]]:
    """
    Pull the categorized ingredients out of model text.
    Unknown categories fold into Other; unnamed items are dropped. Raises ParseError.
    """
    data = extract_json_object(raw)
    categorized = data.get("categorized")
    if not isinstance(categorized, dict):
        raise ParseError("AI response has no categorized shopping list")

    result: dict[str, list[Ingredient]] = {}
    for category, items in categorized.items():
        if not isinstance(items, list):
            logger.warning("Ignoring shopping category %r: expected a list", category)
            continue
        bucket = result.setdefault(canonical_category(category), [])
        for item in items:
            if not isinstance(item, (str, dict)):
                continue
            try:
                ingredient = Ingredient.model_validate(item)
            except ValidationError as e:
                logger.warning("Dropping shopping item %r: %s", item, e)
                continue
            if not ingredient.is_blank:
                bucket.append(ingredient)
    if not any(result.values()):
        raise ParseError("AI response shopping list is empty")
    return {c: result[c] for c in SHOPPING_CATEGORIES if result.get(c)}

