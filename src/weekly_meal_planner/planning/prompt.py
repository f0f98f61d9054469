"""Prompt builder - deterministic weekly-plan prompt from preferences and history."""

from dataclasses import dataclass, field
from typing import Sequence

from weekly_meal_planner.catalog import CuisineCatalog
from weekly_meal_planner.models import DAYS_OF_WEEK
from weekly_meal_planner.planning.preferences import NormalizedPreferences

SYSTEM_PROMPT = """You are a home-cooking meal planner for Indian households.
You plan practical, varied everyday meals and always respect dietary restrictions.
Output valid JSON when asked."""

VEGETARIAN_CLAUSE = (
    "Dietary Preferences: The user is strictly vegetarian. Never suggest non-vegetarian meals. "
    "Exclude any dish with meat, fish, or eggs. If uncertain, default to a vegetarian option."
)

NON_VEG_DAYS_CLAUSE = (
    "Dietary Preferences: Non-vegetarian. The user eats non-vegetarian dishes only on: {days}. "
    "On every other day, suggest only vegetarian dishes (no meat, fish, or eggs)."
)

NON_VEG_ANY_DAY_CLAUSE = (
    "Dietary Preferences: Non-vegetarian. The user can eat non-vegetarian dishes on any day. "
    "Have a mix of vegetarian and non-vegetarian meals."
)

NON_VEG_NO_DAYS_CLAUSE = (
    "Dietary Preferences: The user has not picked any non-vegetarian days. "
    "Suggest only vegetarian dishes on every day (no meat, fish, or eggs)."
)

CALORIE_CLAUSE = (
    "Calorie Tracking: ENABLED. Include an estimated calorie count for each meal by writing the slot as "
    '{ "name": "meal name", "calories": number } instead of a plain name.'
)

CLOSED_DISH_CLAUSE = (
    "Allowed dishes: choose ONLY from the following list. "
    "Do not suggest any dish that is not in this list: {dishes}"
)

CUISINE_ONLY_CLAUSE = "Cuisine Preferences: focus on authentic dishes from {cuisines} cuisine."

OPEN_DISH_CLAUSE = "No specific cuisine or dish restrictions. Use any appropriate cuisine."

INGREDIENT_CLAUSE = "Must use all of the following ingredients in at least one dish: {ingredients}"

INSTRUCTIONS = """Please suggest meals for each day ({meal_types}) that are:
1. Varied across the week; do not repeat a dish within the week unless the allowed list is too short
2. Respectful of the dietary restrictions above on every day
3. Practical and easy to prepare at home with commonly available ingredients
4. Different from the dishes in the meal history above
5. {dish_rule}"""

CLOSED_RULE = "Chosen strictly from the allowed dishes list above"
OPEN_RULE = "Authentic to the preferred cuisines where any are given"

CLOSING = "Respond with ONLY the JSON object, no other text, no markdown."


@dataclass
class PromptContext:
    """Per-user prompt inputs. Built, rendered, discarded."""

    week_label: str
    dietary_clause: str
    dish_clause: str
    history_text: str
    enabled_meal_types: list[str]
    closed_world: bool
    ingredients: list[str] = field(default_factory=list)
    show_calories: bool = False


def dietary_clause(prefs: NormalizedPreferences) -> str:
    if prefs.is_vegetarian:
        return VEGETARIAN_CLAUSE
    if prefs.non_veg_days is None:
        return NON_VEG_ANY_DAY_CLAUSE
    # Only full weekday names count; a listed but unrecognized day grants nothing.
    days = [d for d in DAYS_OF_WEEK if d in set(prefs.non_veg_days)]
    if days:
        return NON_VEG_DAYS_CLAUSE.format(days=", ".join(days))
    return NON_VEG_NO_DAYS_CLAUSE


def allowed_dishes(prefs: NormalizedPreferences, catalog: CuisineCatalog) -> list[str] | None:
    """
    Closed-world dish list, or None when the prompt leaves dishes open.
    Explicit dish picks win over cuisine catalogs.
    """
    if prefs.has_dish_preferences:
        picks = [*prefs.dish_preferences.breakfast, *prefs.dish_preferences.lunch_dinner]
        return list(dict.fromkeys(picks))
    if prefs.cuisine_preferences:
        dishes = catalog.dishes_for(prefs.cuisine_preferences).all_dishes()
        return dishes or None
    return None


def dish_clause(prefs: NormalizedPreferences, dishes: list[str] | None) -> str:
    if dishes:
        return CLOSED_DISH_CLAUSE.format(dishes=", ".join(dishes))
    if prefs.cuisine_preferences:
        return CUISINE_ONLY_CLAUSE.format(cuisines=", ".join(prefs.cuisine_preferences))
    return OPEN_DISH_CLAUSE


def json_schema(enabled_meal_types: Sequence[str]) -> str:
    """Literal JSON shape the model must fill in."""
    slots = ", ".join(f'"{mt}": "meal name"' for mt in enabled_meal_types)
    days = ",\n".join(f'  "{day}": {{ {slots} }}' for day in DAYS_OF_WEEK)
    return "{\n" + days + "\n}"


def build_context(
    prefs: NormalizedPreferences,
    history_text: str,
    week_start_date: str,
    catalog: CuisineCatalog,
    ingredients: Sequence[str] = (),
) -> PromptContext:
    dishes = allowed_dishes(prefs, catalog)
    return PromptContext(
        week_label=week_start_date,
        dietary_clause=dietary_clause(prefs),
        dish_clause=dish_clause(prefs, dishes),
        history_text=history_text,
        enabled_meal_types=list(prefs.enabled_meal_types),
        closed_world=dishes is not None,
        ingredients=[i.strip() for i in ingredients if i and i.strip()],
        show_calories=prefs.show_calories,
    )


def render(ctx: PromptContext) -> str:
    sections = [
        f"Plan meals for the week of {ctx.week_label} based on the user's dietary preferences, "
        "dish preferences, and meal history below.",
        f"{ctx.dietary_clause}\n{CALORIE_CLAUSE}" if ctx.show_calories else ctx.dietary_clause,
        ctx.dish_clause,
    ]
    if ctx.ingredients:
        sections.append(INGREDIENT_CLAUSE.format(ingredients=", ".join(ctx.ingredients)))
    sections.append(f"Meal History:\n{ctx.history_text}")
    sections.append(
        INSTRUCTIONS.format(
            meal_types=", ".join(ctx.enabled_meal_types),
            dish_rule=CLOSED_RULE if ctx.closed_world else OPEN_RULE,
        )
    )
    sections.append(f"Return the plan in this exact JSON format:\n{json_schema(ctx.enabled_meal_types)}")
    sections.append(CLOSING)
    return "\n\n".join(sections)


def build_prompt(
    prefs: NormalizedPreferences,
    history_text: str,
    week_start_date: str,
    catalog: CuisineCatalog,
    ingredients: Sequence[str] = (),
) -> str:
    """Assemble the user prompt. Pure; same inputs give the same text."""
    return render(build_context(prefs, history_text, week_start_date, catalog, ingredients))
