"""Pure planning steps: normalize, screen, summarize, prompt, parse."""

from weekly_meal_planner.planning.eligibility import (
    SkipReason,
    check_eligibility,
    has_signal,
    is_eligible,
    is_valid_email,
)
from weekly_meal_planner.planning.history import NO_HISTORY, summarize
from weekly_meal_planner.planning.parser import ParseError, parse_week_meals
from weekly_meal_planner.planning.preferences import NormalizedPreferences, normalize
from weekly_meal_planner.planning.prompt import SYSTEM_PROMPT, build_prompt
from weekly_meal_planner.planning.shopping import (
    SHOPPING_SYSTEM_PROMPT,
    build_shopping_prompt,
    meal_plan_hash,
    parse_shopping_list,
)
from weekly_meal_planner.planning.week import format_week, next_week_start, week_start

__all__ = [
    "NO_HISTORY",
    "SHOPPING_SYSTEM_PROMPT",
    "SYSTEM_PROMPT",
    "NormalizedPreferences",
    "ParseError",
    "SkipReason",
    "build_prompt",
    "build_shopping_prompt",
    "check_eligibility",
    "format_week",
    "has_signal",
    "is_eligible",
    "is_valid_email",
    "meal_plan_hash",
    "next_week_start",
    "normalize",
    "parse_shopping_list",
    "parse_week_meals",
    "summarize",
    "week_start",
]
