"""History summarizer - recent plans to a short digest the model should not repeat."""

from typing import Sequence

from weekly_meal_planner.models import DAYS_OF_WEEK, WeeklyMealPlan, sort_meal_types

NO_HISTORY = "No previous meal history available."
MAX_WEEKS_IN_SUMMARY = 2
EMPTY_SLOT = "empty"


def is_day_empty(plan: WeeklyMealPlan, day: str, enabled_meal_types: Sequence[str]) -> bool:
    return all(plan.dish(day, mt).is_blank for mt in enabled_meal_types)


def is_week_empty(plan: WeeklyMealPlan, enabled_meal_types: Sequence[str]) -> bool:
    return all(is_day_empty(plan, day, enabled_meal_types) for day in DAYS_OF_WEEK)


def _week_text(plan: WeeklyMealPlan, meal_types: Sequence[str]) -> str:
    lines = [f"Week of {plan.week_start_date}:"]
    for day in DAYS_OF_WEEK:
        if is_day_empty(plan, day, meal_types):
            continue
        names = [plan.dish(day, mt).name or EMPTY_SLOT for mt in meal_types]
        lines.append(f"  {day}: {' / '.join(names)}")
    return "\n".join(lines)


def summarize(prior_plans: Sequence[WeeklyMealPlan], enabled_meal_types: Sequence[str]) -> str:
    """
    Digest of the most recent non-empty weeks. prior_plans must be newest first.
    Returns NO_HISTORY when nothing usable remains; callers render it verbatim.
    """
    meal_types = sort_meal_types(enabled_meal_types)
    recent = [p for p in prior_plans if not is_week_empty(p, meal_types)][:MAX_WEEKS_IN_SUMMARY]
    if not recent:
        return NO_HISTORY
    return "\n\n".join(_week_text(p, meal_types) for p in recent)
