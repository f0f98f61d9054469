from weekly_meal_planner.models import WeeklyMealPlan
from weekly_meal_planner.planning import NO_HISTORY, summarize
from conftest import make_plan

MEALS = ["breakfast", "lunch", "dinner"]


def test_no_plans_returns_sentinel():
    assert summarize([], MEALS) == NO_HISTORY


def test_all_blank_slots_returns_sentinel():
    blank = make_plan("u1", "2025-06-02", dish="")
    nulls = WeeklyMealPlan(user_id="u1", week_start_date="2025-05-26", meals={"monday": {"lunch": None}})
    assert summarize([blank, nulls], MEALS) == NO_HISTORY


def test_keeps_two_most_recent_non_empty_weeks():
    plans = [
        make_plan("u1", "2025-06-02", dish=""),
        make_plan("u1", "2025-05-26", dish="Idli"),
        make_plan("u1", "2025-05-19", dish="Poha"),
        make_plan("u1", "2025-05-12", dish="Upma"),
    ]
    text = summarize(plans, MEALS)
    assert "Week of 2025-05-26:" in text
    assert "Week of 2025-05-19:" in text
    assert "2025-05-12" not in text
    assert "2025-06-02" not in text
    assert text.index("2025-05-26") < text.index("2025-05-19")


def test_day_lines_use_canonical_meal_order_and_empty_token():
    plan = WeeklyMealPlan(
        user_id="u1",
        week_start_date="2025-06-02",
        meals={
            "Tuesday": {"dinner": {"name": "Rasam Rice", "calories": 450}, "breakfast": "Dosa"},
            "monday": {"breakfast": "", "lunch": "", "dinner": ""},
        },
    )
    text = summarize([plan], ["dinner", "lunch", "breakfast"])
    assert text == "Week of 2025-06-02:\n  tuesday: Dosa / empty / Rasam Rice"


def test_only_enabled_meal_types_count():
    plan = WeeklyMealPlan(
        user_id="u1",
        week_start_date="2025-06-02",
        meals={"monday": {"morningSnack": "Vada"}},
    )
    assert summarize([plan], MEALS) == NO_HISTORY
    assert "monday: Vada" in summarize([plan], ["morningSnack"])
