import json

import pytest

from weekly_meal_planner.models import DAYS_OF_WEEK
from weekly_meal_planner.planning import ParseError, parse_week_meals
from conftest import week_response

MEALS = ["breakfast", "lunch", "dinner"]


def test_parses_json_wrapped_in_prose_and_fences():
    raw = "```json\n" + week_response(MEALS, prefix="", suffix="") + "\n```"
    meals = parse_week_meals(raw, MEALS)
    assert list(meals) == list(DAYS_OF_WEEK)
    assert meals["friday"]["lunch"].name == "Friday lunch"


def test_accepts_object_slots_with_calories_and_mixed_case_days():
    body = {day.upper(): {mt: {"name": "Idli", "calories": 320.6} for mt in MEALS} for day in DAYS_OF_WEEK}
    body["MONDAY"]["extra"] = "ignored"
    meals = parse_week_meals(json.dumps(body), MEALS)
    assert meals["monday"]["breakfast"].calories == 321
    assert "extra" not in meals["monday"]


@pytest.mark.parametrize("raw", ["", "no json here", "} backwards {", None])
def test_no_json_object(raw):
    with pytest.raises(ParseError):
        parse_week_meals(raw, MEALS)


def test_invalid_json():
    with pytest.raises(ParseError):
        parse_week_meals('{"monday": {"breakfast": "Poha",}', MEALS)


def test_missing_day_rejected():
    body = {day: {mt: "Poha" for mt in MEALS} for day in DAYS_OF_WEEK if day != "sunday"}
    with pytest.raises(ParseError, match="sunday"):
        parse_week_meals(json.dumps(body), MEALS)


def test_missing_meal_type_rejected():
    body = {day: {mt: "Poha" for mt in MEALS} for day in DAYS_OF_WEEK}
    del body["tuesday"]["dinner"]
    with pytest.raises(ParseError, match="dinner"):
        parse_week_meals(json.dumps(body), MEALS)


@pytest.mark.parametrize("bad", ["", "   ", None, 42, ["Poha"], {"calories": 100}])
def test_blank_or_wrong_slot_rejected(bad):
    body = {day: {mt: "Poha" for mt in MEALS} for day in DAYS_OF_WEEK}
    body["wednesday"]["lunch"] = bad
    with pytest.raises(ParseError):
        parse_week_meals(json.dumps(body), MEALS)


@pytest.mark.parametrize("calories", ["1e999", "-1e999", "NaN", "Infinity"])
def test_non_finite_calories_dropped(calories):
    slots = ", ".join(f'"{mt}": {{"name": "Idli", "calories": {calories}}}' for mt in MEALS)
    raw = "{" + ", ".join(f'"{day}": {{{slots}}}' for day in DAYS_OF_WEEK) + "}"
    meals = parse_week_meals(raw, MEALS)
    assert meals["monday"]["breakfast"].name == "Idli"
    assert meals["monday"]["breakfast"].calories is None
