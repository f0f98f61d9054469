"""Weekly meal plan data model."""

import math
from datetime import date, datetime
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DAYS_OF_WEEK = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Chronological order; stored per-user orders are discarded in favour of this.
ALL_MEAL_TYPES = ("breakfast", "morningSnack", "lunch", "eveningSnack", "dinner")


def is_number(value: Any) -> bool:
    """Real, finite number. Booleans, NaN and infinities do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def sort_meal_types(meal_types: Iterable[str]) -> list[str]:
    """Filter to known meal types and return them in canonical order."""
    wanted = set(meal_types)
    return [t for t in ALL_MEAL_TYPES if t in wanted]


class Dish(BaseModel):
    """A single meal slot. Stored as a plain string or {name, calories}; parsed once here."""

    name: str = Field(default="")
    calories: int | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _coerce_slot(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, str):
            return {"name": value}
        if isinstance(value, dict):
            data = dict(value)
            data["name"] = str(data.get("name") or "").strip()
            calories = data.get("calories")
            data["calories"] = round(calories) if is_number(calories) else None
            return data
        return value

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()

    @property
    def is_blank(self) -> bool:
        return not self.name


WeekMeals = dict[str, dict[str, Dish]]


class WeeklyMealPlan(BaseModel):
    """One plan per (user_id, week_start_date)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="userId")
    week_start_date: str = Field(..., alias="weekStartDate", description="ISO date of the week start")
    meals: WeekMeals = Field(default_factory=dict)
    generated_at: datetime | None = Field(default=None, alias="generatedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    ai_generated: bool = Field(default=False, alias="aiGenerated")

    @field_validator("week_start_date", mode="before")
    @classmethod
    def _iso_week_start(cls, v: Any) -> str:
        if isinstance(v, date):
            return v.isoformat()
        return date.fromisoformat(str(v)).isoformat()

    @field_validator("meals", mode="before")
    @classmethod
    def _lower_day_keys(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        return {str(day).lower(): (slots or {}) for day, slots in v.items()}

    @property
    def key(self) -> tuple[str, str]:
        return self.user_id, self.week_start_date

    def dish(self, day: str, meal_type: str) -> Dish:
        """Dish for a slot; blank when the day or slot is missing."""
        return self.meals.get(day, {}).get(meal_type) or Dish()
