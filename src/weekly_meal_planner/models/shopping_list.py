"""Shopping list data model - ingredients for one stored weekly plan."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from weekly_meal_planner.models.meal_plan import is_number

SHOPPING_CATEGORIES = (
    "Vegetables",
    "Fruits",
    "Dairy & Eggs",
    "Meat & Seafood",
    "Grains & Pulses",
    "Spices & Herbs",
    "Pantry Items",
    "Other",
)


def canonical_category(value: str) -> str:
    """Match a category name case-insensitively; anything unknown is Other."""
    wanted = str(value).strip().lower()
    for category in SHOPPING_CATEGORIES:
        if category.lower() == wanted:
            return category
    return "Other"


class Ingredient(BaseModel):
    name: str = Field(default="")
    amount: float | None = Field(default=None)
    unit: str = Field(default="")

    @model_validator(mode="before")
    @classmethod
    def _coerce_item(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        if isinstance(value, dict):
            data = dict(value)
            data["name"] = str(data.get("name") or "").strip()
            data["unit"] = str(data.get("unit") or "").strip()
            amount = data.get("amount")
            if not is_number(amount):
                data["amount"] = None
            return data
        return value

    @property
    def is_blank(self) -> bool:
        return not self.name


class ShoppingList(BaseModel):
    """Cached per (user_id, week_start_date); meal_plan_hash says which plan and portions it was built from."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="userId")
    week_start_date: str = Field(..., alias="weekStartDate")
    portions: int = Field(default=1, ge=1)
    meal_plan_hash: str = Field(..., alias="mealPlanHash")
    categorized: dict[str, list[Ingredient]] = Field(default_factory=dict)
    created_at: datetime | None = Field(default=None, alias="createdAt")

    @field_validator("categorized")
    @classmethod
    def _canonical_order(cls, v: dict[str, list[Ingredient]]) -> dict[str, list[Ingredient]]:
        return {c: v[c] for c in SHOPPING_CATEGORIES if v.get(c)}
