"""Cuisine/dish catalog - pure lookup over the YAML cuisine config."""

import logging
from typing import Any, Iterable

from pydantic import BaseModel, Field

from weekly_meal_planner.config import get_cuisine_catalog

logger = logging.getLogger(__name__)


class CuisineDishes(BaseModel):
    """Dishes grouped by meal slot."""

    breakfast: list[str] = Field(default_factory=list)
    lunch_dinner: list[str] = Field(default_factory=list)
    snacks: list[str] = Field(default_factory=list)

    def all_dishes(self) -> list[str]:
        """Union of every slot, first occurrence wins."""
        return _unique([*self.breakfast, *self.lunch_dinner, *self.snacks])


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class CuisineCatalog:
    """Maps cuisine names to their dishes."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        data = get_cuisine_catalog() if data is None else data
        self._cuisines: dict[str, CuisineDishes] = {}
        for entry in data.get("cuisines", []):
            name = entry.get("name")
            if not name:
                continue
            self._cuisines[name] = CuisineDishes.model_validate(entry.get("dishes") or {})
        if not self._cuisines:
            logger.warning("Cuisine catalog is empty; cuisine-based dish lists disabled")

    def cuisine_names(self) -> list[str]:
        return list(self._cuisines)

    def dishes_for(self, cuisine_names: Iterable[str]) -> CuisineDishes:
        """Merge dishes of the named cuisines, in catalog order. Unknown names are ignored."""
        wanted = set(cuisine_names)
        selected = [d for name, d in self._cuisines.items() if name in wanted]
        return CuisineDishes(
            breakfast=_unique(x for d in selected for x in d.breakfast),
            lunch_dinner=_unique(x for d in selected for x in d.lunch_dinner),
            snacks=_unique(x for d in selected for x in d.snacks),
        )
