"""Shopping list persistence - JSON file storage, latest list per (user_id, week_start_date)."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from weekly_meal_planner.models import ShoppingList
from weekly_meal_planner.persistence.user_store import file_key

logger = logging.getLogger(__name__)


def shopping_list_to_json(shopping_list: ShoppingList) -> str:
    return json.dumps(shopping_list.model_dump(mode="json", by_alias=True), indent=2)


class ShoppingListStore:
    """File-based shopping list cache. Saving replaces any earlier list for the week."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir) / "shopping_lists"
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: str, week_start_date: str) -> Path:
        return self._dir / f"{file_key(user_id)}.{week_start_date}.json"

    def get(self, user_id: str, week_start_date: str) -> ShoppingList | None:
        path = self._path(user_id, week_start_date)
        if not path.exists():
            return None
        try:
            with path.open() as f:
                shopping_list = ShoppingList.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Could not load shopping list %s: %s", path, e)
            return None
        if shopping_list.user_id != user_id or shopping_list.week_start_date != week_start_date:
            return None
        return shopping_list

    def save(self, shopping_list: ShoppingList) -> None:
        path = self._path(shopping_list.user_id, shopping_list.week_start_date)
        try:
            path.write_text(shopping_list_to_json(shopping_list))
        except OSError as e:
            logger.error("Could not save shopping list %s: %s", path, e)
            raise
