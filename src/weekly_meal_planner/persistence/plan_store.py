"""Weekly meal plan persistence - JSON file storage keyed by (user_id, week_start_date)."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from weekly_meal_planner.models import WeeklyMealPlan
from weekly_meal_planner.persistence.user_store import file_key

logger = logging.getLogger(__name__)


class PlanAlreadyExistsError(Exception):
    """A plan is already stored for this (user_id, week_start_date)."""

    def __init__(self, user_id: str, week_start_date: str) -> None:
        super().__init__(f"Meal plan already exists for {user_id} week {week_start_date}")
        self.user_id = user_id
        self.week_start_date = week_start_date


def plan_to_json(plan: WeeklyMealPlan) -> str:
    return json.dumps(plan.model_dump(mode="json", by_alias=True), indent=2)


class PlanStore:
    """File-based plan store, one JSON document per composite key."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir) / "plans"
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: str, week_start_date: str) -> Path:
        return self._dir / f"{file_key(user_id)}.{week_start_date}.json"

    def _load(self, path: Path) -> WeeklyMealPlan | None:
        try:
            with path.open() as f:
                return WeeklyMealPlan.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Could not load plan %s: %s", path, e)
            return None

    def exists(self, user_id: str, week_start_date: str) -> bool:
        """True if the key is taken. An unreadable document still counts as taken."""
        path = self._path(user_id, week_start_date)
        if not path.exists():
            return False
        plan = self._load(path)
        return plan is None or self._owned(plan, user_id, week_start_date)

    def get(self, user_id: str, week_start_date: str) -> WeeklyMealPlan | None:
        path = self._path(user_id, week_start_date)
        if not path.exists():
            return None
        plan = self._load(path)
        if plan is None or not self._owned(plan, user_id, week_start_date):
            return None
        return plan

    @staticmethod
    def _owned(plan: WeeklyMealPlan, user_id: str, week_start_date: str) -> bool:
        if plan.user_id == user_id and plan.week_start_date == week_start_date:
            return True
        logger.warning("Plan under key %s/%s belongs to %s/%s", user_id, week_start_date, plan.user_id, plan.week_start_date)
        return False

    def list_before(self, user_id: str, week_start_date: str, limit: int) -> list[WeeklyMealPlan]:
        """Plans strictly before the given week, newest first."""
        plans: list[WeeklyMealPlan] = []
        for path in self._dir.glob(f"{file_key(user_id)}.*.json"):
            plan = self._load(path)
            if plan is None or plan.user_id != user_id:
                continue
            if plan.week_start_date < week_start_date:
                plans.append(plan)
        plans.sort(key=lambda p: p.week_start_date, reverse=True)
        return plans[:limit]

    def create(self, plan: WeeklyMealPlan) -> None:
        """Write a new plan. Raises PlanAlreadyExistsError if the key is taken."""
        path = self._path(plan.user_id, plan.week_start_date)
        try:
            with path.open("x") as f:
                f.write(plan_to_json(plan))
        except FileExistsError as e:
            raise PlanAlreadyExistsError(plan.user_id, plan.week_start_date) from e
        except OSError as e:
            logger.error("Could not save plan %s: %s", path, e)
            raise
