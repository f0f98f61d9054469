import json

import pytest

from weekly_meal_planner.catalog import CuisineCatalog
from weekly_meal_planner.llm.base import LLMClient
from weekly_meal_planner.models import ALL_MEAL_TYPES, DAYS_OF_WEEK, UserProfile, WeeklyMealPlan
from weekly_meal_planner.persistence import PlanStore, ShoppingListStore, UserStore
from weekly_meal_planner.services import AIService, GenerationClient, MealPlanBatchService

TARGET_WEEK = "2025-06-09"


class FakeLLM(LLMClient):
    """Replays queued responses; an Exception in the queue is raised instead."""

    def __init__(self, responses=None, default=None):
        self.calls = []
        self._responses = list(responses or [])
        self._default = default

    async def chat(self, messages, *, model=None, max_tokens=2048):
        self.calls.append(messages)
        result = self._responses.pop(0) if self._responses else self._default
        if isinstance(result, Exception):
            raise result
        return result


def week_response(meal_types=ALL_MEAL_TYPES, prefix="Here is your plan:\n", suffix="\nEnjoy!"):
    body = {day: {mt: f"{day.title()} {mt}" for mt in meal_types} for day in DAYS_OF_WEEK}
    return prefix + json.dumps(body) + suffix


def make_user(user_id="u1", **overrides):
    data = {
        "id": user_id,
        "email": f"{user_id}@example.com",
        "onboardingCompleted": True,
        "cuisinePreferences": ["South Indian"],
        "dietaryPreferences": {"isVegetarian": True},
    }
    data.update(overrides)
    return UserProfile.model_validate(data)


def make_plan(user_id, week, dish="Dosa", meal_types=("breakfast", "lunch", "dinner")):
    meals = {day: {mt: dish for mt in meal_types} for day in DAYS_OF_WEEK}
    return WeeklyMealPlan(user_id=user_id, week_start_date=week, meals=meals)


@pytest.fixture
def catalog():
    return CuisineCatalog(
        {
            "cuisines": [
                {
                    "name": "South Indian",
                    "dishes": {
                        "breakfast": ["Dosa", "Idli"],
                        "lunch_dinner": ["Sambar Rice", "Rasam"],
                        "snacks": ["Vada"],
                    },
                },
                {
                    "name": "Gujarati",
                    "dishes": {
                        "breakfast": ["Dhokla", "Idli"],
                        "lunch_dinner": ["Khichdi"],
                        "snacks": ["Fafda"],
                    },
                },
            ]
        }
    )


@pytest.fixture
def user_store(tmp_path):
    return UserStore(tmp_path)


@pytest.fixture
def plan_store(tmp_path):
    return PlanStore(tmp_path)


@pytest.fixture
def shopping_list_store(tmp_path):
    return ShoppingListStore(tmp_path)


@pytest.fixture
def fake_llm():
    return FakeLLM(default=week_response())


@pytest.fixture
def ai_service(fake_llm, catalog):
    generator = GenerationClient(fake_llm, timeout_seconds=5, max_retries=2, backoff_seconds=0)
    return AIService(generator, catalog)


@pytest.fixture
def batch_service(ai_service, user_store, plan_store):
    return MealPlanBatchService(ai_service, user_store, plan_store, batch_size=12)
