import json

import pytest

from weekly_meal_planner.config import Settings
from weekly_meal_planner.persistence import (
    PlanAlreadyExistsError,
    PlanStore,
    RedisPlanStore,
    ShoppingListStore,
    UserStore,
    file_key,
)
from weekly_meal_planner.persistence import factory
from conftest import make_plan, make_user


def test_user_round_trip_keeps_stored_field_names(user_store, tmp_path):
    user_store.save(make_user("u1", dishPreferences={"breakfast": ["Poha"], "lunch_dinner": ["Dal"]}))
    stored = json.loads((tmp_path / "users" / f"{file_key('u1')}.json").read_text())
    assert stored["onboardingCompleted"] is True
    assert stored["cuisinePreferences"] == ["South Indian"]

    loaded = user_store.get("u1")
    assert loaded.dish_preferences.lunch_dinner == ["Dal"]
    assert user_store.get("missing") is None


def test_list_onboarded_filters_and_orders_by_email(user_store, tmp_path):
    user_store.save(make_user("c", email="carol@example.com"))
    user_store.save(make_user("a", email="alice@example.com"))
    user_store.save(make_user("n", email=None))
    user_store.save(make_user("b", email="bob@example.com", onboardingCompleted=False))
    (tmp_path / "users" / "junk.json").write_text("{not json")

    ids = [u.id for u in user_store.list_onboarded(limit=10)]
    assert ids == ["a", "c", "n"]
    assert [u.id for u in user_store.list_onboarded(limit=1)] == ["a"]


def test_plan_create_is_once_per_key(plan_store):
    plan_store.create(make_plan("u1", "2025-06-09"))
    assert plan_store.exists("u1", "2025-06-09")
    assert not plan_store.exists("u1", "2025-06-16")
    with pytest.raises(PlanAlreadyExistsError):
        plan_store.create(make_plan("u1", "2025-06-09", dish="Idli"))
    assert plan_store.get("u1", "2025-06-09").dish("monday", "lunch").name == "Dosa"


def test_list_before_is_strict_descending_and_per_user(plan_store):
    for week in ["2025-05-19", "2025-06-02", "2025-05-26", "2025-06-09"]:
        plan_store.create(make_plan("u1", week))
    plan_store.create(make_plan("u1_other", "2025-06-02"))

    weeks = [p.week_start_date for p in plan_store.list_before("u1", "2025-06-09", limit=5)]
    assert weeks == ["2025-06-02", "2025-05-26", "2025-05-19"]
    assert len(plan_store.list_before("u1", "2025-06-09", limit=1)) == 1
    assert plan_store.list_before("u1", "2025-05-19", limit=5) == []


def test_legacy_string_slots_parse_at_boundary(plan_store, tmp_path):
    (tmp_path / "plans" / f"{file_key('u1')}.2025-06-02.json").write_text(
        json.dumps(
            {
                "userId": "u1",
                "weekStartDate": "2025-06-02",
                "meals": {"monday": {"breakfast": "Poha", "lunch": {"name": "Dal", "calories": 400}, "dinner": None}},
            }
        )
    )
    plan = plan_store.get("u1", "2025-06-02")
    assert plan.dish("monday", "breakfast").name == "Poha"
    assert plan.dish("monday", "lunch").calories == 400
    assert plan.dish("monday", "dinner").is_blank


def test_ids_differing_only_in_punctuation_do_not_collide(plan_store, user_store):
    plan_store.create(make_plan("user.1", "2025-06-09"))
    assert not plan_store.exists("user1", "2025-06-09")
    assert plan_store.get("user1", "2025-06-09") is None
    plan_store.create(make_plan("user1", "2025-06-09", dish="Idli"))
    assert plan_store.get("user.1", "2025-06-09").dish("monday", "lunch").name == "Dosa"
    assert [p.user_id for p in plan_store.list_before("user1", "2025-06-16", limit=5)] == ["user1"]

    user_store.save(make_user("a/b"))
    user_store.save(make_user("ab", email="other@example.com"))
    assert user_store.get("a/b").email == "a/b@example.com"
    assert user_store.get("ab").email == "other@example.com"


def test_document_under_wrong_key_is_not_returned(plan_store, tmp_path):
    (tmp_path / "plans" / f"{file_key('u1')}.2025-06-09.json").write_text(
        json.dumps({"userId": "intruder", "weekStartDate": "2025-06-09", "meals": {}})
    )
    assert plan_store.get("u1", "2025-06-09") is None
    assert not plan_store.exists("u1", "2025-06-09")


def test_factory_returns_named_stores(monkeypatch, tmp_path):
    settings = Settings(data_dir=tmp_path / "data", redis_url=None, _env_file=None)
    monkeypatch.setattr(factory, "get_settings", lambda: settings)
    stores = factory.create_stores()
    assert isinstance(stores.users, UserStore)
    assert isinstance(stores.plans, PlanStore)
    assert isinstance(stores.shopping_lists, ShoppingListStore)
    assert (tmp_path / "data" / "plans").is_dir()

    settings = Settings(redis_url="redis://localhost:6379/0", _env_file=None)
    monkeypatch.setattr(factory, "get_settings", lambda: settings)
    assert isinstance(factory.create_stores().plans, RedisPlanStore)
