import pytest

from weekly_meal_planner.llm import LLMError
from weekly_meal_planner.services import MealPlanBatchService
from conftest import TARGET_WEEK, FakeLLM, make_plan, make_user, week_response


def seed(user_store, count, prefix="user", **overrides):
    for i in range(count):
        user_store.save(make_user(f"{prefix}{i:02d}", email=f"{prefix}{i:02d}@example.com", **overrides))


@pytest.mark.asyncio
async def test_generates_and_persists_plans(batch_service, user_store, plan_store, fake_llm):
    seed(user_store, 3)
    report = await batch_service.run_batch(TARGET_WEEK)

    assert (report.processed, report.success, report.failed) == (3, 3, 0)
    assert len(fake_llm.calls) == 3
    plan = plan_store.get("user00", TARGET_WEEK)
    assert plan.ai_generated is True
    assert plan.generated_at is not None
    assert plan.dish("sunday", "dinner").name == "Sunday dinner"


@pytest.mark.asyncio
async def test_second_run_skips_everyone(batch_service, user_store, plan_store, fake_llm):
    seed(user_store, 4)
    first = await batch_service.run_batch(TARGET_WEEK)
    second = await batch_service.run_batch(TARGET_WEEK)

    assert first.success == 4
    assert second.processed == 0
    assert second.message == "No users to process"
    assert second.skipped == {"plan_exists": 4}
    assert len(fake_llm.calls) == 4


@pytest.mark.asyncio
async def test_batch_cap(ai_service, user_store, plan_store, fake_llm):
    seed(user_store, 50)
    service = MealPlanBatchService(ai_service, user_store, plan_store, batch_size=12)
    report = await service.run_batch(TARGET_WEEK)

    assert report.processed == 12
    assert report.success == 12
    assert len(fake_llm.calls) == 12
    # next invocation picks up where the first left off
    assert (await service.run_batch(TARGET_WEEK)).processed == 12


@pytest.mark.asyncio
async def test_invalid_emails_counted_separately(batch_service, user_store):
    seed(user_store, 7)
    for i, email in enumerate(["broken", "", "x@nodomain"]):
        user_store.save(make_user(f"bad{i}", email=email))
    report = await batch_service.run_batch(TARGET_WEEK)

    assert report.skipped_invalid_emails == 3
    assert report.success + report.failed == 7
    assert report.to_response()["skippedInvalidEmails"] == 3


@pytest.mark.asyncio
async def test_ineligible_users_tallied_by_reason(batch_service, user_store, plan_store):
    user_store.save(make_user("a", emailPreferences={"weeklyMealPlans": False}))
    user_store.save(make_user("b", cuisinePreferences=[], dishPreferences=None))
    user_store.save(make_user("c", onboardingCompleted=False))
    user_store.save(make_user("d"))
    plan_store.create(make_plan("d", TARGET_WEEK))

    report = await batch_service.run_batch(TARGET_WEEK)
    assert report.processed == 0
    assert report.skipped == {"unsubscribed": 1, "insufficient_signal": 1, "plan_exists": 1}


@pytest.mark.asyncio
async def test_history_makes_user_eligible_and_reaches_prompt(batch_service, user_store, plan_store, fake_llm):
    user_store.save(make_user("h", cuisinePreferences=[], dishPreferences=None))
    plan_store.create(make_plan("h", "2025-06-02", dish="Masala Dosa"))

    report = await batch_service.run_batch(TARGET_WEEK)
    assert report.success == 1
    prompt = fake_llm.calls[0][1]["content"]
    assert "Week of 2025-06-02:" in prompt
    assert "Masala Dosa" in prompt


@pytest.mark.asyncio
async def test_user_failures_do_not_abort_batch(catalog, user_store, plan_store):
    from weekly_meal_planner.services import AIService, GenerationClient

    llm = FakeLLM([LLMError("boom"), "no json at all", week_response()])
    service = MealPlanBatchService(
        AIService(GenerationClient(llm, backoff_seconds=0), catalog),
        user_store,
        plan_store,
    )
    seed(user_store, 3)
    report = await service.run_batch(TARGET_WEEK)

    assert (report.processed, report.success, report.failed) == (3, 1, 2)
    assert not plan_store.exists("user00", TARGET_WEEK)
    assert not plan_store.exists("user01", TARGET_WEEK)
    assert plan_store.exists("user02", TARGET_WEEK)


@pytest.mark.asyncio
async def test_enabled_meal_types_shape_the_plan(batch_service, user_store, plan_store, fake_llm):
    user_store.save(make_user("m", mealSettings={"enabledMealTypes": ["dinner", "breakfast"]}))
    await batch_service.run_batch(TARGET_WEEK)
    plan = plan_store.get("m", TARGET_WEEK)
    assert set(plan.meals["monday"]) == {"breakfast", "dinner"}


@pytest.mark.asyncio
async def test_candidate_fetch_failure_is_fatal(ai_service, plan_store):
    class BrokenUsers:
        def list_onboarded(self, limit):
            raise OSError("disk gone")

    service = MealPlanBatchService(ai_service, BrokenUsers(), plan_store)
    with pytest.raises(OSError):
        await service.run_batch(TARGET_WEEK)
