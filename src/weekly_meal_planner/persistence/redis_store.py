"""Redis-backed stores for cloud deployment. Use when REDIS_URL is set."""

import json
import logging
from datetime import date

import redis
from pydantic import ValidationError

from weekly_meal_planner.models import ShoppingList, UserProfile, WeeklyMealPlan
from weekly_meal_planner.persistence.plan_store import PlanAlreadyExistsError, plan_to_json
from weekly_meal_planner.persistence.shopping_list_store import shopping_list_to_json
from weekly_meal_planner.persistence.user_store import email_sort_key

logger = logging.getLogger(__name__)

KEY_PREFIX = "weekly_meal_planner"


class _RedisBacked:
    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._client = None

    def _get_client(self):
        """Lazy-init Redis client."""
        if self._client is None:
            self._client = redis.from_url(
                self._redis_url,
                decode_responses=True,
            )
        return self._client


class RedisUserStore(_RedisBacked):
    """Redis-backed user store. Users are JSON strings; an index set lists all ids."""

    def _key(self, user_id: str) -> str:
        return f"{KEY_PREFIX}:user:{user_id}"

    def _index_key(self) -> str:
        return f"{KEY_PREFIX}:users"

    def get(self, user_id: str) -> UserProfile | None:
        try:
            data = self._get_client().get(self._key(user_id))
            if not data:
                return None
            return UserProfile.model_validate(json.loads(data))
        except (redis.RedisError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Redis user get failed: %s", e)
            return None

    def list_onboarded(self, limit: int) -> list[UserProfile]:
        """Users with onboarding completed, ordered by email. Redis errors propagate."""
        r = self._get_client()
        try:
            ids = sorted(r.smembers(self._index_key()))
            raw = r.mget([self._key(i) for i in ids]) if ids else []
        except redis.RedisError as e:
            logger.error("Redis user listing failed: %s", e)
            raise
        users: list[UserProfile] = []
        for data in raw:
            if not data:
                continue
            try:
                profile = UserProfile.model_validate(json.loads(data))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning("Skipping unreadable user document: %s", e)
                continue
            if profile.onboarding_completed:
                users.append(profile)
        users.sort(key=email_sort_key)
        return users[:limit]

    def save(self, profile: UserProfile) -> None:
        try:
            r = self._get_client()
            payload = profile.model_dump(mode="json", by_alias=True, exclude_none=True)
            r.set(self._key(profile.id), json.dumps(payload))
            r.sadd(self._index_key(), profile.id)
        except redis.RedisError as e:
            logger.error("Redis user save failed: %s", e)
            raise


class RedisPlanStore(_RedisBacked):
    """Redis-backed plan store. One key per plan plus a per-user sorted set of weeks."""

    def _key(self, user_id: str, week_start_date: str) -> str:
        return f"{KEY_PREFIX}:plan:{user_id}:{week_start_date}"

    def _weeks_key(self, user_id: str) -> str:
        return f"{KEY_PREFIX}:plans:{user_id}"

    @staticmethod
    def _score(week_start_date: str) -> int:
        return date.fromisoformat(week_start_date).toordinal()

    def exists(self, user_id: str, week_start_date: str) -> bool:
        return bool(self._get_client().exists(self._key(user_id, week_start_date)))

    def get(self, user_id: str, week_start_date: str) -> WeeklyMealPlan | None:
        data = self._get_client().get(self._key(user_id, week_start_date))
        if not data:
            return None
        try:
            return WeeklyMealPlan.model_validate(json.loads(data))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Redis plan %s/%s unreadable: %s", user_id, week_start_date, e)
            return None

    def list_before(self, user_id: str, week_start_date: str, limit: int) -> list[WeeklyMealPlan]:
        """Plans strictly before the given week, newest first."""
        r = self._get_client()
        weeks = r.zrevrangebyscore(
            self._weeks_key(user_id),
            f"({self._score(week_start_date)}",
            "-inf",
            start=0,
            num=limit,
        )
        if not weeks:
            return []
        plans: list[WeeklyMealPlan] = []
        for data in r.mget([self._key(user_id, w) for w in weeks]):
            if not data:
                continue
            try:
                plans.append(WeeklyMealPlan.model_validate(json.loads(data)))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning("Skipping unreadable plan for %s: %s", user_id, e)
        return plans

    def create(self, plan: WeeklyMealPlan) -> None:
        """SET NX on the composite key. Raises PlanAlreadyExistsError if taken."""
        r = self._get_client()
        try:
            created = r.set(self._key(plan.user_id, plan.week_start_date), plan_to_json(plan), nx=True)
            if not created:
                raise PlanAlreadyExistsError(plan.user_id, plan.week_start_date)
            r.zadd(self._weeks_key(plan.user_id), {plan.week_start_date: self._score(plan.week_start_date)})
        except redis.RedisError as e:
            logger.error("Redis plan save failed: %s", e)
            raise


class RedisShoppingListStore(_RedisBacked):
    """Redis-backed shopping list cache. One key per (user_id, week_start_date); saving overwrites."""

    def _key(self, user_id: str, week_start_date: str) -> str:
        return f"{KEY_PREFIX}:shopping:{user_id}:{week_start_date}"

    def get(self, user_id: str, week_start_date: str) -> ShoppingList | None:
        try:
            data = self._get_client().get(self._key(user_id, week_start_date))
            if not data:
                return None
            return ShoppingList.model_validate(json.loads(data))
        except (redis.RedisError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Redis shopping list get failed: %s", e)
            return None

    def save(self, shopping_list: ShoppingList) -> None:
        try:
            self._get_client().set(
                self._key(shopping_list.user_id, shopping_list.week_start_date),
                shopping_list_to_json(shopping_list),
            )
        except redis.RedisError as e:
            logger.error("Redis shopping list save failed: %s", e)
            raise
