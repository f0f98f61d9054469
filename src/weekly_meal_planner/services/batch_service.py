"""Weekly meal plan batch - screens onboarded users and generates plans for a bounded batch."""

import logging
from datetime import date, datetime, timezone

from weekly_meal_planner.models import BatchReport, UserProfile, WeeklyMealPlan
from weekly_meal_planner.planning import SkipReason, check_eligibility, format_week
from weekly_meal_planner.services.ai_service import AIService

logger = logging.getLogger(__name__)

LOOKUP_ERROR = "lookup_error"


class MealPlanBatchService:
    """
    Drives one cron invocation. Users are handled one at a time so upstream calls
    stay under the provider's per-minute quota; batch_size caps a single run.
    """

    def __init__(
        self,
        ai_service: AIService,
        user_store,
        plan_store,
        *,
        batch_size: int = 12,
        candidate_limit: int = 1000,
        history_lookback: int = 5,
    ) -> None:
        self._ai = ai_service
        self._users = user_store
        self._plans = plan_store
        self._batch_size = batch_size
        self._candidate_limit = candidate_limit
        self._history_lookback = history_lookback

    def _has_history(self, user_id: str, week_start_date: str) -> bool:
        return bool(self._plans.list_before(user_id, week_start_date, 1))

    def select_users(
        self,
        candidates: list[UserProfile],
        week_start_date: str,
        batch_size: int,
        report: BatchReport,
    ) -> list[UserProfile]:
        """Eligible users in candidate order, at most batch_size. Skips are tallied on report."""
        eligible: list[UserProfile] = []
        for profile in candidates:
            try:
                reason = check_eligibility(
                    profile,
                    week_start_date,
                    self._plans.exists,
                    self._has_history,
                )
            except Exception as e:
                logger.warning("Eligibility lookup failed for user %s: %s", profile.id, e)
                report.skipped[LOOKUP_ERROR] = report.skipped.get(LOOKUP_ERROR, 0) + 1
                continue
            if reason is SkipReason.INVALID_EMAIL:
                logger.info("User %s has invalid email address, skipping", profile.id)
                report.skipped_invalid_emails += 1
                continue
            if reason is not None:
                logger.info("Skipping user %s: %s", profile.id, reason.value)
                report.skipped[reason.value] = report.skipped.get(reason.value, 0) + 1
                continue
            eligible.append(profile)
            if len(eligible) >= batch_size:
                break
        return eligible

    async def generate_for_user(self, profile: UserProfile, week_start_date: str) -> WeeklyMealPlan:
        """Generate and persist one plan. Any failure propagates to the caller."""
        history = self._plans.list_before(profile.id, week_start_date, self._history_lookback)
        meals = await self._ai.generate_week_meals(profile, history, week_start_date)
        now = datetime.now(timezone.utc)
        plan = WeeklyMealPlan(
            user_id=profile.id,
            week_start_date=week_start_date,
            meals=meals,
            generated_at=now,
            created_at=now,
            updated_at=now,
            ai_generated=True,
        )
        self._plans.create(plan)
        return plan

    async def run_batch(
        self,
        target_week_start: date | str,
        batch_size: int | None = None,
    ) -> BatchReport:
        """
        Generate plans for up to batch_size eligible users.
        Only a failed candidate fetch raises; per-user failures become counts.
        """
        week = format_week(target_week_start) if isinstance(target_week_start, date) else target_week_start
        size = batch_size or self._batch_size
        logger.info("Generating meal plans for week starting: %s", week)

        candidates = self._users.list_onboarded(self._candidate_limit)
        report = BatchReport(week_start_date=week)
        eligible = self.select_users(candidates, week, size, report)

        if not eligible:
            logger.info(
                "No users found that need meal plan generation (skipped %d invalid emails)",
                report.skipped_invalid_emails,
            )
            report.message = "No users to process"
            return report

        logger.info(
            "Found %d users to process in this batch (skipped %d invalid emails)",
            len(eligible),
            report.skipped_invalid_emails,
        )
        for profile in eligible:
            try:
                await self.generate_for_user(profile, week)
                report.success += 1
                logger.info("Generated meal plan for user %s", profile.id)
            except Exception as e:
                logger.exception("Error processing user %s: %s", profile.id, e)
                report.failed += 1
            report.processed += 1

        logger.info(
            "AI generation batch completed. Processed: %d, Success: %d, Failed: %d, Skipped invalid emails: %d",
            report.processed,
            report.success,
            report.failed,
            report.skipped_invalid_emails,
        )
        return report
