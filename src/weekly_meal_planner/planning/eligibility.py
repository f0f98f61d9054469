"""Eligibility filter - decides whether a user gets a generated plan this cycle.

Checks run cheapest first and stop at the first failure. Storage is only
touched through the two lookups passed in, so the decision itself is pure.
"""

import re
from enum import Enum
from typing import Callable

from weekly_meal_planner.models import UserProfile

PlanExistsLookup = Callable[[str, str], bool]
HistoryLookup = Callable[[str, str], bool]

_EMAIL_FORBIDDEN = set(' \t\r\n<>()[]\\,;:"')
_DOMAIN_LABEL = re.compile(r"^[A-Za-z0-9-]+$")


class SkipReason(str, Enum):
    """Why a user was left out of a batch."""

    ONBOARDING_INCOMPLETE = "onboarding_incomplete"
    INVALID_EMAIL = "invalid_email"
    UNSUBSCRIBED = "unsubscribed"
    PLAN_EXISTS = "plan_exists"
    INSUFFICIENT_SIGNAL = "insufficient_signal"


def is_valid_email(email: str | None) -> bool:
    """Syntactic check only: one @, non-empty local part, dotted domain, no forbidden characters."""
    if not email or not isinstance(email, str):
        return False
    if any(c in _EMAIL_FORBIDDEN for c in email):
        return False
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain or "@" in domain:
        return False
    labels = domain.split(".")
    if len(labels) < 2:
        return False
    return all(label and _DOMAIN_LABEL.match(label) for label in labels)


def has_signal(profile: UserProfile, has_history: bool) -> bool:
    """History, cuisine preferences, or both dish lists. One of them is enough."""
    if has_history:
        return True
    if profile.cuisine_preferences:
        return True
    dishes = profile.dish_preferences
    return bool(dishes and dishes.breakfast and dishes.lunch_dinner)


def check_eligibility(
    profile: UserProfile,
    target_week_start: str,
    plan_exists: PlanExistsLookup,
    has_history: HistoryLookup,
) -> SkipReason | None:
    """Return the first failing check, or None when the user is eligible."""
    if not profile.onboarding_completed:
        return SkipReason.ONBOARDING_INCOMPLETE
    if not is_valid_email(profile.email):
        return SkipReason.INVALID_EMAIL
    if profile.unsubscribed_from_weekly_plans:
        return SkipReason.UNSUBSCRIBED
    if plan_exists(profile.id, target_week_start):
        return SkipReason.PLAN_EXISTS
    if not has_signal(profile, has_history(profile.id, target_week_start)):
        return SkipReason.INSUFFICIENT_SIGNAL
    return None


def is_eligible(
    profile: UserProfile,
    target_week_start: str,
    plan_exists: PlanExistsLookup,
    has_history: HistoryLookup,
) -> bool:
    return check_eligibility(profile, target_week_start, plan_exists, has_history) is None
