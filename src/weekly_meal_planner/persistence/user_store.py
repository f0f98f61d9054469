"""User persistence - JSON file storage."""

import base64
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from weekly_meal_planner.models import UserProfile

logger = logging.getLogger(__name__)


def file_key(value: str) -> str:
    """Reversible, filename-safe encoding of an id. Never contains a dot."""
    return base64.urlsafe_b64encode(value.encode()).decode().rstrip("=")


def email_sort_key(profile: UserProfile) -> tuple[bool, str]:
    """Order by email; users without one go last."""
    return profile.email is None, profile.email or ""


class UserStore:
    """File-based user store, one JSON document per user."""

    def __init__(self, data_dir: Path) -> None:
        self._dir = Path(data_dir) / "users"
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: str) -> Path:
        return self._dir / f"{file_key(user_id)}.json"

    def _load(self, path: Path) -> UserProfile | None:
        try:
            with path.open() as f:
                return UserProfile.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Could not load user %s: %s", path, e)
            return None

    def get(self, user_id: str) -> UserProfile | None:
        path = self._path(user_id)
        if not path.exists():
            return None
        try:
            profile = self._load(path)
        except OSError as e:
            logger.warning("Could not read user %s: %s", path, e)
            return None
        if profile is not None and profile.id != user_id:
            logger.warning("User file %s holds id %s, expected %s", path, profile.id, user_id)
            return None
        return profile

    def list_onboarded(self, limit: int) -> list[UserProfile]:
        """
        Users with onboarding completed, ordered by email, capped at limit.
        I/O errors propagate: callers treat a failed candidate fetch as fatal.
        """
        users: list[UserProfile] = []
        for path in self._dir.glob("*.json"):
            profile = self._load(path)
            if profile is not None and profile.onboarding_completed:
                users.append(profile)
        users.sort(key=email_sort_key)
        return users[:limit]

    def save(self, profile: UserProfile) -> None:
        path = self._path(profile.id)
        try:
            with path.open("w") as f:
                json.dump(profile.model_dump(mode="json", by_alias=True, exclude_none=True), f, indent=2)
        except OSError as e:
            logger.error("Could not save user %s: %s", path, e)
            raise
