"""Week-start date helpers."""

from datetime import date, timedelta


def week_start(day: date, week_start_day: int = 0) -> date:
    """Start of the week containing day. week_start_day: 0 = Monday ... 6 = Sunday."""
    offset = (day.weekday() - week_start_day) % 7
    return day - timedelta(days=offset)


def next_week_start(today: date | None = None, week_start_day: int = 0) -> date:
    """Start of the week after the one containing today."""
    today = today or date.today()
    return week_start(today, week_start_day) + timedelta(days=7)


def format_week(day: date) -> str:
    return day.isoformat()
