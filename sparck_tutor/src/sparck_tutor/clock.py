"""
Clock / Calendar Adapter

Wraps wall-clock access so the streak and chat code can be driven by a
fixed calendar in tests.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional


DATE_KEY_FORMAT = "%Y-%m-%d"


def date_key(day: date) -> str:
    """Format a date as a YYYY-MM-DD date key."""
    return day.strftime(DATE_KEY_FORMAT)


def parse_date_key(key: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD date key, returning None when it is malformed."""
    if not key or not isinstance(key, str):
        return None
    try:
        return datetime.strptime(key, DATE_KEY_FORMAT).date()
    except ValueError:
        return None


class SystemClock:
    """
    Real clock.

    "Today" follows the learner's local calendar, timestamps are UTC ISO-8601
    so they stay comparable across timezones.
    """

    def today(self) -> str:
        return date_key(datetime.now().date())

    def now(self) -> str:
        return datetime.now(timezone.utc).isoformat()


@dataclass
class FixedClock:
    """Clock pinned to a given day and instant. Used by tests and replays."""
    day: str
    instant: str = ""

    def today(self) -> str:
        return self.day

    def now(self) -> str:
        return self.instant or f"{self.day}T12:00:00+00:00"

    def advance_to(self, day: str, instant: Optional[str] = None):
        """Move the clock to another day."""
        self.day = day
        self.instant = instant or ""
