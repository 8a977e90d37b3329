"""
Progress read-model

Summaries of the state document for the dashboard and progress pages.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel

from sparck_tutor.state import MistakeEntry, StateDocument

RECENT_MISTAKES = 4


class MistakeView(BaseModel):
    """A logged mistake as shown in lists."""
    category: str
    original: str
    corrected: str
    explanation: str
    time_ago: str


class ProgressSummary(BaseModel):
    """Progress tracking metrics."""
    name: str
    level: str
    goal: str
    daily_minutes: int
    streak: int
    corrections: int
    sessions_completed: int
    recent_mistakes: List[MistakeView]


def _parse_timestamp(iso: str) -> Optional[datetime]:
    try:
        moment = datetime.fromisoformat(iso.replace('Z', '+00:00'))
    except (ValueError, AttributeError):
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def time_ago(iso: str, now: Optional[datetime] = None) -> str:
    """
    Human label for how long ago `iso` was.

    Examples: "just now", "5 min ago", "3 hr ago", "1 day ago", "4 days ago".
    Unreadable timestamps give an empty string.
    """
    moment = _parse_timestamp(iso)
    if moment is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    minutes = int((now - moment).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} min ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hr ago"
    days = hours // 24
    return f"{days} day{'s' if days > 1 else ''} ago"


def _view(entry: MistakeEntry, now: Optional[datetime]) -> MistakeView:
    return MistakeView(
        category=entry.category,
        original=entry.original,
        corrected=entry.corrected,
        explanation=entry.explanation,
        time_ago=time_ago(entry.timestamp, now),
    )


def mistake_history(state: StateDocument, now: Optional[datetime] = None) -> List[MistakeView]:
    """All logged mistakes, newest first."""
    return [_view(entry, now) for entry in reversed(state.mistake_log)]


def build_summary(state: StateDocument, now: Optional[datetime] = None) -> ProgressSummary:
    """Dashboard summary with the last few mistakes, newest first."""
    recent = state.mistake_log[-RECENT_MISTAKES:]
    return ProgressSummary(
        name=state.profile.name,
        level=state.profile.level,
        goal=state.profile.goal,
        daily_minutes=state.profile.daily_minutes,
        streak=state.streak or 0,
        corrections=len(state.mistake_log),
        sessions_completed=state.sessions_completed or 0,
        recent_mistakes=[_view(entry, now) for entry in reversed(recent)],
    )
