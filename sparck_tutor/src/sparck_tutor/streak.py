"""
Streak Engine

Day-boundary bookkeeping for the practice streak. Works on calendar days
(date keys), never on elapsed hours.
"""

import logging
from typing import Optional

from sparck_tutor.clock import parse_date_key
from sparck_tutor.state import StateDocument

logger = logging.getLogger(__name__)


def day_difference(earlier: Optional[str], later: Optional[str]) -> Optional[int]:
    """
    Whole calendar days from `earlier` to `later`.

    Args:
        earlier: YYYY-MM-DD date key
        later: YYYY-MM-DD date key

    Returns:
        Signed day count, or None if either key is malformed
    """
    start = parse_date_key(earlier)
    end = parse_date_key(later)
    if start is None or end is None:
        return None
    return (end - start).days


def update_streak(state: StateDocument, today: str) -> bool:
    """
    Record activity on `today`.

    - Same day as last activity: nothing changes.
    - No previous activity: streak starts at 1.
    - Exactly one day later: streak grows by 1.
    - Anything else (gap, clock moved backward, unreadable stored day):
      streak restarts at 1.

    Returns:
        True if the document was changed
    """
    if state.last_active_day == today:
        return False

    if state.last_active_day is None:
        state.streak = 1
    else:
        diff = day_difference(state.last_active_day, today)
        if diff is None:
            logger.warning(
                f"⚠️ [Streak] Unreadable day key (last={state.last_active_day!r}, today={today!r}), restarting streak"
            )
            state.streak = 1
        elif diff == 1:
            state.streak = (state.streak or 0) + 1
        else:
            if diff < 0:
                logger.warning(f"⚠️ [Streak] Clock moved backward ({state.last_active_day} -> {today}), restarting streak")
            state.streak = 1

    state.last_active_day = today
    logger.debug(f"[Streak] streak={state.streak} last_active_day={today}")
    return True


def complete_lesson(state: StateDocument, today: str) -> int:
    """
    Mark a lesson as completed: counts as activity for the streak and bumps
    the completed-sessions counter.

    Returns:
        New sessions_completed value
    """
    update_streak(state, today)
    state.sessions_completed = (state.sessions_completed or 0) + 1
    return state.sessions_completed
