"""
Unit Tests for Progress Summaries

Tests dashboard metrics, mistake ordering and relative time labels.
"""

from datetime import datetime, timedelta, timezone
import pytest
import sys
import os

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
sys.path.insert(0, os.path.join(project_root, "sparck_tutor", "src"))

from sparck_tutor.progress import build_summary, mistake_history, time_ago
from sparck_tutor.state import StateDocument

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


def ago(**delta) -> str:
    return (NOW - timedelta(**delta)).isoformat()


@pytest.fixture
def state():
    doc = StateDocument(streak=3, sessions_completed=5)
    for i in range(6):
        doc.append_mistake("Spelling", f"orig {i}", f"fixed {i}", f"why {i}", ago(minutes=60 - i))
    return doc


class TestTimeAgo:
    """Test suite for time_ago."""

    @pytest.mark.parametrize("delta,label", [
        (timedelta(seconds=20), "just now"),
        (timedelta(minutes=1), "1 min ago"),
        (timedelta(minutes=59), "59 min ago"),
        (timedelta(hours=1), "1 hr ago"),
        (timedelta(hours=23, minutes=59), "23 hr ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(days=4, hours=3), "4 days ago"),
    ])
    def test_labels(self, delta, label):
        assert time_ago((NOW - delta).isoformat(), NOW) == label

    def test_zulu_suffix(self):
        assert time_ago("2024-01-10T11:55:00Z", NOW) == "5 min ago"

    def test_naive_timestamp_treated_as_utc(self):
        assert time_ago("2024-01-10T11:00:00", NOW) == "1 hr ago"

    def test_unreadable(self):
        assert time_ago("yesterday", NOW) == ""


class TestSummary:
    """Test suite for build_summary and mistake_history."""

    def test_metrics(self, state):
        summary = build_summary(state, NOW)
        assert summary.streak == 3
        assert summary.sessions_completed == 5
        assert summary.corrections == 6
        assert summary.name == "Learner"
        assert summary.daily_minutes == 10

    def test_recent_mistakes_newest_first(self, state):
        recent = build_summary(state, NOW).recent_mistakes
        assert [m.original for m in recent] == ["orig 5", "orig 4", "orig 3", "orig 2"]
        assert recent[0].time_ago == "55 min ago"

    def test_history_newest_first(self, state):
        history = mistake_history(state, NOW)
        assert len(history) == 6
        assert history[0].corrected == "fixed 5"
        assert history[-1].corrected == "fixed 0"

    def test_empty_document(self):
        summary = build_summary(StateDocument(), NOW)
        assert summary.corrections == 0
        assert summary.recent_mistakes == []

    def test_summary_serializes(self, state):
        data = build_summary(state, NOW).model_dump()
        assert data["corrections"] == 6
        assert data["recent_mistakes"][0]["category"] == "Spelling"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
