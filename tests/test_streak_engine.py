"""Unit tests for StreakEngine consecutive-day streaks."""

from custom_components.kidstraining import const
from custom_components.kidstraining.engines.streak_engine import StreakEngine


def test_consecutive_days_up_to_today() -> None:
    """Three adjacent days ending today is a streak of three."""
    streak = StreakEngine.compute_streak(
        ["2025-04-05", "2025-04-06", "2025-04-07"], "2025-04-07"
    )
    assert streak == {"current": 3, "best": 3, "last_session_date": "2025-04-07"}


def test_current_is_zero_without_session_today() -> None:
    """Yesterday's streak does not count as current."""
    streak = StreakEngine.compute_streak(["2025-04-06", "2025-04-07"], "2025-04-08")
    assert streak["current"] == 0
    assert streak["best"] == 2


def test_gap_resets_run_but_keeps_best() -> None:
    """Best is the longest run; a gap starts a new run."""
    streak = StreakEngine.compute_streak(
        ["2025-04-01", "2025-04-02", "2025-04-05"], "2025-04-05"
    )
    assert streak["best"] == 2
    assert streak["current"] == 1


def test_duplicates_and_order_do_not_matter() -> None:
    """Several sessions on one day count once, in any order."""
    keys = ["2025-04-07", "2025-04-06", "2025-04-07", "2025-04-06"]
    assert StreakEngine.compute_streak(keys, "2025-04-07")["current"] == 2
    assert StreakEngine.compute_streak(
        list(reversed(keys)), "2025-04-07"
    ) == StreakEngine.compute_streak(keys, "2025-04-07")


def test_month_boundary() -> None:
    """Adjacency follows the calendar across months."""
    streak = StreakEngine.compute_streak(["2025-02-28", "2025-03-01"], "2025-03-01")
    assert streak["current"] == 2


def test_no_sessions() -> None:
    """No valid keys gives the empty streak."""
    assert StreakEngine.compute_streak([], "2025-04-07") == StreakEngine.empty()
    assert StreakEngine.compute_streak(["bogus"], "2025-04-07") == StreakEngine.empty()


def test_streaks_for_children_skip_planned_sessions() -> None:
    """Only completed sessions of listed children are counted."""
    sessions = {
        "s1": {
            const.DATA_SESSION_CHILD_ID: "a",
            const.DATA_SESSION_STATUS: const.SESSION_STATUS_COMPLETED,
            const.DATA_SESSION_DATE_KEY: "2025-04-07",
        },
        "s2": {
            const.DATA_SESSION_CHILD_ID: "a",
            const.DATA_SESSION_STATUS: const.SESSION_STATUS_PLANNED,
            const.DATA_SESSION_DATE_KEY: "2025-04-06",
        },
        "s3": {
            const.DATA_SESSION_CHILD_ID: "ghost",
            const.DATA_SESSION_STATUS: const.SESSION_STATUS_COMPLETED,
            const.DATA_SESSION_DATE_KEY: "2025-04-07",
        },
    }

    streaks = StreakEngine.compute_streaks_for_children(sessions, ["a", "b"], "2025-04-07")

    assert set(streaks) == {"a", "b"}
    assert streaks["a"]["current"] == 1
    assert streaks["b"] == StreakEngine.empty()
