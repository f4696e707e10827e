"""Tests for streak algorithms."""

from datetime import date, timedelta

from fitness_tracker.services.streaks import logging_streaks, workout_streaks

D = date(2024, 6, 12)


def _days_ago(*offsets: int) -> list[date]:
    return [D - timedelta(days=offset) for offset in offsets]


def test_workout_streak_counts_today_and_previous_days() -> None:
    assert workout_streaks(_days_ago(0, 1, 2), D) == (3, 3)


def test_workout_streak_is_zero_after_two_day_gap() -> None:
    assert workout_streaks(_days_ago(2), D) == (0, 1)


def test_workout_longest_run_is_tracked_separately() -> None:
    assert workout_streaks(_days_ago(5, 4, 3, 1, 0), D) == (2, 3)


def test_workout_streak_may_start_yesterday() -> None:
    assert workout_streaks(_days_ago(1, 2, 4), D) == (2, 2)


def test_workout_streak_ignores_duplicates_and_order() -> None:
    assert workout_streaks(_days_ago(0, 1, 0, 1), D) == (2, 2)


def test_workout_streak_empty() -> None:
    assert workout_streaks([], D) == (0, 0)


def test_logging_streak_matches_workout_on_contiguous_run() -> None:
    assert logging_streaks(_days_ago(0, 1, 2), D) == (3, 3)


def test_logging_streak_zeroes_current_on_gap() -> None:
    assert logging_streaks(_days_ago(0, 1, 3, 4, 5), D) == (0, 3)


def test_logging_streak_without_recent_day() -> None:
    assert logging_streaks(_days_ago(3, 4), D) == (0, 2)


def test_logging_streak_empty() -> None:
    assert logging_streaks([], D) == (0, 0)
