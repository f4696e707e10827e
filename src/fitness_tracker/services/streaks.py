"""Consecutive-day streak algorithms.

Workout and meal-logging streaks are computed by two separate functions. They
agree on most inputs but not all: the logging walk starts from the newest
date and zeroes the current streak at the first gap, while the workout walk
anchors on today or yesterday and steps back through the sorted dates.
"""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

_ONE_DAY = timedelta(days=1)


def workout_streaks(dates: Iterable[date], today: date) -> tuple[int, int]:
    """Return ``(current, longest)`` streaks for workout dates."""
    ordered = sorted(set(dates))
    if not ordered:
        return 0, 0

    current = 0
    yesterday = today - _ONE_DAY
    if today in ordered or yesterday in ordered:
        current = 1
        check_date = today if today in ordered else yesterday
        for index in range(len(ordered) - 2, -1, -1):
            expected = check_date - _ONE_DAY
            if ordered[index] != expected:
                break
            current += 1
            check_date = expected

    longest = 0
    running = 1
    for index in range(1, len(ordered)):
        if ordered[index] == ordered[index - 1] + _ONE_DAY:
            running += 1
        else:
            longest = max(longest, running)
            running = 1
    longest = max(longest, running)

    return current, longest


def logging_streaks(dates_desc: Sequence[date], today: date) -> tuple[int, int]:
    """Return ``(current, longest)`` streaks for logged days, newest first.

    Dates are consumed in the given order; callers pass one date per logged
    day, newest first.
    """
    current = 0
    longest = 0
    running = 0
    last_date: date | None = None

    for day in dates_desc:
        if last_date is None:
            running = 1
            if day in (today, today - _ONE_DAY):
                current = 1
        elif (last_date - day).days == 1:
            running += 1
            if current > 0:
                current += 1
        else:
            longest = max(longest, running)
            running = 1
            current = 0
        last_date = day

    longest = max(longest, running)
    return current, longest
