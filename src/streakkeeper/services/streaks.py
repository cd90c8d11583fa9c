"""Streak and calendar-status calculations for habits.

Everything here is a pure function of (habit, entries, today). Entries may
arrive in any order; each function indexes them by date itself. ``today``
is always passed in so callers decide which clock applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Optional

from ..domain.schedule import RecurrenceRule, is_scheduled, parse_rule, scheduled_weekdays
from ..models.habit import Habit, HabitEntry

_ONE_DAY = timedelta(days=1)


class DisplayStatus(str, Enum):
    """Status of one (habit, date) cell in a calendar or heatmap."""

    COMPLETED = "completed"
    MISSED = "missed"
    NOT_SCHEDULED = "not-scheduled"
    PENDING_TODAY = "pending-today"
    FUTURE = "future"
    BEFORE_START = "before-start"


@dataclass(slots=True)
class HabitStats:
    """Derived statistics for one habit; never persisted."""

    current_streak: int
    longest_streak: int
    completed_today: bool
    last_completed_date: Optional[date]


@dataclass(slots=True)
class DayStatus:
    """Display status of one calendar day."""

    day: date
    status: DisplayStatus


def _entries_by_day(entries: Iterable[HabitEntry]) -> dict[date, HabitEntry]:
    return {entry.entry_date: entry for entry in entries}


def _rule_for(habit: Habit) -> RecurrenceRule:
    return parse_rule(habit.target_days)


def current_streak(habit: Habit, entries: Iterable[HabitEntry], today: date) -> int:
    """Count consecutive completed scheduled days ending at or before ``today``.

    Walks backward from ``today``. Non-scheduled days are skipped, today
    included. The walk stops at the first scheduled day that is missed or
    unmarked, or once it passes the habit's start date. A scheduled today
    with no entry therefore yields 0 until it is completed.
    """

    rule = _rule_for(habit)
    if not scheduled_weekdays(rule):
        return 0

    by_day = _entries_by_day(entries)
    streak = 0
    cursor = today
    while cursor >= habit.start_date:
        if is_scheduled(cursor, rule):
            entry = by_day.get(cursor)
            if entry is None or not entry.completed:
                break
            streak += 1
        cursor -= _ONE_DAY
    return streak


def longest_streak(habit: Habit, entries: Iterable[HabitEntry]) -> int:
    """Return the longest run of completed scheduled days in the history.

    Completed entries are scanned oldest first. Two neighbouring completions
    belong to the same run when every day between them is non-scheduled.
    Completions on non-scheduled days or before the start date are ignored.
    """

    rule = _rule_for(habit)
    days = sorted(
        entry.entry_date
        for entry in entries
        if entry.completed
        and entry.entry_date >= habit.start_date
        and is_scheduled(entry.entry_date, rule)
    )

    longest = 0
    run = 0
    previous: Optional[date] = None
    for day in days:
        if previous is None:
            run = 1
        elif _only_unscheduled_between(previous, day, rule):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def _only_unscheduled_between(earlier: date, later: date, rule: RecurrenceRule) -> bool:
    """True when no scheduled day lies strictly between ``earlier`` and ``later``."""

    cursor = earlier + _ONE_DAY
    while cursor < later:
        if is_scheduled(cursor, rule):
            return False
        cursor += _ONE_DAY
    return True


def classify_date(
    habit: Habit, day: date, entries: Iterable[HabitEntry], today: date
) -> DisplayStatus:
    """Classify a single date for calendar/heatmap rendering."""

    if day > today:
        return DisplayStatus.FUTURE
    if day < habit.start_date:
        return DisplayStatus.BEFORE_START
    if not is_scheduled(day, _rule_for(habit)):
        return DisplayStatus.NOT_SCHEDULED

    entry = _entries_by_day(entries).get(day)
    if entry is None:
        return DisplayStatus.PENDING_TODAY if day == today else DisplayStatus.MISSED
    return DisplayStatus.COMPLETED if entry.completed else DisplayStatus.MISSED


def classify_window(
    habit: Habit, entries: Iterable[HabitEntry], start: date, end: date, today: date
) -> list[DayStatus]:
    """Classify every date from ``start`` to ``end`` inclusive, oldest first."""

    entry_list = list(entries)
    window: list[DayStatus] = []
    cursor = start
    while cursor <= end:
        window.append(DayStatus(cursor, classify_date(habit, cursor, entry_list, today)))
        cursor += _ONE_DAY
    return window


def compute_stats(habit: Habit, entries: Iterable[HabitEntry], today: date) -> HabitStats:
    """Compute current/longest streak and today's completion for a habit."""

    entry_list = list(entries)
    today_entry = _entries_by_day(entry_list).get(today)
    completed_days = [
        entry.entry_date for entry in entry_list if entry.completed and entry.entry_date <= today
    ]
    return HabitStats(
        current_streak=current_streak(habit, entry_list, today),
        longest_streak=longest_streak(habit, entry_list),
        completed_today=bool(today_entry and today_entry.completed),
        last_completed_date=max(completed_days) if completed_days else None,
    )


def scheduled_adherence(
    habit: Habit, entries: Iterable[HabitEntry], start: date, end: date, today: date
) -> float:
    """Return the share (0.0-1.0) of scheduled days in a window that were completed.

    The window is clipped to [habit.start_date, today]. Returns 0.0 when the
    clipped window has no scheduled days.
    """

    rule = _rule_for(habit)
    start = max(start, habit.start_date)
    end = min(end, today)
    by_day = _entries_by_day(entries)

    scheduled = 0
    completed = 0
    cursor = start
    while cursor <= end:
        if is_scheduled(cursor, rule):
            scheduled += 1
            entry = by_day.get(cursor)
            if entry is not None and entry.completed:
                completed += 1
        cursor += _ONE_DAY
    return completed / scheduled if scheduled else 0.0


__all__ = [
    "DayStatus",
    "DisplayStatus",
    "HabitStats",
    "classify_date",
    "classify_window",
    "compute_stats",
    "current_streak",
    "longest_streak",
    "scheduled_adherence",
]
