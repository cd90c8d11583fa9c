"""Habit service: owner-scoped CRUD, entry marking and statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Optional

from ..domain.repositories.habit import HabitRepository
from ..domain.schedule import UnparseableRule, format_rule, parse_rule
from ..logging_config import get_logger
from ..models.habit import Habit, HabitEntry
from .streaks import DayStatus, HabitStats, classify_window, compute_stats

logger = get_logger(__name__)

MAX_NAME_LENGTH = 80
ENTRY_STATUSES = ("completed", "missed", "unmarked")


class HabitServiceError(Exception):
    """Base class for errors surfaced by the habit service."""


class HabitNotFoundError(HabitServiceError):
    """Habit does not exist or belongs to another user."""

    def __init__(self, habit_id: int):
        super().__init__(f"Habit {habit_id} not found")
        self.habit_id = habit_id


class HabitValidationError(HabitServiceError):
    """Input rejected before it reaches storage."""


@dataclass(slots=True)
class HabitWithStats:
    """A habit paired with its freshly computed statistics."""

    habit: Habit
    stats: HabitStats


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise HabitValidationError("Habit name must not be blank")
    if len(name) > MAX_NAME_LENGTH:
        raise HabitValidationError(f"Habit name must be at most {MAX_NAME_LENGTH} characters")
    return name


def _clean_target_days(target_days: str) -> str:
    rule = parse_rule(target_days)
    if isinstance(rule, UnparseableRule):
        raise HabitValidationError(f"Unrecognised target days: {target_days!r}")
    return format_rule(rule)


class HabitService:
    """Application-facing operations on one user's habits.

    ``clock`` supplies "today"; pass a fixed lambda in tests or wire
    ``BaseConfig.today`` in the CLI.
    """

    def __init__(
        self,
        repository: HabitRepository,
        *,
        clock: Callable[[], date] = date.today,
        heatmap_days: int = 30,
    ):
        self.repository = repository
        self.clock = clock
        self.heatmap_days = heatmap_days

    def _owned_habit(self, user_id: int, habit_id: int) -> Habit:
        habit = self.repository.get_by_id(habit_id)
        if habit is None or habit.user_id != user_id:
            raise HabitNotFoundError(habit_id)
        return habit

    # Habit CRUD
    def create_habit(
        self,
        user_id: int,
        name: str,
        target_days: str = "everyday",
        start_date: Optional[date] = None,
    ) -> Habit:
        """Create a habit; start date defaults to today."""
        habit = Habit(
            user_id=user_id,
            name=_clean_name(name),
            target_days=_clean_target_days(target_days),
            start_date=start_date or self.clock(),
        )
        created = self.repository.create(habit)
        logger.info(
            "Habit created",
            extra={"habit_id": created.id, "user_id": user_id, "target_days": created.target_days},
        )
        return created

    def get_habit(self, user_id: int, habit_id: int) -> Habit:
        return self._owned_habit(user_id, habit_id)

    def update_habit(
        self,
        user_id: int,
        habit_id: int,
        *,
        name: Optional[str] = None,
        target_days: Optional[str] = None,
        start_date: Optional[date] = None,
    ) -> Habit:
        """Apply a partial update. Statistics follow automatically on next read."""
        habit = self._owned_habit(user_id, habit_id)
        if name is not None:
            habit.name = _clean_name(name)
        if target_days is not None:
            habit.target_days = _clean_target_days(target_days)
        if start_date is not None:
            habit.start_date = start_date
        updated = self.repository.update(habit)
        logger.info("Habit updated", extra={"habit_id": habit_id, "user_id": user_id})
        return updated

    def delete_habit(self, user_id: int, habit_id: int) -> None:
        self._owned_habit(user_id, habit_id)
        self.repository.delete(habit_id)
        logger.info("Habit deleted", extra={"habit_id": habit_id, "user_id": user_id})

    def list_habits(self, user_id: int) -> list[Habit]:
        return self.repository.list_for_user(user_id)

    # Entries
    def set_entry_status(
        self,
        user_id: int,
        habit_id: int,
        day: Optional[date] = None,
        status: Optional[str] = None,
    ) -> Optional[HabitEntry]:
        """Record completion state for one day.

        ``completed``/``missed`` set the flag, ``unmarked`` removes the entry
        (returns None), and no status toggles an existing entry or creates a
        completed one.
        """
        if status is not None and status not in ENTRY_STATUSES:
            raise HabitValidationError(
                f"Unknown status {status!r}; expected one of {', '.join(ENTRY_STATUSES)}"
            )
        self._owned_habit(user_id, habit_id)
        day = day or self.clock()

        if status == "unmarked":
            removed = self.repository.delete_entry(habit_id, day)
            logger.info(
                "Habit entry cleared",
                extra={"habit_id": habit_id, "entry_date": day, "removed": removed},
            )
            return None

        if status is None:
            existing = self.repository.get_entry(habit_id, day)
            completed = not existing.completed if existing else True
        else:
            completed = status == "completed"

        entry = self.repository.upsert_entry(
            HabitEntry(habit_id=habit_id, user_id=user_id, entry_date=day, completed=completed)
        )
        logger.info(
            "Habit entry recorded",
            extra={"habit_id": habit_id, "entry_date": day, "completed": completed},
        )
        return entry

    # Statistics
    def get_stats(self, user_id: int, habit_id: int) -> HabitStats:
        habit = self._owned_habit(user_id, habit_id)
        return compute_stats(habit, self.repository.list_entries(habit_id), self.clock())

    def list_habits_with_stats(self, user_id: int) -> list[HabitWithStats]:
        today = self.clock()
        return [
            HabitWithStats(habit, compute_stats(habit, self.repository.list_entries(habit.id), today))
            for habit in self.repository.list_for_user(user_id)
        ]

    def heatmap(self, user_id: int, habit_id: int, days: Optional[int] = None) -> list[DayStatus]:
        """Statuses for the last ``days`` days ending today, oldest first.

        ``None`` uses the configured window length.
        """
        if days is None:
            days = self.heatmap_days
        if days < 1:
            raise HabitValidationError("days must be at least 1")
        habit = self._owned_habit(user_id, habit_id)
        today = self.clock()
        start = today - timedelta(days=days - 1)
        entries = self.repository.get_entries_between(habit_id, start, today)
        return classify_window(habit, entries, start, today, today)

    def completion_rate(self, user_id: int) -> float:
        """Percentage of the user's recorded entries that are completed."""
        entries = self.repository.list_entries_for_user(user_id)
        if not entries:
            return 0.0
        completed = sum(1 for entry in entries if entry.completed)
        return completed / len(entries) * 100


__all__ = [
    "ENTRY_STATUSES",
    "HabitNotFoundError",
    "HabitService",
    "HabitServiceError",
    "HabitValidationError",
    "HabitWithStats",
]
