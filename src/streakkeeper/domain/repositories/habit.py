"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitEntry


class HabitRepository(Protocol):
    """Storage collaborator for habits and their daily entries."""

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_for_user(self, user_id: int) -> list[Habit]:
        """List a user's habits ordered by name."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: int) -> bool:
        """Delete a habit and its entries; False when it did not exist."""
        ...

    # Habit entry operations
    def get_entry(self, habit_id: int, entry_date: date) -> Optional[HabitEntry]:
        """Get the entry for one habit and day."""
        ...

    def list_entries(self, habit_id: int) -> list[HabitEntry]:
        """All entries for a habit, in no guaranteed order."""
        ...

    def get_entries_between(
        self, habit_id: int, start_date: date, end_date: date
    ) -> list[HabitEntry]:
        """Entries for a habit within a date range, oldest first."""
        ...

    def list_entries_for_user(self, user_id: int) -> list[HabitEntry]:
        """Every entry owned by a user."""
        ...

    def upsert_entry(self, entry: HabitEntry) -> HabitEntry:
        """Insert or update the entry for (habit_id, entry_date)."""
        ...

    def delete_entry(self, habit_id: int, entry_date: date) -> bool:
        """Delete the entry for a day; False when none existed."""
        ...
