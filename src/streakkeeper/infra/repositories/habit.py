"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from ...models.habit import Habit, HabitEntry
from ...models.user import User


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_for_user(self, user_id: int) -> list[Habit]:
        """List a user's habits ordered by name."""
        with self.session_factory() as session:
            statement = (
                select(Habit).where(Habit.user_id == user_id).order_by(Habit.name, Habit.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: int) -> bool:
        """Delete a habit together with all of its entries."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return False
            session.execute(delete(HabitEntry).where(HabitEntry.habit_id == habit_id))
            session.delete(habit)
            session.commit()
            return True

    # Habit entry operations
    def get_entry(self, habit_id: int, entry_date: date) -> Optional[HabitEntry]:
        """Get the entry for one habit and day."""
        with self.session_factory() as session:
            statement = (
                select(HabitEntry)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.entry_date == entry_date)
            )
            obj = session.exec(statement).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_entries(self, habit_id: int) -> list[HabitEntry]:
        """All entries for a habit."""
        with self.session_factory() as session:
            statement = select(HabitEntry).where(HabitEntry.habit_id == habit_id)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_entries_between(
        self, habit_id: int, start_date: date, end_date: date
    ) -> list[HabitEntry]:
        """Get entries for a habit within a date range."""
        with self.session_factory() as session:
            statement = (
                select(HabitEntry)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.entry_date >= start_date)
                .where(HabitEntry.entry_date <= end_date)
                .order_by(HabitEntry.entry_date)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_entries_for_user(self, user_id: int) -> list[HabitEntry]:
        """Every entry owned by a user."""
        with self.session_factory() as session:
            statement = select(HabitEntry).where(HabitEntry.user_id == user_id)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert_entry(self, entry: HabitEntry) -> HabitEntry:
        """Insert or update the entry for (habit_id, entry_date)."""
        with self.session_factory() as session:
            existing = session.exec(
                select(HabitEntry)
                .where(HabitEntry.habit_id == entry.habit_id)
                .where(HabitEntry.entry_date == entry.entry_date)
            ).first()

            if existing:
                existing.completed = entry.completed
                session.add(existing)
                session.commit()
                session.refresh(existing)
                session.expunge(existing)
                return existing
            else:
                session.add(entry)
                session.commit()
                session.refresh(entry)
                session.expunge(entry)
                return entry

    def delete_entry(self, habit_id: int, entry_date: date) -> bool:
        """Delete the entry for a day; False when none existed."""
        with self.session_factory() as session:
            entry = session.exec(
                select(HabitEntry)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.entry_date == entry_date)
            ).first()

            if entry is None:
                return False
            session.delete(entry)
            session.commit()
            return True


def ensure_user(session_factory: Callable[[], Session], username: str) -> User:
    """Return the user named ``username``, creating it on first use."""
    username = username.strip()
    if not username:
        raise ValueError("Username must not be blank")
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            user = User(username=username, display_name=username)
            session.add(user)
            session.commit()
            session.refresh(user)
        session.expunge(user)
        return user
