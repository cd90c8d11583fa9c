"""Pytest configuration and shared fixtures for StreakKeeper tests.

Provides isolated SQLite databases, a default owner, and factories for
habits and entries. Pure calculator tests use ``make_habit``/``make_entries``
and never touch a database.
"""

from __future__ import annotations

import tempfile
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable

import pytest
from sqlmodel import Session, SQLModel, create_engine, select

from streakkeeper.models import Habit, HabitEntry, User

# =============================================================================
# Plain builders (no database)
# =============================================================================


def make_habit(
    target_days: str = "everyday",
    start_date: date = date(2024, 1, 1),
    name: str = "Test Habit",
    habit_id: int = 1,
    user_id: int = 1,
) -> Habit:
    """Build an unsaved habit for calculator tests."""
    return Habit(
        id=habit_id,
        user_id=user_id,
        name=name,
        target_days=target_days,
        start_date=start_date,
    )


def make_entries(
    days: Iterable[date], completed: bool = True, habit_id: int = 1, user_id: int = 1
) -> list[HabitEntry]:
    """Build unsaved entries, one per day, all with the same completion flag."""
    return [
        HabitEntry(habit_id=habit_id, user_id=user_id, entry_date=day, completed=completed)
        for day in days
    ]


def day_range(start: date, end: date) -> list[date]:
    """Inclusive list of dates from ``start`` to ``end``."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Database session for arranging test data directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories expect (Callable[[], Session])."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(db_session) -> User:
    """Default owner for scoping data."""
    existing = db_session.exec(select(User).where(User.username == "tester")).first()
    if existing:
        return existing
    u = User(username="tester", display_name="Tester")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def other_user(db_session) -> User:
    """A second owner, for access-scoping tests."""
    u = User(username="someone-else", display_name="Someone Else")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def habit_factory(db_session, user):
    """Factory for creating persisted habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        target_days: str = "everyday",
        start_date: date = date(2024, 1, 1),
        owner: User | None = None,
    ) -> Habit:
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            name=name,
            target_days=target_days,
            start_date=start_date,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def entry_factory(db_session):
    """Factory for persisting entries for an existing habit."""

    def _create_entry(habit: Habit, day: date, completed: bool = True) -> HabitEntry:
        entry = HabitEntry(
            habit_id=habit.id,
            user_id=habit.user_id,
            entry_date=day,
            completed=completed,
        )
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry

    return _create_entry
