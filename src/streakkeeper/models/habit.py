"""Habits tracking data structures."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Habit(SQLModel, table=True):
    """A user-defined recurring habit.

    ``target_days`` holds the stored form of the recurrence rule: one of
    ``everyday``, ``weekdays``, ``weekends`` or a JSON array of weekday names.
    See :mod:`streakkeeper.domain.schedule` for parsing.
    """

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    target_days: str = Field(default="everyday", nullable=False, max_length=128)
    start_date: date = Field(nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    entries: list["HabitEntry"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitEntry",
            back_populates="habit",
            cascade="all, delete-orphan",
        ),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class HabitEntry(SQLModel, table=True):
    """Completion record for a habit on one calendar day.

    ``completed=False`` is an explicit miss; a day without a row is unmarked.
    """

    __tablename__: ClassVar[str] = "habit_entry"
    __table_args__ = (UniqueConstraint("habit_id", "entry_date", name="uq_habit_entry_day"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    entry_date: date = Field(nullable=False, index=True)
    completed: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habit: "Habit" = Relationship(
        back_populates="entries",
        sa_relationship=relationship("Habit", back_populates="entries"),
    )
