"""User model used to scope habits and entries to an owner."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class User(SQLModel, table=True):
    """Owner of habits. Credentials live with the external auth layer."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    display_name: str = Field(default="", max_length=120)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habits = Relationship(
        back_populates="user",
        sa_relationship=relationship("Habit", back_populates="user"),
    )
