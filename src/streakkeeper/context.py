"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository
from .infra.repositories.habit import ensure_user
from .logging_config import setup_logging
from .models.user import User
from .services.habits import HabitService


@dataclass
class AppContext:
    """Wiring shared by CLI commands."""

    config: BaseConfig
    session_factory: SessionFactory
    habit_repo: SQLModelHabitRepository
    habit_service: HabitService

    def user(self, username: str) -> User:
        """Return the owning user, creating it on first use."""
        return ensure_user(self.session_factory, username)


def create_app_context(config: Optional[BaseConfig] = None, *, configure_logging: bool = True) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()
    if configure_logging:
        setup_logging(config)

    _, session_factory = bootstrap_database(config)
    habit_repo = SQLModelHabitRepository(session_factory)
    return AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=habit_repo,
        habit_service=HabitService(habit_repo, clock=config.today, heatmap_days=config.HEATMAP_DAYS),
    )
