"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_date(name: str) -> date | None:
    """Parse an optional ISO calendar date from the environment."""

    value = os.getenv(name)
    if not value or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "StreakKeeper"
    DB_FILENAME = "streakkeeper.db"
    DEFAULT_HEATMAP_DAYS = 30

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("STREAKKEEPER_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("STREAKKEEPER_DATABASE_URL", self._build_sqlite_url())
        self.TODAY = _env_date("STREAKKEEPER_TODAY")
        self.HEATMAP_DAYS = int(
            os.getenv("STREAKKEEPER_HEATMAP_DAYS", str(self.DEFAULT_HEATMAP_DAYS))
        )
        if self.HEATMAP_DAYS < 1:
            raise ValueError("STREAKKEEPER_HEATMAP_DAYS must be a positive integer.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("STREAKKEEPER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if not self.DATABASE_URL.startswith("sqlite"):
            return {}
        return {"connect_args": {"check_same_thread": False}}

    def today(self) -> date:
        """Return the pinned calendar date, or the local date when unpinned."""

        return self.TODAY or date.today()


class TestConfig(BaseConfig):
    """Configuration for tests backed by an in-memory SQLite database."""

    __test__ = False  # keep pytest from collecting this as a test class

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"
        self.DEV_MODE = True

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
