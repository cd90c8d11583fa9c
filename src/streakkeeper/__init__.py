"""StreakKeeper: habit tracking with schedule-aware streak statistics."""

from __future__ import annotations

from .config import BaseConfig, TestConfig
from .services.streaks import classify_date, compute_stats

__all__ = ["BaseConfig", "TestConfig", "classify_date", "compute_stats"]
