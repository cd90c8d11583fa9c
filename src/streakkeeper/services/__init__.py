"""Service module exports."""

from . import habits, streaks

__all__ = ["habits", "streaks"]
