"""Recurrence rules and the scheduled-day predicate.

A habit's ``target_days`` column is parsed into one of five rule variants.
``UnparseableRule`` is a real variant rather than an exception: statistics
for a habit with corrupt rule data still render, with no day scheduled.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from typing import Union

WEEKDAY_NAMES: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_SHORT_NAMES = {name: name[:3].capitalize() for name in WEEKDAY_NAMES}
_WORK_WEEK = frozenset(WEEKDAY_NAMES[:5])
_WEEKEND = frozenset(WEEKDAY_NAMES[5:])


@dataclass(frozen=True, slots=True)
class Everyday:
    pass


@dataclass(frozen=True, slots=True)
class Weekdays:
    pass


@dataclass(frozen=True, slots=True)
class Weekends:
    pass


@dataclass(frozen=True, slots=True)
class CustomDays:
    """Explicit set of lower-case weekday names."""

    days: frozenset[str]


@dataclass(frozen=True, slots=True)
class UnparseableRule:
    """Stored rule text that could not be understood."""

    raw: str


RecurrenceRule = Union[Everyday, Weekdays, Weekends, CustomDays, UnparseableRule]

_KEYWORDS: dict[str, RecurrenceRule] = {
    "everyday": Everyday(),
    "weekdays": Weekdays(),
    "weekends": Weekends(),
}


def weekday_name(day: date) -> str:
    """Return the lower-case English weekday name for ``day``."""

    return WEEKDAY_NAMES[day.weekday()]


def parse_rule(text: str | None) -> RecurrenceRule:
    """Parse stored ``target_days`` text into a rule; never raises."""

    raw = (text or "").strip()
    keyword = _KEYWORDS.get(raw.lower())
    if keyword is not None:
        return keyword
    if not raw.startswith("["):
        return UnparseableRule(raw)

    try:
        decoded = json.loads(raw)
    except ValueError:
        return UnparseableRule(raw)
    if not isinstance(decoded, list) or not all(isinstance(item, str) for item in decoded):
        return UnparseableRule(raw)

    days = frozenset(item.strip().lower() for item in decoded)
    if not days <= set(WEEKDAY_NAMES):
        return UnparseableRule(raw)
    return CustomDays(days)


def custom_days(*names: str) -> CustomDays:
    """Build a ``CustomDays`` rule, rejecting unknown day names."""

    days = frozenset(name.strip().lower() for name in names)
    unknown = days - set(WEEKDAY_NAMES)
    if unknown:
        raise ValueError(f"Unknown weekday name(s): {', '.join(sorted(unknown))}")
    return CustomDays(days)


def format_rule(rule: RecurrenceRule) -> str:
    """Return the storage form of ``rule`` (inverse of :func:`parse_rule`)."""

    if isinstance(rule, Everyday):
        return "everyday"
    if isinstance(rule, Weekdays):
        return "weekdays"
    if isinstance(rule, Weekends):
        return "weekends"
    if isinstance(rule, CustomDays):
        # Week order keeps the stored JSON stable for equal sets
        return json.dumps([name for name in WEEKDAY_NAMES if name in rule.days])
    return rule.raw


def is_scheduled(day: date, rule: RecurrenceRule) -> bool:
    """Return True when ``day`` is an active day under ``rule``."""

    if isinstance(rule, Everyday):
        return True
    if isinstance(rule, Weekdays):
        return day.weekday() < 5
    if isinstance(rule, Weekends):
        return day.weekday() >= 5
    if isinstance(rule, CustomDays):
        return weekday_name(day) in rule.days
    return False


def scheduled_weekdays(rule: RecurrenceRule) -> frozenset[str]:
    """Return the weekday names on which ``rule`` is active."""

    if isinstance(rule, Everyday):
        return frozenset(WEEKDAY_NAMES)
    if isinstance(rule, Weekdays):
        return _WORK_WEEK
    if isinstance(rule, Weekends):
        return _WEEKEND
    if isinstance(rule, CustomDays):
        return rule.days
    return frozenset()


def describe_rule(rule: RecurrenceRule) -> str:
    """Human-readable label for a rule, e.g. ``"Mon, Wed, Fri"``."""

    if isinstance(rule, UnparseableRule):
        return "Custom days"
    days = scheduled_weekdays(rule)
    if not days:
        return "No days selected"
    if days == frozenset(WEEKDAY_NAMES):
        return "Every day"
    if days == _WORK_WEEK:
        return "Weekdays"
    if days == _WEEKEND:
        return "Weekends"
    return ", ".join(_SHORT_NAMES[name] for name in WEEKDAY_NAMES if name in days)


__all__ = [
    "CustomDays",
    "Everyday",
    "RecurrenceRule",
    "UnparseableRule",
    "WEEKDAY_NAMES",
    "Weekdays",
    "Weekends",
    "custom_days",
    "describe_rule",
    "format_rule",
    "is_scheduled",
    "parse_rule",
    "scheduled_weekdays",
    "weekday_name",
]
