"""Command line interface for StreakKeeper."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Optional

import click

from .context import AppContext, create_app_context
from .domain.schedule import UnparseableRule, describe_rule, parse_rule
from .services.habits import ENTRY_STATUSES, HabitServiceError
from .services.streaks import DisplayStatus

_ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])

_HEATMAP_SYMBOLS = {
    DisplayStatus.COMPLETED: "#",
    DisplayStatus.MISSED: "x",
    DisplayStatus.NOT_SCHEDULED: ".",
    DisplayStatus.PENDING_TODAY: "?",
    DisplayStatus.FUTURE: " ",
    DisplayStatus.BEFORE_START: " ",
}


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def _app(ctx: click.Context) -> AppContext:
    return ctx.find_object(AppContext)


@click.group()
@click.option("--user", "username", default="local", show_default=True, help="Owner of the habits.")
@click.pass_context
def cli(ctx: click.Context, username: str) -> None:
    """Track habits and their streaks."""

    if ctx.obj is None:
        ctx.obj = create_app_context()
    ctx.meta["username"] = username


def _user_id(ctx: click.Context) -> int:
    user = _app(ctx).user(ctx.meta["username"])
    return user.id


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create database tables (idempotent)."""

    click.echo(f"Database ready: {_app(ctx).config.DATABASE_URL}")


@cli.command("add")
@click.argument("name")
@click.option(
    "--days",
    "target_days",
    default="everyday",
    show_default=True,
    help="everyday, weekdays, weekends or a comma list such as monday,wednesday,friday.",
)
@click.option("--start", "start", type=_ISO_DATE, default=None, help="Start date (YYYY-MM-DD).")
@click.pass_context
def add_habit(ctx: click.Context, name: str, target_days: str, start: Optional[datetime]) -> None:
    """Create a habit."""

    if isinstance(parse_rule(target_days), UnparseableRule) and not target_days.strip().startswith("["):
        names = [part.strip().lower() for part in target_days.split(",") if part.strip()]
        target_days = json.dumps(names)
    try:
        habit = _app(ctx).habit_service.create_habit(
            _user_id(ctx), name, target_days, _as_date(start)
        )
    except HabitServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created habit {habit.id}: {habit.name} ({describe_rule(parse_rule(habit.target_days))})")


@cli.command("list")
@click.pass_context
def list_habits(ctx: click.Context) -> None:
    """Show habits with their current and longest streaks."""

    rows = _app(ctx).habit_service.list_habits_with_stats(_user_id(ctx))
    if not rows:
        click.echo("No habits yet.")
        return
    for row in rows:
        habit, stats = row.habit, row.stats
        done = "done today" if stats.completed_today else "not done today"
        click.echo(
            f"{habit.id:>4}  {habit.name:<24} {describe_rule(parse_rule(habit.target_days)):<16} "
            f"current {stats.current_streak:>3}  longest {stats.longest_streak:>3}  {done}"
        )


@cli.command("mark")
@click.argument("habit_id", type=int)
@click.option("--date", "day", type=_ISO_DATE, default=None, help="Day to mark (default today).")
@click.option(
    "--status",
    type=click.Choice(ENTRY_STATUSES),
    default=None,
    help="Explicit status; omit to toggle.",
)
@click.pass_context
def mark(ctx: click.Context, habit_id: int, day: Optional[datetime], status: Optional[str]) -> None:
    """Mark a habit completed, missed or unmarked for a day."""

    app = _app(ctx)
    try:
        entry = app.habit_service.set_entry_status(_user_id(ctx), habit_id, _as_date(day), status)
    except HabitServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    if entry is None:
        click.echo(f"Habit {habit_id}: cleared {(_as_date(day) or app.config.today()).isoformat()}")
    else:
        state = "completed" if entry.completed else "missed"
        click.echo(f"Habit {habit_id}: {entry.entry_date.isoformat()} {state}")


@cli.command("stats")
@click.argument("habit_id", type=int)
@click.pass_context
def stats(ctx: click.Context, habit_id: int) -> None:
    """Print streak statistics for one habit."""

    try:
        result = _app(ctx).habit_service.get_stats(_user_id(ctx), habit_id)
    except HabitServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    last = result.last_completed_date.isoformat() if result.last_completed_date else "never"
    click.echo(f"Current streak: {result.current_streak}")
    click.echo(f"Longest streak: {result.longest_streak}")
    click.echo(f"Completed today: {'yes' if result.completed_today else 'no'}")
    click.echo(f"Last completed: {last}")


@cli.command("heatmap")
@click.argument("habit_id", type=int)
@click.option("--days", type=click.IntRange(min=1), default=None, help="Window length in days.")
@click.pass_context
def heatmap(ctx: click.Context, habit_id: int, days: Optional[int]) -> None:
    """Print a per-day status strip, oldest day first."""

    app = _app(ctx)
    try:
        cells = app.habit_service.heatmap(_user_id(ctx), habit_id, days)
    except HabitServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo("".join(_HEATMAP_SYMBOLS[cell.status] for cell in cells))
    click.echo(f"{cells[0].day.isoformat()} .. {cells[-1].day.isoformat()}")


@cli.command("rate")
@click.pass_context
def rate(ctx: click.Context) -> None:
    """Print the share of recorded entries that are completed."""

    click.echo(f"Completion rate: {_app(ctx).habit_service.completion_rate(_user_id(ctx)):.1f}%")


@cli.command("delete")
@click.argument("habit_id", type=int)
@click.confirmation_option(prompt="Delete this habit and all of its entries?")
@click.pass_context
def delete(ctx: click.Context, habit_id: int) -> None:
    """Delete a habit and its entries."""

    try:
        _app(ctx).habit_service.delete_habit(_user_id(ctx), habit_id)
    except HabitServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Deleted habit {habit_id}")


def main() -> None:  # pragma: no cover - console entry point
    cli(prog_name="streakkeeper")
