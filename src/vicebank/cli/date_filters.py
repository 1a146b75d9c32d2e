"""CLI helpers for date range resolution."""

from datetime import datetime
from typing import Any, Callable

import click

from vicebank.utils.date_parser import get_date_range

PERIODS = ("this-week", "this-month", "last-week", "last-month")


def period_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Add --start-date, --end-date and the named period flags to a command."""
    for period in reversed(PERIODS):
        command = click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Only show entries from {period.replace('-', ' ')}",
        )(command)
    command = click.option(
        "--end-date", help="Latest date to include (ISO-8601, e.g. 2024-01-31)"
    )(command)
    command = click.option(
        "--start-date", help="Earliest date to include (ISO-8601, e.g. 2024-01-01)"
    )(command)
    return command


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[str | datetime | None, str | datetime | None]:
    """Resolve CLI date range from period flags or explicit dates.

    Explicit dates are passed on unparsed; the store ignores bounds it
    cannot read.
    """
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            "Error: Only one period option (--this-week, --this-month, --last-week, --last-month) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-week, --this-month, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])
    return start_date, end_date


def period_flags(**flags: bool) -> dict[str, bool]:
    """Map click's flag parameters back to period names."""
    return {name.replace("_", "-"): value for name, value in flags.items()}
