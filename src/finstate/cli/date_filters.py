"""CLI helpers for date range resolution."""

from datetime import date

import click

from finstate.cli.error_handling import handle_domain_error
from finstate.utils.date_parser import get_date_range, parse_date


def period_options(command):
    """Attach the reporting period flags to a command."""
    flags = (
        ("--last-year", "Previous calendar year"),
        ("--this-year", "Current year to date"),
        ("--last-quarter", "Previous quarter"),
        ("--this-quarter", "Current quarter to date"),
        ("--last-month", "Previous month"),
        ("--this-month", "Current month to date"),
    )
    for flag, help_text in flags:
        command = click.option(flag, is_flag=True, help=help_text)(command)
    return command


def parse_date_option(ctx, value: str | None, label: str) -> date | None:
    """Parse an optional date option, or exit with a CLI error."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        handle_domain_error(ctx, ValueError(f"Invalid {label}: {e}"))


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo("Error: Only one period option can be specified at a time.", err=True)
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    return (
        parse_date_option(ctx, start_date, "start date"),
        parse_date_option(ctx, end_date, "end date"),
    )
