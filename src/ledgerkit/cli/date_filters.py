"""CLI helpers for date options and reporting periods."""

from datetime import date

import click

from ledgerkit.utils.date_parser import PERIODS, get_date_range, parse_date


def period_options(func):
    """Add --start-date/--end-date and one flag per named period (--this-month, ...)."""
    for period in reversed(PERIODS):
        func = click.option(
            f"--{period}", is_flag=True, help=f"Report on {period.replace('-', ' ')}"
        )(func)
    func = click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")(func)
    func = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')"
    )(func)
    return func


def parse_date_option(ctx: click.Context, value: str | None, label: str) -> date | None:
    """Parse an optional date option, exiting with an error if it is invalid."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates.

    period_flags is keyed by click parameter name (this_month, last_year, ...).
    """
    selected = [name.replace("_", "-") for name, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        flag_names = ", ".join(f"--{p}" for p in PERIODS)
        click.echo(
            f"Error: Only one period option ({flag_names}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    start = parse_date_option(ctx, start_date, "start date")
    end = parse_date_option(ctx, end_date, "end date")

    if start is None and end is None and default_range is not None:
        start, end = default_range

    return start, end
