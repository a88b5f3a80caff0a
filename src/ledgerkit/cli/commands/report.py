"""Financial report commands."""

from decimal import Decimal

import click

from ledgerkit.cli.date_filters import parse_date_option, period_options, resolve_cli_date_range
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.budget import BudgetService
from ledgerkit.domain.cash_flow import CashFlowService
from ledgerkit.domain.dimensions import DimensionReportService
from ledgerkit.domain.entities import DimensionKind, StatementSection
from ledgerkit.domain.statements import StatementService
from ledgerkit.domain.variance import VarianceService

WIDTH = 80


def _money(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def _line(label: str, amount: Decimal, indent: int = 0) -> None:
    label_width = 50 - indent
    click.echo(f"{' ' * indent}{label:<{label_width}} {_money(amount):>20}")


def _display_section(title: str, section: StatementSection) -> None:
    click.echo(title)
    click.echo("*" * WIDTH)
    for row in section.rows:
        _line(f"{row.account.code} {row.account.name}", row.balance, indent=4)
    click.echo("-" * WIDTH)
    _line(f"Total {title}", section.total)
    click.echo("=" * WIDTH)
    click.echo()


@click.group()
def report_group():
    """Generate financial statements."""
    pass


@report_group.command("trial-balance")
@click.option("--as-of", help="As-of date (defaults to all posted entries)")
@click.pass_context
def trial_balance(ctx, as_of: str | None):
    """Show the trial balance."""
    service = StatementService(ctx.obj["db"], ctx.obj["settings"].reports)
    as_of_date = parse_date_option(ctx, as_of, "as-of date")

    result = service.trial_balance(as_of_date=as_of_date)

    title = f"as of {result.as_of_date}" if result.as_of_date else "(all dates)"
    click.echo(f"\nTrial Balance {title}:")
    click.echo("-" * WIDTH)
    click.echo(f"{'Account':<38} {'Debit':>20} {'Credit':>20}")
    click.echo("-" * WIDTH)
    for row in result.rows:
        label = f"{row.account.code} {row.account.name}"
        click.echo(f"{label:<38} {_money(row.debit):>20} {_money(row.credit):>20}")
    click.echo("-" * WIDTH)
    click.echo(
        f"{'Total':<38} {_money(result.total_debits):>20} {_money(result.total_credits):>20}"
    )
    click.echo("=" * WIDTH)
    if result.is_balanced:
        click.echo("Balanced")
    else:
        click.echo(f"NOT BALANCED (difference {_money(result.difference)})")


@report_group.command("balance-sheet")
@click.option("--as-of", help="As-of date (defaults to today)")
@click.pass_context
def balance_sheet(ctx, as_of: str | None):
    """Show the balance sheet."""
    service = StatementService(ctx.obj["db"], ctx.obj["settings"].reports)
    as_of_date = parse_date_option(ctx, as_of, "as-of date")

    result = service.balance_sheet(as_of_date=as_of_date)

    click.echo(f"\nBalance Sheet as of {result.as_of_date}:")
    click.echo("-" * WIDTH)
    _display_section("Assets", result.assets)
    _display_section("Liabilities", result.liabilities)
    _display_section("Equity", result.equity)
    _line("Retained Earnings", result.retained_earnings)
    _line("Total Liabilities and Equity", result.total_liabilities_and_equity)
    click.echo("=" * WIDTH)
    click.echo("Balanced" if result.balanced else "NOT BALANCED")


@report_group.command("profit-loss")
@period_options
@click.pass_context
def profit_loss(ctx, start_date: str | None, end_date: str | None, **period_flags):
    """Show profit and loss for a period."""
    service = StatementService(ctx.obj["db"], ctx.obj["settings"].reports)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    try:
        result = service.profit_and_loss(start, end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nProfit and Loss {result.start_date} to {result.end_date}:")
    click.echo("-" * WIDTH)
    _display_section("Income", result.income)
    _display_section("Expenses", result.expenses)
    if result.net_loss:
        _line("Net Loss", result.net_loss)
    else:
        _line("Net Profit", result.net_profit)


@report_group.command("cash-flow")
@period_options
@click.option(
    "--method",
    type=click.Choice(["direct", "indirect", "compare"]),
    default="direct",
    show_default=True,
    help="Cash flow method",
)
@click.pass_context
def cash_flow(ctx, start_date: str | None, end_date: str | None, method: str, **period_flags):
    """Show the cash flow statement for a period."""
    service = CashFlowService(ctx.obj["db"], ctx.obj["settings"].reports)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    try:
        if method == "direct":
            result = service.direct(start, end)
        elif method == "indirect":
            result = service.indirect(start, end)
        else:
            result = service.compare_methods(start, end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if method == "direct":
        click.echo(f"\nCash Flow (direct) {result.start_date} to {result.end_date}:")
        click.echo("-" * WIDTH)
        _line("Opening Cash", result.opening_cash)
        for section in result.sections:
            click.echo(section.activity.value)
            _line("Inflows", section.inflows, indent=4)
            _line("Outflows", section.outflows, indent=4)
            _line(f"Net {section.activity.value}", section.net, indent=4)
        click.echo("-" * WIDTH)
        _line("Net Change in Cash", result.net_change_in_cash)
        _line("Closing Cash", result.closing_cash)
        if result.unclassified_sources:
            click.echo(
                f"Unclassified source documents counted as Operating: "
                f"{', '.join(result.unclassified_sources)}"
            )
    elif method == "indirect":
        click.echo(f"\nCash Flow (indirect) {result.start_date} to {result.end_date}:")
        click.echo("-" * WIDTH)
        _line("Net Income", result.net_income)
        for adj in result.adjustments:
            _line(f"{adj.account.code} {adj.account.name}", adj.contribution, indent=4)
        click.echo("-" * WIDTH)
        _line("Net Change in Cash", result.net_change_in_cash)
    else:
        click.echo(f"\nCash Flow comparison {start} to {end}:")
        click.echo("-" * WIDTH)
        _line("Direct", result.direct.net_change_in_cash)
        _line("Indirect", result.indirect.net_change_in_cash)
        _line("Divergence", result.divergence)
        click.echo("Consistent" if result.consistent else "Methods diverge")


@report_group.command("budget")
@click.argument("budget_id", type=int)
@click.pass_context
def budget(ctx, budget_id: int):
    """Compare a budget with actuals."""
    service = BudgetService(ctx.obj["db"], ctx.obj["settings"].reports)

    try:
        result = service.budget_vs_actual(budget_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"\nBudget '{result.budget.name}' "
        f"{result.budget.start_date} to {result.budget.end_date}:"
    )
    click.echo("-" * 100)
    click.echo(f"{'Account':<30} {'Budget':>15} {'Actual':>15} {'Variance':>15} {'%':>8}  Status")
    click.echo("-" * 100)
    for row in result.rows:
        label = f"{row.account.code} {row.account.name}"[:30]
        click.echo(
            f"{label:<30} {_money(row.budget):>15} {_money(row.actual):>15} "
            f"{_money(row.variance):>15} {row.variance_percent:>8.1f}  {row.status.value}"
        )
    click.echo("-" * 100)
    click.echo(
        f"{'Total':<30} {_money(result.total_budget):>15} {_money(result.total_actual):>15} "
        f"{_money(result.total_variance):>15} {result.variance_percent:>8.1f}"
    )


@report_group.command("variance")
@click.option("--current-start", required=True, help="Current period start date")
@click.option("--current-end", required=True, help="Current period end date")
@click.option("--prior-start", required=True, help="Prior period start date")
@click.option("--prior-end", required=True, help="Prior period end date")
@click.pass_context
def variance(ctx, current_start: str, current_end: str, prior_start: str, prior_end: str):
    """Compare account balances between two periods."""
    service = VarianceService(ctx.obj["db"], ctx.obj["settings"].reports)

    dates = [
        parse_date_option(ctx, current_start, "current start date"),
        parse_date_option(ctx, current_end, "current end date"),
        parse_date_option(ctx, prior_start, "prior start date"),
        parse_date_option(ctx, prior_end, "prior end date"),
    ]

    try:
        result = service.compare_periods(*dates)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.rows:
        click.echo("No activity in either period.")
        return

    click.echo(f"\nVariance {result.current_start}..{result.current_end} "
               f"vs {result.prior_start}..{result.prior_end}:")
    click.echo("-" * 100)
    click.echo(f"{'Account':<30} {'Current':>15} {'Prior':>15} {'Variance':>15} {'%':>8}  Direction")
    click.echo("-" * 100)
    for row in result.rows:
        label = f"{row.account.code} {row.account.name}"[:30]
        click.echo(
            f"{label:<30} {_money(row.current):>15} {_money(row.prior):>15} "
            f"{_money(row.variance):>15} {row.variance_percent:>8.1f}  {row.direction.value}"
        )


@report_group.command("dimension")
@click.argument("kind", type=click.Choice([k.value for k in DimensionKind]))
@period_options
@click.pass_context
def dimension(ctx, kind: str, start_date: str | None, end_date: str | None, **period_flags):
    """Summarize posted lines by cost center or project."""
    service = DimensionReportService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    result = service.report(DimensionKind(kind), start, end)
    if not result.rows:
        click.echo("No tagged journal lines found.")
        return

    click.echo(f"\n{kind.replace('-', ' ').title()} Report:")
    click.echo("-" * WIDTH)
    click.echo(f"{'Name':<24} {'Debit':>15} {'Credit':>15} {'Net':>15} {'Lines':>7}")
    click.echo("-" * WIDTH)
    for row in result.rows:
        click.echo(
            f"{row.name[:24]:<24} {_money(row.debit_total):>15} {_money(row.credit_total):>15} "
            f"{_money(row.net):>15} {row.line_count:>7d}"
        )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
