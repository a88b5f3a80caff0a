"""Chart of accounts commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.chart import ChartService

INDENT_SIZE = 4


@click.group()
def account_group():
    """Browse the chart of accounts."""
    pass


@account_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide inactive accounts")
@click.pass_context
def list_accounts(ctx, active_only: bool):
    """List all accounts ordered by code."""
    db = ctx.obj["db"]

    accounts = db.list_accounts(active_only=active_only)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        flags = "" if acc.is_active else " (inactive)"
        sub_type = acc.sub_type or ""
        click.echo(
            f"ID: {acc.id:3d} | {acc.code:8s} | {acc.name:30s} | "
            f"{acc.account_type.value:9s} | {sub_type}{flags}"
        )


def _display_tree(nodes, indent=0):
    for node in nodes:
        acc = node["account"]
        indent_str = " " * (INDENT_SIZE * indent)
        click.echo(f"{indent_str}{acc.code} {acc.name} [{acc.account_type.value}]")
        _display_tree(node["children"], indent + 1)


@account_group.command("tree")
@click.option("--active-only", is_flag=True, help="Hide inactive accounts")
@click.pass_context
def account_tree(ctx, active_only: bool):
    """Show the account hierarchy."""
    db = ctx.obj["db"]
    service = ChartService(db)

    try:
        tree = service.get_account_tree(active_only=active_only)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not tree:
        click.echo("No accounts found.")
        return

    _display_tree(tree)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
