"""Bank statement import and reconciliation commands."""

import click

from ledgerkit.cli.date_filters import parse_date_option
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.entities import TransactionStatus
from ledgerkit.domain.reconciliation import ReconciliationService, to_amount


def _service(ctx) -> ReconciliationService:
    return ReconciliationService(ctx.obj["db"], ctx.obj["settings"].reconciliation)


@click.group()
def bank_group():
    """Import bank statements and reconcile transactions."""
    pass


@bank_group.command("import")
@click.argument("bank_account_id", type=int)
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--statement-date", help="Statement date (defaults to today)")
@click.option("--opening-balance", help="Opening balance on the statement")
@click.option("--closing-balance", help="Closing balance on the statement")
@click.option("--imported-by", help="User recorded on the statement")
@click.pass_context
def import_statement(
    ctx,
    bank_account_id: int,
    csv_file: str,
    statement_date: str | None,
    opening_balance: str | None,
    closing_balance: str | None,
    imported_by: str | None,
):
    """Import a bank statement CSV file.

    The file needs a Date column and Debit and/or Credit columns;
    Description, Reference and Balance are optional. Either every row is
    imported or none is.

    Examples:
        ledgerkit bank import 1 statement.csv
        ledgerkit bank import 1 march.csv --statement-date 2024-03-31 --closing-balance 5400
    """
    service = _service(ctx)
    stmt_date = parse_date_option(ctx, statement_date, "statement date")

    try:
        result = service.import_statement_file(
            bank_account_id,
            csv_file,
            statement_date=stmt_date,
            opening_balance=to_amount(opening_balance),
            closing_balance=to_amount(closing_balance),
            imported_by=imported_by,
        )
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Statement: {result.statement.id}")
    click.echo(f"  Imported: {result.transactions_imported} transactions")
    click.echo(f"  Total debit: {result.total_debit:,.2f}")
    click.echo(f"  Total credit: {result.total_credit:,.2f}")


@bank_group.command("transactions")
@click.argument("bank_account_id", type=int)
@click.option(
    "--status",
    type=click.Choice([s.value for s in TransactionStatus]),
    help="Only show transactions in this status",
)
@click.pass_context
def list_transactions(ctx, bank_account_id: int, status: str | None):
    """List imported bank transactions."""
    service = _service(ctx)

    try:
        transactions = service.list_transactions(
            bank_account_id, status=TransactionStatus(status) if status else None
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>5} {'Date':<12} {'Description':<30} {'Debit':>12} {'Credit':>12}  Status")
    click.echo("-" * 90)
    for txn in transactions:
        click.echo(
            f"{txn.id:>5} {txn.date.isoformat():<12} {txn.description[:30]:<30} "
            f"{txn.debit:>12,.2f} {txn.credit:>12,.2f}  {txn.status.value}"
        )


@bank_group.command("auto-match")
@click.argument("bank_account_id", type=int)
@click.pass_context
def auto_match(ctx, bank_account_id: int):
    """Match unmatched transactions to confirmed payments."""
    service = _service(ctx)

    try:
        result = service.auto_match(bank_account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Auto-matched {result.auto_matched} of {result.total_unmatched} transactions")
    click.echo(f"Remaining unmatched: {result.remaining}")
    if result.ambiguous_transaction_ids:
        ids = ", ".join(str(i) for i in result.ambiguous_transaction_ids)
        click.echo(f"Several candidate payments (match manually): {ids}")


@bank_group.command("match")
@click.argument("transaction_id", type=int)
@click.option("--journal-entry", "journal_entry_id", type=int, help="Journal entry ID")
@click.option("--payment", "payment_id", type=int, help="Payment ID")
@click.option("--category-account", "category_account_id", type=int, help="Category account ID")
@click.pass_context
def match(
    ctx,
    transaction_id: int,
    journal_entry_id: int | None,
    payment_id: int | None,
    category_account_id: int | None,
):
    """Match a bank transaction by hand."""
    service = _service(ctx)

    try:
        txn = service.manual_match(
            transaction_id,
            journal_entry_id=journal_entry_id,
            payment_id=payment_id,
            category_account_id=category_account_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Matched transaction {txn.id}")


@bank_group.command("reconcile")
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.option("--by", "reconciled_by", default="user", show_default=True, help="Reconciling user")
@click.pass_context
def reconcile(ctx, transaction_ids: tuple[int, ...], reconciled_by: str):
    """Reconcile one or more matched transactions.

    Examples:
        ledgerkit bank reconcile 12
        ledgerkit bank reconcile 12 13 14 --by alice
    """
    service = _service(ctx)

    try:
        if len(transaction_ids) == 1:
            service.reconcile(transaction_ids[0], reconciled_by=reconciled_by)
            count = 1
        else:
            count = service.bulk_reconcile(list(transaction_ids), reconciled_by=reconciled_by)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Reconciled {count} transaction{'s' if count != 1 else ''}")


@bank_group.command("summary")
@click.argument("bank_account_id", type=int)
@click.pass_context
def summary(ctx, bank_account_id: int):
    """Show reconciliation progress for a bank account."""
    service = _service(ctx)

    try:
        result = service.summary(bank_account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nReconciliation Summary: {result.account_name}")
    click.echo("-" * 60)
    click.echo(f"{'Book balance':<30} {result.book_balance:>20,.2f}")
    click.echo(f"{'Bank balance':<30} {result.bank_balance:>20,.2f}")
    click.echo(f"{'Cleared balance':<30} {result.cleared_balance:>20,.2f}")
    click.echo(f"{'Uncleared balance':<30} {result.uncleared_balance:>20,.2f}")
    click.echo(f"{'Difference':<30} {result.difference:>20,.2f}")
    click.echo("-" * 60)
    for status, count in result.transaction_counts.items():
        click.echo(f"{status:<30} {count:>20d}")


def register_commands(cli):
    """Register bank commands with main CLI."""
    cli.add_command(bank_group, name="bank")
