"""Shared pytest fixtures for ledgerkit tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.balances import BalanceService
from ledgerkit.domain.budget import BudgetService
from ledgerkit.domain.cash_flow import CashFlowService
from ledgerkit.domain.chart import ChartService
from ledgerkit.domain.dimensions import DimensionReportService
from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.reconciliation import ReconciliationService
from ledgerkit.domain.statements import StatementService
from ledgerkit.domain.variance import VarianceService
from ledgerkit.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop the CLI log handler between tests."""
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def chart(temp_db):
    """Create a small chart of accounts and return account IDs by short name."""
    accounts = {}
    accounts["cash"] = temp_db.create_account(
        "1000", "Cash", AccountType.ASSET, sub_type="Cash", is_cash_flow_relevant=True
    )
    accounts["receivables"] = temp_db.create_account(
        "1100", "Accounts Receivable", AccountType.ASSET, sub_type="CurrentAsset"
    )
    accounts["payables"] = temp_db.create_account(
        "2000", "Accounts Payable", AccountType.LIABILITY, sub_type="CurrentLiability"
    )
    accounts["capital"] = temp_db.create_account("3000", "Owner Capital", AccountType.EQUITY)
    accounts["sales"] = temp_db.create_account("4000", "Sales Revenue", AccountType.INCOME)
    accounts["rent"] = temp_db.create_account("5000", "Rent Expense", AccountType.EXPENSE)
    return accounts


@pytest.fixture
def post_entry(temp_db):
    """Return a helper that posts a two-line journal entry."""

    def _post(entry_date, debit_account, credit_account, amount, source_document=None, **dims):
        amount = Decimal(str(amount))
        return temp_db.create_journal_entry(
            date=entry_date,
            description=None,
            lines=[
                {"account_id": debit_account, "debit_amount": amount, **dims},
                {"account_id": credit_account, "credit_amount": amount, **dims},
            ],
            source_document=source_document,
        )

    return _post


@pytest.fixture
def worked_example(chart, post_entry):
    """Sales of 10,000 received in cash and 2,000 rent paid, both in March 2024."""
    post_entry(date(2024, 3, 5), chart["cash"], chart["sales"], 10000, source_document="Invoice")
    post_entry(date(2024, 3, 20), chart["rent"], chart["cash"], 2000, source_document="Bill")
    return chart


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def statement_service(temp_db):
    """Create a StatementService with a temporary database."""
    return StatementService(temp_db)


@pytest.fixture
def cash_flow_service(temp_db):
    """Create a CashFlowService with a temporary database."""
    return CashFlowService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db)


@pytest.fixture
def variance_service(temp_db):
    """Create a VarianceService with a temporary database."""
    return VarianceService(temp_db)


@pytest.fixture
def dimension_service(temp_db):
    """Create a DimensionReportService with a temporary database."""
    return DimensionReportService(temp_db)


@pytest.fixture
def chart_service(temp_db):
    """Create a ChartService with a temporary database."""
    return ChartService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def bank_account(temp_db, chart):
    """Create a bank account linked to the cash ledger account."""
    bank_account_id = temp_db.create_bank_account(
        name="Operating Account",
        current_balance=Decimal("1000"),
        bank_balance=Decimal("500"),
        account_id=chart["cash"],
    )
    return temp_db.get_bank_account(bank_account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
