"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from ledgerkit.database.models import (
    Account as ORMAccount,
    BankTransaction as ORMBankTransaction,
    Budget as ORMBudget,
    BudgetLine as ORMBudgetLine,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
)
from ledgerkit.database.mappers import (
    account_to_domain,
    bank_transaction_to_domain,
    budget_to_domain,
    journal_entry_to_domain,
    to_decimal,
)
from ledgerkit.domain.entities import (
    Account,
    AccountType,
    EntryStatus,
    MatchType,
    TransactionStatus,
)


def test_to_decimal():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal(Decimal("1.50")) == Decimal("1.50")
    assert to_decimal(2.25) == Decimal("2.25")


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id=1,
            code="1000",
            name="Cash",
            account_type="Asset",
            sub_type="Cash",
            parent_id=None,
            is_cash_flow_relevant=True,
            is_active=True,
            created_at=datetime.now(UTC),
        )
        domain_account = account_to_domain(orm_account)

        assert isinstance(domain_account, Account)
        assert domain_account.id == 1
        assert domain_account.code == "1000"
        assert domain_account.account_type == AccountType.ASSET
        assert domain_account.is_cash_flow_relevant is True

    def test_unknown_account_type(self):
        orm_account = ORMAccount(id=1, code="X", name="X", account_type="Other")

        with pytest.raises(ValueError):
            account_to_domain(orm_account)


class TestJournalEntryMapper:
    """Tests for JournalEntry mapper."""

    def test_lines_carry_entry_date_and_source(self):
        orm_entry = ORMJournalEntry(
            id=7,
            date=date(2024, 3, 5),
            description="Sale",
            status="Posted",
            source_document="Invoice",
        )
        orm_entry.lines.append(
            ORMJournalEntryLine(
                id=1, entry_id=7, account_id=1, debit_amount=Decimal("10"), credit_amount=Decimal("0")
            )
        )
        orm_entry.lines.append(
            ORMJournalEntryLine(
                id=2, entry_id=7, account_id=5, debit_amount=None, credit_amount=Decimal("10"),
                project_id=3,
            )
        )

        entry = journal_entry_to_domain(orm_entry)

        assert entry.status == EntryStatus.POSTED
        assert len(entry.lines) == 2
        assert entry.lines[0].entry_date == date(2024, 3, 5)
        assert entry.lines[0].source_document == "Invoice"
        assert entry.lines[1].debit_amount == Decimal("0")
        assert entry.lines[1].project_id == 3


class TestBudgetMapper:
    """Tests for Budget mapper."""

    def test_budget_to_domain(self):
        orm_budget = ORMBudget(id=1, name="FY24", start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))
        orm_budget.lines.append(ORMBudgetLine(id=4, budget_id=1, account_id=6, total_amount=Decimal("1200")))

        budget = budget_to_domain(orm_budget)

        assert budget.name == "FY24"
        assert budget.lines[0].account_id == 6
        assert budget.lines[0].total_amount == Decimal("1200")


class TestBankTransactionMapper:
    """Tests for BankTransaction mapper."""

    def test_bank_transaction_to_domain(self):
        reconciled_at = datetime(2024, 4, 1, 9, 30)
        orm_txn = ORMBankTransaction(
            id=3,
            bank_account_id=1,
            statement_id=2,
            date=date(2024, 3, 10),
            description=None,
            reference="CHQ-1",
            debit=Decimal("500"),
            credit=Decimal("0"),
            running_balance=Decimal("4500"),
            status="Reconciled",
            match_type="Auto",
            matched_payment_id=9,
            is_reconciled=True,
            reconciled_at=reconciled_at,
            reconciled_by="alice",
        )

        txn = bank_transaction_to_domain(orm_txn)

        assert txn.status == TransactionStatus.RECONCILED
        assert txn.match_type == MatchType.AUTO
        assert txn.description == ""
        assert txn.amount == Decimal("500")
        assert txn.reconciled_at == reconciled_at

    def test_credit_amount_and_no_match(self):
        orm_txn = ORMBankTransaction(
            id=4,
            bank_account_id=1,
            statement_id=2,
            date=date(2024, 3, 11),
            debit=Decimal("0"),
            credit=Decimal("75"),
            status="Unmatched",
            match_type=None,
        )

        txn = bank_transaction_to_domain(orm_txn)

        assert txn.amount == Decimal("75")
        assert txn.match_type is None
        assert txn.is_reconciled is False
