"""Tests for store behaviour the services rely on."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import AccountType, MatchType, SubledgerType, TransactionStatus
from ledgerkit.domain.errors import ConflictError


def _import_one(temp_db, bank_account_id):
    temp_db.import_bank_statement(
        bank_account_id=bank_account_id,
        statement_date=date(2024, 3, 31),
        file_name=None,
        opening_balance=Decimal("0"),
        closing_balance=Decimal("0"),
        rows=[{"date": date(2024, 3, 1), "debit": Decimal("10"), "credit": Decimal("0")}],
    )
    (txn,) = temp_db.list_bank_transactions(bank_account_id)
    return txn


def test_duplicate_account_code(temp_db, chart):
    with pytest.raises(ConflictError, match="code '1000' already exists"):
        temp_db.create_account("1000", "Another Cash", AccountType.ASSET)


def test_duplicate_bank_account_name(temp_db, bank_account):
    with pytest.raises(ConflictError):
        temp_db.create_bank_account(bank_account.name)


def test_transition_is_conditional(temp_db, bank_account):
    txn = _import_one(temp_db, bank_account.id)

    moved = temp_db.transition_bank_transaction(
        txn.id, [TransactionStatus.UNMATCHED], TransactionStatus.MATCHED, match_type=MatchType.MANUAL
    )
    moved_again = temp_db.transition_bank_transaction(
        txn.id, [TransactionStatus.UNMATCHED], TransactionStatus.MATCHED, match_type=MatchType.AUTO
    )

    assert moved is True
    assert moved_again is False
    assert temp_db.get_bank_transaction(txn.id).match_type == MatchType.MANUAL


def test_transition_missing_row(temp_db, bank_account):
    assert not temp_db.transition_bank_transaction(
        999, [TransactionStatus.MATCHED], TransactionStatus.RECONCILED
    )


def test_count_and_sum(temp_db, bank_account):
    txn = _import_one(temp_db, bank_account.id)
    temp_db.transition_bank_transaction(
        txn.id, [TransactionStatus.UNMATCHED], TransactionStatus.MATCHED
    )

    counts = temp_db.count_bank_transactions_by_status(bank_account.id)

    assert counts == {
        TransactionStatus.UNMATCHED: 0,
        TransactionStatus.MATCHED: 1,
        TransactionStatus.RECONCILED: 0,
    }
    assert temp_db.sum_bank_transactions(bank_account.id) == (Decimal("10"), Decimal("0"))
    assert temp_db.sum_bank_transactions(bank_account.id, reconciled_only=True) == (
        Decimal("0"),
        Decimal("0"),
    )


def test_journal_entry_round_trip(temp_db, chart):
    entry_id = temp_db.create_journal_entry(
        date=date(2024, 3, 1),
        description="Opening capital",
        lines=[
            {"account_id": chart["cash"], "debit_amount": "5000"},
            {"account_id": chart["capital"], "credit_amount": 5000},
        ],
        source_document="CapitalContribution",
    )

    entry = temp_db.get_journal_entry(entry_id)

    assert entry.source_document == "CapitalContribution"
    assert [line.debit_amount for line in entry.lines] == [Decimal("5000"), Decimal("0")]
    assert [line.credit_amount for line in entry.lines] == [Decimal("0"), Decimal("5000")]
    assert temp_db.get_journal_entry(entry_id + 1) is None


def test_journal_line_keeps_subledger_tag(temp_db, chart):
    entry_id = temp_db.create_journal_entry(
        date=date(2024, 3, 1),
        description="Invoice 17",
        lines=[
            {
                "account_id": chart["receivables"],
                "debit_amount": 300,
                "entity_type": SubledgerType.CUSTOMER,
                "entity_id": 7,
            },
            {"account_id": chart["sales"], "credit_amount": 300},
        ],
    )

    tagged, untagged = temp_db.get_journal_entry(entry_id).lines

    assert (tagged.entity_type, tagged.entity_id) == ("Customer", 7)
    assert (untagged.entity_type, untagged.entity_id) == (None, None)


def test_get_payment(temp_db, bank_account):
    payment_id = temp_db.create_payment(bank_account.id, Decimal("75.50"), date(2024, 3, 4), "Pending")

    payment = temp_db.get_payment(payment_id)

    assert payment.amount == Decimal("75.50")
    assert payment.status == "Pending"
    assert temp_db.get_payment(payment_id + 1) is None
