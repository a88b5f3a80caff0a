"""Tests for balance aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.balances import is_debit_normal, signed_balance
from ledgerkit.domain.entities import AccountType, EntryStatus, SubledgerType
from ledgerkit.domain.errors import NotFoundError, ValidationError


@pytest.mark.parametrize(
    "account_type,expected",
    [
        (AccountType.ASSET, Decimal("70")),
        (AccountType.EXPENSE, Decimal("70")),
        (AccountType.LIABILITY, Decimal("-70")),
        (AccountType.EQUITY, Decimal("-70")),
        (AccountType.INCOME, Decimal("-70")),
    ],
)
def test_signed_balance_follows_normal_side(account_type, expected):
    assert signed_balance(account_type, Decimal("100"), Decimal("30")) == expected


def test_is_debit_normal_accepts_plain_values():
    assert is_debit_normal("Asset")
    assert not is_debit_normal("Income")


def test_get_balances_returns_every_active_account(balance_service, worked_example):
    balances = balance_service.get_balances()

    assert [row.account.code for row in balances] == ["1000", "1100", "2000", "3000", "4000", "5000"]
    by_code = {row.account.code: row for row in balances}
    assert by_code["1000"].debit_total == Decimal("10000")
    assert by_code["1000"].credit_total == Decimal("2000")
    assert by_code["1000"].balance == Decimal("8000")
    assert by_code["4000"].balance == Decimal("10000")
    assert by_code["5000"].balance == Decimal("2000")
    assert by_code["2000"].balance == Decimal("0")


def test_get_balances_skips_inactive_accounts(temp_db, balance_service, chart):
    temp_db.create_account("9999", "Old Clearing", AccountType.ASSET, is_active=False)

    codes = [row.account.code for row in balance_service.get_balances()]

    assert "9999" not in codes


def test_get_balances_ignores_draft_entries(temp_db, balance_service, chart):
    temp_db.create_journal_entry(
        date=date(2024, 3, 1),
        description="Not yet posted",
        lines=[
            {"account_id": chart["cash"], "debit_amount": Decimal("500")},
            {"account_id": chart["sales"], "credit_amount": Decimal("500")},
        ],
        status=EntryStatus.DRAFT,
    )

    cash = balance_service.get_account_balance(chart["cash"])

    assert cash.balance == Decimal("0")


def test_period_and_as_of_filters(balance_service, worked_example, post_entry):
    post_entry(date(2024, 4, 2), worked_example["cash"], worked_example["sales"], 300)

    april = balance_service.get_account_balance(
        worked_example["sales"], start_date=date(2024, 4, 1), end_date=date(2024, 4, 30)
    )
    as_of_march = balance_service.get_account_balance(
        worked_example["cash"], as_of_date=date(2024, 3, 31)
    )
    as_of_mid_march = balance_service.get_account_balance(
        worked_example["cash"], as_of_date=date(2024, 3, 10)
    )

    assert april.balance == Decimal("300")
    assert as_of_march.balance == Decimal("8000")
    assert as_of_mid_march.balance == Decimal("10000")


def test_dimension_filter_on_lines(temp_db, balance_service, chart, post_entry):
    from ledgerkit.domain.entities import DimensionKind

    north = temp_db.create_dimension(DimensionKind.COST_CENTER, "N", "North")
    post_entry(date(2024, 3, 1), chart["rent"], chart["cash"], 400, cost_center_id=north)
    post_entry(date(2024, 3, 2), chart["rent"], chart["cash"], 100)

    rent = balance_service.get_account_balance(chart["rent"], cost_center_id=north)

    assert rent.balance == Decimal("400")


def test_get_account_balance_unknown_account(balance_service, chart):
    with pytest.raises(NotFoundError, match="Account 999 not found"):
        balance_service.get_account_balance(999)


def test_rollup_balances_sums_same_type_descendants(temp_db, balance_service, chart, post_entry):
    current = temp_db.create_account("1500", "Current Assets", AccountType.ASSET)
    petty = temp_db.create_account(
        "1510", "Petty Cash", AccountType.ASSET, parent_id=current
    )
    bank = temp_db.create_account("1520", "Bank", AccountType.ASSET, parent_id=current)
    post_entry(date(2024, 3, 1), petty, chart["sales"], 50)
    post_entry(date(2024, 3, 1), bank, chart["sales"], 200)

    totals = balance_service.rollup_balances(balance_service.get_balances())

    assert totals[current] == Decimal("250")
    assert totals[petty] == Decimal("50")
    assert totals[chart["sales"]] == Decimal("250")


def _tagged_entry(temp_db, entry_date, debit, credit, amount, tagged, entity_type, entity_id, **kwargs):
    """Post a two-line entry with the customer/vendor tag on one side only."""
    amount = Decimal(str(amount))
    lines = [
        {"account_id": debit, "debit_amount": amount},
        {"account_id": credit, "credit_amount": amount},
    ]
    for line in lines:
        if line["account_id"] == tagged:
            line.update(entity_type=entity_type, entity_id=entity_id)
    return temp_db.create_journal_entry(date=entry_date, description=None, lines=lines, **kwargs)


class TestSubledgerBalances:
    """Tests for customer and vendor balances."""

    def test_customer_balances(self, temp_db, balance_service, chart):
        ar = chart["receivables"]
        _tagged_entry(temp_db, date(2024, 3, 1), ar, chart["sales"], 900, ar, "Customer", 7)
        _tagged_entry(temp_db, date(2024, 3, 9), chart["cash"], ar, 400, ar, "Customer", 7)
        _tagged_entry(temp_db, date(2024, 3, 2), ar, chart["sales"], 250, ar, "Customer", 3)

        rows = balance_service.get_subledger_balances(SubledgerType.CUSTOMER)

        assert [row.entity_id for row in rows] == [3, 7]
        assert rows[1].debit_total == Decimal("900")
        assert rows[1].credit_total == Decimal("400")
        assert rows[1].balance == Decimal("500")
        assert rows[0].balance == Decimal("250")
        assert all(row.entity_type == SubledgerType.CUSTOMER for row in rows)

    def test_vendor_balance_is_credit_heavy(self, temp_db, balance_service, chart):
        ap = chart["payables"]
        _tagged_entry(temp_db, date(2024, 3, 1), chart["rent"], ap, 1200, ap, "Vendor", 11)

        (row,) = balance_service.get_subledger_balances("Vendor")

        assert row.balance == Decimal("-1200")
        assert balance_service.get_subledger_balances(SubledgerType.CUSTOMER) == []

    def test_as_of_entity_and_status_filters(self, temp_db, balance_service, chart):
        ar = chart["receivables"]
        _tagged_entry(temp_db, date(2024, 3, 1), ar, chart["sales"], 900, ar, "Customer", 7)
        _tagged_entry(temp_db, date(2024, 4, 1), ar, chart["sales"], 100, ar, "Customer", 7)
        _tagged_entry(temp_db, date(2024, 3, 2), ar, chart["sales"], 250, ar, "Customer", 3)
        _tagged_entry(
            temp_db, date(2024, 3, 3), ar, chart["sales"], 50, ar, "Customer", 7,
            status=EntryStatus.DRAFT,
        )

        (row,) = balance_service.get_subledger_balances(
            SubledgerType.CUSTOMER, as_of_date=date(2024, 3, 31), entity_id=7
        )

        assert row.entity_id == 7
        assert row.balance == Decimal("900")

    def test_unknown_subledger_type(self, balance_service, chart):
        with pytest.raises(ValidationError, match="Unknown subledger type"):
            balance_service.get_subledger_balances("Employee")
