"""Tests for direct and indirect cash flow statements."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.config import ReportSettings
from ledgerkit.domain.cash_flow import CashFlowService, classify_source_document
from ledgerkit.domain.entities import AccountType, CashFlowActivity
from ledgerkit.domain.errors import ValidationError


MARCH_START = date(2024, 3, 1)
MARCH_END = date(2024, 3, 31)


def test_classify_source_document():
    assert classify_source_document("Invoice") == CashFlowActivity.OPERATING
    assert classify_source_document("AssetPurchase") == CashFlowActivity.INVESTING
    assert classify_source_document("LoanRepayment") == CashFlowActivity.FINANCING
    assert classify_source_document(None) == CashFlowActivity.OPERATING
    assert classify_source_document("Barter") is None


class TestCashAccounts:
    """Tests for cash account selection."""

    def test_flagged_accounts_win(self, cash_flow_service, chart):
        accounts = cash_flow_service.get_cash_accounts()

        assert [acc.id for acc in accounts] == [chart["cash"]]

    def test_code_prefix_fallback(self, temp_db):
        bank = temp_db.create_account("1010", "Bank", AccountType.ASSET)
        temp_db.create_account("1200", "Inventory", AccountType.ASSET)
        temp_db.create_account("1050", "Old Bank", AccountType.ASSET, is_active=False)

        accounts = CashFlowService(temp_db).get_cash_accounts()

        assert [acc.id for acc in accounts] == [bank]

    def test_configurable_prefix(self, temp_db):
        temp_db.create_account("1010", "Bank", AccountType.ASSET)
        till = temp_db.create_account("1110", "Till", AccountType.ASSET)

        service = CashFlowService(temp_db, ReportSettings(cash_account_prefix="11"))

        assert [acc.id for acc in service.get_cash_accounts()] == [till]


class TestDirectMethod:
    """Tests for the direct method."""

    def test_worked_example(self, cash_flow_service, worked_example):
        result = cash_flow_service.direct(MARCH_START, MARCH_END)

        operating = result.section(CashFlowActivity.OPERATING)
        assert operating.inflows == Decimal("10000")
        assert operating.outflows == Decimal("2000")
        assert operating.net == Decimal("8000")
        assert result.net_change_in_cash == Decimal("8000")
        assert result.opening_cash == Decimal("0")
        assert result.closing_cash == Decimal("8000")

    def test_sections_by_source_document(self, temp_db, cash_flow_service, chart, post_entry):
        equipment = temp_db.create_account("1500", "Equipment", AccountType.ASSET)
        loan = temp_db.create_account("2500", "Bank Loan", AccountType.LIABILITY)
        post_entry(date(2024, 3, 2), chart["cash"], loan, 5000, source_document="Loan")
        post_entry(date(2024, 3, 3), equipment, chart["cash"], 3000, source_document="AssetPurchase")
        post_entry(date(2024, 3, 4), loan, chart["cash"], 500, source_document="LoanRepayment")

        result = cash_flow_service.direct(MARCH_START, MARCH_END)

        assert result.section(CashFlowActivity.INVESTING).outflows == Decimal("3000")
        assert result.section(CashFlowActivity.INVESTING).net == Decimal("-3000")
        assert result.section(CashFlowActivity.FINANCING).inflows == Decimal("5000")
        assert result.section(CashFlowActivity.FINANCING).outflows == Decimal("500")
        assert result.net_change_in_cash == Decimal("1500")

    def test_unknown_source_counts_as_operating(
        self, cash_flow_service, chart, post_entry, caplog
    ):
        post_entry(date(2024, 3, 2), chart["cash"], chart["sales"], 250, source_document="Barter")

        result = cash_flow_service.direct(MARCH_START, MARCH_END)

        assert result.section(CashFlowActivity.OPERATING).inflows == Decimal("250")
        assert result.unclassified_sources == ("Barter",)
        assert "Barter" in caplog.text

    def test_opening_cash_from_earlier_entries(self, cash_flow_service, worked_example, post_entry):
        post_entry(date(2024, 4, 3), worked_example["cash"], worked_example["sales"], 100)

        result = cash_flow_service.direct(date(2024, 4, 1), date(2024, 4, 30))

        assert result.opening_cash == Decimal("8000")
        assert result.closing_cash == Decimal("8100")

    def test_requires_dates(self, cash_flow_service, chart):
        with pytest.raises(ValidationError):
            cash_flow_service.direct(None, MARCH_END)


class TestIndirectMethod:
    """Tests for the indirect method."""

    def test_worked_example(self, cash_flow_service, worked_example):
        result = cash_flow_service.indirect(MARCH_START, MARCH_END)

        assert result.net_income == Decimal("8000")
        assert result.adjustments == ()
        assert result.net_change_in_cash == Decimal("8000")

    def test_working_capital_movements(self, cash_flow_service, chart, post_entry):
        # Credit sale, partly collected, and an unpaid bill
        post_entry(date(2024, 3, 5), chart["receivables"], chart["sales"], 1000, source_document="Invoice")
        post_entry(date(2024, 3, 10), chart["cash"], chart["receivables"], 600, source_document="Payment")
        post_entry(date(2024, 3, 12), chart["rent"], chart["payables"], 300, source_document="Bill")

        result = cash_flow_service.indirect(MARCH_START, MARCH_END)

        assert result.net_income == Decimal("700")
        assert result.receivables_contribution == Decimal("-400")
        assert result.payables_contribution == Decimal("300")
        assert result.net_change_in_cash == Decimal("600")
        assert {adj.account.code for adj in result.adjustments} == {"1100", "2000"}

    def test_requires_dates(self, cash_flow_service, chart):
        with pytest.raises(ValidationError):
            cash_flow_service.indirect(MARCH_START, None)


class TestCompareMethods:
    """Tests for comparing both methods."""

    def test_consistent_for_operating_activity(self, cash_flow_service, chart, post_entry):
        post_entry(date(2024, 3, 5), chart["receivables"], chart["sales"], 1000, source_document="Invoice")
        post_entry(date(2024, 3, 10), chart["cash"], chart["receivables"], 600, source_document="Payment")

        result = cash_flow_service.compare_methods(MARCH_START, MARCH_END)

        assert result.direct.net_change_in_cash == Decimal("600")
        assert result.indirect.net_change_in_cash == Decimal("600")
        assert result.divergence == Decimal("0")
        assert result.consistent

    def test_financing_cash_is_reported_as_divergence(
        self, temp_db, cash_flow_service, chart, post_entry
    ):
        loan = temp_db.create_account("2500", "Bank Loan", AccountType.LIABILITY)
        post_entry(date(2024, 3, 2), chart["cash"], loan, 5000, source_document="Loan")

        result = cash_flow_service.compare_methods(MARCH_START, MARCH_END)

        assert result.divergence == Decimal("5000")
        assert not result.consistent
