"""Cash flow statement service (direct and indirect methods)."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from ledgerkit.config import ReportSettings
from ledgerkit.database.base import Database
from ledgerkit.domain.balances import BalanceService
from ledgerkit.domain.entities import (
    Account,
    AccountBalance,
    AccountType,
    CashFlowActivity,
    CashFlowComparison,
    CashFlowSection,
    DirectCashFlow,
    IndirectCashFlow,
    WorkingCapitalAdjustment,
)
from ledgerkit.domain.statements import require_period

logger = logging.getLogger(__name__)

CURRENT_ASSET = "CurrentAsset"
CURRENT_LIABILITY = "CurrentLiability"

# Source document kind -> cash flow section
SOURCE_DOCUMENT_ACTIVITIES: dict[str, CashFlowActivity] = {
    "Manual": CashFlowActivity.OPERATING,
    "Invoice": CashFlowActivity.OPERATING,
    "Bill": CashFlowActivity.OPERATING,
    "Payment": CashFlowActivity.OPERATING,
    "CreditNote": CashFlowActivity.OPERATING,
    "VendorCredit": CashFlowActivity.OPERATING,
    "Payroll": CashFlowActivity.OPERATING,
    "Expense": CashFlowActivity.OPERATING,
    "Reversal": CashFlowActivity.OPERATING,
    "RoundingAdjustment": CashFlowActivity.OPERATING,
    "AssetPurchase": CashFlowActivity.INVESTING,
    "AssetSale": CashFlowActivity.INVESTING,
    "Investment": CashFlowActivity.INVESTING,
    "Loan": CashFlowActivity.FINANCING,
    "LoanRepayment": CashFlowActivity.FINANCING,
    "CapitalContribution": CashFlowActivity.FINANCING,
    "Dividend": CashFlowActivity.FINANCING,
    "OwnerDrawing": CashFlowActivity.FINANCING,
}


def classify_source_document(source_document: Optional[str]) -> Optional[CashFlowActivity]:
    """Look up the cash flow section for a source document kind.

    Returns None for kinds missing from SOURCE_DOCUMENT_ACTIVITIES; an entry
    without any source document counts as Manual.
    """
    return SOURCE_DOCUMENT_ACTIVITIES.get(source_document or "Manual")


class CashFlowService:
    """Service for building cash flow statements."""

    def __init__(self, db: Database, settings: Optional[ReportSettings] = None):
        """Initialize cash flow service.

        Args:
            db: Database instance
            settings: Optional report thresholds (defaults apply if None)
        """
        self.db = db
        self.settings = settings or ReportSettings()
        self.balance_service = BalanceService(db)

    def get_cash_accounts(self) -> list[Account]:
        """Get accounts whose movements count as cash.

        Accounts flagged as cash-flow relevant are used when any exist;
        otherwise active asset accounts whose code starts with the configured
        cash prefix.
        """
        accounts = self.db.list_accounts(active_only=True)
        flagged = [acc for acc in accounts if acc.is_cash_flow_relevant]
        if flagged:
            return flagged
        return [
            acc
            for acc in accounts
            if acc.account_type == AccountType.ASSET
            and acc.code.startswith(self.settings.cash_account_prefix)
        ]

    def direct(self, start_date: Optional[date], end_date: Optional[date]) -> DirectCashFlow:
        """Build a direct-method cash flow statement.

        Every posted line on a cash account in the period contributes
        debit - credit to the section of its entry's source document.

        Raises:
            ValidationError: If either date is missing
        """
        require_period(start_date, end_date)

        cash_accounts = self.get_cash_accounts()
        cash_ids = [acc.id for acc in cash_accounts]

        inflows = {activity: Decimal("0") for activity in CashFlowActivity}
        outflows = {activity: Decimal("0") for activity in CashFlowActivity}
        unclassified: list[str] = []

        lines = self.db.list_posted_lines(start_date, end_date, account_ids=cash_ids) if cash_ids else []
        for line in lines:
            activity = classify_source_document(line.source_document)
            if activity is None:
                if line.source_document not in unclassified:
                    logger.warning(
                        "Unrecognized source document '%s' on entry %s; reporting as Operating",
                        line.source_document,
                        line.entry_id,
                    )
                    unclassified.append(line.source_document)
                activity = CashFlowActivity.OPERATING

            net_cash = line.debit_amount - line.credit_amount
            if net_cash > 0:
                inflows[activity] += net_cash
            else:
                outflows[activity] += -net_cash

        sections = tuple(
            CashFlowSection(
                activity=activity,
                inflows=inflows[activity],
                outflows=outflows[activity],
                net=inflows[activity] - outflows[activity],
            )
            for activity in CashFlowActivity
        )
        net_change = sum((s.net for s in sections), Decimal("0"))
        opening_cash = self._cash_balance(cash_ids, start_date - timedelta(days=1))

        return DirectCashFlow(
            start_date=start_date,
            end_date=end_date,
            cash_account_ids=tuple(cash_ids),
            sections=sections,
            net_change_in_cash=net_change,
            opening_cash=opening_cash,
            closing_cash=opening_cash + net_change,
            unclassified_sources=tuple(unclassified),
        )

    def _cash_balance(self, cash_ids: Sequence[int], as_of_date: date) -> Decimal:
        ids = set(cash_ids)
        return sum(
            (
                row.balance
                for row in self.balance_service.get_balances(as_of_date=as_of_date)
                if row.account.id in ids
            ),
            Decimal("0"),
        )

    def indirect(self, start_date: Optional[date], end_date: Optional[date]) -> IndirectCashFlow:
        """Build an indirect-method cash flow statement.

        Starts from period net income and adds working-capital movements
        between the balances as of start_date and as of end_date: an increase
        in current assets reduces cash, an increase in current liabilities
        adds to it. Cash accounts themselves are left out.

        Raises:
            ValidationError: If either date is missing
        """
        require_period(start_date, end_date)

        period = self.balance_service.get_balances(start_date=start_date, end_date=end_date)
        income = sum(
            (r.balance for r in period if r.account.account_type == AccountType.INCOME),
            Decimal("0"),
        )
        expenses = sum(
            (r.balance for r in period if r.account.account_type == AccountType.EXPENSE),
            Decimal("0"),
        )
        net_income = income - expenses

        cash_ids = {acc.id for acc in self.get_cash_accounts()}
        opening = self._working_capital(self.balance_service.get_balances(as_of_date=start_date), cash_ids)
        closing = self._working_capital(self.balance_service.get_balances(as_of_date=end_date), cash_ids)

        adjustments = []
        receivables = Decimal("0")
        payables = Decimal("0")
        for account_id, closing_row in closing.items():
            opening_balance = opening[account_id].balance
            change = closing_row.balance - opening_balance
            if closing_row.account.sub_type == CURRENT_ASSET:
                contribution = -change
                receivables += contribution
            else:
                contribution = change
                payables += contribution
            if contribution:
                adjustments.append(
                    WorkingCapitalAdjustment(
                        account=closing_row.account,
                        opening_balance=opening_balance,
                        closing_balance=closing_row.balance,
                        contribution=contribution,
                    )
                )

        return IndirectCashFlow(
            start_date=start_date,
            end_date=end_date,
            net_income=net_income,
            adjustments=tuple(adjustments),
            receivables_contribution=receivables,
            payables_contribution=payables,
            net_change_in_cash=net_income + receivables + payables,
        )

    @staticmethod
    def _working_capital(
        balances: Sequence[AccountBalance], cash_ids: set[int]
    ) -> dict[int, AccountBalance]:
        return {
            row.account.id: row
            for row in balances
            if row.account.sub_type in (CURRENT_ASSET, CURRENT_LIABILITY)
            and row.account.id not in cash_ids
        }

    def compare_methods(
        self, start_date: Optional[date], end_date: Optional[date]
    ) -> CashFlowComparison:
        """Run both methods for a period and report how far apart they are.

        The methods look at different transactions (cash lines versus income
        and working capital), so a divergence is reported, not raised.
        """
        direct = self.direct(start_date, end_date)
        indirect = self.indirect(start_date, end_date)
        divergence = direct.net_change_in_cash - indirect.net_change_in_cash
        consistent = abs(divergence) < self.settings.balance_epsilon
        if not consistent:
            logger.info(
                "Direct and indirect cash flow differ by %s for %s..%s",
                divergence,
                start_date,
                end_date,
            )
        return CashFlowComparison(
            direct=direct,
            indirect=indirect,
            divergence=divergence,
            consistent=consistent,
        )
