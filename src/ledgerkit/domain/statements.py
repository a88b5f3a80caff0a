"""Trial balance, balance sheet and profit & loss statements."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ledgerkit.config import ReportSettings
from ledgerkit.database.base import Database
from ledgerkit.domain.balances import BalanceService, is_debit_normal
from ledgerkit.domain.entities import (
    AccountBalance,
    AccountType,
    BalanceSheet,
    ProfitAndLoss,
    StatementSection,
    TrialBalance,
    TrialBalanceRow,
)
from ledgerkit.domain.errors import ValidationError, dates_required

logger = logging.getLogger(__name__)


def require_period(start_date: Optional[date], end_date: Optional[date]) -> None:
    """Reject a period report invoked without both bounds or with reversed bounds.

    Raises:
        ValidationError: If a bound is missing or start_date is after end_date
    """
    if start_date is None or end_date is None:
        raise ValidationError(dates_required("start_date", "end_date"))
    if start_date > end_date:
        raise ValidationError(f"start_date {start_date} is after end_date {end_date}")


class StatementService:
    """Service generating the core financial statements."""

    def __init__(self, db: Database, settings: Optional[ReportSettings] = None):
        """Initialize statement service.

        Args:
            db: Database instance
            settings: Optional report thresholds (defaults apply if None)
        """
        self.db = db
        self.settings = settings or ReportSettings()
        self.balance_service = BalanceService(db)

    def _section(
        self, balances: Iterable[AccountBalance], account_type: AccountType
    ) -> StatementSection:
        """Select nonzero balances of one account type into a section."""
        rows = tuple(
            row
            for row in balances
            if row.account.account_type == account_type
            and abs(row.balance) > self.settings.zero_epsilon
        )
        return StatementSection(rows=rows, total=sum((r.balance for r in rows), Decimal("0")))

    def trial_balance(self, as_of_date: Optional[date] = None) -> TrialBalance:
        """Build a trial balance from all posted activity up to as_of_date.

        Each account with activity appears once. A non-negative balance is
        shown on the account's normal side; a negative one is shown, as an
        absolute amount, on the opposite side.

        Args:
            as_of_date: Optional cut-off date (all posted activity if None)

        Returns:
            TrialBalance with totals, difference and is_balanced flag
        """
        eps = self.settings.zero_epsilon
        rows = []
        for row in self.balance_service.get_balances(as_of_date=as_of_date):
            if abs(row.debit_total) <= eps and abs(row.credit_total) <= eps:
                continue
            debit_side = is_debit_normal(row.account.account_type) == (row.balance >= 0)
            amount = abs(row.balance)
            rows.append(
                TrialBalanceRow(
                    account=row.account,
                    debit=amount if debit_side else Decimal("0"),
                    credit=Decimal("0") if debit_side else amount,
                )
            )

        total_debits = sum((r.debit for r in rows), Decimal("0"))
        total_credits = sum((r.credit for r in rows), Decimal("0"))
        difference = total_debits - total_credits
        is_balanced = abs(difference) < self.settings.balance_epsilon
        if not is_balanced:
            logger.warning("Trial balance out of balance by %s as of %s", difference, as_of_date)

        return TrialBalance(
            as_of_date=as_of_date,
            rows=tuple(rows),
            total_debits=total_debits,
            total_credits=total_credits,
            difference=difference,
            is_balanced=is_balanced,
        )

    def balance_sheet(self, as_of_date: Optional[date] = None) -> BalanceSheet:
        """Build a balance sheet as of a date.

        Retained earnings (cumulative income minus cumulative expense up to
        as_of_date) are folded into total equity.

        Args:
            as_of_date: Cut-off date (today if None)

        Returns:
            BalanceSheet with sections, totals and balanced flag
        """
        if as_of_date is None:
            as_of_date = date.today()

        balances = self.balance_service.get_balances(as_of_date=as_of_date)
        assets = self._section(balances, AccountType.ASSET)
        liabilities = self._section(balances, AccountType.LIABILITY)
        equity = self._section(balances, AccountType.EQUITY)

        income = sum(
            (r.balance for r in balances if r.account.account_type == AccountType.INCOME),
            Decimal("0"),
        )
        expenses = sum(
            (r.balance for r in balances if r.account.account_type == AccountType.EXPENSE),
            Decimal("0"),
        )
        retained_earnings = income - expenses

        total_equity = equity.total + retained_earnings
        total_liabilities_and_equity = liabilities.total + total_equity
        balanced = (
            abs(assets.total - total_liabilities_and_equity) < self.settings.balance_epsilon
        )
        if not balanced:
            logger.warning(
                "Balance sheet as of %s does not balance: assets %s, liabilities and equity %s",
                as_of_date,
                assets.total,
                total_liabilities_and_equity,
            )

        return BalanceSheet(
            as_of_date=as_of_date,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            retained_earnings=retained_earnings,
            total_assets=assets.total,
            total_liabilities=liabilities.total,
            total_equity=total_equity,
            total_liabilities_and_equity=total_liabilities_and_equity,
            balanced=balanced,
        )

    def profit_and_loss(
        self, start_date: Optional[date], end_date: Optional[date]
    ) -> ProfitAndLoss:
        """Build a profit & loss statement for a period.

        Raises:
            ValidationError: If either date is missing
        """
        require_period(start_date, end_date)

        balances = self.balance_service.get_balances(start_date=start_date, end_date=end_date)
        income = self._section(balances, AccountType.INCOME)
        expenses = self._section(balances, AccountType.EXPENSE)
        net_profit = income.total - expenses.total

        return ProfitAndLoss(
            start_date=start_date,
            end_date=end_date,
            income=income,
            expenses=expenses,
            total_income=income.total,
            total_expenses=expenses.total,
            net_profit=net_profit,
            net_loss=max(Decimal("0"), -net_profit),
        )
