"""Budget versus actual domain service."""

from decimal import Decimal
from typing import Optional

from ledgerkit.config import ReportSettings
from ledgerkit.database.base import Database
from ledgerkit.domain.balances import BalanceService
from ledgerkit.domain.entities import (
    Account,
    AccountType,
    BudgetStatus,
    BudgetVarianceRow,
    BudgetVsActual,
)
from ledgerkit.domain.errors import NotFoundError, budget_not_found

HUNDRED = Decimal("100")


def percent_of(amount: Decimal, base: Decimal) -> Decimal:
    """Return amount as a percentage of base, or 0 when base is 0."""
    if base == 0:
        return Decimal("0")
    return amount / base * HUNDRED


def classify_budget_line(
    account: Account,
    variance: Decimal,
    variance_percent: Decimal,
    on_track_percent: Decimal = Decimal("5"),
) -> BudgetStatus:
    """Classify a budget line; rules are checked in order."""
    if abs(variance_percent) <= on_track_percent:
        return BudgetStatus.ON_TRACK
    if account.account_type == AccountType.EXPENSE and variance > 0:
        return BudgetStatus.OVER_BUDGET
    if account.account_type == AccountType.INCOME and variance < 0:
        return BudgetStatus.UNDER_BUDGET
    return BudgetStatus.FAVORABLE


class BudgetService:
    """Service comparing budgets against posted actuals."""

    def __init__(self, db: Database, settings: Optional[ReportSettings] = None):
        """Initialize budget service.

        Args:
            db: Database instance
            settings: Optional report thresholds (defaults apply if None)
        """
        self.db = db
        self.settings = settings or ReportSettings()
        self.balance_service = BalanceService(db)

    def budget_vs_actual(self, budget_id: int) -> BudgetVsActual:
        """Compare each budget line with the account's actual balance for the budget period.

        Args:
            budget_id: Budget ID

        Returns:
            BudgetVsActual with one row per budget line and totals

        Raises:
            NotFoundError: If the budget does not exist
        """
        budget = self.db.get_budget(budget_id)
        if budget is None:
            raise NotFoundError(budget_not_found(budget_id))

        actuals = {
            row.account.id: row
            for row in self.balance_service.get_balances(
                start_date=budget.start_date, end_date=budget.end_date
            )
        }

        rows = []
        for line in budget.lines:
            actual_row = actuals.get(line.account_id)
            if actual_row is None:
                # Inactive accounts have no aggregated balance
                account = self.db.get_account(line.account_id)
                if account is None:
                    continue
                actual = Decimal("0")
            else:
                account = actual_row.account
                actual = actual_row.balance

            variance = actual - line.total_amount
            variance_percent = percent_of(variance, line.total_amount)
            rows.append(
                BudgetVarianceRow(
                    account=account,
                    budget=line.total_amount,
                    actual=actual,
                    variance=variance,
                    variance_percent=variance_percent,
                    status=classify_budget_line(
                        account, variance, variance_percent, self.settings.on_track_percent
                    ),
                )
            )

        total_budget = sum((r.budget for r in rows), Decimal("0"))
        total_actual = sum((r.actual for r in rows), Decimal("0"))
        total_variance = total_actual - total_budget

        return BudgetVsActual(
            budget=budget,
            rows=tuple(rows),
            total_budget=total_budget,
            total_actual=total_actual,
            total_variance=total_variance,
            variance_percent=percent_of(total_variance, total_budget),
        )
