"""Period-over-period variance analysis."""

from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerkit.config import ReportSettings
from ledgerkit.database.base import Database
from ledgerkit.domain.balances import BalanceService
from ledgerkit.domain.entities import (
    AccountBalance,
    PeriodVarianceRow,
    VarianceDirection,
    VarianceReport,
)
from ledgerkit.domain.statements import require_period


def period_variance_percent(current: Decimal, prior: Decimal) -> Decimal:
    """Percent change from prior to current.

    A zero prior gives 100 when current is nonzero and 0 otherwise.
    """
    if prior == 0:
        return Decimal("100") if current != 0 else Decimal("0")
    return (current - prior) / prior * Decimal("100")


def variance_direction(variance: Decimal) -> VarianceDirection:
    if variance > 0:
        return VarianceDirection.INCREASE
    if variance < 0:
        return VarianceDirection.DECREASE
    return VarianceDirection.NO_CHANGE


class VarianceService:
    """Service comparing account balances across two periods."""

    def __init__(self, db: Database, settings: Optional[ReportSettings] = None):
        self.db = db
        self.settings = settings or ReportSettings()
        self.balance_service = BalanceService(db)

    def _has_activity(self, row: Optional[AccountBalance]) -> bool:
        if row is None:
            return False
        eps = self.settings.zero_epsilon
        return abs(row.debit_total) > eps or abs(row.credit_total) > eps

    def compare_periods(
        self,
        current_start: Optional[date],
        current_end: Optional[date],
        prior_start: Optional[date],
        prior_end: Optional[date],
    ) -> VarianceReport:
        """Compare every account's balance in the current period with a prior period.

        Accounts are included when either period has activity.

        Raises:
            ValidationError: If any of the four dates is missing
        """
        require_period(current_start, current_end)
        require_period(prior_start, prior_end)

        current = self.balance_service.get_balances(start_date=current_start, end_date=current_end)
        prior = {
            row.account.id: row
            for row in self.balance_service.get_balances(start_date=prior_start, end_date=prior_end)
        }

        rows = []
        for current_row in current:
            prior_row = prior.get(current_row.account.id)
            if not (self._has_activity(current_row) or self._has_activity(prior_row)):
                continue
            prior_balance = prior_row.balance if prior_row is not None else Decimal("0")
            variance = current_row.balance - prior_balance
            rows.append(
                PeriodVarianceRow(
                    account=current_row.account,
                    current=current_row.balance,
                    prior=prior_balance,
                    variance=variance,
                    variance_percent=period_variance_percent(current_row.balance, prior_balance),
                    direction=variance_direction(variance),
                )
            )

        return VarianceReport(
            current_start=current_start,
            current_end=current_end,
            prior_start=prior_start,
            prior_end=prior_end,
            rows=tuple(rows),
        )
