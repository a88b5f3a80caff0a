"""Balance aggregation over posted journal lines."""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ledgerkit.database.base import Database
from ledgerkit.domain.chart import AccountIndex
from ledgerkit.domain.entities import AccountBalance, AccountType, SubledgerBalance, SubledgerType
from ledgerkit.domain.errors import NotFoundError, ValidationError, account_not_found

DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def is_debit_normal(account_type: AccountType) -> bool:
    """Return True if the account type accumulates value on the debit side."""
    return AccountType(account_type) in DEBIT_NORMAL_TYPES


def signed_balance(account_type: AccountType, debit: Decimal, credit: Decimal) -> Decimal:
    """Convert debit and credit totals to a balance on the account's normal side.

    Asset and Expense accounts are debit-normal (debit - credit); Liability,
    Equity and Income accounts are credit-normal (credit - debit).
    """
    if is_debit_normal(account_type):
        return debit - credit
    return credit - debit


class BalanceService:
    """Service turning posted journal lines into per-account balances."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_balances(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        as_of_date: Optional[date] = None,
        cost_center_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> list[AccountBalance]:
        """Get one balance row per active account.

        Args:
            start_date: Optional inclusive period start
            end_date: Optional inclusive period end
            as_of_date: Optional cut-off; replaces start_date/end_date when given
            cost_center_id: Optional cost center filter on lines
            project_id: Optional project filter on lines

        Returns:
            Balances ordered by account code, including accounts with no activity
        """
        activity = self.db.get_account_activity(
            start_date=start_date,
            end_date=end_date,
            as_of_date=as_of_date,
            cost_center_id=cost_center_id,
            project_id=project_id,
        )
        return [
            AccountBalance(
                account=row.account,
                debit_total=row.debit_total,
                credit_total=row.credit_total,
                balance=signed_balance(row.account.account_type, row.debit_total, row.credit_total),
            )
            for row in activity
        ]

    def get_account_balance(
        self,
        account_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        as_of_date: Optional[date] = None,
        cost_center_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> AccountBalance:
        """Get the balance of a single active account.

        Raises:
            NotFoundError: If the account does not exist or is inactive
        """
        for row in self.get_balances(
            start_date=start_date,
            end_date=end_date,
            as_of_date=as_of_date,
            cost_center_id=cost_center_id,
            project_id=project_id,
        ):
            if row.account.id == account_id:
                return row
        raise NotFoundError(account_not_found(account_id))

    def rollup_balances(self, balances: Sequence[AccountBalance]) -> dict[int, Decimal]:
        """Sum each account's balance with the balances of all its descendants.

        Children are only added to parents of the same account type, since
        balances of different types are signed against different sides.
        """
        index = AccountIndex([row.account for row in balances])
        by_id = {row.account.id: row for row in balances}

        totals: dict[int, Decimal] = {}
        for account_id, row in by_id.items():
            total = Decimal("0")
            for descendant_id in index.descendant_ids(account_id):
                descendant = by_id[descendant_id]
                if descendant.account.account_type == row.account.account_type:
                    total += descendant.balance
            totals[account_id] = total
        return totals

    def get_subledger_balances(
        self,
        entity_type: SubledgerType,
        as_of_date: Optional[date] = None,
        entity_id: Optional[int] = None,
    ) -> list[SubledgerBalance]:
        """Get receivable or payable balances per customer or vendor.

        Balances are always debit - credit, whatever accounts the lines
        hit: customers normally show a positive balance and vendors a
        negative one.

        Args:
            entity_type: Customer or Vendor
            as_of_date: Optional cut-off date (inclusive)
            entity_id: Optional single entity to report

        Raises:
            ValidationError: If entity_type is not a known subledger type
        """
        try:
            kind = SubledgerType(entity_type)
        except ValueError:
            raise ValidationError(f"Unknown subledger type: '{entity_type}'")

        return [
            SubledgerBalance(
                entity_type=kind,
                entity_id=row["entity_id"],
                debit_total=row["debit_total"],
                credit_total=row["credit_total"],
                balance=row["debit_total"] - row["credit_total"],
            )
            for row in self.db.get_subledger_totals(kind, as_of_date=as_of_date, entity_id=entity_id)
        ]
