"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Iterable, Mapping
from datetime import date
from decimal import Decimal

# Entities only; domain/__init__.py must stay free of service imports
from ledgerkit.domain.entities import (
    Account,
    AccountActivity,
    AccountType,
    BankAccount,
    BankStatement,
    BankTransaction,
    Budget,
    Dimension,
    DimensionKind,
    EntryStatus,
    JournalEntry,
    JournalLine,
    Payment,
    TransactionStatus,
)


class Database(ABC):
    """Abstract database interface for ledgerkit.

    The ledger, budget, dimension and payment records are owned by other
    subsystems; the create methods here store them as given and perform
    no posting validation.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Chart of accounts
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        sub_type: Optional[str] = None,
        parent_id: Optional[int] = None,
        cash_flow_category: Optional[str] = None,
        is_cash_flow_relevant: bool = False,
        is_active: bool = True,
    ) -> int:
        """Create a ledger account. Returns account ID.

        Raises:
            ConflictError: If an account with the same code exists
        """
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, active_only: bool = False) -> list[Account]:
        """List accounts ordered by code."""
        pass

    # Dimension masters
    @abstractmethod
    def create_dimension(self, kind: DimensionKind, code: str, name: str) -> int:
        """Create a cost center or project. Returns its ID."""
        pass

    @abstractmethod
    def list_dimensions(self, kind: DimensionKind) -> list[Dimension]:
        """List cost centers or projects ordered by code."""
        pass

    # Journal entries
    @abstractmethod
    def create_journal_entry(
        self,
        date: date,
        description: Optional[str],
        lines: Iterable[Mapping[str, Any]],
        status: EntryStatus = EntryStatus.POSTED,
        source_document: Optional[str] = None,
    ) -> int:
        """Store a journal entry with its lines. Returns entry ID.

        Each line mapping carries account_id and optionally debit_amount,
        credit_amount, cost_center_id, project_id, entity_type, entity_id
        and description.
        """
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry with its lines by ID."""
        pass

    @abstractmethod
    def get_account_activity(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        as_of_date: Optional[date] = None,
        cost_center_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> list[AccountActivity]:
        """Sum posted debits and credits per active account.

        Every active account is returned, with zero totals when it has no
        matching activity. as_of_date replaces the start/end range.
        """
        pass

    @abstractmethod
    def list_posted_lines(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_ids: Optional[Iterable[int]] = None,
    ) -> list[JournalLine]:
        """List posted journal lines, optionally restricted to accounts."""
        pass

    @abstractmethod
    def get_dimension_totals(
        self,
        kind: DimensionKind,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[dict[str, Any]]:
        """Sum posted lines per dimension id, skipping lines without one.

        Returns a list of dictionaries with dimension_id, debit_total,
        credit_total and line_count. Kept as dict for aggregation results.
        """
        pass

    @abstractmethod
    def get_subledger_totals(
        self,
        entity_type: str,
        as_of_date: Optional[date] = None,
        entity_id: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Sum posted lines per entity id for one entity type (e.g. Customer).

        Returns dictionaries with entity_id, debit_total and credit_total,
        ordered by entity_id. Lines without an entity id are skipped.
        """
        pass

    # Budgets
    @abstractmethod
    def create_budget(
        self,
        name: str,
        start_date: date,
        end_date: date,
        lines: Iterable[tuple[int, Decimal]] = (),
    ) -> int:
        """Create a budget with (account_id, total_amount) lines. Returns budget ID."""
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Optional[Budget]:
        """Get budget with its lines by ID."""
        pass

    # Bank accounts and payments
    @abstractmethod
    def create_bank_account(
        self,
        name: str,
        current_balance: Decimal = Decimal("0"),
        bank_balance: Decimal = Decimal("0"),
        account_id: Optional[int] = None,
    ) -> int:
        """Create a bank account. Returns bank account ID.

        Raises:
            ConflictError: If a bank account with the same name exists
        """
        pass

    @abstractmethod
    def get_bank_account(self, bank_account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def create_payment(
        self,
        bank_account_id: int,
        amount: Decimal,
        date: date,
        status: str,
        journal_entry_id: Optional[int] = None,
    ) -> int:
        """Store a payment from the payments feed. Returns payment ID."""
        pass

    @abstractmethod
    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID."""
        pass

    @abstractmethod
    def find_payments(
        self,
        bank_account_id: int,
        status: str,
        min_amount: Decimal,
        max_amount: Decimal,
        start_date: date,
        end_date: date,
    ) -> list[Payment]:
        """Find payments on a bank account by status, amount and date bounds (inclusive)."""
        pass

    # Bank statements
    @abstractmethod
    def import_bank_statement(
        self,
        bank_account_id: int,
        statement_date: date,
        file_name: Optional[str],
        opening_balance: Decimal,
        closing_balance: Decimal,
        rows: Iterable[Mapping[str, Any]],
        imported_by: Optional[str] = None,
    ) -> int:
        """Create a statement and its Unmatched transactions in one transaction.

        Statement totals are computed from the rows. If anything fails,
        including iterating rows, nothing is persisted and the error is
        re-raised. Returns statement ID.
        """
        pass

    @abstractmethod
    def get_bank_statement(self, statement_id: int) -> Optional[BankStatement]:
        """Get bank statement by ID."""
        pass

    @abstractmethod
    def list_bank_statements(self, bank_account_id: int) -> list[BankStatement]:
        """List statements for a bank account, newest first."""
        pass

    # Bank transactions
    @abstractmethod
    def get_bank_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""
        pass

    @abstractmethod
    def list_bank_transactions(
        self,
        bank_account_id: int,
        status: Optional[TransactionStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_reconciled: Optional[bool] = None,
    ) -> list[BankTransaction]:
        """List bank transactions with optional filters."""
        pass

    @abstractmethod
    def transition_bank_transaction(
        self,
        transaction_id: int,
        expected_statuses: Iterable[TransactionStatus],
        new_status: TransactionStatus,
        **fields: Any,
    ) -> bool:
        """Move one transaction to new_status only if it is in an expected status.

        Returns True if the row was updated, False if it was missing or had
        already moved on.
        """
        pass

    @abstractmethod
    def bulk_transition_bank_transactions(
        self,
        transaction_ids: Iterable[int],
        expected_status: TransactionStatus,
        new_status: TransactionStatus,
        **fields: Any,
    ) -> int:
        """Conditionally move several transactions. Returns number updated."""
        pass

    @abstractmethod
    def count_bank_transactions_by_status(self, bank_account_id: int) -> dict[TransactionStatus, int]:
        """Count transactions per status for a bank account."""
        pass

    @abstractmethod
    def sum_bank_transactions(
        self, bank_account_id: int, reconciled_only: bool = False
    ) -> tuple[Decimal, Decimal]:
        """Return (total debit, total credit) for a bank account's transactions."""
        pass
