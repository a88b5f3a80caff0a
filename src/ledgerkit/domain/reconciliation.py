"""Bank reconciliation domain service.

Bank transactions move Unmatched -> Matched -> Reconciled and never back.
Every status change is handed to the store as a conditional update on the
expected prior status, so two operators racing on the same row cannot both
advance it.
"""

import logging
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from ledgerkit.config import ReconciliationSettings
from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    AutoMatchResult,
    BankStatement,
    BankTransaction,
    ImportResult,
    MatchType,
    ReconciliationSummary,
    TransactionStatus,
)
from ledgerkit.domain.errors import (
    InvalidStateTransitionError,
    NotFoundError,
    ValidationError,
    account_not_found,
    bank_account_not_found,
    bank_transaction_not_found,
    invalid_transition,
)
from ledgerkit.domain.statement_import import BankStatementCSVReader
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import parse_date

logger = logging.getLogger(__name__)


def to_amount(value: Any) -> Decimal:
    """Parse an amount from a payload value; empty values are zero.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    return parse_amount(str(value))


def to_date(value: Any) -> date:
    """Parse a date from a payload value.

    Raises:
        ValueError: If the value is missing or cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError("Missing date")
    return parse_date(str(value))


def parse_statement_rows(transactions: Iterable[Mapping[str, Any]]) -> Iterator[dict[str, Any]]:
    """Lazily convert raw statement rows into typed import rows.

    Raises:
        ValidationError: On the first row that cannot be parsed
    """
    for row_num, raw in enumerate(transactions, start=1):
        try:
            debit = to_amount(raw.get("debit"))
            credit = to_amount(raw.get("credit"))
            txn_date = to_date(raw.get("date"))
            balance = to_amount(raw.get("balance"))
        except ValueError as e:
            raise ValidationError(f"Row {row_num}: {e}") from e

        if debit < 0 or credit < 0:
            raise ValidationError(f"Row {row_num}: Debit and credit amounts must be non-negative")

        yield {
            "date": txn_date,
            "description": raw.get("description") or raw.get("narration") or "",
            "reference": raw.get("reference") or raw.get("cheque_number") or "",
            "debit": debit,
            "credit": credit,
            "balance": balance,
        }


class ReconciliationService:
    """Service for importing bank statements and reconciling their transactions."""

    def __init__(self, db: Database, settings: Optional[ReconciliationSettings] = None):
        """Initialize reconciliation service.

        Args:
            db: Database instance
            settings: Optional auto-match criteria (defaults apply if None)
        """
        self.db = db
        self.settings = settings or ReconciliationSettings()

    def _require_bank_account(self, bank_account_id: int):
        bank_account = self.db.get_bank_account(bank_account_id)
        if bank_account is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))
        return bank_account

    def _require_transaction(self, transaction_id: int) -> BankTransaction:
        txn = self.db.get_bank_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(bank_transaction_not_found(transaction_id))
        return txn

    # Import
    def import_statement(
        self,
        bank_account_id: int,
        payload: Mapping[str, Any],
        imported_by: Optional[str] = None,
    ) -> ImportResult:
        """Import a bank statement and its transactions as one unit.

        Args:
            bank_account_id: Bank account ID
            payload: Dict with statement_date, file_name, opening_balance,
                closing_balance and a transactions list of dicts with date,
                description, reference, debit, credit and balance
            imported_by: Optional user recorded on the statement

        Returns:
            ImportResult with the stored statement and its totals

        Raises:
            NotFoundError: If the bank account doesn't exist
            ValidationError: If there are no transactions or a row is invalid;
                nothing is stored in that case
        """
        self._require_bank_account(bank_account_id)

        transactions = payload.get("transactions") or []
        if not transactions:
            raise ValidationError("No transactions to import")

        try:
            statement_date = to_date(payload.get("statement_date") or date.today())
            opening_balance = to_amount(payload.get("opening_balance"))
            closing_balance = to_amount(payload.get("closing_balance"))
        except ValueError as e:
            raise ValidationError(f"Invalid statement header: {e}") from e

        statement_id = self.db.import_bank_statement(
            bank_account_id=bank_account_id,
            statement_date=statement_date,
            file_name=payload.get("file_name"),
            opening_balance=opening_balance,
            closing_balance=closing_balance,
            rows=parse_statement_rows(transactions),
            imported_by=imported_by,
        )
        statement = self.db.get_bank_statement(statement_id)
        logger.info(
            "Imported statement %s for bank account %s: %s transactions",
            statement_id,
            bank_account_id,
            statement.transaction_count,
        )

        return ImportResult(
            statement=statement,
            transactions_imported=statement.transaction_count,
            total_debit=statement.total_debit,
            total_credit=statement.total_credit,
        )

    def import_statement_file(
        self,
        bank_account_id: int,
        csv_file_path: str,
        statement_date: Optional[date] = None,
        opening_balance: Optional[Decimal] = None,
        closing_balance: Optional[Decimal] = None,
        imported_by: Optional[str] = None,
        columns: Optional[Mapping[str, str]] = None,
    ) -> ImportResult:
        """Import a bank statement from a CSV export.

        Raises:
            FileNotFoundError: If the CSV file doesn't exist
            NotFoundError: If the bank account doesn't exist
            ValidationError: If the file or any row is invalid
        """
        rows = BankStatementCSVReader(columns).read(csv_file_path)
        payload = {
            "statement_date": statement_date,
            "file_name": Path(csv_file_path).name,
            "opening_balance": opening_balance,
            "closing_balance": closing_balance,
            "transactions": rows,
        }
        return self.import_statement(bank_account_id, payload, imported_by=imported_by)

    def list_statements(self, bank_account_id: int) -> list[BankStatement]:
        """List imported statements for a bank account, newest first."""
        self._require_bank_account(bank_account_id)
        return self.db.list_bank_statements(bank_account_id)

    def list_transactions(
        self,
        bank_account_id: int,
        status: Optional[TransactionStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_reconciled: Optional[bool] = None,
    ) -> list[BankTransaction]:
        """List bank transactions for a bank account with optional filters."""
        self._require_bank_account(bank_account_id)
        return self.db.list_bank_transactions(
            bank_account_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
            is_reconciled=is_reconciled,
        )

    # Matching
    def auto_match(self, bank_account_id: int) -> AutoMatchResult:
        """Match Unmatched transactions to confirmed payments.

        A transaction is matched only when exactly one payment on the same
        bank account has an amount within the tolerance and a date within
        the window. Several candidates leave it Unmatched for manual review.

        Raises:
            NotFoundError: If the bank account doesn't exist
        """
        self._require_bank_account(bank_account_id)

        unmatched = self.db.list_bank_transactions(
            bank_account_id, status=TransactionStatus.UNMATCHED
        )
        tolerance = self.settings.amount_tolerance
        window = timedelta(days=self.settings.date_window_days)

        matched = 0
        ambiguous = []
        for txn in unmatched:
            amount = txn.amount
            if not amount:
                continue

            candidates = self.db.find_payments(
                bank_account_id=bank_account_id,
                status=self.settings.confirmed_status,
                min_amount=amount - tolerance,
                max_amount=amount + tolerance,
                start_date=txn.date - window,
                end_date=txn.date + window,
            )
            if len(candidates) > 1:
                logger.info(
                    "Bank transaction %s has %s candidate payments; left unmatched",
                    txn.id,
                    len(candidates),
                )
                ambiguous.append(txn.id)
                continue
            if not candidates:
                continue

            payment = candidates[0]
            if self.db.transition_bank_transaction(
                txn.id,
                [TransactionStatus.UNMATCHED],
                TransactionStatus.MATCHED,
                match_type=MatchType.AUTO,
                matched_payment_id=payment.id,
                matched_journal_entry_id=payment.journal_entry_id,
            ):
                logger.debug("Matched bank transaction %s to payment %s", txn.id, payment.id)
                matched += 1

        return AutoMatchResult(
            total_unmatched=len(unmatched),
            auto_matched=matched,
            remaining=len(unmatched) - matched,
            ambiguous_transaction_ids=tuple(ambiguous),
        )

    def manual_match(
        self,
        transaction_id: int,
        journal_entry_id: Optional[int] = None,
        payment_id: Optional[int] = None,
        category_account_id: Optional[int] = None,
    ) -> BankTransaction:
        """Match a transaction by hand to a journal entry, payment or category account.

        An already Matched transaction is re-matched; a Reconciled one is final.

        Raises:
            ValidationError: If no match target is given
            NotFoundError: If the transaction, journal entry, payment or account doesn't exist
            InvalidStateTransitionError: If the transaction is Reconciled
        """
        if journal_entry_id is None and payment_id is None and category_account_id is None:
            raise ValidationError(
                "Provide a journal entry, payment or category account to match against"
            )

        txn = self._require_transaction(transaction_id)
        if journal_entry_id is not None and self.db.get_journal_entry(journal_entry_id) is None:
            raise NotFoundError(f"Journal entry {journal_entry_id} not found")
        if payment_id is not None and self.db.get_payment(payment_id) is None:
            raise NotFoundError(f"Payment {payment_id} not found")
        if category_account_id is not None and self.db.get_account(category_account_id) is None:
            raise NotFoundError(account_not_found(category_account_id))

        allowed = [TransactionStatus.UNMATCHED, TransactionStatus.MATCHED]
        if txn.status not in allowed or not self.db.transition_bank_transaction(
            transaction_id,
            allowed,
            TransactionStatus.MATCHED,
            match_type=MatchType.MANUAL,
            matched_journal_entry_id=journal_entry_id,
            matched_payment_id=payment_id,
            category_account_id=category_account_id,
        ):
            current = self._require_transaction(transaction_id)
            logger.warning("Rejected manual match of reconciled transaction %s", transaction_id)
            raise InvalidStateTransitionError(
                invalid_transition(transaction_id, current.status.value, "Unmatched or Matched")
            )

        return self._require_transaction(transaction_id)

    # Reconciliation
    def reconcile(self, transaction_id: int, reconciled_by: str = "user") -> BankTransaction:
        """Mark a Matched transaction as Reconciled.

        Raises:
            NotFoundError: If the transaction doesn't exist
            InvalidStateTransitionError: If the transaction is not Matched
        """
        if not self.db.transition_bank_transaction(
            transaction_id,
            [TransactionStatus.MATCHED],
            TransactionStatus.RECONCILED,
            is_reconciled=True,
            reconciled_at=datetime.now(UTC),
            reconciled_by=reconciled_by,
        ):
            current = self._require_transaction(transaction_id)
            logger.warning(
                "Rejected reconcile of transaction %s in status %s",
                transaction_id,
                current.status.value,
            )
            raise InvalidStateTransitionError(
                invalid_transition(transaction_id, current.status.value, "Matched")
            )

        return self._require_transaction(transaction_id)

    def bulk_reconcile(self, transaction_ids: Sequence[int], reconciled_by: str = "user") -> int:
        """Reconcile every listed transaction that is still Matched.

        Rows that are not Matched at update time are skipped, so repeating
        the call reconciles nothing further.

        Returns:
            Number of transactions reconciled by this call

        Raises:
            ValidationError: If no transaction IDs are given
        """
        if not transaction_ids:
            raise ValidationError("No transaction IDs provided")

        reconciled = self.db.bulk_transition_bank_transactions(
            transaction_ids,
            TransactionStatus.MATCHED,
            TransactionStatus.RECONCILED,
            is_reconciled=True,
            reconciled_at=datetime.now(UTC),
            reconciled_by=reconciled_by,
        )
        logger.info("Bulk reconciled %s of %s transactions", reconciled, len(transaction_ids))
        return reconciled

    def summary(self, bank_account_id: int) -> ReconciliationSummary:
        """Summarize reconciliation progress for a bank account.

        cleared_balance sums credit - debit over reconciled rows; difference
        is the bank balance minus the cleared balance and should reach zero
        once a period is fully reconciled.

        Raises:
            NotFoundError: If the bank account doesn't exist
        """
        bank_account = self._require_bank_account(bank_account_id)

        counts = self.db.count_bank_transactions_by_status(bank_account_id)
        transaction_counts = {status.value: counts.get(status, 0) for status in TransactionStatus}
        transaction_counts["Total"] = sum(transaction_counts.values())

        cleared_debit, cleared_credit = self.db.sum_bank_transactions(
            bank_account_id, reconciled_only=True
        )
        total_debit, total_credit = self.db.sum_bank_transactions(bank_account_id)
        cleared_balance = cleared_credit - cleared_debit
        uncleared_balance = (total_credit - total_debit) - cleared_balance

        return ReconciliationSummary(
            bank_account_id=bank_account.id,
            account_name=bank_account.name,
            book_balance=bank_account.current_balance,
            bank_balance=bank_account.bank_balance,
            transaction_counts=transaction_counts,
            cleared_balance=cleared_balance,
            uncleared_balance=uncleared_balance,
            difference=bank_account.bank_balance - cleared_balance,
        )
