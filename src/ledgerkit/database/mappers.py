"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the reporting and
reconciliation services never see ORM objects.
"""

from decimal import Decimal
from typing import Any, Optional

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Account as ORMAccount,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
    Budget as ORMBudget,
    BudgetLine as ORMBudgetLine,
    BankAccount as ORMBankAccount,
    BankStatement as ORMBankStatement,
    BankTransaction as ORMBankTransaction,
    Payment as ORMPayment,
    CostCenter as ORMCostCenter,
    Project as ORMProject,
)


def to_decimal(value: Any) -> Decimal:
    """Coerce a numeric column or aggregate value to Decimal (None -> 0)."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        sub_type=orm_account.sub_type,
        parent_id=orm_account.parent_id,
        cash_flow_category=orm_account.cash_flow_category,
        is_cash_flow_relevant=bool(orm_account.is_cash_flow_relevant),
        is_active=bool(orm_account.is_active),
    )


def dimension_to_domain(orm_dimension: ORMCostCenter | ORMProject) -> domain.Dimension:
    """Convert SQLAlchemy CostCenter or Project model to domain Dimension entity."""
    return domain.Dimension(
        id=orm_dimension.id,
        code=orm_dimension.code,
        name=orm_dimension.name,
    )


def journal_line_to_domain(
    orm_line: ORMJournalEntryLine, orm_entry: Optional[ORMJournalEntry] = None
) -> domain.JournalLine:
    """Convert SQLAlchemy JournalEntryLine (plus its entry) to a domain JournalLine."""
    entry = orm_entry if orm_entry is not None else orm_line.entry
    return domain.JournalLine(
        id=orm_line.id,
        entry_id=orm_line.entry_id,
        entry_date=entry.date,
        source_document=entry.source_document,
        account_id=orm_line.account_id,
        debit_amount=to_decimal(orm_line.debit_amount),
        credit_amount=to_decimal(orm_line.credit_amount),
        cost_center_id=orm_line.cost_center_id,
        project_id=orm_line.project_id,
        description=orm_line.description,
        entity_type=orm_line.entity_type,
        entity_id=orm_line.entity_id,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        description=orm_entry.description,
        status=domain.EntryStatus(orm_entry.status),
        source_document=orm_entry.source_document,
        lines=tuple(journal_line_to_domain(line, orm_entry) for line in orm_entry.lines),
    )


def budget_line_to_domain(orm_line: ORMBudgetLine) -> domain.BudgetLine:
    """Convert SQLAlchemy BudgetLine model to domain BudgetLine entity."""
    return domain.BudgetLine(
        id=orm_line.id,
        budget_id=orm_line.budget_id,
        account_id=orm_line.account_id,
        total_amount=to_decimal(orm_line.total_amount),
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        name=orm_budget.name,
        start_date=orm_budget.start_date,
        end_date=orm_budget.end_date,
        lines=tuple(budget_line_to_domain(line) for line in orm_budget.lines),
    )


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        name=orm_account.name,
        current_balance=to_decimal(orm_account.current_balance),
        bank_balance=to_decimal(orm_account.bank_balance),
        account_id=orm_account.account_id,
    )


def bank_statement_to_domain(orm_statement: ORMBankStatement) -> domain.BankStatement:
    """Convert SQLAlchemy BankStatement model to domain BankStatement entity."""
    return domain.BankStatement(
        id=orm_statement.id,
        bank_account_id=orm_statement.bank_account_id,
        statement_date=orm_statement.statement_date,
        file_name=orm_statement.file_name,
        opening_balance=to_decimal(orm_statement.opening_balance),
        closing_balance=to_decimal(orm_statement.closing_balance),
        total_debit=to_decimal(orm_statement.total_debit),
        total_credit=to_decimal(orm_statement.total_credit),
        transaction_count=orm_statement.transaction_count,
        imported_at=orm_statement.imported_at,
        imported_by=orm_statement.imported_by,
    )


def bank_transaction_to_domain(orm_txn: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_txn.id,
        bank_account_id=orm_txn.bank_account_id,
        statement_id=orm_txn.statement_id,
        date=orm_txn.date,
        description=orm_txn.description or "",
        reference=orm_txn.reference or "",
        debit=to_decimal(orm_txn.debit),
        credit=to_decimal(orm_txn.credit),
        running_balance=to_decimal(orm_txn.running_balance),
        status=domain.TransactionStatus(orm_txn.status),
        match_type=domain.MatchType(orm_txn.match_type) if orm_txn.match_type else None,
        matched_payment_id=orm_txn.matched_payment_id,
        matched_journal_entry_id=orm_txn.matched_journal_entry_id,
        category_account_id=orm_txn.category_account_id,
        is_reconciled=bool(orm_txn.is_reconciled),
        reconciled_at=orm_txn.reconciled_at,
        reconciled_by=orm_txn.reconciled_by,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        bank_account_id=orm_payment.bank_account_id,
        amount=to_decimal(orm_payment.amount),
        date=orm_payment.date,
        status=orm_payment.status,
        journal_entry_id=orm_payment.journal_entry_id,
    )
