"""Domain model entities for ledgerkit.

These are pure data classes representing ledger and reconciliation concepts,
independent of database schema. Report results are immutable value objects
built by the domain services from these entities.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Top-level account classification."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    INCOME = "Income"
    EXPENSE = "Expense"


class EntryStatus(str, Enum):
    """Journal entry status as seen by the reporting core."""

    DRAFT = "Draft"
    POSTED = "Posted"


class TransactionStatus(str, Enum):
    """Bank transaction reconciliation status."""

    UNMATCHED = "Unmatched"
    MATCHED = "Matched"
    RECONCILED = "Reconciled"


class MatchType(str, Enum):
    """How a bank transaction was matched."""

    AUTO = "Auto"
    MANUAL = "Manual"


class CashFlowActivity(str, Enum):
    """Cash flow statement section."""

    OPERATING = "Operating"
    INVESTING = "Investing"
    FINANCING = "Financing"


class BudgetStatus(str, Enum):
    """Budget line classification."""

    ON_TRACK = "OnTrack"
    OVER_BUDGET = "OverBudget"
    UNDER_BUDGET = "UnderBudget"
    FAVORABLE = "Favorable"


class VarianceDirection(str, Enum):
    """Direction of change between two periods."""

    INCREASE = "Increase"
    DECREASE = "Decrease"
    NO_CHANGE = "NoChange"


class DimensionKind(str, Enum):
    """Sub-ledger dimension carried on journal lines."""

    COST_CENTER = "cost-center"
    PROJECT = "project"


class SubledgerType(str, Enum):
    """Counterparty kind tagged on receivable and payable lines."""

    CUSTOMER = "Customer"
    VENDOR = "Vendor"


# Ledger store entities


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    id: int
    code: str
    name: str
    account_type: AccountType
    sub_type: Optional[str]
    parent_id: Optional[int]
    cash_flow_category: Optional[str]
    is_cash_flow_relevant: bool
    is_active: bool


@dataclass(frozen=True)
class JournalLine:
    """Posted or draft journal line joined with its entry header."""

    id: int
    entry_id: int
    entry_date: date
    source_document: Optional[str]
    account_id: int
    debit_amount: Decimal
    credit_amount: Decimal
    cost_center_id: Optional[int] = None
    project_id: Optional[int] = None
    description: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header with its lines."""

    id: int
    date: date
    description: Optional[str]
    status: EntryStatus
    source_document: Optional[str]
    lines: tuple[JournalLine, ...] = ()


@dataclass(frozen=True)
class Dimension:
    """Cost center or project master record."""

    id: int
    code: str
    name: str


@dataclass(frozen=True)
class BudgetLine:
    """Budgeted amount for one account."""

    id: int
    budget_id: int
    account_id: int
    total_amount: Decimal


@dataclass(frozen=True)
class Budget:
    """Budget covering a period."""

    id: int
    name: str
    start_date: date
    end_date: date
    lines: tuple[BudgetLine, ...] = ()


@dataclass(frozen=True)
class AccountActivity:
    """Raw debit and credit totals for one account."""

    account: Account
    debit_total: Decimal
    credit_total: Decimal


# Banking entities


@dataclass(frozen=True)
class BankAccount:
    """Bank account linked to a ledger account."""

    id: int
    name: str
    current_balance: Decimal
    bank_balance: Decimal
    account_id: Optional[int]


@dataclass(frozen=True)
class BankStatement:
    """Imported bank statement header."""

    id: int
    bank_account_id: int
    statement_date: date
    file_name: Optional[str]
    opening_balance: Decimal
    closing_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal
    transaction_count: int
    imported_at: datetime
    imported_by: Optional[str] = None


@dataclass(frozen=True)
class BankTransaction:
    """Bank statement line subject to reconciliation."""

    id: int
    bank_account_id: int
    statement_id: int
    date: date
    description: str
    reference: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal
    status: TransactionStatus
    match_type: Optional[MatchType] = None
    matched_payment_id: Optional[int] = None
    matched_journal_entry_id: Optional[int] = None
    category_account_id: Optional[int] = None
    is_reconciled: bool = False
    reconciled_at: Optional[datetime] = None
    reconciled_by: Optional[str] = None

    @property
    def amount(self) -> Decimal:
        """Amount used for matching: the debit if present, else the credit."""
        return self.debit if self.debit else self.credit


@dataclass(frozen=True)
class Payment:
    """Payment record from the external payments feed."""

    id: int
    bank_account_id: int
    amount: Decimal
    date: date
    status: str
    journal_entry_id: Optional[int] = None


# Report results


@dataclass(frozen=True)
class AccountBalance:
    """One account's totals and signed balance."""

    account: Account
    debit_total: Decimal
    credit_total: Decimal
    balance: Decimal


@dataclass(frozen=True)
class SubledgerBalance:
    """Posted totals for one customer or vendor; balance is debit - credit."""

    entity_type: SubledgerType
    entity_id: int
    debit_total: Decimal
    credit_total: Decimal
    balance: Decimal


@dataclass(frozen=True)
class TrialBalanceRow:
    account: Account
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    as_of_date: Optional[date]
    rows: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class StatementSection:
    """Group of account balances with a total."""

    rows: tuple[AccountBalance, ...]
    total: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    as_of_date: date
    assets: StatementSection
    liabilities: StatementSection
    equity: StatementSection
    retained_earnings: Decimal
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_liabilities_and_equity: Decimal
    balanced: bool


@dataclass(frozen=True)
class ProfitAndLoss:
    start_date: date
    end_date: date
    income: StatementSection
    expenses: StatementSection
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    net_loss: Decimal


@dataclass(frozen=True)
class CashFlowSection:
    activity: CashFlowActivity
    inflows: Decimal
    outflows: Decimal
    net: Decimal


@dataclass(frozen=True)
class DirectCashFlow:
    start_date: date
    end_date: date
    cash_account_ids: tuple[int, ...]
    sections: tuple[CashFlowSection, ...]
    net_change_in_cash: Decimal
    opening_cash: Decimal
    closing_cash: Decimal
    unclassified_sources: tuple[str, ...] = ()

    def section(self, activity: CashFlowActivity) -> CashFlowSection:
        for section in self.sections:
            if section.activity == activity:
                return section
        raise KeyError(activity)


@dataclass(frozen=True)
class WorkingCapitalAdjustment:
    """Change in one working-capital account between two dates."""

    account: Account
    opening_balance: Decimal
    closing_balance: Decimal
    contribution: Decimal


@dataclass(frozen=True)
class IndirectCashFlow:
    start_date: date
    end_date: date
    net_income: Decimal
    adjustments: tuple[WorkingCapitalAdjustment, ...]
    receivables_contribution: Decimal
    payables_contribution: Decimal
    net_change_in_cash: Decimal


@dataclass(frozen=True)
class CashFlowComparison:
    direct: DirectCashFlow
    indirect: IndirectCashFlow
    divergence: Decimal
    consistent: bool


@dataclass(frozen=True)
class BudgetVarianceRow:
    account: Account
    budget: Decimal
    actual: Decimal
    variance: Decimal
    variance_percent: Decimal
    status: BudgetStatus


@dataclass(frozen=True)
class BudgetVsActual:
    budget: Budget
    rows: tuple[BudgetVarianceRow, ...]
    total_budget: Decimal
    total_actual: Decimal
    total_variance: Decimal
    variance_percent: Decimal


@dataclass(frozen=True)
class PeriodVarianceRow:
    account: Account
    current: Decimal
    prior: Decimal
    variance: Decimal
    variance_percent: Decimal
    direction: VarianceDirection


@dataclass(frozen=True)
class VarianceReport:
    current_start: date
    current_end: date
    prior_start: date
    prior_end: date
    rows: tuple[PeriodVarianceRow, ...]


@dataclass(frozen=True)
class DimensionReportRow:
    dimension_id: int
    code: Optional[str]
    name: str
    debit_total: Decimal
    credit_total: Decimal
    net: Decimal
    line_count: int


@dataclass(frozen=True)
class DimensionReport:
    kind: DimensionKind
    start_date: Optional[date]
    end_date: Optional[date]
    rows: tuple[DimensionReportRow, ...]


@dataclass(frozen=True)
class ImportResult:
    statement: BankStatement
    transactions_imported: int
    total_debit: Decimal
    total_credit: Decimal


@dataclass(frozen=True)
class AutoMatchResult:
    total_unmatched: int
    auto_matched: int
    remaining: int
    ambiguous_transaction_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class ReconciliationSummary:
    bank_account_id: int
    account_name: str
    book_balance: Decimal
    bank_balance: Decimal
    transaction_counts: dict[str, int] = field(default_factory=dict)
    cleared_balance: Decimal = Decimal("0")
    uncleared_balance: Decimal = Decimal("0")
    difference: Decimal = Decimal("0")
