"""SQLAlchemy models for ledgerkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    sub_type = Column(String, nullable=True)
    parent_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    cash_flow_category = Column(String, nullable=True)
    is_cash_flow_relevant = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")
    lines = relationship("JournalEntryLine", back_populates="account")


class CostCenter(Base):
    """Cost center dimension master."""

    __tablename__ = "cost_centers"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)


class Project(Base):
    """Project dimension master."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    status = Column(String, nullable=False, default="Draft")
    source_document = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "JournalEntryLine", back_populates="entry", cascade="all, delete-orphan"
    )


class JournalEntryLine(Base):
    """Journal entry line model."""

    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    description = Column(String, nullable=True)
    debit_amount = Column(Numeric(18, 2), default=0, nullable=False)
    credit_amount = Column(Numeric(18, 2), default=0, nullable=False)
    cost_center_id = Column(Integer, ForeignKey("cost_centers.id"), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    entity_type = Column(String, nullable=True)
    entity_id = Column(Integer, nullable=True)

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account", back_populates="lines")


class Budget(Base):
    """Budget header model."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # Relationships
    lines = relationship("BudgetLine", back_populates="budget", cascade="all, delete-orphan")


class BudgetLine(Base):
    """Budget line model."""

    __tablename__ = "budget_lines"

    id = Column(Integer, primary_key=True)
    budget_id = Column(Integer, ForeignKey("budgets.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    total_amount = Column(Numeric(18, 2), nullable=False)

    # Relationships
    budget = relationship("Budget", back_populates="lines")


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    current_balance = Column(Numeric(18, 2), default=0, nullable=False)
    bank_balance = Column(Numeric(18, 2), default=0, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)

    # Relationships
    statements = relationship("BankStatement", back_populates="bank_account")


class BankStatement(Base):
    """Imported bank statement model."""

    __tablename__ = "bank_statements"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    statement_date = Column(Date, nullable=False)
    file_name = Column(String, nullable=True)
    opening_balance = Column(Numeric(18, 2), default=0, nullable=False)
    closing_balance = Column(Numeric(18, 2), default=0, nullable=False)
    total_debit = Column(Numeric(18, 2), default=0, nullable=False)
    total_credit = Column(Numeric(18, 2), default=0, nullable=False)
    transaction_count = Column(Integer, default=0, nullable=False)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    imported_by = Column(String, nullable=True)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="statements")
    transactions = relationship(
        "BankTransaction", back_populates="statement", cascade="all, delete-orphan"
    )


class BankTransaction(Base):
    """Bank statement transaction model."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    statement_id = Column(Integer, ForeignKey("bank_statements.id"), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, default="", nullable=False)
    reference = Column(String, default="", nullable=False)
    debit = Column(Numeric(18, 2), default=0, nullable=False)
    credit = Column(Numeric(18, 2), default=0, nullable=False)
    running_balance = Column(Numeric(18, 2), default=0, nullable=False)
    status = Column(String, default="Unmatched", nullable=False)
    match_type = Column(String, nullable=True)
    matched_payment_id = Column(Integer, ForeignKey("payments.id"), nullable=True)
    matched_journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)
    category_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    is_reconciled = Column(Boolean, default=False, nullable=False)
    reconciled_at = Column(DateTime, nullable=True)
    reconciled_by = Column(String, nullable=True)

    # Relationships
    statement = relationship("BankStatement", back_populates="transactions")


class Payment(Base):
    """Payment model fed by the payments subsystem."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String, nullable=False)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
