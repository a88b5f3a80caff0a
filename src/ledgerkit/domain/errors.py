"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class InvalidStateTransitionError(DomainError):
    """Bank transaction is not in the state the operation requires."""


def account_not_found(account_id: int) -> str:
    """Return message for missing ledger account."""
    return f"Account {account_id} not found"


def bank_account_not_found(bank_account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {bank_account_id} not found"


def bank_transaction_not_found(transaction_id: int) -> str:
    """Return message for missing bank transaction."""
    return f"Bank transaction {transaction_id} not found"


def budget_not_found(budget_id: int) -> str:
    """Return message for missing budget."""
    return f"Budget {budget_id} not found"


def dates_required(*names: str) -> str:
    """Return message for a report invoked without its period bounds."""
    return f"{' and '.join(names)} {'is' if len(names) == 1 else 'are'} required"


def invalid_transition(transaction_id: int, current: str, required: str) -> str:
    """Return message for a rejected reconciliation state change."""
    return (
        f"Bank transaction {transaction_id} is {current}; "
        f"it must be {required} for this operation"
    )
