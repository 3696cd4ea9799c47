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


class AuthenticationError(DomainError):
    """Credentials did not match any account."""


class BalanceUpdateFailed(DomainError):
    """The balance write was rejected; nothing was changed."""


class LedgerAppendFailed(DomainError):
    """The balance changed but its ledger entry could not be written.

    The running balance and the ledger are out of sync and need manual
    reconciliation.
    """

    def __init__(self, message: str, account_id: int, pool: str, amount, new_balance):
        super().__init__(message)
        self.account_id = account_id
        self.pool = pool
        self.amount = amount
        self.new_balance = new_balance


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_name_not_found(name: str) -> str:
    """Return message for missing account by name."""
    return f"Account '{name}' not found"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Ledger entry {entry_id} not found"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def salary_month_required() -> str:
    """Return message for a salary credit without its month."""
    return "Salary month is required when adding to the salary pool"


def ledger_out_of_sync(account_id: int, pool: str, amount, new_balance) -> str:
    """Return message when the balance moved but the ledger append failed."""
    return (
        f"Balance of account {account_id} ({pool}) was updated to {new_balance} "
        f"but the ledger entry for {amount} could not be recorded. "
        "Manual reconciliation is required."
    )


def amount_out_of_range(amount) -> str:
    """Return message for an amount too large to store."""
    return f"Amount '{amount}' is out of range (at most 9999999999.99)"
