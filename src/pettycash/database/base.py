"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from pettycash.domain.entities import (
    Account,
    BalanceSnapshot,
    Expense,
    ExpenseFilter,
    ExpenseStats,
    LedgerEntry,
    LedgerFilter,
    Pool,
    UserExpenseTotal,
)


class Database(ABC):
    """Abstract database interface for pettycash.

    The account store half has no business logic: balance columns are read
    and written per pool, and a write only lands if the caller's
    ``balance_version`` is still current. The ledger half is append-only.
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

    # Account store operations
    @abstractmethod
    def create_account(
        self, name: str, pin: str, role: str, salary: Optional[Decimal] = None
    ) -> int:
        """Create a new account with zero balances. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def find_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by its unique name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by name."""
        pass

    @abstractmethod
    def count_accounts(self) -> int:
        """Count all accounts."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        pin: Optional[str] = None,
        role: Optional[str] = None,
        salary: Optional[Decimal] = None,
        update_salary: bool = False,
    ) -> None:
        """Update profile fields. Balance columns are never touched here.

        Args:
            update_salary: If True, update salary even if it's None (to clear it)
        """
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account. Ledger entries and expenses are left in place."""
        pass

    @abstractmethod
    def get_balance_snapshot(self, account_id: int) -> Optional[BalanceSnapshot]:
        """Read all three balances and the balance version of an account."""
        pass

    @abstractmethod
    def get_account_balance(self, account_id: int, pool: Pool) -> Decimal:
        """Read one pool's balance. Raises LookupError if the account is missing."""
        pass

    @abstractmethod
    def sum_balances(self) -> dict[Pool, Decimal]:
        """Sum each pool's stored balance over all accounts."""
        pass

    @abstractmethod
    def set_account_balance(
        self, account_id: int, pool: Pool, new_value: Decimal, expected_version: int
    ) -> bool:
        """Write one pool's balance if the balance version still matches.

        Returns:
            True if the write landed, False on a version conflict (or a
            vanished account)
        """
        pass

    # Ledger operations
    @abstractmethod
    def append_entry(
        self,
        user_id: int,
        pool: Pool,
        amount: Decimal,
        description: Optional[str] = None,
        salary_month: Optional[date] = None,
        actor_name: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Append a ledger entry. Returns entry ID."""
        pass

    @abstractmethod
    def append_expense_entry(
        self,
        user_id: int,
        amount: Decimal,
        category: str,
        description: str,
        image: Optional[str] = None,
        actor_name: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> tuple[int, int]:
        """Append the company debit for an expense and the expense row together.

        ``amount`` is the positive expense amount; the ledger entry records
        its negation.

        Returns:
            Tuple of (ledger entry ID, expense ID)
        """
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def list_entries(
        self,
        entry_filter: Optional[LedgerFilter] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[LedgerEntry], int]:
        """List ledger entries newest first.

        Returns:
            Tuple of (entries in the requested window, total matching count)
        """
        pass

    @abstractmethod
    def sum_entries_by_pool(
        self, user_id: Optional[int] = None, credits_only: bool = False
    ) -> dict[Pool, Decimal]:
        """Sum ledger amounts per pool, optionally for one account."""
        pass

    # Expense operations
    @abstractmethod
    def get_expense(self, expense_id: int) -> Optional[Expense]:
        """Get expense by ID."""
        pass

    @abstractmethod
    def list_expenses(
        self,
        expense_filter: Optional[ExpenseFilter] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[Expense], int]:
        """List expenses newest first.

        Returns:
            Tuple of (expenses in the requested window, total matching count)
        """
        pass

    @abstractmethod
    def get_expense_stats(self, user_id: Optional[int] = None) -> ExpenseStats:
        """Get total amount and count of expenses."""
        pass

    @abstractmethod
    def get_expense_totals_by_user(self) -> list[UserExpenseTotal]:
        """Get expense totals grouped by account, largest total first."""
        pass
