"""Reconciliation and query service.

Read-only projections over accounts, the ledger and expenses. Balances are
read straight from the account store and never recomputed from the ledger.
Empty result sets produce zero totals and empty lists.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pettycash.database.base import Database
from pettycash.domain.entities import (
    BalanceSnapshot,
    Expense,
    ExpenseFilter,
    ExpenseStats,
    Page,
    Pool,
    UserExpenseTotal,
)
from pettycash.domain.errors import NotFoundError, account_not_found, expense_not_found
from pettycash.domain.ledger import page_window
from pettycash.domain.mutator import normalize_category

DEFAULT_RECENT_LIMIT = 5
DEFAULT_EXPENSE_PAGE_SIZE = 10


class ReportService:
    """Service for dashboard figures and expense listings."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def expense_stats(self, user_id: Optional[int] = None) -> ExpenseStats:
        """Total amount and count of expenses, globally or for one account."""
        return self.db.get_expense_stats(user_id=user_id)

    def recent_expenses(
        self, limit: int = DEFAULT_RECENT_LIMIT, user_id: Optional[int] = None
    ) -> list[Expense]:
        """Most recent expenses, newest first."""
        if limit < 1:
            return []
        expenses, _ = self.db.list_expenses(ExpenseFilter(user_id=user_id), limit=limit)
        return expenses

    def list_expenses(
        self,
        user_id: Optional[int] = None,
        search: Optional[str] = None,
        category: Optional[str] = None,
        on_date: Optional[date] = None,
        page: int = 1,
        page_size: int = DEFAULT_EXPENSE_PAGE_SIZE,
    ) -> Page[Expense]:
        """List expenses newest first, one page at a time.

        Args:
            user_id: Optional account filter
            search: Optional case-insensitive text matched against the description
            category: Optional category filter; None or "all" lists every category
            on_date: Optional calendar day the expense was submitted on
            page: 1-based page number
            page_size: Expenses per page

        Raises:
            ValidationError: If the category or paging arguments are invalid
        """
        offset, limit = page_window(page, page_size)
        if category is not None and category.strip().lower() in ("", "all"):
            category = None
        if category is not None:
            category = normalize_category(category)

        expense_filter = ExpenseFilter(
            user_id=user_id,
            category=category,
            on_date=on_date,
            search=search.strip() if search and search.strip() else None,
        )
        expenses, total = self.db.list_expenses(expense_filter, offset=offset, limit=limit)
        return Page(items=expenses, total=total, page=page, page_size=page_size)

    def get_expense(self, expense_id: int) -> Expense:
        """Get expense by ID.

        Raises:
            NotFoundError: If expense doesn't exist
        """
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise NotFoundError(expense_not_found(expense_id))
        return expense

    def balance_snapshot(self, user_id: int) -> BalanceSnapshot:
        """Current balances of one account as stored.

        Raises:
            NotFoundError: If account doesn't exist
        """
        snapshot = self.db.get_balance_snapshot(user_id)
        if snapshot is None:
            raise NotFoundError(account_not_found(user_id))
        return snapshot

    def user_totals(self) -> list[UserExpenseTotal]:
        """Expense totals per account, largest first.

        Accounts that were deleted still appear, with no name.
        """
        return self.db.get_expense_totals_by_user()

    def user_count(self) -> int:
        return self.db.count_accounts()

    def balance_totals(self) -> dict[Pool, Decimal]:
        """Stored balances per pool summed over every account."""
        return self.db.sum_balances()

    def company_total(self) -> Decimal:
        """Company-wide balance: the company pools of all accounts added up.

        Read from the stored balances, never from the ledger. Zero when there
        are no accounts.
        """
        return self.balance_totals()[Pool.COMPANY]

    def fund_totals(self, user_id: Optional[int] = None) -> dict[Pool, Decimal]:
        """Sum of credits per pool, globally or for one account."""
        return self.db.sum_entries_by_pool(user_id=user_id, credits_only=True)

    def ledger_totals(self, user_id: Optional[int] = None) -> dict[Pool, Decimal]:
        """Net sum of all ledger entries per pool.

        Compared against the stored balances this shows how far an account
        has drifted, for example after a LedgerAppendFailed.
        """
        return self.db.sum_entries_by_pool(user_id=user_id)

    def drift(self, user_id: int) -> dict[Pool, Decimal]:
        """Stored balance minus net ledger sum per pool for one account.

        Raises:
            NotFoundError: If account doesn't exist
        """
        snapshot = self.balance_snapshot(user_id)
        totals = self.ledger_totals(user_id=user_id)
        return {pool: snapshot.balance(pool) - totals[pool] for pool in Pool}
