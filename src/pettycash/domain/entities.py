"""Domain model entities for pettycash.

These are pure data classes representing business concepts, independent of
database schema. Balances live on the account; the ledger and expense rows
are an audit trail and never feed back into the running balance.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from math import ceil
from typing import Generic, Optional, TypeVar

from pettycash.domain.errors import DomainError

T = TypeVar("T")


class Pool(str, Enum):
    """Balance bucket held on every account."""

    COMPANY = "company"
    PERSONAL = "personal"
    SALARY = "salary"

    @classmethod
    def parse(cls, value: "str | Pool") -> "Pool":
        """Coerce arbitrary casing into a pool."""
        if isinstance(value, Pool):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown pool '{value}'. Expected one of: {choices}") from None

    @property
    def column(self) -> str:
        """Name of the balance column backing this pool."""
        return f"{self.value}_balance"


class Role(str, Enum):
    """Account role."""

    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        if isinstance(value, Role):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown role '{value}'. Expected 'admin' or 'user'") from None


EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Office Supplies",
    "Travel",
    "Meals",
    "Equipment",
    "Software",
    "Utilities",
    "Site Work",
    "Bill",
    "Miscellaneous",
)


@dataclass(frozen=True)
class Account:
    """User account with its three running balances."""

    id: int
    name: str
    pin: str
    role: Role
    salary: Optional[Decimal]
    company_balance: Decimal
    personal_balance: Decimal
    salary_balance: Decimal
    balance_version: int
    created_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def balance(self, pool: Pool) -> Decimal:
        """Return the balance held in the given pool."""
        return getattr(self, Pool.parse(pool).column)


@dataclass(frozen=True)
class LedgerEntry:
    """Immutable record of one signed balance delta."""

    id: int
    user_id: int
    pool: Pool
    amount: Decimal
    salary_month: Optional[date]
    description: Optional[str]
    actor_name: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Expense:
    """Expense submitted against the company pool."""

    id: int
    user_id: int
    category: str
    description: str
    amount: Decimal
    image: Optional[str]
    ledger_entry_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class LedgerFilter:
    """Filter applied when listing ledger entries.

    All fields are optional; unset fields do not restrict the result.
    """

    user_id: Optional[int] = None
    pool: Optional[Pool] = None
    on_date: Optional[date] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class ExpenseFilter:
    """Filter applied when listing expenses."""

    user_id: Optional[int] = None
    category: Optional[str] = None
    on_date: Optional[date] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of an ordered result set plus the size of the whole set."""

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return ceil(self.total / self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass(frozen=True)
class BalanceSnapshot:
    """Balances of one account as currently stored."""

    user_id: int
    name: str
    company_balance: Decimal
    personal_balance: Decimal
    salary_balance: Decimal
    balance_version: int

    def balance(self, pool: Pool) -> Decimal:
        return getattr(self, Pool.parse(pool).column)


@dataclass(frozen=True)
class ExpenseStats:
    """Total amount and number of expenses."""

    total: Decimal = Decimal("0.00")
    count: int = 0


@dataclass(frozen=True)
class UserExpenseTotal:
    """Expense total for one account."""

    user_id: int
    name: Optional[str]
    total: Decimal
    count: int


@dataclass(frozen=True)
class DeltaResult:
    """Outcome of a balance mutation.

    A successful result has ``entry_id`` and ``new_balance`` set and no
    ``error``. A failed result has ``error`` set and no ``entry_id``.
    ``LedgerAppendFailed`` is the one error that comes with ``new_balance``:
    the balance changed but no ledger entry exists.
    """

    account_id: int
    pool: Optional[Pool]
    amount: Optional[Decimal]
    new_balance: Optional[Decimal] = None
    entry_id: Optional[int] = None
    expense_id: Optional[int] = None
    error: Optional[DomainError] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def balance_changed(self) -> bool:
        return self.new_balance is not None

    def raise_for_error(self) -> "DeltaResult":
        """Raise the carried error, if any, and return self otherwise."""
        if self.error is not None:
            raise self.error
        return self
