"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so schema changes (such as the
receipt column rename) stay out of the services.
"""

from decimal import Decimal
from typing import Optional

from pettycash.domain import entities as domain
from pettycash.database.models import (
    User as ORMUser,
    BalanceTransaction as ORMBalanceTransaction,
    Expense as ORMExpense,
)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Normalize a stored numeric value to a two-place Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(value).quantize(CENT)


def _optional_money(value) -> Optional[Decimal]:
    if value is None:
        return None
    return to_money(value)


def account_to_domain(orm_user: ORMUser) -> domain.Account:
    """Convert SQLAlchemy User model to domain Account entity."""
    return domain.Account(
        id=orm_user.id,
        name=orm_user.name,
        pin=orm_user.pin,
        role=domain.Role(orm_user.role),
        salary=_optional_money(orm_user.salary),
        company_balance=to_money(orm_user.company_balance),
        personal_balance=to_money(orm_user.personal_balance),
        salary_balance=to_money(orm_user.salary_balance),
        balance_version=orm_user.balance_version or 0,
        created_at=orm_user.created_at,
    )


def snapshot_to_domain(orm_user: ORMUser) -> domain.BalanceSnapshot:
    """Convert SQLAlchemy User model to a BalanceSnapshot."""
    return domain.BalanceSnapshot(
        user_id=orm_user.id,
        name=orm_user.name,
        company_balance=to_money(orm_user.company_balance),
        personal_balance=to_money(orm_user.personal_balance),
        salary_balance=to_money(orm_user.salary_balance),
        balance_version=orm_user.balance_version or 0,
    )


def entry_to_domain(orm_entry: ORMBalanceTransaction) -> domain.LedgerEntry:
    """Convert SQLAlchemy BalanceTransaction model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        user_id=orm_entry.user_id,
        pool=domain.Pool(orm_entry.type),
        amount=to_money(orm_entry.amount),
        salary_month=orm_entry.salary_month,
        description=orm_entry.description,
        actor_name=orm_entry.actor_name,
        created_at=orm_entry.created_at,
    )


def expense_to_domain(orm_expense: ORMExpense) -> domain.Expense:
    """Convert SQLAlchemy Expense model to domain Expense entity."""
    return domain.Expense(
        id=orm_expense.id,
        user_id=orm_expense.user_id,
        category=orm_expense.category,
        description=orm_expense.description,
        amount=to_money(orm_expense.amount),
        image=orm_expense.image,
        ledger_entry_id=orm_expense.ledger_entry_id,
        created_at=orm_expense.created_at,
    )
