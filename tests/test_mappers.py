"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from pettycash.database.models import (
    User as ORMUser,
    BalanceTransaction as ORMBalanceTransaction,
    Expense as ORMExpense,
)
from pettycash.database.mappers import (
    account_to_domain,
    entry_to_domain,
    expense_to_domain,
    snapshot_to_domain,
    to_money,
)
from pettycash.domain.entities import Account, LedgerEntry, Pool, Role


def make_orm_user(**overrides):
    values = dict(
        id=1,
        name="Asha",
        pin="1234",
        role="user",
        salary=None,
        company_balance=Decimal("12.5"),
        personal_balance=None,
        salary_balance=Decimal("0"),
        balance_version=3,
        created_at=datetime(2024, 3, 1, tzinfo=UTC),
    )
    values.update(overrides)
    return ORMUser(**values)


class TestAccountMapper:
    """Tests for account and snapshot mapping."""

    def test_account_to_domain(self):
        account = account_to_domain(make_orm_user(salary=Decimal("25000")))
        assert isinstance(account, Account)
        assert account.role == Role.USER
        assert account.salary == Decimal("25000.00")
        assert account.company_balance == Decimal("12.50")
        # Missing balances read as zero
        assert account.personal_balance == Decimal("0.00")
        assert account.balance_version == 3

    def test_snapshot_to_domain(self):
        snapshot = snapshot_to_domain(make_orm_user())
        assert snapshot.user_id == 1
        assert snapshot.name == "Asha"
        assert snapshot.balance(Pool.COMPANY) == Decimal("12.50")


class TestEntryMapper:
    """Tests for ledger entry mapping."""

    def test_entry_to_domain(self):
        orm_entry = ORMBalanceTransaction(
            id=5,
            user_id=1,
            type="salary",
            amount=Decimal("25000"),
            salary_month=date(2024, 3, 1),
            description="March",
            actor_name="Asha",
            created_at=datetime(2024, 3, 15, 9, 0),
        )
        entry = entry_to_domain(orm_entry)
        assert isinstance(entry, LedgerEntry)
        assert entry.pool == Pool.SALARY
        assert entry.amount == Decimal("25000.00")
        assert entry.salary_month == date(2024, 3, 1)


class TestExpenseMapper:
    """Tests for expense mapping."""

    def test_expense_to_domain(self):
        orm_expense = ORMExpense(
            id=2,
            user_id=1,
            category="Travel",
            description="Cab",
            amount=Decimal("450"),
            image="receipt.jpg",
            ledger_entry_id=9,
            created_at=datetime(2024, 3, 15, 9, 0),
        )
        expense = expense_to_domain(orm_expense)
        assert expense.amount == Decimal("450.00")
        assert expense.image == "receipt.jpg"
        assert expense.ledger_entry_id == 9


def test_to_money_rounds_to_cents():
    assert to_money(None) == Decimal("0.00")
    assert to_money(Decimal("2.5")) == Decimal("2.50")
    assert to_money(3) == Decimal("3.00")
