"""Tests for the report service."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from pettycash.domain.entities import Pool
from pettycash.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def expenses(mutator, sample_user, admin_user):
    """Three expenses from two users, oldest first."""
    mutator.submit_expense(sample_user.id, "Travel", "Cab to site", Decimal("450")).raise_for_error()
    mutator.submit_expense(sample_user.id, "Meals", "Team lunch", Decimal("1200")).raise_for_error()
    mutator.submit_expense(admin_user.id, "Bill", "Internet", Decimal("999")).raise_for_error()


class TestExpenseReports:
    """Expense totals and listings."""

    def test_stats_empty(self, report_service):
        stats = report_service.expense_stats()
        assert stats.total == Decimal("0.00")
        assert stats.count == 0

    def test_stats(self, report_service, expenses, sample_user):
        assert report_service.expense_stats().total == Decimal("2649.00")
        stats = report_service.expense_stats(user_id=sample_user.id)
        assert stats.total == Decimal("1650.00")
        assert stats.count == 2

    def test_recent_expenses(self, report_service, expenses, sample_user):
        recent = report_service.recent_expenses(limit=2)
        assert [e.description for e in recent] == ["Internet", "Team lunch"]

        own = report_service.recent_expenses(user_id=sample_user.id)
        assert [e.description for e in own] == ["Team lunch", "Cab to site"]
        assert report_service.recent_expenses(limit=0) == []

    def test_list_expenses(self, report_service, expenses):
        page = report_service.list_expenses(search="LUNCH")
        assert page.total == 1
        assert page.items[0].category == "Meals"

        assert report_service.list_expenses(category="bill").total == 1
        assert report_service.list_expenses(category="all").total == 3
        assert report_service.list_expenses(on_date=date(2024, 3, 15)).total == 3
        assert report_service.list_expenses(on_date=date(2024, 3, 16)).total == 0

    def test_list_expenses_rejects_unknown_category(self, report_service):
        with pytest.raises(ValidationError):
            report_service.list_expenses(category="Gifts")

    def test_list_expenses_pages_of_ten(self, report_service, mutator, sample_user):
        for n in range(12):
            mutator.submit_expense(sample_user.id, "Bill", f"Bill {n}", Decimal("1"))

        page = report_service.list_expenses(page=2)
        assert page.page_size == 10
        assert len(page.items) == 2
        assert page.total == 12

    def test_get_expense(self, report_service):
        with pytest.raises(NotFoundError):
            report_service.get_expense(1)

    def test_user_totals(self, report_service, expenses, sample_user, admin_user, account_service):
        account_service.delete_account(admin_user.id)

        totals = report_service.user_totals()
        assert [(t.user_id, t.total, t.count) for t in totals] == [
            (sample_user.id, Decimal("1650.00"), 2),
            (admin_user.id, Decimal("999.00"), 1),
        ]
        assert totals[0].name == "Asha"
        assert totals[1].name is None


class TestBalanceReports:
    """Balances and fund totals."""

    def test_balance_snapshot(self, report_service, mutator, sample_user):
        mutator.add_funds(sample_user.id, Pool.PERSONAL, Decimal("300")).raise_for_error()

        snapshot = report_service.balance_snapshot(sample_user.id)
        assert snapshot.personal_balance == Decimal("300.00")
        assert snapshot.name == "Asha"

    def test_balance_snapshot_missing(self, report_service):
        with pytest.raises(NotFoundError):
            report_service.balance_snapshot(404)

    def test_fund_totals_count_credits_only(self, report_service, mutator, sample_user):
        mutator.add_funds(sample_user.id, Pool.COMPANY, Decimal("500")).raise_for_error()
        mutator.submit_expense(sample_user.id, "Bill", "Water", Decimal("100")).raise_for_error()
        mutator.add_funds(
            sample_user.id, Pool.SALARY, Decimal("25000"), period=date(2024, 3, 1)
        ).raise_for_error()

        totals = report_service.fund_totals()
        assert totals[Pool.COMPANY] == Decimal("500.00")
        assert totals[Pool.SALARY] == Decimal("25000.00")
        assert totals[Pool.PERSONAL] == Decimal("0.00")

    def test_user_count(self, report_service, sample_user, admin_user):
        assert report_service.user_count() == 2

    def test_company_total_empty_store(self, report_service):
        assert report_service.company_total() == Decimal("0.00")
        assert report_service.balance_totals() == {pool: Decimal("0.00") for pool in Pool}

    def test_company_total_sums_every_account(
        self, report_service, mutator, sample_user, admin_user, account_service
    ):
        mutator.add_funds(sample_user.id, Pool.COMPANY, Decimal("1000.25")).raise_for_error()
        mutator.add_funds(admin_user.id, Pool.PERSONAL, Decimal("40")).raise_for_error()
        mutator.submit_expense(admin_user.id, "Bill", "Internet", Decimal("999.50")).raise_for_error()

        assert report_service.company_total() == Decimal("0.75")
        assert report_service.balance_totals()[Pool.PERSONAL] == Decimal("40.00")

        account_service.delete_account(sample_user.id)
        assert report_service.company_total() == Decimal("-999.50")

    def test_no_drift_after_clean_mutations(self, report_service, mutator, sample_user):
        mutator.add_funds(sample_user.id, Pool.COMPANY, Decimal("500")).raise_for_error()
        mutator.submit_expense(sample_user.id, "Bill", "Water", Decimal("100")).raise_for_error()

        drift = report_service.drift(sample_user.id)
        assert all(value == Decimal("0.00") for value in drift.values())

    def test_drift_after_failed_append(self, report_service, mutator, sample_user, temp_db, monkeypatch):
        def failing(*args, **kwargs):
            from sqlalchemy.exc import OperationalError
            raise OperationalError("INSERT", {}, Exception("disk full"))

        monkeypatch.setattr(temp_db, "append_entry", failing)
        mutator.add_funds(sample_user.id, Pool.COMPANY, Decimal("40"))

        assert report_service.drift(sample_user.id)[Pool.COMPANY] == Decimal("40.00")
