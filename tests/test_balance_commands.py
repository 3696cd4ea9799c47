"""Tests for balance and dashboard commands."""

from datetime import date
from decimal import Decimal

from pettycash.cli.main import cli
from pettycash.domain.entities import Pool


def test_show_own_balance(cli_runner, as_user, sample_user, mutator):
    mutator.add_funds(sample_user.id, Pool.COMPANY, Decimal("1500")).raise_for_error()
    mutator.submit_expense(sample_user.id, "Bill", "Water", Decimal("2000")).raise_for_error()

    result = cli_runner.invoke(cli, as_user + ["balance", "show"])

    assert result.exit_code == 0
    assert "Balances of 'Asha'" in result.output
    assert "-500.00" in result.output


def test_show_other_balance_requires_admin(cli_runner, as_user, admin_user):
    result = cli_runner.invoke(cli, as_user + ["balance", "show", "Admin"])
    assert result.exit_code == 1
    assert "Only admins" in result.output


def test_admin_shows_user_balance(cli_runner, as_admin, sample_user, mutator):
    mutator.add_funds(sample_user.id, Pool.PERSONAL, Decimal("42")).raise_for_error()

    result = cli_runner.invoke(cli, as_admin + ["balance", "show", "Asha"])

    assert result.exit_code == 0
    assert "Balances of 'Asha'" in result.output
    assert "42.00" in result.output


def test_watch_stops_after_count(cli_runner, as_user, sample_user, mutator):
    mutator.add_funds(sample_user.id, Pool.COMPANY, Decimal("75")).raise_for_error()

    result = cli_runner.invoke(
        cli, as_user + ["balance", "watch", "--interval", "0.01", "--count", "2"]
    )

    assert result.exit_code == 0, result.output
    assert result.output.count("Balances of 'Asha'") >= 2
    assert "75.00" in result.output


def test_watch_requires_login(cli_runner, cli_args, sample_user):
    result = cli_runner.invoke(cli, cli_args + ["balance", "watch", "--count", "1"])
    assert result.exit_code == 1
    assert "Not logged in" in result.output


def test_user_dashboard(cli_runner, as_user, sample_user, mutator):
    mutator.add_funds(sample_user.id, Pool.COMPANY, Decimal("1000")).raise_for_error()
    mutator.submit_expense(sample_user.id, "Travel", "Train", Decimal("300")).raise_for_error()

    result = cli_runner.invoke(cli, as_user + ["dashboard"])

    assert result.exit_code == 0
    assert "Dashboard for 'Asha'" in result.output
    assert "700.00" in result.output
    assert "Monthly salary: 25,000.00" in result.output
    assert "Expenses: 1 totalling 300.00" in result.output
    assert "Train" in result.output


def test_admin_dashboard(cli_runner, as_admin, sample_user, admin_user, mutator):
    mutator.add_funds(sample_user.id, Pool.COMPANY, Decimal("1000")).raise_for_error()
    mutator.add_funds(
        sample_user.id, Pool.SALARY, Decimal("25000"), period=date(2024, 3, 1)
    ).raise_for_error()
    mutator.submit_expense(sample_user.id, "Travel", "Train", Decimal("300")).raise_for_error()
    mutator.submit_expense(admin_user.id, "Bill", "Internet", Decimal("999")).raise_for_error()

    result = cli_runner.invoke(cli, as_admin + ["dashboard"])

    assert result.exit_code == 0
    assert "Company balance: -299.00" in result.output
    assert "Users:           2" in result.output
    assert "Expenses:        2" in result.output
    assert "Total expenses:  1,299.00" in result.output
    assert "25,000.00" in result.output
    assert "Internet" in result.output


def test_dashboard_requires_login(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["dashboard"])
    assert result.exit_code == 1


def test_help_does_not_need_database(cli_runner, tmp_path):
    missing_dir = tmp_path / "nope" / "db.sqlite"
    result = cli_runner.invoke(cli, ["--db-path", str(missing_dir), "--help"])
    assert result.exit_code == 0
    assert "Pettycash" in result.output
