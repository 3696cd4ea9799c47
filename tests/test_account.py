"""Tests for the account service and user commands."""

import pytest
from decimal import Decimal

from pettycash.cli.main import cli
from pettycash.domain.entities import Role
from pettycash.domain.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class TestAccountService:
    """Account service behavior."""

    def test_create_account(self, account_service):
        account_id = account_service.create_account(name="  Asha ", pin="1234")
        account = account_service.get_account(account_id)
        assert account.name == "Asha"
        assert account.role == Role.USER
        assert account.salary is None

    def test_create_duplicate_name(self, account_service, sample_user):
        with pytest.raises(ConflictError, match="already exists"):
            account_service.create_account(name="Asha", pin="9999")

    @pytest.mark.parametrize("pin", ["123", "12345", "12a4", ""])
    def test_create_with_bad_pin(self, account_service, pin):
        with pytest.raises(ValidationError, match="4 digits"):
            account_service.create_account(name="Asha", pin=pin)

    def test_create_with_unknown_role(self, account_service):
        with pytest.raises(ValidationError, match="Unknown role"):
            account_service.create_account(name="Asha", pin="1234", role="owner")

    def test_create_with_negative_salary(self, account_service):
        with pytest.raises(ValidationError, match="Salary"):
            account_service.create_account(name="Asha", pin="1234", salary=Decimal("-1"))

    @pytest.mark.parametrize("salary", [Decimal("1e27"), Decimal("10000000000")])
    def test_create_with_salary_out_of_range(self, account_service, salary):
        with pytest.raises(ValidationError, match="Salary"):
            account_service.create_account(name="Asha", pin="1234", salary=salary)
        assert account_service.find_account("Asha") is None

    def test_update_account(self, account_service, sample_user):
        account_service.update_account(sample_user.id, pin="4321", role="admin")
        account = account_service.get_account(sample_user.id)
        assert account.pin == "4321"
        assert account.is_admin
        assert account.salary == Decimal("25000.00")

    def test_clear_salary(self, account_service, sample_user):
        account_service.update_account(sample_user.id, clear_salary=True)
        assert account_service.get_account(sample_user.id).salary is None

    def test_rename_to_taken_name(self, account_service, sample_user, admin_user):
        with pytest.raises(ConflictError):
            account_service.update_account(sample_user.id, name="Admin")

    def test_update_missing_account(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.update_account(99, name="Nobody")

    def test_delete_account(self, account_service, sample_user):
        account_service.delete_account(sample_user.id)
        assert account_service.get_account(sample_user.id) is None
        with pytest.raises(NotFoundError):
            account_service.delete_account(sample_user.id)

    def test_authenticate(self, account_service, sample_user):
        account = account_service.authenticate("Asha", "1234")
        assert account.id == sample_user.id

    def test_authenticate_wrong_pin(self, account_service, sample_user, caplog):
        with pytest.raises(AuthenticationError):
            account_service.authenticate("Asha", "0000")
        assert "Failed login attempt" in caplog.text

    def test_authenticate_unknown_name(self, account_service):
        with pytest.raises(AuthenticationError):
            account_service.authenticate("Nobody", "1234")


class TestUserCommands:
    """CLI user management."""

    def test_first_user_needs_no_login(self, cli_runner, cli_args):
        result = cli_runner.invoke(
            cli, cli_args + ["user", "create", "Admin", "--pin", "0000", "--role", "admin"]
        )
        assert result.exit_code == 0
        assert "Created admin 'Admin'" in result.output

    def test_later_users_need_admin(self, cli_runner, cli_args, sample_user):
        result = cli_runner.invoke(cli, cli_args + ["user", "create", "Ravi", "--pin", "1111"])
        assert result.exit_code == 1
        assert "Not logged in" in result.output

    def test_regular_user_cannot_create_users(self, cli_runner, as_user):
        result = cli_runner.invoke(cli, as_user + ["user", "create", "Ravi", "--pin", "1111"])
        assert result.exit_code == 1
        assert "requires an admin account" in result.output

    def test_admin_creates_user_with_salary(self, cli_runner, as_admin, account_service):
        result = cli_runner.invoke(
            cli, as_admin + ["user", "create", "Ravi", "--pin", "1111", "--salary", "30,000"]
        )
        assert result.exit_code == 0
        assert account_service.find_account("Ravi").salary == Decimal("30000.00")

    def test_create_duplicate(self, cli_runner, as_admin):
        result = cli_runner.invoke(cli, as_admin + ["user", "create", "Admin", "--pin", "1111"])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_list_users(self, cli_runner, as_admin, sample_user):
        result = cli_runner.invoke(cli, as_admin + ["user", "list"])
        assert result.exit_code == 0
        assert "Asha" in result.output
        assert "Admin" in result.output
        assert "25,000.00" in result.output

    def test_edit_user(self, cli_runner, as_admin, sample_user, account_service):
        result = cli_runner.invoke(cli, as_admin + ["user", "edit", "Asha", "--pin", "9876"])
        assert result.exit_code == 0
        assert "Updated user 'Asha'" in result.output
        assert account_service.get_account(sample_user.id).pin == "9876"

    def test_edit_without_changes(self, cli_runner, as_admin, sample_user):
        result = cli_runner.invoke(cli, as_admin + ["user", "edit", "Asha"])
        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_edit_unknown_user(self, cli_runner, as_admin):
        result = cli_runner.invoke(cli, as_admin + ["user", "edit", "Nobody", "--pin", "1111"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete_user_with_confirmation(self, cli_runner, as_admin, sample_user, account_service):
        result = cli_runner.invoke(cli, as_admin + ["user", "delete", "Asha"], input="y\n")
        assert result.exit_code == 0
        assert "Deleted user 'Asha'" in result.output
        assert account_service.get_account(sample_user.id) is None

    def test_delete_cancelled(self, cli_runner, as_admin, sample_user, account_service):
        result = cli_runner.invoke(cli, as_admin + ["user", "delete", "Asha"], input="n\n")
        assert result.exit_code == 0
        assert "Deletion cancelled" in result.output
        assert account_service.get_account(sample_user.id) is not None

    def test_cannot_delete_self(self, cli_runner, as_admin):
        result = cli_runner.invoke(cli, as_admin + ["user", "delete", "Admin", "--yes"])
        assert result.exit_code == 1
        assert "cannot delete" in result.output
