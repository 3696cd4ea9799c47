"""Account domain service."""

import logging
from decimal import Decimal
from typing import Optional

from pettycash.database.base import Database
from pettycash.domain.entities import Account as AccountEntity, Role
from pettycash.domain.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
)
from pettycash.domain.mutator import coerce_amount

logger = logging.getLogger(__name__)

PIN_LENGTH = 4


def validate_pin(pin: str) -> str:
    """Check a PIN is exactly four digits and return it unchanged."""
    if pin is None or len(pin) != PIN_LENGTH or not pin.isdigit():
        raise ValidationError(f"PIN must be exactly {PIN_LENGTH} digits")
    return pin


def validate_name(name: str) -> str:
    """Check a display name is present and return it stripped."""
    if name is None or not name.strip():
        raise ValidationError("Name is required")
    return name.strip()


def validate_salary(salary: Optional[Decimal]) -> Optional[Decimal]:
    if salary is None:
        return None
    try:
        salary = coerce_amount(salary)
    except ValidationError:
        raise ValidationError("Salary must be a non-negative amount up to 9999999999.99") from None
    if salary < 0:
        raise ValidationError("Salary must be a non-negative amount up to 9999999999.99")
    return salary


class AccountService:
    """Service for managing accounts.

    Balances are not editable here; they only move through
    ``BalanceMutator``.
    """

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        pin: str,
        role: str | Role = Role.USER,
        salary: Optional[Decimal] = None,
    ) -> int:
        """Create a new account with zero balances.

        Args:
            name: Display name, unique across accounts
            pin: Four digit PIN
            role: "admin" or "user"
            salary: Optional fixed monthly salary

        Returns:
            Account ID

        Raises:
            ValidationError: If a field is missing or malformed
            ConflictError: If account name already exists
        """
        name = validate_name(name)
        validate_pin(pin)
        role = self._parse_role(role)
        salary = validate_salary(salary)

        if self.db.find_account_by_name(name) is not None:
            raise ConflictError(duplicate_account_name(name))

        account_id = self.db.create_account(name=name, pin=pin, role=role.value, salary=salary)
        logger.info("Created %s account %s (%s)", role.value, account_id, name)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def find_account(self, name: str) -> Optional[AccountEntity]:
        """Get account by exact name."""
        return self.db.find_account_by_name(name)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts ordered by name."""
        return self.db.list_accounts()

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        pin: Optional[str] = None,
        role: Optional[str | Role] = None,
        salary: Optional[Decimal] = None,
        clear_salary: bool = False,
    ) -> None:
        """Update account profile fields (admin edit).

        Only the fields that are provided change.

        Raises:
            NotFoundError: If account not found
            ValidationError: If a provided field is malformed
            ConflictError: If the new name is taken by another account
        """
        self.require_account(account_id)

        if name is not None:
            name = validate_name(name)
            existing = self.db.find_account_by_name(name)
            if existing is not None and existing.id != account_id:
                raise ConflictError(duplicate_account_name(name))
        if pin is not None:
            validate_pin(pin)
        role_value = self._parse_role(role).value if role is not None else None

        if clear_salary:
            if salary is not None:
                raise ValidationError("Cannot set both salary and clear_salary")
        else:
            salary = validate_salary(salary)

        self.db.update_account(
            account_id=account_id,
            name=name,
            pin=pin,
            role=role_value,
            salary=salary,
            update_salary=clear_salary,
        )
        logger.info("Updated account %s", account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Its ledger entries and expenses stay in place, attributed to the
        removed ID.

        Raises:
            NotFoundError: If account not found
        """
        account = self.require_account(account_id)
        self.db.delete_account(account_id)
        logger.info("Deleted account %s (%s)", account_id, account.name)

    def authenticate(self, name: str, pin: str) -> AccountEntity:
        """Return the account whose name and PIN both match.

        The PIN is compared verbatim.

        Raises:
            AuthenticationError: If no account matches
        """
        account = self.db.find_account_by_name(name.strip()) if name else None
        if account is None or account.pin != pin:
            logger.warning("Failed login attempt for '%s'", name)
            raise AuthenticationError("Invalid credentials")
        return account

    def count_accounts(self) -> int:
        """Count all accounts."""
        return self.db.count_accounts()

    @staticmethod
    def _parse_role(role: str | Role) -> Role:
        try:
            return Role.parse(role)
        except ValueError as e:
            raise ValidationError(str(e)) from None
