"""Balance mutator.

The only code path that changes a balance. Each call reads the current
balance of one (account, pool) pair, writes ``current + delta`` guarded by
the account's ``balance_version``, then appends one ledger entry carrying
the signed delta.

A version conflict means another writer got in between the read and the
write; the mutator re-reads and recomputes, so concurrent deltas are never
lost. Failures never raise out of ``apply_delta``: they come back inside
the returned ``DeltaResult``.
"""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from pettycash.database.base import Database
from pettycash.domain.entities import (
    EXPENSE_CATEGORIES,
    Account,
    DeltaResult,
    Pool,
)
from pettycash.domain.errors import (
    BalanceUpdateFailed,
    DomainError,
    LedgerAppendFailed,
    NotFoundError,
    ValidationError,
    account_not_found,
    amount_out_of_range,
    ledger_out_of_sync,
    salary_month_required,
)
from pettycash.utils.amount_parser import quantize_amount
from pettycash.utils.date_parser import first_of_month

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5

# Largest magnitude a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")

# Appends return (ledger entry ID, expense ID or None)
AppendStep = Callable[[Account, Decimal, datetime], tuple[int, Optional[int]]]


def utc_now() -> datetime:
    return datetime.now(UTC)


def coerce_amount(amount) -> Decimal:
    """Convert an int, str or Decimal amount into a two-place Decimal.

    Raises:
        ValidationError: If the amount is missing, non-numeric, not finite or
            out of range
    """
    if amount is None or isinstance(amount, bool):
        raise ValidationError("Amount is required")
    try:
        value = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Amount '{amount}' is not a number") from None
    if not value.is_finite():
        raise ValidationError(f"Amount '{amount}' is not a finite number")
    try:
        value = quantize_amount(value)
    except InvalidOperation:
        raise ValidationError(amount_out_of_range(amount)) from None
    if abs(value) > MAX_AMOUNT:
        raise ValidationError(amount_out_of_range(amount))
    return value


def normalize_category(category: Optional[str]) -> str:
    """Match a category against the fixed set, ignoring case.

    Raises:
        ValidationError: If the category is missing or unknown
    """
    if category is None or not category.strip():
        raise ValidationError("Category is required")
    wanted = category.strip().lower()
    for known in EXPENSE_CATEGORIES:
        if known.lower() == wanted:
            return known
    raise ValidationError(
        f"Unknown category '{category}'. Expected one of: {', '.join(EXPENSE_CATEGORIES)}"
    )


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class BalanceMutator:
    """Apply signed deltas to account balances and record them in the ledger."""

    def __init__(
        self,
        db: Database,
        clock: Callable[[], datetime] = utc_now,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """Initialize balance mutator.

        Args:
            db: Database instance
            clock: Source of ledger timestamps
            max_attempts: How many times a balance write is retried after a
                version conflict before giving up with BalanceUpdateFailed
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.db = db
        self.clock = clock
        self.max_attempts = max_attempts

    def apply_delta(
        self,
        account_id: int,
        pool: str | Pool,
        signed_amount,
        description: Optional[str] = None,
        period: Optional[date] = None,
    ) -> DeltaResult:
        """Apply one signed delta to one (account, pool) pair and record it.

        Negative resulting balances are allowed. ``period`` is the salary
        month and is required for the salary pool; it is stored as the first
        day of its month.

        Returns:
            DeltaResult carrying the new balance and ledger entry ID, or the
            error: ValidationError, NotFoundError, BalanceUpdateFailed or
            LedgerAppendFailed
        """
        try:
            parsed_pool = self._parse_pool(pool)
            amount = coerce_amount(signed_amount)
            salary_month = self._check_period(parsed_pool, period)
        except DomainError as e:
            return DeltaResult(account_id=account_id, pool=None, amount=None, error=e)

        description = _clean_text(description)

        def append(account: Account, delta: Decimal, stamp: datetime) -> tuple[int, Optional[int]]:
            entry_id = self.db.append_entry(
                user_id=account.id,
                pool=parsed_pool,
                amount=delta,
                description=description,
                salary_month=salary_month,
                actor_name=account.name,
                created_at=stamp,
            )
            return entry_id, None

        return self._mutate(account_id, parsed_pool, amount, append)

    def submit_expense(
        self,
        account_id: int,
        category: str,
        description: str,
        amount,
        image: Optional[str] = None,
    ) -> DeltaResult:
        """Record an expense as a debit against the company pool.

        The expense row is written together with its ledger entry. The
        company balance may go negative.

        Args:
            account_id: Submitting account
            category: One of EXPENSE_CATEGORIES (case-insensitive)
            description: Required free text
            amount: Positive expense amount
            image: Optional receipt reference

        Returns:
            DeltaResult whose ``amount`` is the negative delta applied and
            whose ``expense_id`` identifies the expense row
        """
        try:
            category = normalize_category(category)
            description = _clean_text(description)
            if description is None:
                raise ValidationError("Description is required")
            amount = coerce_amount(amount)
            if amount <= 0:
                raise ValidationError("Expense amount must be greater than zero")
        except DomainError as e:
            return DeltaResult(account_id=account_id, pool=Pool.COMPANY, amount=None, error=e)

        image = _clean_text(image)

        def append(account: Account, delta: Decimal, stamp: datetime) -> tuple[int, Optional[int]]:
            return self.db.append_expense_entry(
                user_id=account.id,
                amount=-delta,
                category=category,
                description=description,
                image=image,
                actor_name=account.name,
                created_at=stamp,
            )

        return self._mutate(account_id, Pool.COMPANY, -amount, append)

    def add_funds(
        self,
        account_id: int,
        pool: str | Pool,
        amount,
        description: Optional[str] = None,
        period: Optional[date] = None,
    ) -> DeltaResult:
        """Credit a positive amount to one pool of an account.

        Returns:
            DeltaResult of the underlying ``apply_delta`` call
        """
        try:
            amount = coerce_amount(amount)
            if amount <= 0:
                raise ValidationError("Amount must be greater than zero")
        except DomainError as e:
            return DeltaResult(account_id=account_id, pool=None, amount=None, error=e)

        return self.apply_delta(account_id, pool, amount, description=description, period=period)

    def _mutate(
        self, account_id: int, pool: Pool, amount: Decimal, append: AppendStep
    ) -> DeltaResult:
        failed = DeltaResult(account_id=account_id, pool=pool, amount=amount)

        try:
            account = self.db.get_account(account_id)
        except SQLAlchemyError as e:
            logger.warning("Could not read account %s: %s", account_id, e)
            return self._with_error(failed, BalanceUpdateFailed(f"Could not read account {account_id}: {e}"))
        if account is None:
            return self._with_error(failed, NotFoundError(account_not_found(account_id)))

        new_balance = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                snapshot = self.db.get_balance_snapshot(account_id)
                if snapshot is None:
                    return self._with_error(failed, NotFoundError(account_not_found(account_id)))

                candidate = quantize_amount(snapshot.balance(pool) + amount)
                if abs(candidate) > MAX_AMOUNT:
                    return self._with_error(
                        failed,
                        ValidationError(
                            f"New {pool.value} balance {candidate} would be out of range"
                        ),
                    )
                landed = self.db.set_account_balance(
                    account_id, pool, candidate, snapshot.balance_version
                )
            except SQLAlchemyError as e:
                logger.warning(
                    "Balance write for account %s (%s) rejected: %s", account_id, pool.value, e
                )
                return self._with_error(
                    failed, BalanceUpdateFailed(f"Could not update {pool.value} balance: {e}")
                )

            if landed:
                new_balance = candidate
                break
            logger.debug(
                "Balance of account %s changed concurrently, retrying (attempt %s of %s)",
                account_id,
                attempt,
                self.max_attempts,
            )

        if new_balance is None:
            logger.warning(
                "Gave up updating %s balance of account %s after %s attempts",
                pool.value,
                account_id,
                self.max_attempts,
            )
            return self._with_error(
                failed,
                BalanceUpdateFailed(
                    f"Could not update {pool.value} balance of account {account_id}: "
                    f"it kept changing concurrently ({self.max_attempts} attempts)"
                ),
            )

        try:
            entry_id, expense_id = append(account, amount, self.clock())
        except SQLAlchemyError as e:
            error = LedgerAppendFailed(
                ledger_out_of_sync(account_id, pool.value, amount, new_balance),
                account_id=account_id,
                pool=pool.value,
                amount=amount,
                new_balance=new_balance,
            )
            logger.error("%s Cause: %s", error, e)
            return DeltaResult(
                account_id=account_id,
                pool=pool,
                amount=amount,
                new_balance=new_balance,
                error=error,
            )

        logger.info(
            "Applied %s to %s balance of account %s: new balance %s (entry %s)",
            amount,
            pool.value,
            account_id,
            new_balance,
            entry_id,
        )
        return DeltaResult(
            account_id=account_id,
            pool=pool,
            amount=amount,
            new_balance=new_balance,
            entry_id=entry_id,
            expense_id=expense_id,
        )

    @staticmethod
    def _with_error(result: DeltaResult, error: DomainError) -> DeltaResult:
        return DeltaResult(
            account_id=result.account_id, pool=result.pool, amount=result.amount, error=error
        )

    @staticmethod
    def _parse_pool(pool: str | Pool) -> Pool:
        try:
            return Pool.parse(pool)
        except ValueError as e:
            raise ValidationError(str(e)) from None

    @staticmethod
    def _check_period(pool: Pool, period: Optional[date]) -> Optional[date]:
        if pool != Pool.SALARY:
            return None
        if period is None:
            raise ValidationError(salary_month_required())
        if isinstance(period, datetime):
            period = period.date()
        return first_of_month(period)
