"""Utility for resolving account names to IDs."""

from pettycash.domain.account import AccountService
from pettycash.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    # If it's already an integer, use it as ID
    if isinstance(account, int):
        return account_service.require_account(account).id

    # Names win over numeric IDs so a user literally named "7" stays reachable
    by_name = account_service.find_account(account)
    if by_name is not None:
        return by_name.id

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        raise NotFoundError(f"Account '{account}' not found") from None

    return account_service.require_account(account_id).id
