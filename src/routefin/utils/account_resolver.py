"""Utility for resolving account names to IDs."""

from routefin.domain.account import AccountService


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        ValueError: If account is not found
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise ValueError(f"Account ID {account} not found")
        return account

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None
    if account_id is not None and account_service.get_account(account_id) is not None:
        return account_id

    for acc in account_service.list_accounts():
        if acc.name == account:
            return acc.id

    raise ValueError(f"Account '{account}' not found")
