"""Account domain service."""

from typing import Optional
from routefin.database.base import Database
from routefin.domain.entities import Account as AccountEntity, AccountType
from routefin.domain.errors import (
    ConflictError,
    NotFoundError,
    account_not_found,
    duplicate_account_name,
    route_not_found,
)


class AccountService:
    """Service for managing fund accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self, name: str, account_type: AccountType, route_id: Optional[int] = None
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            account_type: Kind of fund (prepaid gas card, cash fund, bank)
            route_id: Optional route the account belongs to

        Returns:
            Account ID

        Raises:
            ConflictError: If account name already exists
            NotFoundError: If the route does not exist
        """
        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(duplicate_account_name(name))
        if route_id is not None and self.db.get_route(route_id) is None:
            raise NotFoundError(route_not_found(route_id))

        return self.db.create_account(name=name, account_type=account_type, route_id=route_id)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()
