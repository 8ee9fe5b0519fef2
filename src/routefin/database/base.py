"""Abstract database interfaces.

The report engine depends only on the three narrow read/cache interfaces
(``LedgerReader``, ``CacheStore``, ``RouteDirectory``). ``Database`` combines
them with the write operations used to populate the ledger.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from routefin.domain.entities import (
    Account,
    AccountType,
    ExpenseSource,
    IncomeSource,
    Loan,
    LoanPayment,
    MonthlyData,
    PaymentMethod,
    Route,
    Transaction,
    TransactionType,
)


class LedgerReader(ABC):
    """Read-only accessor over ledger transactions and loans."""

    @abstractmethod
    def list_transactions(
        self, route_ids: Sequence[int], start_date: date, end_date: date
    ) -> list[Transaction]:
        """List transactions of the given routes dated within [start_date, end_date]."""
        pass

    @abstractmethod
    def list_bad_debt_loans(
        self, route_ids: Sequence[int], start_date: date, end_date: date
    ) -> list[Loan]:
        """List loans of the given routes marked as bad debt within [start_date, end_date]."""
        pass

    @abstractmethod
    def list_payments_and_profit_transactions(
        self, loan_id: int
    ) -> tuple[list[LoanPayment], list[Transaction]]:
        """Get all payments of a loan and the transactions linked to them."""
        pass

    @abstractmethod
    def list_account_ids(self, account_type: AccountType) -> list[int]:
        """List IDs of accounts of a given type."""
        pass

    @abstractmethod
    def list_portfolio_loans(
        self, route_ids: Sequence[int], start_date: date, end_date: date
    ) -> list[Loan]:
        """List loans signed by end_date that were not finished before start_date."""
        pass


class CacheStore(ABC):
    """Persistent store of single-route monthly summaries."""

    @abstractmethod
    def get(self, route_id: int, year: int, month: int) -> Optional[MonthlyData]:
        """Get the cached summary of a route-month, if any."""
        pass

    @abstractmethod
    def get_year(self, route_id: int, year: int) -> dict[int, MonthlyData]:
        """Get all cached summaries of a route-year keyed by month."""
        pass

    @abstractmethod
    def put(self, route_id: int, year: int, month: int, data: MonthlyData) -> None:
        """Store a route-month summary, overwriting any existing entry."""
        pass

    @abstractmethod
    def delete_all(self, route_id: int, year: int) -> int:
        """Delete all cached summaries of a route-year. Returns rows deleted."""
        pass


class RouteDirectory(ABC):
    """Lookup of route metadata."""

    @abstractmethod
    def get_route(self, route_id: int) -> Optional[Route]:
        """Get route by ID."""
        pass

    @abstractmethod
    def list_routes(self, route_ids: Optional[Sequence[int]] = None) -> list[Route]:
        """List routes ordered by name, optionally restricted to the given IDs."""
        pass


class Database(LedgerReader, CacheStore, RouteDirectory):
    """Abstract database interface for routefin."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Route operations
    @abstractmethod
    def create_route(self, name: str) -> int:
        """Create a route. Returns route ID."""
        pass

    @abstractmethod
    def get_route_by_name(self, name: str) -> Optional[Route]:
        """Get route by name."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, name: str, account_type: AccountType, route_id: Optional[int] = None
    ) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        route_id: int,
        date: date,
        amount: Decimal,
        transaction_type: TransactionType,
        expense_source: Optional[ExpenseSource] = None,
        income_source: Optional[IncomeSource] = None,
        source_account_id: Optional[int] = None,
        profit_amount: Optional[Decimal] = None,
        loan_payment_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a ledger transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    # Loan operations
    @abstractmethod
    def create_loan(
        self,
        route_id: int,
        requested_amount: Decimal,
        rate: Decimal,
        sign_date: date,
        previous_loan_id: Optional[int] = None,
    ) -> int:
        """Create a loan. Returns loan ID."""
        pass

    @abstractmethod
    def get_loan(self, loan_id: int) -> Optional[Loan]:
        """Get loan by ID."""
        pass

    @abstractmethod
    def update_loan_finished_date(self, loan_id: int, finished_date: Optional[date]) -> None:
        """Set or clear the date a loan was finished."""
        pass

    @abstractmethod
    def update_loan_bad_debt_date(self, loan_id: int, bad_debt_date: Optional[date]) -> None:
        """Set or clear the bad-debt marking date of a loan."""
        pass

    @abstractmethod
    def create_loan_payment(
        self,
        loan_id: int,
        amount: Decimal,
        received_at: date,
        payment_method: PaymentMethod,
    ) -> int:
        """Create a loan payment. Returns payment ID."""
        pass
