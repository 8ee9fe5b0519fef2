"""Ledger transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal
from routefin.database.base import Database
from routefin.domain.entities import (
    ZERO,
    ExpenseSource,
    IncomeSource,
    Transaction as TransactionEntity,
    TransactionType,
)
from routefin.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    negative_amount,
    profit_exceeds_amount,
    route_not_found,
)


class TransactionService:
    """Service for recording ledger transactions.

    Transactions are append-only: there are no update or delete operations.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def validate_entry(
        self, route_id: int, amount: Decimal, source_account_id: Optional[int]
    ) -> None:
        """Check amount, route and account of an entry before it is written."""
        if amount < ZERO:
            raise ValidationError(negative_amount(amount))
        if self.db.get_route(route_id) is None:
            raise NotFoundError(route_not_found(route_id))
        if source_account_id is not None and self.db.get_account(source_account_id) is None:
            raise NotFoundError(account_not_found(source_account_id))

    def record_expense(
        self,
        route_id: int,
        date: date,
        amount: Decimal,
        expense_source: ExpenseSource,
        source_account_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        """Record an expense.

        Args:
            route_id: Route the expense belongs to
            date: Date of the expense
            amount: Non-negative amount
            expense_source: Source tag used to classify the expense
            source_account_id: Account the money came from
            description: Optional description

        Returns:
            Transaction ID

        Raises:
            ValidationError: If amount is negative
            NotFoundError: If route or account doesn't exist
        """
        self.validate_entry(route_id, amount, source_account_id)
        return self.db.create_transaction(
            route_id=route_id,
            date=date,
            amount=amount,
            transaction_type=TransactionType.EXPENSE,
            expense_source=expense_source,
            source_account_id=source_account_id,
            description=description,
        )

    def record_income(
        self,
        route_id: int,
        date: date,
        amount: Decimal,
        income_source: IncomeSource,
        profit_amount: Optional[Decimal] = None,
        source_account_id: Optional[int] = None,
        loan_payment_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        """Record an income.

        Args:
            route_id: Route the income belongs to
            date: Date of the income
            amount: Non-negative amount
            income_source: Source tag used to classify the income
            profit_amount: Interest/margin portion of a loan payment
            source_account_id: Account the money went into
            loan_payment_id: Loan payment this income records
            description: Optional description

        Returns:
            Transaction ID

        Raises:
            ValidationError: If amount or profit portion is out of range
            NotFoundError: If route or account doesn't exist
        """
        self.validate_entry(route_id, amount, source_account_id)
        if profit_amount is not None:
            if profit_amount < ZERO:
                raise ValidationError(negative_amount(profit_amount))
            if profit_amount > amount:
                raise ValidationError(profit_exceeds_amount(profit_amount, amount))

        return self.db.create_transaction(
            route_id=route_id,
            date=date,
            amount=amount,
            transaction_type=TransactionType.INCOME,
            income_source=income_source,
            source_account_id=source_account_id,
            profit_amount=profit_amount,
            loan_payment_id=loan_payment_id,
            description=description,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)
