"""Loan domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from routefin.database.base import Database
from routefin.domain.entities import (
    ZERO,
    ExpenseSource,
    IncomeSource,
    Loan as LoanEntity,
    PaymentMethod,
)
from routefin.domain.errors import (
    NotFoundError,
    ValidationError,
    loan_not_found,
)
from routefin.domain.transaction import TransactionService

CENT = Decimal("0.01")

_PAYMENT_SOURCES = {
    PaymentMethod.CASH: IncomeSource.CASH_LOAN_PAYMENT,
    PaymentMethod.BANK: IncomeSource.BANK_LOAN_PAYMENT,
}


def profit_portion(amount: Decimal, rate: Decimal, remaining_profit: Decimal) -> Decimal:
    """Split the profit portion out of a payment.

    Each payment carries profit in the same proportion as the loan's total
    owed (``rate / (1 + rate)``), never more than the profit still
    uncollected.
    """
    share = (amount * rate / (1 + rate)).quantize(CENT, rounding=ROUND_HALF_UP)
    return max(ZERO, min(share, remaining_profit, amount))


class LoanService:
    """Service for granting loans and recording their lifecycle."""

    def __init__(self, db: Database):
        """Initialize loan service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)

    def require_loan(self, loan_id: int) -> LoanEntity:
        """Get loan by ID or raise NotFoundError."""
        loan = self.db.get_loan(loan_id)
        if loan is None:
            raise NotFoundError(loan_not_found(loan_id))
        return loan

    def get_loan(self, loan_id: int) -> Optional[LoanEntity]:
        """Get loan by ID."""
        return self.db.get_loan(loan_id)

    def grant_loan(
        self,
        route_id: int,
        requested_amount: Decimal,
        rate: Decimal,
        sign_date: date,
        source_account_id: Optional[int] = None,
        previous_loan_id: Optional[int] = None,
    ) -> int:
        """Grant a loan and record its disbursement.

        Args:
            route_id: Route the loan belongs to
            requested_amount: Principal
            rate: Profit rate over the principal (e.g. 0.4 for 40%)
            sign_date: Date the loan is signed and disbursed
            source_account_id: Account the disbursement is paid from
            previous_loan_id: Loan being renewed, finished on sign_date

        Returns:
            Loan ID

        Raises:
            ValidationError: If amount or rate are out of range
            NotFoundError: If route, account or previous loan doesn't exist
        """
        if requested_amount <= ZERO:
            raise ValidationError(f"Requested amount must be positive, got {requested_amount}")
        if rate < ZERO:
            raise ValidationError(f"Rate must not be negative, got {rate}")

        previous = None
        if previous_loan_id is not None:
            previous = self.require_loan(previous_loan_id)

        # Validates route and account before the loan row is written
        self.transactions.validate_entry(route_id, requested_amount, source_account_id)

        loan_id = self.db.create_loan(
            route_id=route_id,
            requested_amount=requested_amount,
            rate=rate,
            sign_date=sign_date,
            previous_loan_id=previous_loan_id,
        )
        self.transactions.record_expense(
            route_id=route_id,
            date=sign_date,
            amount=requested_amount,
            expense_source=ExpenseSource.LOAN_GRANTED,
            source_account_id=source_account_id,
            description=f"Loan {loan_id} disbursement",
        )

        if previous is not None and previous.finished_date is None:
            self.db.update_loan_finished_date(previous.id, sign_date)

        return loan_id

    def record_payment(
        self,
        loan_id: int,
        amount: Decimal,
        received_at: date,
        method: PaymentMethod = PaymentMethod.CASH,
        source_account_id: Optional[int] = None,
    ) -> int:
        """Record a loan payment and its ledger income.

        The loan is finished once its total payments reach principal plus
        expected profit.

        Args:
            loan_id: Loan being paid
            amount: Payment amount
            received_at: Date the payment was received
            method: Cash or bank payment
            source_account_id: Account the payment went into

        Returns:
            Loan payment ID

        Raises:
            ValidationError: If amount is not positive
            NotFoundError: If loan or account doesn't exist
        """
        if amount <= ZERO:
            raise ValidationError(f"Payment amount must be positive, got {amount}")
        loan = self.require_loan(loan_id)

        payments, linked = self.db.list_payments_and_profit_transactions(loan_id)
        profit_collected = sum((t.profit_amount or ZERO for t in linked), ZERO)
        remaining_profit = max(ZERO, loan.expected_profit - profit_collected)
        profit = profit_portion(amount, loan.rate, remaining_profit)

        payment_id = self.db.create_loan_payment(
            loan_id=loan_id,
            amount=amount,
            received_at=received_at,
            payment_method=method,
        )
        self.transactions.record_income(
            route_id=loan.route_id,
            date=received_at,
            amount=amount,
            income_source=_PAYMENT_SOURCES[method],
            profit_amount=profit,
            source_account_id=source_account_id,
            loan_payment_id=payment_id,
        )

        total_paid = sum((p.amount for p in payments), ZERO) + amount
        if loan.finished_date is None and total_paid >= loan.total_owed:
            self.db.update_loan_finished_date(loan_id, received_at)

        return payment_id

    def mark_bad_debt(self, loan_id: int, bad_debt_date: Optional[date]) -> None:
        """Mark a loan as bad debt as of a date, or clear the marking with None.

        Raises:
            NotFoundError: If loan doesn't exist
        """
        self.require_loan(loan_id)
        self.db.update_loan_bad_debt_date(loan_id, bad_debt_date)
