"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the string columns that
hold enum tags and the JSON payload of cached monthly summaries.
"""

from decimal import Decimal
from typing import Any, Optional

from routefin.domain import entities as domain
from routefin.database.models import (
    Account as ORMAccount,
    FinancialReportCache as ORMFinancialReportCache,
    Loan as ORMLoan,
    LoanPayment as ORMLoanPayment,
    Route as ORMRoute,
    Transaction as ORMTransaction,
)


def _decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def route_to_domain(orm_route: ORMRoute) -> domain.Route:
    """Convert SQLAlchemy Route model to domain Route entity."""
    return domain.Route(
        id=orm_route.id,
        name=orm_route.name,
        created_at=orm_route.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        route_id=orm_account.route_id,
        created_at=orm_account.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    expense_source = orm_transaction.expense_source
    income_source = orm_transaction.income_source
    return domain.Transaction(
        id=orm_transaction.id,
        route_id=orm_transaction.route_id,
        date=orm_transaction.date,
        amount=_decimal(orm_transaction.amount),
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        expense_source=domain.ExpenseSource(expense_source) if expense_source else None,
        income_source=domain.IncomeSource(income_source) if income_source else None,
        source_account_id=orm_transaction.source_account_id,
        profit_amount=_decimal(orm_transaction.profit_amount),
        loan_payment_id=orm_transaction.loan_payment_id,
        description=orm_transaction.description,
        created_at=orm_transaction.created_at,
    )


def loan_to_domain(orm_loan: ORMLoan) -> domain.Loan:
    """Convert SQLAlchemy Loan model to domain Loan entity."""
    return domain.Loan(
        id=orm_loan.id,
        route_id=orm_loan.route_id,
        requested_amount=_decimal(orm_loan.requested_amount),
        rate=_decimal(orm_loan.rate),
        sign_date=orm_loan.sign_date,
        finished_date=orm_loan.finished_date,
        bad_debt_date=orm_loan.bad_debt_date,
        previous_loan_id=orm_loan.previous_loan_id,
        created_at=orm_loan.created_at,
    )


def loan_payment_to_domain(orm_payment: ORMLoanPayment) -> domain.LoanPayment:
    """Convert SQLAlchemy LoanPayment model to domain LoanPayment entity."""
    return domain.LoanPayment(
        id=orm_payment.id,
        loan_id=orm_payment.loan_id,
        amount=_decimal(orm_payment.amount),
        received_at=orm_payment.received_at,
        payment_method=domain.PaymentMethod(orm_payment.payment_method),
    )


def cache_entry_to_domain(orm_entry: ORMFinancialReportCache) -> domain.MonthlyData:
    """Convert a cached JSON payload back into a MonthlyData value."""
    return domain.MonthlyData.from_dict(orm_entry.data or {})
