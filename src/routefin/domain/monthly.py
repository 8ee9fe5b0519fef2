"""Monthly computation engine.

Turns the ledger entries of a calendar month into one ``MonthlyData`` for a
set of routes. The computation is a pure function of the ledger snapshot:
entries are folded into an immutable accumulator, then the bad-debt pass and
the derived figures are applied on top.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from functools import reduce
from typing import Iterable, Sequence

from routefin.database.base import LedgerReader
from routefin.domain.calendar import month_bounds, operational_weeks
from routefin.domain.entities import (
    COMMISSION_SOURCES,
    LOAN_PAYMENT_SOURCES,
    PAYROLL_SOURCES,
    ZERO,
    AccountType,
    BadDebtBreakdown,
    ExpenseSource,
    Loan,
    LoanPayment,
    MonthlyData,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

_PAYROLL_BUCKETS = {
    ExpenseSource.NOMINA_SALARY: "internal_salary",
    ExpenseSource.EXTERNAL_SALARY: "external_salary",
    ExpenseSource.VIATIC: "per_diem",
}


def safe_divide(numerator: Decimal, denominator) -> Decimal:
    """Divide, returning zero when the denominator is zero."""
    if not denominator:
        return ZERO
    return Decimal(numerator) / Decimal(denominator)


def _increment(acc: MonthlyData, amounts: dict[str, Decimal]) -> MonthlyData:
    return replace(acc, **{name: getattr(acc, name) + value for name, value in amounts.items()})


def apply_expense(
    acc: MonthlyData, txn: Transaction, prepaid_account_ids: frozenset[int]
) -> MonthlyData:
    """Fold one expense entry into the accumulator."""
    amount = txn.amount
    source = txn.expense_source
    changes: dict[str, Decimal] = {
        "total_expenses": amount,
        "net_cash": -amount,
        "operational_cash_used": amount,
    }

    if source == ExpenseSource.GASOLINE:
        if txn.source_account_id in prepaid_account_ids:
            changes["prepaid_gasoline"] = amount
        else:
            changes["cash_gasoline"] = amount
        changes["total_gasoline"] = amount
        changes["general_expenses"] = amount
    elif source in PAYROLL_SOURCES:
        changes[_PAYROLL_BUCKETS[source]] = amount
        changes["payroll"] = amount
    elif source == ExpenseSource.TRAVEL_EXPENSES:
        changes["travel_expenses"] = amount
    elif source in COMMISSION_SOURCES:
        changes["commissions"] = amount
    elif source == ExpenseSource.LOAN_GRANTED:
        changes["loan_disbursements"] = amount
    else:
        changes["general_expenses"] = amount

    if source != ExpenseSource.LOAN_GRANTED:
        changes["total_investment"] = amount

    return _increment(acc, changes)


def apply_income(acc: MonthlyData, txn: Transaction) -> MonthlyData:
    """Fold one income entry into the accumulator."""
    amount = txn.amount
    changes: dict[str, Decimal] = {
        "total_incoming_cash": amount,
        "net_cash": amount,
    }

    if txn.income_source in LOAN_PAYMENT_SOURCES:
        profit = txn.profit_amount or ZERO
        changes["profit_returned"] = profit
        changes["income"] = profit
        changes["capital_returned"] = amount - profit
        acc = replace(acc, payments_count=acc.payments_count + 1)
    else:
        changes["income"] = amount
        changes["profit_returned"] = amount

    return _increment(acc, changes)


def apply_transaction(
    acc: MonthlyData, txn: Transaction, prepaid_account_ids: frozenset[int]
) -> MonthlyData:
    """Fold one ledger entry into the accumulator."""
    if txn.transaction_type == TransactionType.EXPENSE:
        return apply_expense(acc, txn, prepaid_account_ids)
    if txn.transaction_type == TransactionType.INCOME:
        return apply_income(acc, txn)
    return acc


def bad_debt_exposure(
    loan: Loan,
    payments: Sequence[LoanPayment],
    profit_transactions: Sequence[Transaction],
) -> BadDebtBreakdown:
    """Compute the capital-at-risk portion of a bad-debt loan.

    Args:
        loan: Loan marked as bad debt
        payments: All payments recorded for the loan
        profit_transactions: Ledger entries linked to those payments

    Returns:
        BadDebtBreakdown with every intermediate figure clamped at zero
    """
    total_paid = sum((p.amount for p in payments), ZERO)
    profit_collected = sum((t.profit_amount or ZERO for t in profit_transactions), ZERO)

    expected_profit = loan.expected_profit
    pending_expected_profit = max(ZERO, expected_profit - profit_collected)
    total_owed = loan.requested_amount + expected_profit
    pending_total_debt = max(ZERO, total_owed - total_paid)
    exposure = max(ZERO, pending_total_debt - pending_expected_profit)

    return BadDebtBreakdown(
        total_paid=total_paid,
        profit_collected=profit_collected,
        expected_profit=expected_profit,
        pending_expected_profit=pending_expected_profit,
        total_owed=total_owed,
        pending_total_debt=pending_total_debt,
        exposure=exposure,
    )


def finalize(acc: MonthlyData, weeks: int) -> MonthlyData:
    """Apply the derived figures and weekly normalization."""
    operational_expenses = acc.general_expenses + acc.payroll + acc.commissions
    balance = acc.income - operational_expenses
    ui_expenses_total = operational_expenses + acc.bad_debt_amount + acc.travel_expenses
    ui_gains_total = acc.income
    operational_profit = ui_gains_total - ui_expenses_total

    return replace(
        acc,
        operational_expenses=operational_expenses,
        total_expenses=operational_expenses,
        balance=balance,
        balance_with_reinvestment=balance - acc.loan_disbursements,
        ui_expenses_total=ui_expenses_total,
        ui_gains_total=ui_gains_total,
        operational_profit=operational_profit,
        profit_percentage=safe_divide(operational_profit, ui_gains_total) * HUNDRED,
        gain_per_payment=safe_divide(operational_profit, acc.payments_count),
        operational_weeks=weeks,
        weekly_income=safe_divide(acc.income, weeks),
        weekly_expenses=safe_divide(ui_expenses_total, weeks),
        weekly_profit=safe_divide(operational_profit, weeks),
        weekly_payments=safe_divide(Decimal(acc.payments_count), weeks),
    )


class MonthlyComputationService:
    """Service computing monthly financial summaries from the ledger."""

    def __init__(self, ledger: LedgerReader):
        """Initialize monthly computation service.

        Args:
            ledger: Read-only ledger accessor
        """
        self.ledger = ledger

    def compute_month(self, route_ids: Iterable[int], year: int, month: int) -> MonthlyData:
        """Summarize all ledger activity of a route set in one month.

        Args:
            route_ids: Routes to include
            year: Four-digit year
            month: Month number, 1-indexed

        Returns:
            MonthlyData for the month; all zeros when there is no activity
        """
        route_ids = sorted(set(route_ids))
        start, end = month_bounds(year, month)

        prepaid_account_ids = frozenset(self.ledger.list_account_ids(AccountType.PREPAID_GAS))
        transactions = self.ledger.list_transactions(route_ids, start, end)
        acc = reduce(
            lambda current, txn: apply_transaction(current, txn, prepaid_account_ids),
            transactions,
            MonthlyData(),
        )

        acc = replace(acc, bad_debt_amount=self.compute_bad_debt(route_ids, year, month))
        acc = self.apply_portfolio_counts(acc, route_ids, year, month)

        result = finalize(acc, operational_weeks(year, month))
        logger.debug(
            "Computed %04d-%02d for routes %s from %d transactions",
            year,
            month,
            route_ids,
            len(transactions),
        )
        return result

    def compute_bad_debt(self, route_ids: Sequence[int], year: int, month: int) -> Decimal:
        """Sum the bad-debt exposure of loans marked as bad debt in a month."""
        start, end = month_bounds(year, month)
        total = ZERO
        for loan in self.ledger.list_bad_debt_loans(route_ids, start, end):
            payments, profit_transactions = self.ledger.list_payments_and_profit_transactions(
                loan.id
            )
            breakdown = bad_debt_exposure(loan, payments, profit_transactions)
            logger.debug(
                "Bad debt loan %s (route %s, marked %s): paid=%s profit_collected=%s "
                "pending_profit=%s pending_debt=%s exposure=%s",
                loan.id,
                loan.route_id,
                loan.bad_debt_date,
                breakdown.total_paid,
                breakdown.profit_collected,
                breakdown.pending_expected_profit,
                breakdown.pending_total_debt,
                breakdown.exposure,
            )
            total += breakdown.exposure
        return total

    def apply_portfolio_counts(
        self, acc: MonthlyData, route_ids: Sequence[int], year: int, month: int
    ) -> MonthlyData:
        """Count loans open at month end and renewals signed in the month."""
        start, end = month_bounds(year, month)
        active = 0
        renewed = 0
        for loan in self.ledger.list_portfolio_loans(route_ids, start, end):
            if loan.finished_date is None or loan.finished_date > end:
                active += 1
            if loan.previous_loan_id is not None and start <= loan.sign_date <= end:
                renewed += 1
        return replace(acc, active_loans=active, renewed_loans=renewed)
