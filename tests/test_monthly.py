"""Tests for the monthly computation engine."""

from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal
from functools import reduce

import pytest

from routefin.domain.aggregation import sum_monthly_data
from routefin.domain.entities import (
    ExpenseSource,
    IncomeSource,
    Loan,
    LoanPayment,
    MonthlyData,
    PaymentMethod,
    Transaction,
    TransactionType,
)
from routefin.domain.monthly import (
    MonthlyComputationService,
    apply_transaction,
    bad_debt_exposure,
    finalize,
    safe_divide,
)

PREPAID_IDS = frozenset({7})


def _nonzero_fields(data):
    return [
        f.name
        for f in fields(MonthlyData)
        if f.name != "operational_weeks" and getattr(data, f.name) != 0
    ]


def _expense(amount, source, account_id=None, txn_id=1):
    return Transaction(
        id=txn_id,
        route_id=1,
        date=date(2024, 3, 5),
        amount=Decimal(amount),
        transaction_type=TransactionType.EXPENSE,
        expense_source=source,
        income_source=None,
        source_account_id=account_id,
        profit_amount=None,
        loan_payment_id=None,
        description=None,
        created_at=datetime(2024, 3, 5),
    )


def _income(amount, source, profit=None, txn_id=1):
    return Transaction(
        id=txn_id,
        route_id=1,
        date=date(2024, 3, 12),
        amount=Decimal(amount),
        transaction_type=TransactionType.INCOME,
        expense_source=None,
        income_source=source,
        source_account_id=None,
        profit_amount=Decimal(profit) if profit is not None else None,
        loan_payment_id=None,
        description=None,
        created_at=datetime(2024, 3, 12),
    )


def _fold(transactions, weeks=4):
    acc = reduce(lambda a, t: apply_transaction(a, t, PREPAID_IDS), transactions, MonthlyData())
    return finalize(acc, weeks)


def _loan(requested="1000", rate="0.4"):
    return Loan(
        id=1,
        route_id=1,
        requested_amount=Decimal(requested),
        rate=Decimal(rate),
        sign_date=date(2024, 1, 10),
        finished_date=None,
        bad_debt_date=date(2024, 3, 20),
        previous_loan_id=None,
        created_at=datetime(2024, 1, 10),
    )


def _payment(amount, payment_id=1):
    return LoanPayment(
        id=payment_id,
        loan_id=1,
        amount=Decimal(amount),
        received_at=date(2024, 2, 1),
        payment_method=PaymentMethod.CASH,
    )


class TestClassification:
    """Tests for expense and income classification."""

    def test_prepaid_gasoline_and_loan_payment_month(self):
        """Test a month with prepaid gasoline and one loan payment."""
        data = _fold(
            [
                _expense("1000", ExpenseSource.GASOLINE, account_id=7),
                _income("1500", IncomeSource.CASH_LOAN_PAYMENT, profit="500", txn_id=2),
            ]
        )

        assert data.total_gasoline == Decimal("1000")
        assert data.prepaid_gasoline == Decimal("1000")
        assert data.cash_gasoline == 0
        assert data.general_expenses == Decimal("1000")
        assert data.operational_expenses == Decimal("1000")
        assert data.income == Decimal("500")
        assert data.capital_returned == Decimal("1000")
        assert data.profit_returned == Decimal("500")
        assert data.payments_count == 1
        assert data.balance == Decimal("-500")
        assert data.total_incoming_cash == Decimal("1500")

    def test_gasoline_from_other_account_is_cash(self):
        """Test that gasoline not paid from a prepaid card is cash gasoline."""
        data = _fold(
            [
                _expense("300", ExpenseSource.GASOLINE, account_id=9),
                _expense("200", ExpenseSource.GASOLINE, account_id=None, txn_id=2),
                _expense("100", ExpenseSource.GASOLINE, account_id=7, txn_id=3),
            ]
        )

        assert data.cash_gasoline == Decimal("500")
        assert data.prepaid_gasoline == Decimal("100")
        assert data.total_gasoline == data.prepaid_gasoline + data.cash_gasoline

    def test_payroll_buckets(self):
        """Test that salaries and per diem are split and summed into payroll."""
        data = _fold(
            [
                _expense("4000", ExpenseSource.NOMINA_SALARY),
                _expense("1500", ExpenseSource.EXTERNAL_SALARY, txn_id=2),
                _expense("250", ExpenseSource.VIATIC, txn_id=3),
            ]
        )

        assert data.internal_salary == Decimal("4000")
        assert data.external_salary == Decimal("1500")
        assert data.per_diem == Decimal("250")
        assert data.payroll == Decimal("5750")
        assert data.operational_expenses == Decimal("5750")

    def test_commissions(self):
        """Test that every commission tag feeds commissions."""
        data = _fold(
            [
                _expense("10", ExpenseSource.LOAN_PAYMENT_COMISSION),
                _expense("20", ExpenseSource.LOAN_GRANTED_COMISSION, txn_id=2),
                _expense("30", ExpenseSource.LEAD_COMISSION, txn_id=3),
            ]
        )

        assert data.commissions == Decimal("60")
        assert data.operational_expenses == Decimal("60")

    def test_travel_expenses_outside_operational_expenses(self):
        """Test that travel expenses count in UI expenses but not operational expenses."""
        data = _fold([_expense("800", ExpenseSource.TRAVEL_EXPENSES)])

        assert data.travel_expenses == Decimal("800")
        assert data.operational_expenses == 0
        assert data.ui_expenses_total == Decimal("800")
        assert data.operational_profit == Decimal("-800")

    def test_loan_disbursement_is_not_an_operating_expense(self):
        """Test that a loan disbursement only affects cash and reinvestment balance."""
        data = _fold([_expense("5000", ExpenseSource.LOAN_GRANTED)])

        assert data.loan_disbursements == Decimal("5000")
        assert data.operational_expenses == 0
        assert data.total_investment == 0
        assert data.operational_cash_used == Decimal("5000")
        assert data.net_cash == Decimal("-5000")
        assert data.balance == 0
        assert data.balance_with_reinvestment == Decimal("-5000")

    @pytest.mark.parametrize(
        "source",
        [ExpenseSource.GENERAL_EXPENSE, ExpenseSource.OFFICE_RENT, ExpenseSource.OTHER],
    )
    def test_other_tags_are_general_expenses(self, source):
        """Test that unrecognized expense tags fall into general expenses."""
        data = _fold([_expense("120", source)])

        assert data.general_expenses == Decimal("120")
        assert data.total_investment == Decimal("120")

    def test_non_payment_income_is_income_and_profit(self):
        """Test that incomes other than loan payments count fully as income."""
        data = _fold(
            [
                _income("10000", IncomeSource.MONEY_INVESTMENT),
                _income("50", IncomeSource.OTHER_INCOME, txn_id=2),
            ]
        )

        assert data.income == Decimal("10050")
        assert data.profit_returned == Decimal("10050")
        assert data.capital_returned == 0
        assert data.payments_count == 0

    def test_bank_payment_without_profit_is_all_capital(self):
        """Test that a loan payment without profit portion is capital only."""
        data = _fold([_income("700", IncomeSource.BANK_LOAN_PAYMENT)])

        assert data.capital_returned == Decimal("700")
        assert data.income == 0
        assert data.payments_count == 1


class TestInvariants:
    """Tests for relationships between MonthlyData fields."""

    def _mixed_month(self):
        return _fold(
            [
                _expense("1000", ExpenseSource.GASOLINE, account_id=7),
                _expense("400", ExpenseSource.NOMINA_SALARY, txn_id=2),
                _expense("90", ExpenseSource.LEAD_COMISSION, txn_id=3),
                _expense("60", ExpenseSource.TRAVEL_EXPENSES, txn_id=4),
                _expense("3000", ExpenseSource.LOAN_GRANTED, txn_id=5),
                _income("1400", IncomeSource.CASH_LOAN_PAYMENT, profit="400", txn_id=6),
                _income("700", IncomeSource.BANK_LOAN_PAYMENT, profit="200", txn_id=7),
            ],
            weeks=4,
        )

    def test_cash_identities(self):
        """Test cash flow identities."""
        data = self._mixed_month()

        assert data.total_incoming_cash == data.capital_returned + data.profit_returned
        assert data.operational_cash_used == data.total_investment + data.loan_disbursements
        assert data.net_cash == data.total_incoming_cash - data.operational_cash_used

    def test_expense_identities(self):
        """Test expense aggregation identities."""
        data = self._mixed_month()

        assert data.payroll == data.internal_salary + data.external_salary + data.per_diem
        assert data.operational_expenses == (
            data.general_expenses + data.payroll + data.commissions
        )
        assert data.total_expenses == data.operational_expenses
        assert data.ui_expenses_total == (
            data.operational_expenses + data.bad_debt_amount + data.travel_expenses
        )
        assert data.ui_gains_total == data.income

    def test_ratios_and_weekly_figures(self):
        """Test profit percentage, gain per payment and weekly normalization."""
        data = self._mixed_month()

        # income 600, ui expenses 1000 + 400 + 90 + 60 = 1550
        assert data.operational_profit == Decimal("-950")
        assert data.profit_percentage == Decimal("-950") / Decimal("600") * 100
        assert data.gain_per_payment == Decimal("-475")
        assert data.weekly_income == Decimal("150")
        assert data.weekly_expenses == Decimal("1550") / 4
        assert data.weekly_profit == Decimal("-950") / 4
        assert data.weekly_payments == Decimal("0.5")


def test_empty_month_is_all_zero():
    """Test that a month without activity yields zeros, including ratios."""
    data = finalize(MonthlyData(), 4)

    assert _nonzero_fields(data) == []
    assert data.operational_weeks == 4


def test_zero_weeks_gives_zero_weekly_figures():
    """Test that weekly fields are zero when weeks is zero."""
    data = _fold([_income("100", IncomeSource.OTHER_INCOME)], weeks=0)

    assert data.weekly_income == 0
    assert data.weekly_payments == 0


def test_safe_divide():
    """Test division guard."""
    assert safe_divide(Decimal("10"), 0) == 0
    assert safe_divide(Decimal("10"), 4) == Decimal("2.5")


class TestBadDebtExposure:
    """Tests for bad-debt exposure of a single loan."""

    def test_partially_paid_loan(self):
        """Test a loan with 200 paid and no profit collected."""
        breakdown = bad_debt_exposure(_loan(), [_payment("200")], [])

        assert breakdown.expected_profit == Decimal("400")
        assert breakdown.pending_expected_profit == Decimal("400")
        assert breakdown.total_owed == Decimal("1400")
        assert breakdown.pending_total_debt == Decimal("1200")
        assert breakdown.exposure == Decimal("800")

    def test_overpaid_loan_clamps_at_zero(self):
        """Test that overpayment and excess profit do not produce negatives."""
        profit_entry = _income("1600", IncomeSource.CASH_LOAN_PAYMENT, profit="500")
        breakdown = bad_debt_exposure(_loan(), [_payment("1600")], [profit_entry])

        assert breakdown.pending_expected_profit == 0
        assert breakdown.pending_total_debt == 0
        assert breakdown.exposure == 0

    def test_profit_collected_reduces_pending_profit(self):
        """Test that collected profit raises capital exposure."""
        profit_entry = _income("700", IncomeSource.CASH_LOAN_PAYMENT, profit="200")
        breakdown = bad_debt_exposure(_loan(), [_payment("700")], [profit_entry])

        # pending debt 700, pending profit 200
        assert breakdown.exposure == Decimal("500")


class TestMonthlyComputationService:
    """Tests for computing months from a database."""

    def test_compute_month_from_ledger(self, temp_db, march_activity):
        """Test the prepaid gasoline and loan payment month end to end."""
        service = MonthlyComputationService(temp_db)
        data = service.compute_month([march_activity.id], 2024, 3)

        assert data.prepaid_gasoline == Decimal("1000")
        assert data.general_expenses == Decimal("1000")
        assert data.income == Decimal("500")
        assert data.capital_returned == Decimal("1000")
        assert data.payments_count == 1
        assert data.balance == Decimal("-500")
        assert data.operational_weeks == 4

    def test_compute_month_only_reads_that_month(self, temp_db, march_activity):
        """Test that activity in other months is excluded."""
        service = MonthlyComputationService(temp_db)

        assert service.compute_month([march_activity.id], 2024, 2).income == 0
        assert service.compute_month([march_activity.id], 2024, 4).income == 0

    def test_compute_month_is_idempotent(self, temp_db, march_activity):
        """Test that computing twice from the same ledger gives equal results."""
        service = MonthlyComputationService(temp_db)

        first = service.compute_month([march_activity.id], 2024, 3)
        second = service.compute_month([march_activity.id], 2024, 3)
        assert first == second

    def test_compute_month_route_without_activity(self, temp_db, sample_route):
        """Test that a route without ledger entries yields zeros."""
        service = MonthlyComputationService(temp_db)
        data = service.compute_month([sample_route.id], 2024, 5)

        assert _nonzero_fields(data) == []
        assert data.operational_weeks == 5

    def test_compute_month_is_additive_across_routes(
        self, temp_db, march_activity, second_route, transaction_service, loan_service
    ):
        """Test that computing two routes equals summing their single-route months."""
        transaction_service.record_expense(
            route_id=second_route.id,
            date=date(2024, 3, 8),
            amount=Decimal("600"),
            expense_source=ExpenseSource.NOMINA_SALARY,
        )
        transaction_service.record_expense(
            route_id=second_route.id,
            date=date(2024, 3, 12),
            amount=Decimal("60"),
            expense_source=ExpenseSource.TRAVEL_EXPENSES,
        )
        loan_id = loan_service.grant_loan(
            route_id=second_route.id,
            requested_amount=Decimal("1000"),
            rate=Decimal("0.4"),
            sign_date=date(2024, 1, 10),
        )
        loan_service.record_payment(loan_id, Decimal("200"), date(2024, 2, 1))
        loan_service.mark_bad_debt(loan_id, date(2024, 3, 20))
        service = MonthlyComputationService(temp_db)

        combined = service.compute_month([march_activity.id, second_route.id], 2024, 3)
        first = service.compute_month([march_activity.id], 2024, 3)
        second = service.compute_month([second_route.id], 2024, 3)
        expected = sum_monthly_data([first, second])

        mismatched = [
            f.name
            for f in fields(MonthlyData)
            if getattr(combined, f.name) != getattr(expected, f.name)
        ]
        assert mismatched == []
        assert combined.payroll == Decimal("600")
        assert combined.travel_expenses == Decimal("60")
        assert combined.bad_debt_amount == Decimal("857.14")
        assert second.active_loans == 1

    def test_bad_debt_from_ledger(self, temp_db, sample_route, loan_service):
        """Test the bad-debt pass over a loan marked in the month."""
        loan_id = loan_service.grant_loan(
            route_id=sample_route.id,
            requested_amount=Decimal("1000"),
            rate=Decimal("0.4"),
            sign_date=date(2024, 1, 10),
        )
        loan_service.record_payment(loan_id, Decimal("200"), date(2024, 2, 1))
        loan_service.mark_bad_debt(loan_id, date(2024, 3, 20))

        service = MonthlyComputationService(temp_db)
        march = service.compute_month([sample_route.id], 2024, 3)
        february = service.compute_month([sample_route.id], 2024, 2)

        # 200 paid carries 57.14 profit: pending profit 342.86, pending debt 1200
        assert march.bad_debt_amount == Decimal("857.14")
        assert march.ui_expenses_total == Decimal("857.14")
        assert february.bad_debt_amount == 0

    def test_portfolio_counts(self, temp_db, sample_route, loan_service):
        """Test active and renewed loan counts."""
        first = loan_service.grant_loan(
            route_id=sample_route.id,
            requested_amount=Decimal("1000"),
            rate=Decimal("0.4"),
            sign_date=date(2024, 1, 10),
        )
        loan_service.grant_loan(
            route_id=sample_route.id,
            requested_amount=Decimal("2000"),
            rate=Decimal("0.4"),
            sign_date=date(2024, 3, 4),
            previous_loan_id=first,
        )
        service = MonthlyComputationService(temp_db)

        january = service.compute_month([sample_route.id], 2024, 1)
        march = service.compute_month([sample_route.id], 2024, 3)

        assert january.active_loans == 1
        assert january.renewed_loans == 0
        # The renewed loan finished on March 4, so only the new one is open
        assert march.active_loans == 1
        assert march.renewed_loans == 1
