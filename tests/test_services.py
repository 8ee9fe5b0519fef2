"""Tests for route, account, transaction and loan services."""

from datetime import date
from decimal import Decimal

import pytest

from routefin.domain.entities import (
    AccountType,
    ExpenseSource,
    IncomeSource,
    PaymentMethod,
    TransactionType,
)
from routefin.domain.errors import ConflictError, NotFoundError, ValidationError
from routefin.domain.loan import profit_portion


class TestRouteService:
    """Tests for RouteService."""

    def test_create_and_get(self, route_service):
        route_id = route_service.create_route("  Ruta Centro ")
        route = route_service.get_route(route_id)

        assert route.name == "Ruta Centro"
        assert route_service.get_route_by_name("Ruta Centro").id == route_id

    def test_duplicate_name(self, route_service, sample_route):
        with pytest.raises(ConflictError):
            route_service.create_route("Ruta Norte")

    def test_empty_name(self, route_service):
        with pytest.raises(ValidationError):
            route_service.create_route("   ")

    def test_require_routes_reports_missing(self, route_service, sample_route):
        with pytest.raises(NotFoundError) as exc_info:
            route_service.require_routes([sample_route.id, 41, 42])
        assert "41" in str(exc_info.value)
        assert "42" in str(exc_info.value)

    def test_require_routes_keeps_request_order(self, route_service, sample_route, second_route):
        routes = route_service.require_routes([second_route.id, sample_route.id])

        assert [r.name for r in routes] == ["Ruta Sur", "Ruta Norte"]

    def test_list_routes_ordered_by_name(self, route_service):
        route_service.create_route("Ruta Sur")
        route_service.create_route("Ruta Este")

        assert [r.name for r in route_service.list_routes()] == ["Ruta Este", "Ruta Sur"]


class TestAccountService:
    """Tests for AccountService."""

    def test_create_prepaid_account(self, account_service, prepaid_account, sample_route):
        assert prepaid_account.account_type == AccountType.PREPAID_GAS
        assert prepaid_account.route_id == sample_route.id

    def test_duplicate_name(self, account_service, prepaid_account):
        with pytest.raises(ConflictError):
            account_service.create_account("Tarjeta Gas Norte", AccountType.BANK)

    def test_unknown_route(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.create_account("Caja", AccountType.OFFICE_CASH_FUND, route_id=99)

    def test_account_without_route(self, account_service):
        account_id = account_service.create_account("Banco", AccountType.BANK)
        assert account_service.require_account(account_id).route_id is None


class TestTransactionService:
    """Tests for TransactionService."""

    def test_record_expense(self, transaction_service, sample_route, prepaid_account):
        txn_id = transaction_service.record_expense(
            route_id=sample_route.id,
            date=date(2024, 3, 5),
            amount=Decimal("450.50"),
            expense_source=ExpenseSource.GASOLINE,
            source_account_id=prepaid_account.id,
            description="Carga semanal",
        )
        txn = transaction_service.get_transaction(txn_id)

        assert txn.transaction_type == TransactionType.EXPENSE
        assert txn.expense_source == ExpenseSource.GASOLINE
        assert txn.income_source is None
        assert txn.amount == Decimal("450.50")
        assert txn.source_account_id == prepaid_account.id

    def test_record_income_with_profit(self, transaction_service, sample_route):
        txn_id = transaction_service.record_income(
            route_id=sample_route.id,
            date=date(2024, 3, 5),
            amount=Decimal("1500"),
            income_source=IncomeSource.CASH_LOAN_PAYMENT,
            profit_amount=Decimal("500"),
        )
        txn = transaction_service.get_transaction(txn_id)

        assert txn.transaction_type == TransactionType.INCOME
        assert txn.profit_amount == Decimal("500")

    def test_negative_amount(self, transaction_service, sample_route):
        with pytest.raises(ValidationError):
            transaction_service.record_expense(
                route_id=sample_route.id,
                date=date(2024, 3, 5),
                amount=Decimal("-1"),
                expense_source=ExpenseSource.OTHER,
            )

    def test_profit_above_amount(self, transaction_service, sample_route):
        with pytest.raises(ValidationError):
            transaction_service.record_income(
                route_id=sample_route.id,
                date=date(2024, 3, 5),
                amount=Decimal("100"),
                income_source=IncomeSource.CASH_LOAN_PAYMENT,
                profit_amount=Decimal("101"),
            )

    def test_unknown_route_and_account(self, transaction_service, sample_route):
        with pytest.raises(NotFoundError):
            transaction_service.record_expense(
                route_id=999,
                date=date(2024, 3, 5),
                amount=Decimal("1"),
                expense_source=ExpenseSource.OTHER,
            )
        with pytest.raises(NotFoundError):
            transaction_service.record_expense(
                route_id=sample_route.id,
                date=date(2024, 3, 5),
                amount=Decimal("1"),
                expense_source=ExpenseSource.OTHER,
                source_account_id=999,
            )


class TestLoanService:
    """Tests for LoanService."""

    def _grant(self, loan_service, route_id, **kwargs):
        params = dict(
            route_id=route_id,
            requested_amount=Decimal("1000"),
            rate=Decimal("0.4"),
            sign_date=date(2024, 1, 10),
        )
        params.update(kwargs)
        return loan_service.grant_loan(**params)

    def test_grant_records_disbursement(self, temp_db, loan_service, sample_route):
        loan_id = self._grant(loan_service, sample_route.id)
        loan = loan_service.get_loan(loan_id)
        transactions = temp_db.list_transactions(
            [sample_route.id], date(2024, 1, 1), date(2024, 1, 31)
        )

        assert loan.total_owed == Decimal("1400")
        assert len(transactions) == 1
        assert transactions[0].expense_source == ExpenseSource.LOAN_GRANTED
        assert transactions[0].amount == Decimal("1000")

    def test_grant_validates_amount_and_rate(self, loan_service, sample_route):
        with pytest.raises(ValidationError):
            self._grant(loan_service, sample_route.id, requested_amount=Decimal("0"))
        with pytest.raises(ValidationError):
            self._grant(loan_service, sample_route.id, rate=Decimal("-0.1"))

    def test_grant_unknown_route_writes_nothing(self, temp_db, loan_service, sample_route):
        with pytest.raises(NotFoundError):
            self._grant(loan_service, 999)
        assert temp_db.list_portfolio_loans([999], date(2024, 1, 1), date(2024, 12, 31)) == []

    def test_renewal_finishes_previous_loan(self, loan_service, sample_route):
        first = self._grant(loan_service, sample_route.id)
        second = self._grant(
            loan_service, sample_route.id, sign_date=date(2024, 2, 14), previous_loan_id=first
        )

        assert loan_service.get_loan(first).finished_date == date(2024, 2, 14)
        assert loan_service.get_loan(second).previous_loan_id == first
        assert loan_service.get_loan(second).finished_date is None

    def test_payment_splits_profit(self, temp_db, loan_service, sample_route):
        loan_id = self._grant(loan_service, sample_route.id)
        loan_service.record_payment(loan_id, Decimal("140"), date(2024, 1, 17))

        payments, linked = temp_db.list_payments_and_profit_transactions(loan_id)

        assert len(payments) == 1
        assert linked[0].income_source == IncomeSource.CASH_LOAN_PAYMENT
        assert linked[0].profit_amount == Decimal("40")

    def test_bank_payment_source(self, temp_db, loan_service, sample_route):
        loan_id = self._grant(loan_service, sample_route.id)
        loan_service.record_payment(
            loan_id, Decimal("140"), date(2024, 1, 17), method=PaymentMethod.BANK
        )

        _, linked = temp_db.list_payments_and_profit_transactions(loan_id)
        assert linked[0].income_source == IncomeSource.BANK_LOAN_PAYMENT

    def test_full_payment_finishes_loan(self, temp_db, loan_service, sample_route):
        loan_id = self._grant(loan_service, sample_route.id)
        loan_service.record_payment(loan_id, Decimal("700"), date(2024, 1, 17))
        assert loan_service.get_loan(loan_id).finished_date is None

        loan_service.record_payment(loan_id, Decimal("700"), date(2024, 1, 24))

        _, linked = temp_db.list_payments_and_profit_transactions(loan_id)
        assert loan_service.get_loan(loan_id).finished_date == date(2024, 1, 24)
        assert sum(t.profit_amount for t in linked) == Decimal("400")

    def test_payment_unknown_loan(self, loan_service):
        with pytest.raises(NotFoundError):
            loan_service.record_payment(999, Decimal("10"), date(2024, 1, 17))

    def test_mark_and_clear_bad_debt(self, loan_service, sample_route):
        loan_id = self._grant(loan_service, sample_route.id)

        loan_service.mark_bad_debt(loan_id, date(2024, 4, 2))
        assert loan_service.get_loan(loan_id).bad_debt_date == date(2024, 4, 2)

        loan_service.mark_bad_debt(loan_id, None)
        assert loan_service.get_loan(loan_id).bad_debt_date is None


def test_profit_portion_is_capped():
    """Test profit share rounding and capping."""
    assert profit_portion(Decimal("200"), Decimal("0.4"), Decimal("400")) == Decimal("57.14")
    assert profit_portion(Decimal("200"), Decimal("0.4"), Decimal("10")) == Decimal("10")
    assert profit_portion(Decimal("200"), Decimal("0"), Decimal("0")) == 0
