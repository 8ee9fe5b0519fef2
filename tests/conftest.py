"""Shared pytest fixtures for routefin tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from routefin.database.factories import create_sqlite_database
from routefin.domain.account import AccountService
from routefin.domain.entities import AccountType
from routefin.domain.loan import LoanService
from routefin.domain.report import FinancialReportService
from routefin.domain.route import RouteService
from routefin.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def route_service(temp_db):
    """Create a RouteService with a temporary database."""
    return RouteService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def loan_service(temp_db):
    """Create a LoanService with a temporary database."""
    return LoanService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a FinancialReportService with a temporary database."""
    return FinancialReportService(temp_db)


@pytest.fixture
def sample_route(route_service):
    """Create a sample route for testing."""
    route_id = route_service.create_route("Ruta Norte")
    return route_service.get_route(route_id)


@pytest.fixture
def second_route(route_service):
    """Create a second route for multi-route tests."""
    route_id = route_service.create_route("Ruta Sur")
    return route_service.get_route(route_id)


@pytest.fixture
def prepaid_account(account_service, sample_route):
    """Create a prepaid gasoline card on the sample route."""
    account_id = account_service.create_account(
        name="Tarjeta Gas Norte", account_type=AccountType.PREPAID_GAS, route_id=sample_route.id
    )
    return account_service.get_account(account_id)


@pytest.fixture
def cash_account(account_service, sample_route):
    """Create an employee cash fund on the sample route."""
    account_id = account_service.create_account(
        name="Caja Cobrador Norte",
        account_type=AccountType.EMPLOYEE_CASH_FUND,
        route_id=sample_route.id,
    )
    return account_service.get_account(account_id)


@pytest.fixture
def march_activity(transaction_service, sample_route, prepaid_account):
    """Record the basic March 2024 month: prepaid gasoline and one loan payment."""
    from routefin.domain.entities import ExpenseSource, IncomeSource

    transaction_service.record_expense(
        route_id=sample_route.id,
        date=date(2024, 3, 5),
        amount=Decimal("1000"),
        expense_source=ExpenseSource.GASOLINE,
        source_account_id=prepaid_account.id,
    )
    transaction_service.record_income(
        route_id=sample_route.id,
        date=date(2024, 3, 12),
        amount=Decimal("1500"),
        income_source=IncomeSource.CASH_LOAN_PAYMENT,
        profit_amount=Decimal("500"),
    )
    return sample_route


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
