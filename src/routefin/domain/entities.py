"""Domain model entities for routefin.

These are pure data classes representing business concepts, independent of
database schema. Ledger entries are immutable once created; reports are
value objects recomputed from the ledger.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


ZERO = Decimal("0")


class TransactionType(str, Enum):
    """Direction of a ledger entry."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class ExpenseSource(str, Enum):
    """Source tag of an expense entry."""

    GASOLINE = "GASOLINE"
    NOMINA_SALARY = "NOMINA_SALARY"
    EXTERNAL_SALARY = "EXTERNAL_SALARY"
    VIATIC = "VIATIC"
    TRAVEL_EXPENSES = "TRAVEL_EXPENSES"
    LOAN_PAYMENT_COMISSION = "LOAN_PAYMENT_COMISSION"
    LOAN_GRANTED_COMISSION = "LOAN_GRANTED_COMISSION"
    LEAD_COMISSION = "LEAD_COMISSION"
    LOAN_GRANTED = "LOAN_GRANTED"
    GENERAL_EXPENSE = "GENERAL_EXPENSE"
    OFFICE_RENT = "OFFICE_RENT"
    VEHICLE_MAINTENANCE = "VEHICLE_MAINTENANCE"
    OTHER = "OTHER"


class IncomeSource(str, Enum):
    """Source tag of an income entry."""

    CASH_LOAN_PAYMENT = "CASH_LOAN_PAYMENT"
    BANK_LOAN_PAYMENT = "BANK_LOAN_PAYMENT"
    MONEY_INVESTMENT = "MONEY_INVESTMENT"
    OTHER_INCOME = "OTHER_INCOME"


class AccountType(str, Enum):
    """Kind of fund an account represents."""

    PREPAID_GAS = "PREPAID_GAS"
    OFFICE_CASH_FUND = "OFFICE_CASH_FUND"
    EMPLOYEE_CASH_FUND = "EMPLOYEE_CASH_FUND"
    BANK = "BANK"


class PaymentMethod(str, Enum):
    """How a loan payment was received."""

    CASH = "CASH"
    BANK = "BANK"


PAYROLL_SOURCES = frozenset(
    {ExpenseSource.NOMINA_SALARY, ExpenseSource.EXTERNAL_SALARY, ExpenseSource.VIATIC}
)
COMMISSION_SOURCES = frozenset(
    {
        ExpenseSource.LOAN_PAYMENT_COMISSION,
        ExpenseSource.LOAN_GRANTED_COMISSION,
        ExpenseSource.LEAD_COMISSION,
    }
)
LOAN_PAYMENT_SOURCES = frozenset(
    {IncomeSource.CASH_LOAN_PAYMENT, IncomeSource.BANK_LOAN_PAYMENT}
)


@dataclass(frozen=True)
class Route:
    """Route (territory under one field leader) domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Fund account domain entity."""

    id: int
    name: str
    account_type: AccountType
    route_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Ledger entry domain entity."""

    id: int
    route_id: int
    date: date
    amount: Decimal
    transaction_type: TransactionType
    expense_source: Optional[ExpenseSource]
    income_source: Optional[IncomeSource]
    source_account_id: Optional[int]
    profit_amount: Optional[Decimal]
    loan_payment_id: Optional[int]
    description: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Loan:
    """Loan domain entity."""

    id: int
    route_id: int
    requested_amount: Decimal
    rate: Decimal
    sign_date: date
    finished_date: Optional[date]
    bad_debt_date: Optional[date]
    previous_loan_id: Optional[int]
    created_at: datetime

    @property
    def expected_profit(self) -> Decimal:
        """Total profit the loan yields when fully paid."""
        return self.requested_amount * self.rate

    @property
    def total_owed(self) -> Decimal:
        """Principal plus expected profit."""
        return self.requested_amount + self.expected_profit


@dataclass(frozen=True)
class LoanPayment:
    """Loan payment domain entity."""

    id: int
    loan_id: int
    amount: Decimal
    received_at: date
    payment_method: PaymentMethod


@dataclass(frozen=True)
class BadDebtBreakdown:
    """Intermediate figures of the bad-debt exposure of one loan."""

    total_paid: Decimal
    profit_collected: Decimal
    expected_profit: Decimal
    pending_expected_profit: Decimal
    total_owed: Decimal
    pending_total_debt: Decimal
    exposure: Decimal


@dataclass(frozen=True)
class MonthlyData:
    """Financial summary of one month for a set of routes.

    Every field is additive across routes except ``operational_weeks`` (a
    property of the calendar month) and the two ratios
    ``profit_percentage`` and ``gain_per_payment``, which are recomputed from
    summed totals.
    """

    # Raw totals
    total_expenses: Decimal = ZERO
    income: Decimal = ZERO
    net_cash: Decimal = ZERO
    total_incoming_cash: Decimal = ZERO
    operational_cash_used: Decimal = ZERO
    total_investment: Decimal = ZERO

    # Expense buckets
    general_expenses: Decimal = ZERO
    payroll: Decimal = ZERO
    internal_salary: Decimal = ZERO
    external_salary: Decimal = ZERO
    per_diem: Decimal = ZERO
    commissions: Decimal = ZERO
    travel_expenses: Decimal = ZERO
    prepaid_gasoline: Decimal = ZERO
    cash_gasoline: Decimal = ZERO
    total_gasoline: Decimal = ZERO
    operational_expenses: Decimal = ZERO

    # Loan economics
    capital_returned: Decimal = ZERO
    profit_returned: Decimal = ZERO
    loan_disbursements: Decimal = ZERO
    bad_debt_amount: Decimal = ZERO
    payments_count: int = 0
    active_loans: int = 0
    renewed_loans: int = 0

    # Derived
    balance: Decimal = ZERO
    balance_with_reinvestment: Decimal = ZERO
    ui_expenses_total: Decimal = ZERO
    ui_gains_total: Decimal = ZERO
    operational_profit: Decimal = ZERO
    profit_percentage: Decimal = ZERO
    gain_per_payment: Decimal = ZERO
    operational_weeks: int = 0
    weekly_income: Decimal = ZERO
    weekly_expenses: Decimal = ZERO
    weekly_profit: Decimal = ZERO
    weekly_payments: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe dictionary (Decimals rendered as strings)."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = str(value) if isinstance(value, Decimal) else value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonthlyData":
        """Build from a dictionary produced by ``to_dict``.

        Unknown keys are ignored and missing keys default to zero, so rows
        written by older versions still load.
        """
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            raw = data[f.name]
            if f.type is int:
                values[f.name] = int(raw)
            else:
                values[f.name] = Decimal(str(raw))
        return cls(**values)


NON_ADDITIVE_FIELDS = frozenset(
    {"operational_weeks", "profit_percentage", "gain_per_payment"}
)
ADDITIVE_FIELDS = tuple(
    f.name for f in fields(MonthlyData) if f.name not in NON_ADDITIVE_FIELDS
)


@dataclass(frozen=True)
class RouteInfo:
    """Route metadata included in a report."""

    id: int
    name: str


@dataclass(frozen=True)
class AnnualSummary:
    """Year-level figures derived from the twelve monthly summaries."""

    totals: MonthlyData
    total_operational_weeks: int
    weekly_average_income: Decimal
    weekly_average_expenses: Decimal
    weekly_average_profit: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "totals": self.totals.to_dict(),
            "total_operational_weeks": self.total_operational_weeks,
            "weekly_average_income": str(self.weekly_average_income),
            "weekly_average_expenses": str(self.weekly_average_expenses),
            "weekly_average_profit": str(self.weekly_average_profit),
        }


@dataclass(frozen=True)
class FinancialReport:
    """Twelve months of financial data for a set of routes."""

    routes: tuple[RouteInfo, ...]
    year: int
    months: tuple[str, ...]
    data: dict[str, MonthlyData] = field(default_factory=dict)
    annual: Optional[AnnualSummary] = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe dictionary of the report."""
        return {
            "routes": [{"id": r.id, "name": r.name} for r in self.routes],
            "year": self.year,
            "months": list(self.months),
            "data": {key: value.to_dict() for key, value in sorted(self.data.items())},
            "annual": self.annual.to_dict() if self.annual is not None else None,
        }


def route_ids_key(route_ids) -> str:
    """Return the cache addressing key of a route set.

    Only single-route keys are ever persisted; combinations are summed from
    their single-route entries instead of being stored.
    """
    return ",".join(sorted(str(route_id) for route_id in route_ids))
