"""SQLAlchemy models for routefin database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Route(Base):
    """Route model."""

    __tablename__ = "routes"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="route")
    loans = relationship("Loan", back_populates="route")


class Account(Base):
    """Fund account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    account_type = Column(String, nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Loan(Base):
    """Loan model."""

    __tablename__ = "loans"

    id = Column(Integer, primary_key=True)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False)
    requested_amount = Column(Numeric(12, 2), nullable=False)
    rate = Column(Numeric(6, 4), nullable=False)
    sign_date = Column(Date, nullable=False)
    finished_date = Column(Date, nullable=True)
    bad_debt_date = Column(Date, nullable=True)
    previous_loan_id = Column(Integer, ForeignKey("loans.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    route = relationship("Route", back_populates="loans")
    payments = relationship("LoanPayment", back_populates="loan", cascade="all, delete-orphan")


class LoanPayment(Base):
    """Loan payment model."""

    __tablename__ = "loan_payments"

    id = Column(Integer, primary_key=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    received_at = Column(Date, nullable=False)
    payment_method = Column(String, nullable=False)

    # Relationships
    loan = relationship("Loan", back_populates="payments")
    transactions = relationship("Transaction", back_populates="loan_payment")


class Transaction(Base):
    """Ledger transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=False)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    transaction_type = Column(String, nullable=False)
    expense_source = Column(String, nullable=True)
    income_source = Column(String, nullable=True)
    source_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    profit_amount = Column(Numeric(12, 2), nullable=True)
    loan_payment_id = Column(Integer, ForeignKey("loan_payments.id"), nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    route = relationship("Route", back_populates="transactions")
    loan_payment = relationship("LoanPayment", back_populates="transactions")


class FinancialReportCache(Base):
    """Cached monthly summary of a single route."""

    __tablename__ = "financial_report_cache"

    id = Column(Integer, primary_key=True)
    route_ids_key = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    data = Column(JSON, nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("route_ids_key", "year", "month", name="uq_cache_route_year_month"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
