"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def route_not_found(route_id: int) -> str:
    """Return message for missing route."""
    return f"Route {route_id} not found"


def routes_not_found(route_ids: list[int]) -> str:
    """Return message for several missing routes."""
    ids = ", ".join(str(route_id) for route_id in sorted(route_ids))
    return f"Route{'s' if len(route_ids) != 1 else ''} not found: {ids}"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def loan_not_found(loan_id: int) -> str:
    """Return message for missing loan."""
    return f"Loan {loan_id} not found"


def duplicate_route_name(name: str) -> str:
    """Return message for duplicate route name."""
    return f"Route with name '{name}' already exists"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def invalid_month(month: int) -> str:
    """Return message for a month outside 1..12."""
    return f"Month must be between 1 and 12, got {month}"


def invalid_year(year: int) -> str:
    """Return message for a year that is not four digits."""
    return f"Year must be a four-digit year, got {year}"


def negative_amount(amount) -> str:
    """Return message for a negative ledger amount."""
    return f"Amount must not be negative, got {amount}"


def profit_exceeds_amount(profit_amount, amount) -> str:
    """Return message when a profit portion is larger than its payment."""
    return f"Profit portion {profit_amount} exceeds transaction amount {amount}"
