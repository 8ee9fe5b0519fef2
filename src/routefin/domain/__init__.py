"""Domain layer for routefin application."""

_SERVICES = {
    "RouteService": "routefin.domain.route",
    "AccountService": "routefin.domain.account",
    "TransactionService": "routefin.domain.transaction",
    "LoanService": "routefin.domain.loan",
    "MonthlyComputationService": "routefin.domain.monthly",
    "MonthlyCacheService": "routefin.domain.cache_policy",
    "MultiRouteAggregator": "routefin.domain.aggregation",
    "FinancialReportService": "routefin.domain.report",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities; load them
# lazily to avoid circular imports
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
