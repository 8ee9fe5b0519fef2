"""Financial report assembly."""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Mapping

from routefin.database.base import Database
from routefin.domain.aggregation import MultiRouteAggregator, sum_monthly_data
from routefin.domain.cache_policy import MonthlyCacheService
from routefin.domain.calendar import MONTH_LABELS, month_key, validate_year
from routefin.domain.entities import (
    AnnualSummary,
    FinancialReport,
    MonthlyData,
    RouteInfo,
)
from routefin.domain.errors import ValidationError
from routefin.domain.monthly import safe_divide
from routefin.domain.route import RouteService

logger = logging.getLogger(__name__)


def build_annual_summary(months: Mapping[int, MonthlyData]) -> AnnualSummary:
    """Derive year totals and annual weekly averages from monthly summaries."""
    total_weeks = sum(data.operational_weeks for data in months.values())
    totals = sum_monthly_data(months.values())
    # Weekly figures of the year are rates over all its weeks, not sums of monthly rates
    totals = replace(
        totals,
        operational_weeks=total_weeks,
        weekly_income=safe_divide(totals.income, total_weeks),
        weekly_expenses=safe_divide(totals.ui_expenses_total, total_weeks),
        weekly_profit=safe_divide(totals.operational_profit, total_weeks),
        weekly_payments=safe_divide(Decimal(totals.payments_count), total_weeks),
    )
    return AnnualSummary(
        totals=totals,
        total_operational_weeks=total_weeks,
        weekly_average_income=totals.weekly_income,
        weekly_average_expenses=totals.weekly_expenses,
        weekly_average_profit=totals.weekly_profit,
    )


class FinancialReportService:
    """Service assembling twelve-month financial reports for routes."""

    def __init__(self, db: Database):
        """Initialize financial report service.

        Args:
            db: Database instance (ledger, cache store and route directory)
        """
        self.db = db
        self.cache_service = MonthlyCacheService(ledger=db, cache=db)
        self.aggregator = MultiRouteAggregator(self.cache_service)

    def validate_request(self, route_ids: Iterable[int], year: int) -> list[int]:
        """Validate report input and return the distinct route IDs in request order.

        Raises:
            ValidationError: If no route is given or the year is not four digits
        """
        distinct: list[int] = []
        for route_id in route_ids:
            if route_id not in distinct:
                distinct.append(route_id)
        if not distinct:
            raise ValidationError("At least one route is required")
        validate_year(year)
        return distinct

    def get_financial_report(
        self, route_ids: Iterable[int], year: int, force_recompute: bool = False
    ) -> FinancialReport:
        """Build the financial report of one or more routes for a year.

        Args:
            route_ids: Route IDs to report on
            year: Four-digit year
            force_recompute: Discard cached months of every requested route-year

        Returns:
            FinancialReport with route metadata in request order, month labels
            and monthly data

        Raises:
            ValidationError: If input is invalid
            NotFoundError: If any route does not exist
        """
        route_ids = self.validate_request(route_ids, year)

        routes = RouteService(self.db).require_routes(route_ids)

        if len(route_ids) == 1:
            months = self.cache_service.load_route_year(
                route_ids[0], year, force_recompute=force_recompute
            )
        else:
            months = self.aggregator.aggregate_year(
                route_ids, year, force_recompute=force_recompute
            )

        logger.info("Assembled financial report for routes %s, year %s", route_ids, year)
        return FinancialReport(
            routes=tuple(RouteInfo(id=route.id, name=route.name) for route in routes),
            year=year,
            months=MONTH_LABELS,
            data={month_key(month): data for month, data in sorted(months.items())},
            annual=build_annual_summary(months),
        )
