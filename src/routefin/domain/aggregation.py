"""Multi-route aggregation of monthly summaries."""

import logging
from dataclasses import replace
from functools import reduce
from typing import Iterable, Sequence

from routefin.domain.cache_policy import MONTHS, MonthlyCacheService
from routefin.domain.calendar import operational_weeks
from routefin.domain.entities import ADDITIVE_FIELDS, MonthlyData
from routefin.domain.monthly import HUNDRED, safe_divide

logger = logging.getLogger(__name__)


def add_monthly_data(left: MonthlyData, right: MonthlyData) -> MonthlyData:
    """Sum every additive field of two summaries."""
    return replace(
        left,
        **{name: getattr(left, name) + getattr(right, name) for name in ADDITIVE_FIELDS},
    )


def recompute_ratios(data: MonthlyData) -> MonthlyData:
    """Recompute the ratio fields from the totals of a summary."""
    return replace(
        data,
        profit_percentage=safe_divide(data.operational_profit, data.ui_gains_total) * HUNDRED,
        gain_per_payment=safe_divide(data.operational_profit, data.payments_count),
    )


def sum_monthly_data(items: Iterable[MonthlyData]) -> MonthlyData:
    """Sum summaries field by field.

    Ratios are recomputed from the summed totals rather than averaged, so
    low-volume routes carry no extra weight. ``operational_weeks`` describes
    the calendar month and is carried over from the inputs, not summed.

    Args:
        items: Summaries to combine

    Returns:
        Combined MonthlyData; all zeros for an empty input
    """
    items = list(items)
    total = reduce(add_monthly_data, items, MonthlyData())
    weeks = max((item.operational_weeks for item in items), default=0)
    return recompute_ratios(replace(total, operational_weeks=weeks))


class MultiRouteAggregator:
    """Combine single-route cached summaries into multi-route figures.

    The combination itself is never cached; only single-route entries are
    persisted, so storage grows with the number of routes rather than with
    the number of route combinations.
    """

    def __init__(self, cache_service: MonthlyCacheService):
        """Initialize aggregator.

        Args:
            cache_service: Service serving single-route summaries
        """
        self.cache_service = cache_service

    def aggregate_month(self, route_ids: Sequence[int], year: int, month: int) -> MonthlyData:
        """Combine one month across several routes."""
        per_route = []
        for route_id in route_ids:
            per_route.append(self.cache_service.get_or_compute(route_id, year, month))
        combined = sum_monthly_data(per_route)
        if not per_route:
            combined = replace(combined, operational_weeks=operational_weeks(year, month))
        return combined

    def aggregate_year(
        self, route_ids: Sequence[int], year: int, force_recompute: bool = False
    ) -> dict[int, MonthlyData]:
        """Combine all twelve months across several routes.

        Args:
            route_ids: Routes to combine
            year: Four-digit year
            force_recompute: Invalidate each route-year before combining

        Returns:
            Dictionary mapping month number (1-12) to combined MonthlyData
        """
        if force_recompute:
            for route_id in route_ids:
                self.cache_service.invalidate(route_id, year)

        logger.info("Combining %d routes for year %s from single-route caches", len(route_ids), year)
        return {month: self.aggregate_month(route_ids, year, month) for month in MONTHS}
