"""Cache invalidation policy and per-route monthly cache service."""

import logging
from typing import Mapping

from routefin.database.base import CacheStore, LedgerReader
from routefin.domain.entities import MonthlyData, route_ids_key
from routefin.domain.monthly import MonthlyComputationService

logger = logging.getLogger(__name__)

MONTHS = tuple(range(1, 13))

# A cached row with all of these at zero is treated as suspect and recomputed.
# This cannot tell a dormant route-month from a corrupted row.
CORE_ACTIVITY_FIELDS = (
    "total_expenses",
    "income",
    "payments_count",
    "loan_disbursements",
    "total_incoming_cash",
)


def is_structurally_empty(data: MonthlyData) -> bool:
    """Return True if every core activity field of a cached summary is zero."""
    return all(getattr(data, name) == 0 for name in CORE_ACTIVITY_FIELDS)


def months_to_recompute(
    cached: Mapping[int, MonthlyData], force_recompute: bool = False
) -> set[int]:
    """Decide which months of a route-year must be (re)computed.

    Args:
        cached: Stored summaries keyed by month
        force_recompute: Full invalidation of the route-year

    Returns:
        Set of month numbers to recompute; the rest are served from cache
    """
    if force_recompute or not cached:
        return set(MONTHS)

    stale = set()
    for month in MONTHS:
        data = cached.get(month)
        if data is None or is_structurally_empty(data):
            stale.add(month)
    return stale


class MonthlyCacheService:
    """Service serving single-route monthly summaries through the cache store."""

    def __init__(self, ledger: LedgerReader, cache: CacheStore):
        """Initialize monthly cache service.

        Args:
            ledger: Read-only ledger accessor
            cache: Store of single-route monthly summaries
        """
        self.cache = cache
        self.computation = MonthlyComputationService(ledger)

    def invalidate(self, route_id: int, year: int) -> int:
        """Delete every cached month of a route-year. Returns rows deleted."""
        deleted = self.cache.delete_all(route_id, year)
        logger.info(
            "Invalidated %d cached months for route %s, year %s", deleted, route_id, year
        )
        return deleted

    def recompute(self, route_id: int, year: int, month: int) -> MonthlyData:
        """Compute a route-month from the ledger and store it."""
        data = self.computation.compute_month([route_id], year, month)
        self.cache.put(route_id, year, month, data)
        return data

    def load_route_year(
        self, route_id: int, year: int, force_recompute: bool = False
    ) -> dict[int, MonthlyData]:
        """Get the twelve monthly summaries of a single route.

        Args:
            route_id: Route ID
            year: Four-digit year
            force_recompute: Delete the stored route-year and compute it again

        Returns:
            Dictionary mapping month number (1-12) to MonthlyData
        """
        if force_recompute:
            self.invalidate(route_id, year)

        cached = self.cache.get_year(route_id, year)
        stale = months_to_recompute(cached, force_recompute=force_recompute)

        if not cached:
            logger.info(
                "No cache for route %s (key %s), year %s; computing all months",
                route_id,
                route_ids_key([route_id]),
                year,
            )
        else:
            suspect = sorted(m for m in stale if m in cached)
            if suspect:
                logger.info(
                    "Recomputing months %s for route %s, year %s: cached rows show no activity",
                    suspect,
                    route_id,
                    year,
                )

        result: dict[int, MonthlyData] = {}
        for month in MONTHS:
            if month in stale:
                result[month] = self.recompute(route_id, year, month)
            else:
                result[month] = cached[month]
        return result

    def get_or_compute(self, route_id: int, year: int, month: int) -> MonthlyData:
        """Get a cached route-month, computing and storing it when absent."""
        data = self.cache.get(route_id, year, month)
        if data is not None:
            return data
        logger.debug("Cache miss for route %s, %04d-%02d", route_id, year, month)
        return self.recompute(route_id, year, month)
