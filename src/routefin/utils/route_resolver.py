"""Utility for resolving route names to IDs."""

from typing import Iterable
from routefin.domain.route import RouteService


def resolve_route(route_service: RouteService, route: str | int) -> int:
    """Resolve route name or ID to route ID.

    Args:
        route_service: RouteService instance
        route: Route name (str) or ID (int or string representation of int)

    Returns:
        Route ID

    Raises:
        ValueError: If route is not found
    """
    if isinstance(route, int):
        if route_service.get_route(route) is None:
            raise ValueError(f"Route ID {route} not found")
        return route

    # A numeric string is an ID first, then a name
    try:
        route_id = int(route)
    except (ValueError, TypeError):
        route_id = None
    if route_id is not None and route_service.get_route(route_id) is not None:
        return route_id

    found = route_service.get_route_by_name(route)
    if found is not None:
        return found.id

    raise ValueError(f"Route '{route}' not found")


def resolve_routes(route_service: RouteService, routes: Iterable[str | int]) -> list[int]:
    """Resolve several route names or IDs, keeping request order."""
    return [resolve_route(route_service, route) for route in routes]
