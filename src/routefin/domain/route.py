"""Route domain service."""

from typing import Iterable, Optional
from routefin.database.base import Database
from routefin.domain.entities import Route as RouteEntity
from routefin.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_route_name,
    routes_not_found,
)


class RouteService:
    """Service for managing routes."""

    def __init__(self, db: Database):
        """Initialize route service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_route(self, name: str) -> int:
        """Create a new route.

        Args:
            name: Route name

        Returns:
            Route ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a route with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Route name must not be empty")
        if self.db.get_route_by_name(name) is not None:
            raise ConflictError(duplicate_route_name(name))
        return self.db.create_route(name)

    def get_route(self, route_id: int) -> Optional[RouteEntity]:
        """Get route by ID."""
        return self.db.get_route(route_id)

    def get_route_by_name(self, name: str) -> Optional[RouteEntity]:
        """Get route by name."""
        return self.db.get_route_by_name(name)

    def require_routes(self, route_ids: Iterable[int]) -> list[RouteEntity]:
        """Get several routes in request order.

        Raises:
            NotFoundError: If any route is missing
        """
        route_ids = list(route_ids)
        by_id = {route.id: route for route in self.db.list_routes(route_ids)}
        missing = set(route_ids) - set(by_id)
        if missing:
            raise NotFoundError(routes_not_found(sorted(missing)))
        return [by_id[route_id] for route_id in route_ids]

    def list_routes(self) -> list[RouteEntity]:
        """List all routes."""
        return self.db.list_routes()
