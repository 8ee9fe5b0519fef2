"""Report cache maintenance commands."""

import click
from routefin.cli.error_handling import handle_domain_error
from routefin.domain.cache_policy import MonthlyCacheService
from routefin.domain.calendar import validate_year
from routefin.domain.route import RouteService
from routefin.utils.route_resolver import resolve_routes


@click.group()
def cache_group():
    """Maintain cached monthly summaries."""
    pass


@cache_group.command("clear")
@click.option("--route", "routes", multiple=True, required=True, help="Route name or ID")
@click.option("--year", required=True, type=int, help="Four-digit year")
@click.pass_context
def clear_cache(ctx, routes, year):
    """Delete cached months of route-years.

    The next report recomputes them from the ledger.

    Examples:
        routefin cache clear --route "Ruta Norte" --year 2024
    """
    db = ctx.obj["db"]
    service = MonthlyCacheService(ledger=db, cache=db)

    try:
        validate_year(year)
        route_ids = resolve_routes(RouteService(db), routes)
    except ValueError as e:
        handle_domain_error(ctx, e)

    for route_id in route_ids:
        deleted = service.invalidate(route_id, year)
        click.echo(f"Cleared {deleted} cached month{'s' if deleted != 1 else ''} for route {route_id}")


def register_commands(cli):
    """Register cache commands with main CLI."""
    cli.add_command(cache_group, name="cache")
