"""Route management commands."""

import click
from routefin.cli.error_handling import handle_domain_error
from routefin.domain.route import RouteService


@click.group()
def route_group():
    """Manage routes."""
    pass


@route_group.command("create")
@click.argument("name", metavar="ROUTE_NAME")
@click.pass_context
def create_route(ctx, name: str):
    """Create a new route.

    Examples:
        routefin route create "Ruta Norte"
    """
    service = RouteService(ctx.obj["db"])

    try:
        route_id = service.create_route(name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created route '{name.strip()}' (ID: {route_id})")


@route_group.command("list")
@click.pass_context
def list_routes(ctx):
    """List all routes."""
    service = RouteService(ctx.obj["db"])

    routes = service.list_routes()
    if not routes:
        click.echo("No routes found.")
        return

    click.echo("\nRoutes:")
    click.echo("-" * 40)
    for r in routes:
        click.echo(f"ID: {r.id:3d} | {r.name}")


def register_commands(cli):
    """Register route commands with main CLI."""
    cli.add_command(route_group, name="route")
