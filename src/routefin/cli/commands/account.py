"""Account management commands."""

import click
from routefin.cli.error_handling import handle_domain_error
from routefin.domain.account import AccountService
from routefin.domain.entities import AccountType
from routefin.domain.route import RouteService
from routefin.utils.route_resolver import resolve_route


@click.group()
def account_group():
    """Manage fund accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    help="Kind of fund the account holds",
)
@click.option("--route", help="Route name or ID the account belongs to")
@click.pass_context
def create_account(ctx, name: str, account_type: str, route: str | None):
    """Create a new account.

    Gasoline paid from a PREPAID_GAS account is reported as prepaid
    gasoline; any other gasoline expense is cash gasoline.

    Examples:
        routefin account create "Tarjeta Gas Norte" --type PREPAID_GAS --route "Ruta Norte"
        routefin account create "Caja Oficina" --type OFFICE_CASH_FUND
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        route_id = resolve_route(RouteService(db), route) if route is not None else None
        account_id = service.create_account(
            name=name, account_type=AccountType(account_type.upper()), route_id=route_id
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        route = acc.route_id if acc.route_id is not None else "-"
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type.value:18s} | Route: {route}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
