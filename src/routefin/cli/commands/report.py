"""Financial report command."""

import json

import click
from routefin.cli.error_handling import handle_domain_error
from routefin.domain.entities import MonthlyData
from routefin.domain.report import FinancialReportService
from routefin.domain.route import RouteService
from routefin.utils.route_resolver import resolve_routes


def _money(value) -> str:
    return f"${value:,.2f}"


def _display_row(label: str, data: MonthlyData) -> None:
    click.echo(
        f"{label:<12} {_money(data.income):>14} {_money(data.ui_expenses_total):>14} "
        f"{_money(data.operational_profit):>14} {data.profit_percentage:>8.2f}% "
        f"{data.payments_count:>9d} {data.operational_weeks:>6d}"
    )


def _display_report(report) -> None:
    names = ", ".join(route.name for route in report.routes)
    click.echo(f"\nFinancial report {report.year}: {names}")
    click.echo("=" * 80)
    click.echo(
        f"{'Month':<12} {'Income':>14} {'Expenses':>14} {'Op. profit':>14} "
        f"{'Profit %':>9} {'Payments':>9} {'Weeks':>6}"
    )
    click.echo("-" * 80)
    for label, key in zip(report.months, sorted(report.data)):
        _display_row(label, report.data[key])
    click.echo("-" * 80)

    annual = report.annual
    _display_row("TOTAL", annual.totals)
    click.echo(
        f"\nWeekly average: income {_money(annual.weekly_average_income)}, "
        f"expenses {_money(annual.weekly_average_expenses)}, "
        f"profit {_money(annual.weekly_average_profit)} "
        f"over {annual.total_operational_weeks} weeks"
    )
    totals = annual.totals
    click.echo(
        f"Loans disbursed {_money(totals.loan_disbursements)}, "
        f"capital returned {_money(totals.capital_returned)}, "
        f"bad debt {_money(totals.bad_debt_amount)}"
    )


@click.command("report")
@click.option(
    "--route",
    "routes",
    multiple=True,
    required=True,
    help="Route name or ID (repeat for a combined report)",
)
@click.option("--year", required=True, type=int, help="Four-digit year")
@click.option("--force", is_flag=True, help="Discard cached months and recompute from the ledger")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_context
def report(ctx, routes, year, force, as_json):
    """Show the monthly financial report of one or more routes.

    Examples:
        routefin report --route "Ruta Norte" --year 2024
        routefin report --route 1 --route 2 --year 2024 --json
    """
    db = ctx.obj["db"]

    try:
        route_ids = resolve_routes(RouteService(db), routes)
        result = FinancialReportService(db).get_financial_report(
            route_ids, year, force_recompute=force
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_report(result)


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(report)
