"""Commands recording expenses and incomes."""

import click
from routefin.cli.error_handling import handle_domain_error
from routefin.domain.account import AccountService
from routefin.domain.entities import ExpenseSource, IncomeSource
from routefin.domain.route import RouteService
from routefin.domain.transaction import TransactionService
from routefin.utils.amount_parser import parse_amount
from routefin.utils.date_parser import parse_date
from routefin.utils.account_resolver import resolve_account
from routefin.utils.route_resolver import resolve_route


@click.command("expense")
@click.option("--route", required=True, help="Route name or ID")
@click.option("--date", "date_str", default="today", show_default=True, help="Expense date")
@click.option("--amount", required=True, help="Amount (e.g., 1,250.00)")
@click.option(
    "--source",
    required=True,
    type=click.Choice([s.value for s in ExpenseSource], case_sensitive=False),
    help="Expense source",
)
@click.option("--account", help="Account name or ID the money came from")
@click.option("--description", help="Optional description")
@click.pass_context
def add_expense(ctx, route, date_str, amount, source, account, description):
    """Record an expense for a route.

    Examples:
        routefin expense --route "Ruta Norte" --amount 500 --source GASOLINE --account "Tarjeta Gas"
        routefin expense --route 1 --date 2024-03-15 --amount 4000 --source NOMINA_SALARY
    """
    db = ctx.obj["db"]

    try:
        transaction_id = TransactionService(db).record_expense(
            route_id=resolve_route(RouteService(db), route),
            date=parse_date(date_str),
            amount=parse_amount(amount),
            expense_source=ExpenseSource(source.upper()),
            source_account_id=resolve_account(AccountService(db), account) if account else None,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded expense (ID: {transaction_id})")


@click.command("income")
@click.option("--route", required=True, help="Route name or ID")
@click.option("--date", "date_str", default="today", show_default=True, help="Income date")
@click.option("--amount", required=True, help="Amount (e.g., 1,250.00)")
@click.option(
    "--source",
    required=True,
    type=click.Choice([s.value for s in IncomeSource], case_sensitive=False),
    help="Income source",
)
@click.option("--profit", help="Profit portion of a loan payment")
@click.option("--account", help="Account name or ID the money went into")
@click.option("--description", help="Optional description")
@click.pass_context
def add_income(ctx, route, date_str, amount, source, profit, account, description):
    """Record an income for a route.

    Loan payments are normally recorded with 'loan pay', which splits the
    profit portion automatically.

    Examples:
        routefin income --route "Ruta Norte" --amount 10000 --source MONEY_INVESTMENT
    """
    db = ctx.obj["db"]

    try:
        transaction_id = TransactionService(db).record_income(
            route_id=resolve_route(RouteService(db), route),
            date=parse_date(date_str),
            amount=parse_amount(amount),
            income_source=IncomeSource(source.upper()),
            profit_amount=parse_amount(profit) if profit is not None else None,
            source_account_id=resolve_account(AccountService(db), account) if account else None,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded income (ID: {transaction_id})")


def register_commands(cli):
    """Register expense and income commands with main CLI."""
    cli.add_command(add_expense)
    cli.add_command(add_income)
