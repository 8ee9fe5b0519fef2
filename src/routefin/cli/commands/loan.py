"""Loan lifecycle commands."""

import click
from routefin.cli.error_handling import handle_domain_error
from routefin.domain.account import AccountService
from routefin.domain.entities import PaymentMethod
from routefin.domain.loan import LoanService
from routefin.domain.route import RouteService
from routefin.utils.account_resolver import resolve_account
from routefin.utils.amount_parser import parse_amount, parse_rate
from routefin.utils.date_parser import parse_date
from routefin.utils.route_resolver import resolve_route


@click.group()
def loan_group():
    """Grant loans and record their payments."""
    pass


@loan_group.command("grant")
@click.option("--route", required=True, help="Route name or ID")
@click.option("--amount", required=True, help="Requested principal")
@click.option("--rate", required=True, help="Profit rate, as a fraction (0.4) or percentage (40%)")
@click.option("--date", "date_str", default="today", show_default=True, help="Sign date")
@click.option("--account", help="Account name or ID the disbursement is paid from")
@click.option("--renews", type=int, help="ID of the loan this one renews")
@click.pass_context
def grant_loan(ctx, route, amount, rate, date_str, account, renews):
    """Grant a loan and record its disbursement as an expense.

    Examples:
        routefin loan grant --route "Ruta Norte" --amount 5000 --rate 40%
        routefin loan grant --route 1 --amount 8000 --rate 0.4 --renews 12
    """
    db = ctx.obj["db"]

    try:
        loan_id = LoanService(db).grant_loan(
            route_id=resolve_route(RouteService(db), route),
            requested_amount=parse_amount(amount),
            rate=parse_rate(rate),
            sign_date=parse_date(date_str),
            source_account_id=resolve_account(AccountService(db), account) if account else None,
            previous_loan_id=renews,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Granted loan (ID: {loan_id})")


@loan_group.command("pay")
@click.argument("loan_id", type=int)
@click.option("--amount", required=True, help="Payment amount")
@click.option("--date", "date_str", default="today", show_default=True, help="Date received")
@click.option(
    "--method",
    type=click.Choice([m.value for m in PaymentMethod], case_sensitive=False),
    default=PaymentMethod.CASH.value,
    show_default=True,
    help="Payment method",
)
@click.option("--account", help="Account name or ID the payment went into")
@click.pass_context
def pay_loan(ctx, loan_id, amount, date_str, method, account):
    """Record a payment on a loan.

    The profit portion of the payment is split out in proportion to the
    loan rate.

    Examples:
        routefin loan pay 3 --amount 700
        routefin loan pay 3 --amount 700 --method BANK --date 2024-03-18
    """
    db = ctx.obj["db"]
    service = LoanService(db)

    try:
        payment_id = service.record_payment(
            loan_id=loan_id,
            amount=parse_amount(amount),
            received_at=parse_date(date_str),
            method=PaymentMethod(method.upper()),
            source_account_id=resolve_account(AccountService(db), account) if account else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded payment (ID: {payment_id}) on loan {loan_id}")

    loan = service.get_loan(loan_id)
    if loan is not None and loan.finished_date is not None:
        click.echo(f"Loan {loan_id} is fully paid")


@loan_group.command("bad-debt")
@click.argument("loan_id", type=int)
@click.option("--date", "date_str", default="today", show_default=True, help="Date the loan went bad")
@click.option("--clear", is_flag=True, help="Remove the bad-debt marking")
@click.pass_context
def bad_debt(ctx, loan_id, date_str, clear):
    """Mark a loan as bad debt.

    Examples:
        routefin loan bad-debt 3 --date 2024-05-02
        routefin loan bad-debt 3 --clear
    """
    service = LoanService(ctx.obj["db"])

    try:
        bad_debt_date = None if clear else parse_date(date_str)
        service.mark_bad_debt(loan_id, bad_debt_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if clear:
        click.echo(f"Cleared bad-debt marking of loan {loan_id}")
    else:
        click.echo(f"Marked loan {loan_id} as bad debt on {bad_debt_date.isoformat()}")


def register_commands(cli):
    """Register loan commands with main CLI."""
    cli.add_command(loan_group, name="loan")
