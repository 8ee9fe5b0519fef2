"""Utility functions for routefin."""

from routefin.utils.date_parser import parse_date
from routefin.utils.amount_parser import parse_amount, parse_rate
from routefin.utils.account_resolver import resolve_account
from routefin.utils.route_resolver import resolve_route, resolve_routes

__all__ = [
    "parse_date",
    "parse_amount",
    "parse_rate",
    "resolve_account",
    "resolve_route",
    "resolve_routes",
]
