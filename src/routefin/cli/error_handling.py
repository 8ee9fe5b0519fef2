"""CLI error handling helpers."""

import logging

import click

from routefin.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain or input error on stderr and exit with failure.

    Only input errors reach here; database faults propagate with their
    traceback.
    """
    logger.debug("Command %s failed: %r", ctx.info_name, error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
