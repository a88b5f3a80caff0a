"""CLI error handling helpers."""

import logging

import click

from ledgerkit.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: <message>`` to stderr and exit with status 1.

    Domain errors are expected outcomes of bad input, so they are not
    logged above debug level.
    """
    logger.debug("%s: %s", type(error).__name__, error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
