import click

from order_history.domain.exceptions import DomainException
from order_history.infrastructure.bootstrap import order_repository
from order_history.infrastructure.cli.order_commands import order_history, order_record
from order_history.infrastructure.config import get_settings
from order_history.infrastructure.observability import setup_logging


@click.group()
def cli() -> None:
    """Order history store"""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)


@cli.group()
def order() -> None:
    """Record and list orders."""


@cli.group()
def db() -> None:
    """Manage the order database."""


@db.command("init")
def db_init() -> None:
    """Create the orders table if it does not exist."""
    try:
        repo = order_repository()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    repo.dispose()
    click.echo("Orders schema is ready.")


# Register subcommands
order.add_command(order_history)
order.add_command(order_record)
