"""
Administrative entry point for the transaction ledger.

Usage:
    ledger-admin init              Create the database tables
    ledger-admin list OWNER_ID     Print an owner's ledger, newest first
"""

import logging
import sys

import click
from dotenv import load_dotenv

from config import get_settings
from db_engine import init_db
from services import TransactionService

logger = logging.getLogger(__name__)


def configure_logging():
    """Configure root logging from settings."""
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def list_ledger(owner_id: str) -> int:
    result = TransactionService().list(owner_id)
    if not result.success:
        logger.error(f"Could not list transactions for {owner_id}: {result.message}")
        click.echo(f"Could not list transactions: {result.message}", err=True)
        return 1

    for tx in result.data:
        click.echo(f"{tx.date.isoformat()}  {tx.amount:>15}  {tx.description or ''}  [{tx.id}]")
    click.echo(f"{len(result.data)} transaction(s)")
    return 0


@click.group()
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file to load settings from'
)
def main(env_file):
    """Transaction ledger administration."""
    load_dotenv(env_file)
    configure_logging()


@main.command('init')
def init_command():
    """Create the database tables."""
    init_db()
    click.echo("Database initialized.")


@main.command('list')
@click.argument('owner_id')
def list_command(owner_id):
    """Print OWNER_ID's transactions, newest first."""
    code = list_ledger(owner_id)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
