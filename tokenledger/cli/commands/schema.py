# tokenledger/cli/commands/schema.py

import click

from ...types import LedgerError


@click.group()
def schema():
    """Manage the ledger schema"""
    pass


@schema.command('create')
@click.pass_context
def create(ctx):
    """Create every ledger table that does not exist yet"""
    cli_context = ctx.obj['cli_context']

    try:
        cli_context.container.primary.create_schema()
    except LedgerError as e:
        raise click.ClickException(f"Failed to create schema: {e}")

    click.echo("Schema created")
