# tokenledger/cli/__main__.py

"""
Token ledger CLI

Usage: python -m tokenledger.cli [command] [options]
"""

import os

import click
from dotenv import load_dotenv

from ..core.logging import LedgerLogger
from .context import CLIContext
from .commands.transfers import transfers
from .commands.reconcile import reconcile
from .commands.schema import schema


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose):
    """Token ledger CLI - query and reconcile token transfers"""
    ctx.ensure_object(dict)

    log_level = "DEBUG" if verbose else "INFO"
    LedgerLogger.configure(
        log_level=log_level,
        console_enabled=True,
        file_enabled=False,
        structured_format=False
    )

    load_dotenv()
    cli_context = CLIContext(dict(os.environ))
    ctx.obj['cli_context'] = cli_context
    ctx.call_on_close(cli_context.close)


cli.add_command(transfers)
cli.add_command(reconcile)
cli.add_command(schema)


if __name__ == '__main__':
    cli()
