# tokenledger/cli/commands/reconcile.py

import click

from ...reconciliation.scanner import UncatalogedTransferScanner
from ...types import LedgerError


@click.group()
def reconcile():
    """Reconcile raw logs against derived token transfers"""
    pass


@reconcile.command('uncataloged')
@click.option('--chunk-size', type=int, default=None, help='Rows fetched per round trip')
@click.pass_context
def uncataloged(ctx, chunk_size):
    """Print block numbers whose transfer logs have no token transfer row

    Examples:
        reconcile uncataloged
        reconcile uncataloged --chunk-size 500
    """
    cli_context = ctx.obj['cli_context']
    container = cli_context.container

    scanner = container.scanner
    if chunk_size is not None:
        try:
            scanner = UncatalogedTransferScanner(container.config.transfer_signatures, chunk_size)
        except LedgerError as e:
            raise click.BadParameter(str(e), param_hint='--chunk-size')

    count = 0
    try:
        with container.session() as session:
            for block_number in scanner.find_uncataloged_block_numbers(session):
                click.echo(block_number)
                count += 1
    except LedgerError as e:
        raise click.ClickException(f"Reconciliation scan failed: {e}")

    click.echo(f"{count} block(s) need reprocessing", err=True)
