# tokenledger/cli/commands/transfers.py

import click

from ...types import (
    Direction,
    LedgerError,
    PagingOptions,
    SortKey,
    TokenType,
    BlockCursor,
    TokenIdCursor,
    decode_cursor,
    encode_cursor,
)


def _paging(ctx, page_size, cursor, asc, sort=SortKey.BLOCK):
    key = decode_cursor(cursor, expected=sort) if cursor else None
    return PagingOptions(key=key, page_size=page_size or ctx.obj['cli_context'].container.config.default_page_size,
                         asc_order=asc, sort=sort)


def _echo_transfers(rows, paging):
    for row in rows:
        amount = row.amount if row.amount is not None else ",".join(str(a) for a in row.amounts or [])
        token_ids = ",".join(str(t) for t in row.token_ids or [])
        click.echo(
            f"{row.block_number}\t{row.log_index}\t{row.transaction_hash}\t"
            f"{row.from_address_hash}\t{row.to_address_hash}\t{amount}\t{token_ids}"
        )

    if rows and paging.page_size is not None and len(rows) == paging.page_size:
        last = rows[-1]
        if paging.sort is SortKey.TOKEN_ID:
            cursor = TokenIdCursor(last.token_ids[0])
        else:
            cursor = BlockCursor(last.block_number, last.log_index)
        click.echo(f"next: {encode_cursor(cursor)}", err=True)


@click.group()
def transfers():
    """Query canonical token transfers"""
    pass


@transfers.command('by-token')
@click.argument('token')
@click.option('--token-id', type=int, help='Only transfers carrying this token id')
@click.option('--page-size', type=click.IntRange(min=1), help='Rows per page')
@click.option('--cursor', help='Opaque cursor from a previous page')
@click.option('--asc', is_flag=True, help='Page towards newer transfers')
@click.option('--by-id', is_flag=True, help='Order by token id instead of block (with --token-id)')
@click.pass_context
def by_token(ctx, token, token_id, page_size, cursor, asc, by_id):
    """List transfers of a token contract

    Examples:
        transfers by-token 0x1234... --page-size 20
        transfers by-token 0x1234... --token-id 7 --cursor <next>
    """
    container = ctx.obj['cli_context'].container

    try:
        sort = SortKey.TOKEN_ID if by_id else SortKey.BLOCK
        paging = _paging(ctx, page_size, cursor, asc, sort)
        with container.session(api=True) as session:
            if token_id is None:
                rows = container.transfers.list_by_token(session, token, paging)
            else:
                rows = container.transfers.list_by_token_and_id(session, token, token_id, paging)
            _echo_transfers(rows, paging)
    except LedgerError as e:
        raise click.ClickException(str(e))


@transfers.command('count')
@click.argument('token')
@click.option('--token-id', type=int, help='Only transfers carrying this token id')
@click.pass_context
def count(ctx, token, token_id):
    """Count every transfer of a token (slow on large tables)"""
    container = ctx.obj['cli_context'].container

    try:
        with container.session(api=True) as session:
            if token_id is None:
                total = container.transfers.count_by_token(session, token)
            else:
                total = container.transfers.count_by_token_and_id(session, token, token_id)
    except LedgerError as e:
        raise click.ClickException(str(e))

    click.echo(total)


@transfers.command('by-address')
@click.argument('address')
@click.option('--direction', type=click.Choice([d.value for d in Direction]), default='either')
@click.option('--type', 'token_types', multiple=True,
              type=click.Choice([t.value for t in TokenType]), help='Token type filter (repeatable)')
@click.option('--page-size', type=click.IntRange(min=1), help='Rows per page')
@click.option('--cursor', help='Opaque cursor from a previous page')
@click.pass_context
def by_address(ctx, address, direction, token_types, page_size, cursor):
    """List transfers sent or received by an address

    Examples:
        transfers by-address 0xabcd... --direction to --type ERC-721
    """
    container = ctx.obj['cli_context'].container

    try:
        paging = _paging(ctx, page_size, cursor, False)
        with container.session(api=True) as session:
            rows = container.transfers.list_by_address(
                session, direction, address, list(token_types), paging
            )
            _echo_transfers(rows, paging)
    except LedgerError as e:
        raise click.ClickException(str(e))
