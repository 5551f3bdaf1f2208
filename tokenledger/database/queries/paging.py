# tokenledger/database/queries/paging.py

from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query

from ...types import BlockCursor, CursorShapeMismatch, PagingOptions, SortKey, TokenIdCursor
from ..sql import first_element
from ..tables import TokenTransfer


def order_transfers(query: Query, paging: Optional[PagingOptions]) -> Query:
    """Apply the ordering a PagingOptions' cursors are expressed in."""
    ascending = bool(paging and paging.asc_order)

    if paging is not None and paging.sort is SortKey.TOKEN_ID:
        token_id = first_element(TokenTransfer.token_ids)
        return query.order_by(
            token_id.asc() if ascending else token_id.desc(),
            TokenTransfer.block_number.asc(),
            TokenTransfer.log_index.asc(),
        )

    if ascending:
        return query.order_by(TokenTransfer.block_number.asc(), TokenTransfer.log_index.asc())
    return query.order_by(TokenTransfer.block_number.desc(), TokenTransfer.log_index.desc())


def page_token_transfer(query: Query, paging: PagingOptions) -> Query:
    """Add the keyset predicate for the position after `paging.key`."""
    key = paging.key
    if key is None:
        return query

    if paging.sort is SortKey.TOKEN_ID:
        if not isinstance(key, TokenIdCursor):
            raise CursorShapeMismatch(f"token id ordering cannot be paged with {key!r}")
        token_id = first_element(TokenTransfer.token_ids)
        if paging.asc_order:
            return query.filter(token_id > key.token_id)
        return query.filter(token_id < key.token_id)

    if not isinstance(key, BlockCursor):
        raise CursorShapeMismatch(f"block ordering cannot be paged with {key!r}")

    block_number = TokenTransfer.block_number
    log_index = TokenTransfer.log_index

    if paging.asc_order:
        if key.log_index is None:
            return query.filter(block_number > key.block_number)
        return query.filter(or_(
            block_number > key.block_number,
            and_(block_number == key.block_number, log_index > key.log_index),
        ))

    if key.log_index is None:
        return query.filter(block_number < key.block_number)
    return query.filter(or_(
        block_number < key.block_number,
        and_(block_number == key.block_number, log_index < key.log_index),
    ))


def handle_paging_options(query: Query, paging: Optional[PagingOptions]) -> Query:
    """Keyset predicate plus limit; no page size means an unpaginated query."""
    if paging is None or paging.page_size is None:
        return query
    return page_token_transfer(query, paging).limit(paging.page_size)


def page_by_block_only(query: Query, paging: PagingOptions, block_column=None) -> Query:
    """Paging for listings keyed on block number alone; the log index is ignored."""
    if paging.key is None:
        return query
    if not isinstance(paging.key, BlockCursor):
        raise CursorShapeMismatch(f"block ordering cannot be paged with {paging.key!r}")

    column = block_column if block_column is not None else TokenTransfer.block_number
    if paging.asc_order:
        return query.filter(column > paging.key.block_number)
    return query.filter(column < paging.key.block_number)
