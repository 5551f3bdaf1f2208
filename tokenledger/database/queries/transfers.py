# tokenledger/database/queries/transfers.py
"""
Query shapes over `token_transfers`.

Every function takes a base Query and returns a narrowed one, so shapes
compose with the consistency predicates and paging fragments. None of
them executes anything.
"""

from typing import Dict, Optional, Sequence

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Query, contains_eager, selectinload

from ...core.denormalization import DenormalizationSnapshot
from ...types import Direction, EvmAddress, LogRecord, TokenType
from ..sql import array_contains
from ..tables import Token, TokenTransfer
from .consistency import filter_by_type, join_token, only_consensus

ASSOCIATIONS = {
    "token": TokenTransfer.token,
    "block": TokenTransfer.block,
}


def with_token_preload(query: Query) -> Query:
    return query.options(selectinload(TokenTransfer.token))


def by_token(query: Query, token_hash: EvmAddress, snapshot: DenormalizationSnapshot) -> Query:
    return only_consensus(query, snapshot).filter(
        TokenTransfer.token_contract_address_hash == token_hash,
        TokenTransfer.block_number.isnot(None),
    )


def by_token_and_id(query: Query, token_hash: EvmAddress, token_id: int,
                    snapshot: DenormalizationSnapshot) -> Query:
    return by_token(query, token_hash, snapshot).filter(
        array_contains(TokenTransfer.token_ids, int(token_id))
    )


def count_filter(query: Query, token_hash: EvmAddress, token_id: Optional[int] = None) -> Query:
    # Counts read every row for the token, canonical or not
    query = query.filter(TokenTransfer.token_contract_address_hash == token_hash)
    if token_id is not None:
        query = query.filter(array_contains(TokenTransfer.token_ids, int(token_id)))
    return query


def filter_by_direction(query: Query, direction: Direction, address_hash: EvmAddress) -> Query:
    if direction is Direction.TO:
        return query.filter(TokenTransfer.to_address_hash == address_hash)
    if direction is Direction.FROM:
        return query.filter(TokenTransfer.from_address_hash == address_hash)
    return query.filter(or_(
        TokenTransfer.to_address_hash == address_hash,
        TokenTransfer.from_address_hash == address_hash,
    ))


def by_address_direction(query: Query, direction: Direction, address_hash: EvmAddress,
                         token_types: Optional[Sequence[str]],
                         snapshot: DenormalizationSnapshot) -> Query:
    """One direction only; the either-direction listing merges two of these."""
    if direction is Direction.EITHER:
        raise ValueError("by_address_direction needs a single direction; merge TO and FROM branches instead")

    query = only_consensus(query, snapshot)
    query = filter_by_direction(query, direction, address_hash)
    return filter_by_type(query, token_types, snapshot)


def by_address_and_token(query: Query, address_hash: EvmAddress, token_hash: EvmAddress,
                         snapshot: DenormalizationSnapshot) -> Query:
    query = only_consensus(query, snapshot)
    return query.filter(
        or_(TokenTransfer.from_address_hash == address_hash,
            TokenTransfer.to_address_hash == address_hash),
        TokenTransfer.token_contract_address_hash == token_hash,
    ).order_by(TokenTransfer.block_number.desc(), TokenTransfer.log_index.desc())


def erc721_canonical(query: Query, snapshot: DenormalizationSnapshot) -> Query:
    query = only_consensus(query, snapshot)
    if snapshot.token_type_finished:
        return query.filter(
            TokenTransfer.token_type == TokenType.ERC721.value
        ).options(selectinload(TokenTransfer.token))

    return join_token(query).filter(
        Token.type == TokenType.ERC721.value
    ).options(contains_eager(TokenTransfer.token))


def transaction_hashes(session, direction: Direction, address_hash: EvmAddress,
                       ascending: bool = False) -> Query:
    """Distinct transaction hashes ordered by their block, newest first unless `ascending`."""
    query = session.query(TokenTransfer.transaction_hash)
    query = filter_by_direction(query, direction, address_hash).group_by(TokenTransfer.transaction_hash)

    if ascending:
        first_block = func.min(TokenTransfer.block_number)
        return query.order_by(first_block.asc(), TokenTransfer.transaction_hash.asc())

    latest_block = func.max(TokenTransfer.block_number)
    return query.order_by(latest_block.desc(), TokenTransfer.transaction_hash.desc())


def from_logs(query: Query, logs: Sequence[LogRecord]) -> Query:
    matches = [
        and_(
            TokenTransfer.transaction_hash == log.transaction_hash,
            TokenTransfer.block_hash == log.block_hash,
            TokenTransfer.log_index == log.index,
        )
        for log in logs
    ]
    return query.filter(or_(*matches))


def join_associations(query: Query, necessity_by_association: Optional[Dict[str, str]]) -> Query:
    """
    Eager-load associations; `required` inner-joins (dropping rows without
    the association), `optional` outer-joins.
    """
    for name, necessity in (necessity_by_association or {}).items():
        if name not in ASSOCIATIONS:
            raise ValueError(f"Unknown association {name!r}")
        relationship = ASSOCIATIONS[name]
        if necessity == "required":
            query = query.join(relationship).options(contains_eager(relationship))
        elif necessity == "optional":
            query = query.outerjoin(relationship).options(contains_eager(relationship))
        else:
            raise ValueError(f"Unknown necessity {necessity!r} for association {name!r}")
    return query
