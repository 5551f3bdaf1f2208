# tokenledger/database/queries/consistency.py
"""
Canonical-chain and token-type predicates for token transfer queries.

Each concern has two interchangeable query transforms. Which one runs is
decided by a DenormalizationSnapshot taken once per call, so callers only
ever ask for `only_consensus(query, snapshot)` or
`filter_by_type(query, token_types, snapshot)`.
"""

from typing import Callable, Iterable, Optional

from sqlalchemy.orm import Query

from ...core.denormalization import DenormalizationSnapshot
from ..tables import Block, Token, TokenTransfer

QueryTransform = Callable[[Query], Query]


def _consensus_via_block(query: Query) -> Query:
    return query.join(Block, Block.hash == TokenTransfer.block_hash).filter(Block.consensus.is_(True))


def _consensus_via_column(query: Query) -> Query:
    return query.filter(TokenTransfer.block_consensus.is_(True))


def consensus_strategy(snapshot: DenormalizationSnapshot) -> QueryTransform:
    return _consensus_via_column if snapshot.consensus_finished else _consensus_via_block


def only_consensus(query: Query, snapshot: DenormalizationSnapshot) -> Query:
    return consensus_strategy(snapshot)(query)


def join_token(query: Query) -> Query:
    return query.join(Token, Token.contract_address_hash == TokenTransfer.token_contract_address_hash)


def _types_via_token(token_types: list) -> QueryTransform:
    def transform(query: Query) -> Query:
        return join_token(query).filter(Token.type.in_(token_types))
    return transform


def _types_via_column(token_types: list) -> QueryTransform:
    def transform(query: Query) -> Query:
        return query.filter(TokenTransfer.token_type.in_(token_types))
    return transform


def type_strategy(snapshot: DenormalizationSnapshot, token_types: list) -> QueryTransform:
    if snapshot.token_type_finished:
        return _types_via_column(token_types)
    return _types_via_token(token_types)


def filter_by_type(query: Query, token_types: Optional[Iterable[str]],
                   snapshot: DenormalizationSnapshot) -> Query:
    """Restrict to the given token types; an empty or missing list leaves the query untouched."""
    types = [getattr(t, "value", t) for t in (token_types or [])]
    if not types:
        return query
    return type_strategy(snapshot, types)(query)
