# tokenledger/database/sql.py
"""
Dialect-aware SQL fragments for the numeric array columns.

PostgreSQL stores `token_ids` as NUMERIC[]; every other dialect stores a
JSON array of fixed-width decimal text, so containment and element access
compile differently. Token ids are bound through TokenIdType, which
produces the matching form for each dialect.
"""

from typing import Iterable, Tuple

from sqlalchemy import Boolean, literal
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.elements import ClauseElement
from sqlalchemy.sql.functions import FunctionElement

from .types import TokenIdType


class array_contains(FunctionElement):
    """array_contains(column, token_id): the token id array column holds `token_id`"""
    type = Boolean()
    name = 'array_contains'
    inherit_cache = True

    def __init__(self, column, token_id, **kwargs):
        if not isinstance(token_id, ClauseElement):
            token_id = literal(token_id, TokenIdType())
        super().__init__(column, token_id, **kwargs)


class first_element(FunctionElement):
    """first_element(column): the first element of the token id array column"""
    type = TokenIdType()
    name = 'first_element'
    inherit_cache = True


@compiles(array_contains)
def _array_contains_json(element, compiler, **kw):
    column, value = list(element.clauses)
    return "EXISTS (SELECT 1 FROM json_each(%s) WHERE json_each.value = %s)" % (
        compiler.process(column, **kw),
        compiler.process(value, **kw),
    )


@compiles(array_contains, 'postgresql')
def _array_contains_pg(element, compiler, **kw):
    column, value = list(element.clauses)
    return "%s @> ARRAY[CAST(%s AS NUMERIC)]" % (
        compiler.process(column, **kw),
        compiler.process(value, **kw),
    )


@compiles(first_element)
def _first_element_json(element, compiler, **kw):
    (column,) = list(element.clauses)
    return "json_extract(%s, '$[0]')" % compiler.process(column, **kw)


@compiles(first_element, 'postgresql')
def _first_element_pg(element, compiler, **kw):
    (column,) = list(element.clauses)
    return "(%s)[1]" % compiler.process(column, **kw)


def encode_transfer_ids(ids: Iterable[Tuple[str, str, int]]) -> str:
    """
    Render (transaction_hash, block_hash, log_index) triples as a PostgreSQL
    tuple list with bytea hex literals, for use by data migrators.
    """
    encoded = ",".join(
        f"('{_hash_to_query_string(tx_hash)}', '{_hash_to_query_string(block_hash)}', {int(log_index)})"
        for tx_hash, block_hash, log_index in ids
    )
    return f"({encoded})"


def _hash_to_query_string(value) -> str:
    return "\\" + str(value).lstrip("0")
