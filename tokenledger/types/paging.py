# tokenledger/types/paging.py
"""
Keyset paging positions and the opaque cursor codec.

A cursor is a tagged variant so a query can refuse a position that was
produced for a different ordering:

- BlockCursor(block_number, log_index) for (block_number, log_index) ordering.
  log_index=None means "every row strictly before this block".
- TokenIdCursor(token_id) for listings ordered by token id.
"""

import base64
import binascii
import enum
from typing import Optional, Union

import msgspec
from msgspec import Struct

from .constants import DEFAULT_PAGE_SIZE
from .errors import CursorShapeMismatch


class Direction(enum.Enum):
    TO = "to"
    FROM = "from"
    EITHER = "either"

    @classmethod
    def parse(cls, value: Union[str, "Direction", None]) -> "Direction":
        if isinstance(value, cls):
            return value
        if value in (None, "", "either", "all"):
            return cls.EITHER
        return cls(value)


class SortKey(enum.Enum):
    BLOCK = "block"
    TOKEN_ID = "token_id"


class BlockCursor(Struct, frozen=True, tag="block"):
    block_number: int
    log_index: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.block_number, int) or self.block_number < 0:
            raise CursorShapeMismatch(f"block_number must be a non-negative integer, got {self.block_number!r}")
        if self.log_index is not None and (not isinstance(self.log_index, int) or self.log_index < 0):
            raise CursorShapeMismatch(f"log_index must be a non-negative integer, got {self.log_index!r}")

    @property
    def is_exhausted(self) -> bool:
        # (0, 0) sits before the first possible position: nothing can follow it
        return self.block_number == 0 and self.log_index in (None, 0)


class TokenIdCursor(Struct, frozen=True, tag="token_id"):
    token_id: int

    def __post_init__(self) -> None:
        if not isinstance(self.token_id, int) or self.token_id < 0:
            raise CursorShapeMismatch(f"token_id must be a non-negative integer, got {self.token_id!r}")

    @property
    def is_exhausted(self) -> bool:
        return False


Cursor = Union[BlockCursor, TokenIdCursor]

_CURSOR_SORT = {BlockCursor: SortKey.BLOCK, TokenIdCursor: SortKey.TOKEN_ID}


class PagingOptions(Struct, frozen=True):
    key: Optional[Cursor] = None
    page_size: Optional[int] = DEFAULT_PAGE_SIZE
    asc_order: bool = False
    sort: SortKey = SortKey.BLOCK

    def __post_init__(self) -> None:
        if self.key is not None and _CURSOR_SORT[type(self.key)] is not self.sort:
            raise CursorShapeMismatch(
                f"{type(self.key).__name__} cannot page a listing sorted by {self.sort.value}"
            )
        if self.page_size is not None and self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @property
    def is_exhausted(self) -> bool:
        return self.key is not None and self.key.is_exhausted

    def next_page(self, key: Cursor) -> "PagingOptions":
        return msgspec.structs.replace(self, key=key)


def cursor_from_key(key: tuple, sort: SortKey = SortKey.BLOCK) -> Cursor:
    """Build a cursor from a raw key tuple, checking arity against the ordering."""
    if sort is SortKey.BLOCK:
        if len(key) != 2:
            raise CursorShapeMismatch(f"block ordering expects (block_number, log_index), got {key!r}")
        return BlockCursor(int(key[0]), None if key[1] is None else int(key[1]))

    if len(key) != 1:
        raise CursorShapeMismatch(f"token id ordering expects (token_id,), got {key!r}")
    return TokenIdCursor(int(key[0]))


# === Codec ===

_TAGS = {"b": SortKey.BLOCK, "t": SortKey.TOKEN_ID}


def encode_cursor(cursor: Cursor) -> str:
    """Render a cursor as an opaque url-safe token, stable across restarts."""
    if isinstance(cursor, BlockCursor):
        log_index = None if cursor.log_index is None else str(cursor.log_index)
        payload = ["b", str(cursor.block_number), log_index]
    elif isinstance(cursor, TokenIdCursor):
        payload = ["t", str(cursor.token_id)]
    else:
        raise CursorShapeMismatch(f"Not a cursor: {cursor!r}")

    raw = msgspec.json.encode(payload)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode_cursor(token: str, expected: Optional[SortKey] = None) -> Cursor:
    try:
        padded = token + "=" * (-len(token) % 4)
        payload = msgspec.json.decode(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (binascii.Error, UnicodeEncodeError, msgspec.DecodeError, ValueError) as e:
        raise CursorShapeMismatch(f"Undecodable cursor {token!r}: {e}") from e

    if not isinstance(payload, list) or not payload or payload[0] not in _TAGS:
        raise CursorShapeMismatch(f"Unknown cursor layout: {payload!r}")

    sort = _TAGS[payload[0]]
    if expected is not None and sort is not expected:
        raise CursorShapeMismatch(f"Cursor for {sort.value} ordering used where {expected.value} is expected")

    try:
        return cursor_from_key(tuple(_parse_int(v) for v in payload[1:]), sort)
    except (TypeError, ValueError) as e:
        raise CursorShapeMismatch(f"Cursor values must be integers: {payload!r}") from e


def _parse_int(value) -> Optional[int]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.isdigit():
        raise ValueError(value)
    return int(value)
