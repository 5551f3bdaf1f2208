# tokenledger/database/queries/merge.py
"""
Bounded fan-out reads merged on the client.

Each branch is its own ordered, limited query. The branches are merged
under the shared ordering, duplicates (same row reached through two
branches) are dropped, and the merged stream is cut to the final page size.
"""

import heapq
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from sqlalchemy.orm import Query

from ...core.logging import LoggingMixin
from ...types import Direction, PagingOptions
from ..tables import TokenTransfer
from .paging import handle_paging_options, order_transfers

T = TypeVar('T')


def transfer_sort_key(transfer: TokenTransfer) -> tuple:
    return transfer.sort_key


def transfer_identity(transfer: TokenTransfer) -> tuple:
    return transfer.identity


def merge_bounded(branches: Sequence[Iterable[T]],
                  key: Callable[[T], Any],
                  identity: Callable[[T], Any],
                  limit: Optional[int],
                  descending: bool = True) -> List[T]:
    """Merge individually sorted branches, drop repeated identities, re-apply the limit."""
    seen = set()
    merged: List[T] = []

    for row in heapq.merge(*branches, key=key, reverse=descending):
        row_id = identity(row)
        if row_id in seen:
            continue
        seen.add(row_id)
        merged.append(row)
        if limit is not None and len(merged) >= limit:
            break

    return merged


class AddressDirectionMerger(LoggingMixin):
    """Either-direction address listing built from independent TO and FROM reads"""

    BRANCHES = (Direction.TO, Direction.FROM)

    def fetch(self, build_branch: Callable[[Direction], Query],
              paging: Optional[PagingOptions]) -> List[TokenTransfer]:
        branches = []
        for direction in self.BRANCHES:
            query = order_transfers(build_branch(direction), paging)
            query = handle_paging_options(query, paging)
            rows = query.all()
            self.log_debug("Direction branch read",
                           direction=direction.value,
                           row_count=len(rows))
            branches.append(rows)

        limit = paging.page_size if paging is not None else None
        descending = not (paging is not None and paging.asc_order)

        return merge_bounded(branches, transfer_sort_key, transfer_identity, limit, descending)
