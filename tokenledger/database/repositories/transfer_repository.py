# tokenledger/database/repositories/transfer_repository.py

from typing import Dict, List, Optional, Sequence, Union

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from ...core.denormalization import DenormalizationState
from ...core.logging import log_with_context, DEBUG, ERROR
from ...types import (
    BlockCursor,
    CursorShapeMismatch,
    DEFAULT_PAGE_SIZE,
    Direction,
    EvmHash,
    LogRecord,
    PagingOptions,
    SortKey,
    to_evm_address,
)
from ..base_repository import BaseRepository
from ..queries import transfers as shapes
from ..queries.merge import AddressDirectionMerger
from ..queries.paging import handle_paging_options, order_transfers, page_by_block_only
from ..tables import TokenTransfer
from ..types import token_id_text


class TransferRepository(BaseRepository[TokenTransfer]):
    """
    Read side of the token transfer ledger.

    Listings are ordered newest first by (block_number, log_index) and paged
    by keyset cursors. Canonical-chain and token-type filtering go through
    the denormalization snapshot taken at the start of each call.
    """

    def __init__(self, db_manager, state: Optional[DenormalizationState] = None,
                 default_page_size: int = DEFAULT_PAGE_SIZE):
        super().__init__(db_manager, TokenTransfer, state)
        self.default_page_size = default_page_size
        self.merger = AddressDirectionMerger()

    def _paging(self, paging: Optional[PagingOptions]) -> PagingOptions:
        return paging if paging is not None else PagingOptions(page_size=self.default_page_size)

    def _run(self, query: Query, shape: str, **context) -> List[TokenTransfer]:
        try:
            rows = query.all()
        except Exception as e:
            log_with_context(self.logger, ERROR, f"Error running {shape} query", error=str(e), **context)
            raise
        log_with_context(self.logger, DEBUG, f"{shape} query complete", row_count=len(rows), **context)
        return rows

    def list_by_token(self, session: Session, token_hash: str,
                      paging: Optional[PagingOptions] = None) -> List[TokenTransfer]:
        token = to_evm_address(token_hash)
        paging = self._paging(paging)
        if paging.is_exhausted:
            return []

        snapshot = self.snapshot()
        query = shapes.by_token(session.query(TokenTransfer), token, snapshot)
        query = shapes.with_token_preload(order_transfers(query, paging))
        query = handle_paging_options(query, paging)

        return self._run(query, "by_token", token=token, page_size=paging.page_size,
                         mode=_mode(snapshot))

    def list_by_token_and_id(self, session: Session, token_hash: str, token_id: int,
                             paging: Optional[PagingOptions] = None) -> List[TokenTransfer]:
        token = to_evm_address(token_hash)
        token_id = _token_id(token_id)
        paging = self._paging(paging)
        if paging.is_exhausted:
            return []

        snapshot = self.snapshot()
        query = shapes.by_token_and_id(session.query(TokenTransfer), token, token_id, snapshot)
        query = shapes.with_token_preload(order_transfers(query, paging))
        query = handle_paging_options(query, paging)

        return self._run(query, "by_token_and_id", token=token, token_id=token_id,
                         page_size=paging.page_size, mode=_mode(snapshot))

    def count_by_token(self, session: Session, token_hash: str) -> int:
        """Count every transfer of the token. Unbounded over large tables."""
        token = to_evm_address(token_hash)
        query = shapes.count_filter(session.query(func.count()).select_from(TokenTransfer), token)
        return query.scalar()

    def count_by_token_and_id(self, session: Session, token_hash: str, token_id: int) -> int:
        token = to_evm_address(token_hash)
        token_id = _token_id(token_id)
        query = shapes.count_filter(
            session.query(func.count()).select_from(TokenTransfer), token, token_id
        )
        return query.scalar()

    def list_by_address(self, session: Session, direction: Union[Direction, str, None],
                        address_hash: str, token_types: Optional[Sequence[str]] = None,
                        paging: Optional[PagingOptions] = None) -> List[TokenTransfer]:
        address = to_evm_address(address_hash)
        direction = Direction.parse(direction)
        paging = self._paging(paging)
        _require_block_sort(paging, "by_address")
        if paging.is_exhausted:
            return []

        snapshot = self.snapshot()

        def build(branch: Direction) -> Query:
            query = shapes.by_address_direction(
                session.query(TokenTransfer), branch, address, token_types, snapshot
            )
            return shapes.with_token_preload(query)

        if direction is not Direction.EITHER:
            query = handle_paging_options(order_transfers(build(direction), paging), paging)
            return self._run(query, "by_address", address=address, direction=direction.value,
                             page_size=paging.page_size, mode=_mode(snapshot))

        rows = self.merger.fetch(build, paging)
        log_with_context(self.logger, DEBUG, "by_address merged query complete",
                         address=address, direction=direction.value,
                         row_count=len(rows), mode=_mode(snapshot))
        return rows

    def transaction_hashes_by_address(self, session: Session, direction: Union[Direction, str, None],
                                      address_hash: str,
                                      paging: Optional[PagingOptions] = None) -> List[EvmHash]:
        address = to_evm_address(address_hash)
        direction = Direction.parse(direction)
        paging = self._paging(paging)
        _require_block_sort(paging, "transaction_hashes_by_address")
        if isinstance(paging.key, BlockCursor) and paging.key.block_number == 0:
            return []

        query = shapes.transaction_hashes(session, direction, address, ascending=paging.asc_order)
        query = page_by_block_only(query, paging)
        if paging.page_size is not None:
            query = query.limit(paging.page_size)

        return [row[0] for row in query.all()]

    def list_by_address_and_token(self, session: Session, address_hash: str,
                                  token_hash: str) -> List[TokenTransfer]:
        """Unpaginated; callers bound the result themselves."""
        address = to_evm_address(address_hash)
        token = to_evm_address(token_hash)
        query = shapes.by_address_and_token(session.query(TokenTransfer), address, token, self.snapshot())
        return self._run(query, "by_address_and_token", address=address, token=token)

    def erc721_canonical_query(self, session: Session) -> Query:
        """Canonical ERC-721 transfers as a query; the caller applies its own limit."""
        return shapes.erc721_canonical(session.query(TokenTransfer), self.snapshot())

    def resolve_from_logs(self, session: Session, logs: Sequence[LogRecord],
                          necessity_by_association: Optional[Dict[str, str]] = None) -> List[TokenTransfer]:
        if not logs:
            return []

        query = shapes.from_logs(session.query(TokenTransfer), logs)
        query = shapes.join_associations(query, necessity_by_association)
        query = query.limit(len(logs))
        return self._run(query, "from_logs", row_count_in=len(logs))


def _mode(snapshot) -> str:
    return "denormalized" if snapshot.consensus_finished else "block_join"


def _token_id(token_id) -> int:
    return int(token_id_text(token_id))


def _require_block_sort(paging: PagingOptions, shape: str) -> None:
    # Address listings merge and page on (block_number, log_index) only
    if paging.sort is not SortKey.BLOCK:
        raise CursorShapeMismatch(f"{shape} is ordered by block; {paging.sort.value} ordering is not supported")
