# tokenledger/reconciliation/scanner.py

from typing import Callable, Iterator, Sequence, TypeVar

from sqlalchemy import and_, exists
from sqlalchemy.orm import Query, Session

from ..core.logging import LoggingMixin
from ..types import ConfigurationError, EvmHash, KNOWN_TRANSFER_SIGNATURES
from ..database.tables import Log, TokenTransfer

A = TypeVar('A')


class UncatalogedTransferScanner(LoggingMixin):
    """
    Finds blocks holding token transfer logs with no derived transfer row.

    A log is catalogued when a token transfer shares its transaction hash
    and log index. Block numbers of uncatalogued logs are streamed from a
    server-side cursor in chunks of `chunk_size`, each block at most once.
    """

    def __init__(self, signatures: Sequence[EvmHash] = KNOWN_TRANSFER_SIGNATURES,
                 chunk_size: int = 1000):
        if chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
        if not signatures:
            raise ConfigurationError("At least one transfer signature is required")

        self.signatures = tuple(signatures)
        self.chunk_size = chunk_size

    def query(self, session: Session) -> Query:
        catalogued = exists().where(and_(
            TokenTransfer.transaction_hash == Log.transaction_hash,
            TokenTransfer.log_index == Log.index,
        ))

        return session.query(Log.block_number).filter(
            Log.first_topic.in_(self.signatures),
            Log.block_number.isnot(None),
            ~catalogued,
        ).distinct()

    def find_uncataloged_block_numbers(self, session: Session) -> Iterator[int]:
        """Lazy, single-pass stream of distinct block numbers; order is unspecified."""
        self.log_info("Scanning for uncatalogued token transfer logs",
                      signature_count=len(self.signatures),
                      page_size=self.chunk_size)

        emitted = 0
        for (block_number,) in self.query(session).yield_per(self.chunk_size):
            emitted += 1
            yield block_number

        self.log_info("Uncatalogued scan complete", row_count=emitted)

    def fold(self, session: Session, reducer: Callable[[A, int], A], initial: A) -> A:
        accumulator = initial
        for block_number in self.find_uncataloged_block_numbers(session):
            accumulator = reducer(accumulator, block_number)
        return accumulator
