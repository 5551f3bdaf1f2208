# tokenledger/core/container.py

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy.orm import Session

from .config import LedgerConfig
from .denormalization import DenormalizationState, configure_denormalization
from .logging import LedgerLogger, log_with_context, INFO


class LedgerContainer:
    """Wires configuration, database managers and repositories together"""

    def __init__(self, config: LedgerConfig, state: Optional[DenormalizationState] = None):
        from ..database.connection import DatabaseManager, ReplicaRouter
        from ..database.repositories import TransferRepository, BatchTransactionRepository
        from ..reconciliation.scanner import UncatalogedTransferScanner

        self.config = config
        self.logger = LedgerLogger.get_logger('core.container')
        self.state = state if state is not None else configure_denormalization(config)

        primary = DatabaseManager(config.database, name="primary")
        replica = DatabaseManager(config.replica, name="replica") if config.replica else None
        self.router = ReplicaRouter(primary, replica)

        self.transfers = TransferRepository(primary, self.state, config.default_page_size)
        self.batch_transactions = BatchTransactionRepository(primary)
        self.scanner = UncatalogedTransferScanner(config.transfer_signatures,
                                                  config.reconciliation_chunk_size)

    @property
    def primary(self):
        return self.router.primary

    def initialize(self) -> 'LedgerContainer':
        self.router.initialize()
        log_with_context(self.logger, INFO, "Ledger container initialized",
                         replica=self.router.replica is not None)
        return self

    def shutdown(self) -> None:
        self.router.shutdown()

    @contextmanager
    def session(self, api: bool = False) -> Generator[Session, None, None]:
        with self.router.get_session(api=api) as session:
            yield session
