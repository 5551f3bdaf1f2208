# tokenledger/database/base_repository.py

from typing import TypeVar, Generic, Type, Optional

from sqlalchemy.orm import Session

from ..core.denormalization import DenormalizationState, DenormalizationSnapshot, denormalization
from ..core.logging import LedgerLogger, log_with_context, ERROR

T = TypeVar('T')


class BaseRepository(Generic[T]):
    def __init__(self, db_manager, model_class: Type[T],
                 state: Optional[DenormalizationState] = None):
        self.db_manager = db_manager
        self.model_class = model_class
        self.state = state if state is not None else denormalization
        self.logger = LedgerLogger.get_logger(f'database.repository.{model_class.__name__.lower()}')

    def snapshot(self) -> DenormalizationSnapshot:
        return self.state.snapshot()

    def count(self, session: Session) -> int:
        try:
            return session.query(self.model_class).count()
        except Exception as e:
            log_with_context(self.logger, ERROR, f"Error counting {self.model_class.__name__}",
                             error=str(e))
            raise
