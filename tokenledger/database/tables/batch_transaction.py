# tokenledger/database/tables/batch_transaction.py

from sqlalchemy import Column, Index, Integer, event

from ...types import InvariantViolation
from ..base import DBBaseModel
from ..types import EvmHashType


class DBBatchTransaction(DBBaseModel):
    __tablename__ = 'batch_transactions'

    hash = Column(EvmHashType(), primary_key=True)
    batch_number = Column(Integer, nullable=False)

    __table_args__ = (
        Index('idx_batch_transactions_batch_number', 'batch_number'),
    )

    def validate(self) -> None:
        if self.batch_number is None or self.hash is None:
            raise InvariantViolation("batch_number and hash are required")

    def __repr__(self) -> str:
        return f"<BatchTransaction(batch={self.batch_number}, hash={str(self.hash)[:10]}...)>"


@event.listens_for(DBBatchTransaction, "before_insert")
def _validate_before_insert(mapper, connection, target: DBBatchTransaction) -> None:
    target.validate()
