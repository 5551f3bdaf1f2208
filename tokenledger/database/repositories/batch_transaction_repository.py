# tokenledger/database/repositories/batch_transaction_repository.py

from typing import List

from sqlalchemy.orm import Session

from ...types import BatchTransaction, EvmHash
from ..base_repository import BaseRepository
from ..tables import DBBatchTransaction


class BatchTransactionRepository(BaseRepository[DBBatchTransaction]):
    """Rollup batch to L2 transaction links"""

    def __init__(self, db_manager):
        super().__init__(db_manager, DBBatchTransaction)

    def add(self, session: Session, link: BatchTransaction) -> DBBatchTransaction:
        record = DBBatchTransaction.from_msgspec(link)
        session.add(record)
        session.flush()
        return record

    def transaction_hashes(self, session: Session, batch_number: int) -> List[EvmHash]:
        rows = session.query(DBBatchTransaction.hash).filter(
            DBBatchTransaction.batch_number == batch_number
        ).order_by(DBBatchTransaction.hash).all()
        return [row[0] for row in rows]

    def batch_number_for(self, session: Session, tx_hash: EvmHash):
        return session.query(DBBatchTransaction.batch_number).filter(
            DBBatchTransaction.hash == tx_hash
        ).scalar()
