# tokenledger/database/tables/log.py

from sqlalchemy import Column, Index, Integer

from ..base import DBBaseModel
from ..types import EvmAddressType, EvmHashType


class Log(DBBaseModel):
    __tablename__ = 'logs'

    transaction_hash = Column(EvmHashType(), primary_key=True)
    block_hash = Column(EvmHashType(), primary_key=True)
    index = Column(Integer, primary_key=True)

    block_number = Column(Integer, nullable=True)
    first_topic = Column(EvmHashType(), nullable=True)
    address_hash = Column(EvmAddressType(), nullable=True)

    __table_args__ = (
        Index('idx_logs_first_topic', 'first_topic'),
        Index('idx_logs_transaction_hash_index', 'transaction_hash', 'index'),
    )

    def __repr__(self) -> str:
        return f"<Log(block={self.block_number}, index={self.index})>"
