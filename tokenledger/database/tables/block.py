# tokenledger/database/tables/block.py

from sqlalchemy import Boolean, Column, Index, Integer

from ..base import DBBaseModel
from ..types import EvmHashType


class Block(DBBaseModel):
    __tablename__ = 'blocks'

    hash = Column(EvmHashType(), primary_key=True)
    number = Column(Integer, nullable=False)
    consensus = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index('idx_blocks_number', 'number'),
        Index('idx_blocks_consensus', 'consensus'),
    )

    def __repr__(self) -> str:
        return f"<Block(number={self.number}, consensus={self.consensus})>"
