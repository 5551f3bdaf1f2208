# tokenledger/database/tables/token.py

from sqlalchemy import Column, Index, Integer, String

from ..base import DBBaseModel
from ..types import EvmAddressType


class Token(DBBaseModel):
    __tablename__ = 'tokens'

    contract_address_hash = Column(EvmAddressType(), primary_key=True)
    type = Column(String(20), nullable=False)
    symbol = Column(String(50), nullable=True)
    name = Column(String(255), nullable=True)
    decimals = Column(Integer, nullable=True)

    __table_args__ = (
        Index('idx_tokens_type', 'type'),
    )

    def __repr__(self) -> str:
        return f"<Token(symbol='{self.symbol}', type='{self.type}')>"

    @property
    def is_nft(self) -> bool:
        return self.type in ('ERC-721', 'ERC-1155', 'ERC-404')
