# tokenledger/database/tables/token_transfer.py

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, event
from sqlalchemy.orm import relationship

from ...types import InvariantViolation, check_amount_representation
from ..base import DBBaseModel
from ..types import (
    AmountArrayType,
    EvmAddressType,
    EvmHashType,
    TokenAmountType,
    TokenIdArrayType,
)


REQUIRED_ATTRS = (
    'transaction_hash', 'block_hash', 'log_index', 'block_number',
    'from_address_hash', 'to_address_hash', 'token_contract_address_hash', 'token_type',
)


class TokenTransfer(DBBaseModel):
    __tablename__ = 'token_transfers'

    transaction_hash = Column(EvmHashType(), primary_key=True)
    block_hash = Column(EvmHashType(), ForeignKey('blocks.hash'), primary_key=True)
    log_index = Column(Integer, primary_key=True)

    block_number = Column(Integer, nullable=True)
    from_address_hash = Column(EvmAddressType(), nullable=False)
    to_address_hash = Column(EvmAddressType(), nullable=False)
    token_contract_address_hash = Column(
        EvmAddressType(), ForeignKey('tokens.contract_address_hash'), nullable=False
    )

    amount = Column(TokenAmountType(), nullable=True)
    amounts = Column(AmountArrayType(), nullable=True)
    token_ids = Column(TokenIdArrayType(), nullable=True)

    token_type = Column(String(20), nullable=True)
    block_consensus = Column(Boolean, nullable=True)

    block = relationship("Block", lazy="select")
    token = relationship("Token", lazy="select")

    __table_args__ = (
        Index('idx_token_transfers_token_block_log',
              'token_contract_address_hash', 'block_number', 'log_index'),
        Index('idx_token_transfers_from_block_log', 'from_address_hash', 'block_number', 'log_index'),
        Index('idx_token_transfers_to_block_log', 'to_address_hash', 'block_number', 'log_index'),
        Index('idx_token_transfers_block_consensus', 'block_consensus'),
    )

    @property
    def identity(self) -> tuple:
        return (self.transaction_hash, self.block_hash, self.log_index)

    @property
    def sort_key(self) -> tuple:
        # Rows without a block sort before every numbered block
        block_number = self.block_number if self.block_number is not None else -1
        return (block_number, self.log_index)

    def validate(self) -> None:
        missing = [name for name in REQUIRED_ATTRS if getattr(self, name) is None]
        if missing:
            raise InvariantViolation(f"Missing required attributes: {', '.join(missing)}", self.identity)
        self.check_amounts()

    def check_amounts(self) -> None:
        check_amount_representation(
            self.token_type, self.amount, self.amounts, self.token_ids, self.identity
        )

    def __repr__(self) -> str:
        return f"<TokenTransfer(block={self.block_number}, log_index={self.log_index}, tx={str(self.transaction_hash)[:10]}...)>"


@event.listens_for(TokenTransfer, "before_insert")
@event.listens_for(TokenTransfer, "before_update")
def _validate_before_write(mapper, connection, target: TokenTransfer) -> None:
    target.validate()


@event.listens_for(TokenTransfer, "load")
def _validate_on_load(target: TokenTransfer, context) -> None:
    # Rows written outside the ORM are checked as they are read
    target.check_amounts()


