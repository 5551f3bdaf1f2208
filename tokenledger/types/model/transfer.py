# tokenledger/types/model/transfer.py

import enum
from decimal import Decimal
from typing import List, Optional, Sequence

from msgspec import Struct

from ..errors import InvariantViolation
from ..new import EvmAddress, EvmHash, to_evm_address, to_evm_hash


class TokenType(str, enum.Enum):
    ERC20 = "ERC-20"
    ERC721 = "ERC-721"
    ERC1155 = "ERC-1155"
    ERC404 = "ERC-404"


TOKEN_TYPES = frozenset(t.value for t in TokenType)


def check_amount_representation(
    token_type: Optional[str],
    amount: Optional[Decimal],
    amounts: Optional[Sequence],
    token_ids: Optional[Sequence],
    identity: Optional[tuple] = None,
) -> None:
    """
    Exactly one of the scalar `amount` or the batched `amounts` is populated.
    A batched transfer carries `token_ids` of the same length.
    """
    if token_type is not None and token_type not in TOKEN_TYPES:
        raise InvariantViolation(f"Unknown token type {token_type!r}", identity)

    has_scalar = amount is not None
    has_batch = amounts is not None

    if has_scalar and has_batch:
        raise InvariantViolation("Transfer carries both a scalar amount and batched amounts", identity)
    if not has_scalar and not has_batch:
        raise InvariantViolation("Transfer carries neither a scalar amount nor batched amounts", identity)

    if has_batch:
        if token_ids is None or len(token_ids) != len(amounts):
            raise InvariantViolation("Batched amounts and token_ids must be parallel arrays", identity)
        if token_type == TokenType.ERC20.value:
            raise InvariantViolation("ERC-20 transfers cannot be batched", identity)


class TransferEvent(Struct, kw_only=True):
    transaction_hash: EvmHash
    block_hash: EvmHash
    log_index: int
    block_number: int
    from_address_hash: EvmAddress
    to_address_hash: EvmAddress
    token_contract_address_hash: EvmAddress
    token_type: str
    amount: Optional[Decimal] = None
    amounts: Optional[List[Decimal]] = None
    token_ids: Optional[List[int]] = None
    block_consensus: Optional[bool] = None

    def __post_init__(self) -> None:
        self.transaction_hash = to_evm_hash(self.transaction_hash)
        self.block_hash = to_evm_hash(self.block_hash)
        self.from_address_hash = to_evm_address(self.from_address_hash)
        self.to_address_hash = to_evm_address(self.to_address_hash)
        self.token_contract_address_hash = to_evm_address(self.token_contract_address_hash)

        if self.log_index < 0 or self.block_number < 0:
            raise InvariantViolation("log_index and block_number must be non-negative", self.identity)

        check_amount_representation(
            self.token_type, self.amount, self.amounts, self.token_ids, self.identity
        )

    @property
    def identity(self) -> tuple:
        return (self.transaction_hash, self.block_hash, self.log_index)

    @property
    def is_batched(self) -> bool:
        return self.amounts is not None
