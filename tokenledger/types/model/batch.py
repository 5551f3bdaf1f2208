# tokenledger/types/model/batch.py

from typing import Optional

from msgspec import Struct

from ..errors import InvariantViolation
from ..new import EvmHash, to_evm_hash


class BatchTransaction(Struct, kw_only=True):
    """Links an L2 transaction to the rollup batch that carried it"""
    batch_number: Optional[int] = None
    hash: Optional[EvmHash] = None

    def __post_init__(self) -> None:
        if self.batch_number is None or self.hash is None:
            raise InvariantViolation("batch_number and hash are required")
        if self.batch_number < 0:
            raise InvariantViolation(f"batch_number must be non-negative, got {self.batch_number}")
        self.hash = to_evm_hash(self.hash)
