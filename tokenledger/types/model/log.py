# tokenledger/types/model/log.py

from typing import Optional

from msgspec import Struct

from ..new import EvmAddress, EvmHash, to_evm_hash


class LogRecord(Struct, kw_only=True):
    transaction_hash: EvmHash
    block_hash: EvmHash
    block_number: int
    index: int
    first_topic: Optional[EvmHash] = None
    address_hash: Optional[EvmAddress] = None

    def __post_init__(self) -> None:
        self.transaction_hash = to_evm_hash(self.transaction_hash)
        self.block_hash = to_evm_hash(self.block_hash)
        if self.first_topic is not None:
            self.first_topic = to_evm_hash(self.first_topic)
