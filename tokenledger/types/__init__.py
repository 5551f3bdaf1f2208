# tokenledger/types/__init__.py

from .new import EvmAddress, EvmHash, HexStr, to_evm_address, to_evm_hash
from .errors import (
    LedgerError,
    MalformedAddress,
    MalformedHash,
    CursorShapeMismatch,
    InvariantViolation,
    ConfigurationError,
    StoreUnavailable,
    StoreTimeout,
)
from .constants import (
    TRANSFER_SIGNATURE,
    WETH_DEPOSIT_SIGNATURE,
    WETH_WITHDRAWAL_SIGNATURE,
    ERC1155_SINGLE_TRANSFER_SIGNATURE,
    ERC1155_BATCH_TRANSFER_SIGNATURE,
    ERC404_ERC20_TRANSFER_EVENT,
    ERC404_ERC721_TRANSFER_EVENT,
    TRANSFER_FUNCTION_SIGNATURE,
    KNOWN_TRANSFER_SIGNATURES,
    DEFAULT_PAGE_SIZE,
)
from .paging import (
    Direction,
    SortKey,
    BlockCursor,
    TokenIdCursor,
    Cursor,
    PagingOptions,
    cursor_from_key,
    encode_cursor,
    decode_cursor,
)
from .configs.config import DatabaseConfig
from .model.transfer import TokenType, TransferEvent, check_amount_representation
from .model.log import LogRecord
from .model.batch import BatchTransaction

__all__ = [
    'EvmAddress', 'EvmHash', 'HexStr', 'to_evm_address', 'to_evm_hash',

    'LedgerError', 'MalformedAddress', 'MalformedHash', 'CursorShapeMismatch',
    'InvariantViolation', 'ConfigurationError', 'StoreUnavailable', 'StoreTimeout',

    'TRANSFER_SIGNATURE', 'WETH_DEPOSIT_SIGNATURE', 'WETH_WITHDRAWAL_SIGNATURE',
    'ERC1155_SINGLE_TRANSFER_SIGNATURE', 'ERC1155_BATCH_TRANSFER_SIGNATURE',
    'ERC404_ERC20_TRANSFER_EVENT', 'ERC404_ERC721_TRANSFER_EVENT',
    'TRANSFER_FUNCTION_SIGNATURE', 'KNOWN_TRANSFER_SIGNATURES', 'DEFAULT_PAGE_SIZE',

    'Direction', 'SortKey', 'BlockCursor', 'TokenIdCursor', 'Cursor', 'PagingOptions',
    'cursor_from_key', 'encode_cursor', 'decode_cursor',

    'DatabaseConfig',

    'TokenType', 'TransferEvent', 'check_amount_representation',
    'LogRecord', 'BatchTransaction',
]
