# tokenledger/database/tables/__init__.py

from .block import Block
from .token import Token
from .token_transfer import TokenTransfer
from .log import Log
from .batch_transaction import DBBatchTransaction

__all__ = [
    'Block',
    'Token',
    'TokenTransfer',
    'Log',
    'DBBatchTransaction',
]
