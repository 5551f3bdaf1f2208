# tokenledger/database/repositories/__init__.py

from .transfer_repository import TransferRepository
from .batch_transaction_repository import BatchTransactionRepository

__all__ = [
    'TransferRepository',
    'BatchTransactionRepository',
]
