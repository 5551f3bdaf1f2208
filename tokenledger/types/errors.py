# tokenledger/types/errors.py

from typing import Any, Optional


class LedgerError(Exception):
    """Base class for every error raised by the ledger core"""


class MalformedAddress(LedgerError, ValueError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Malformed address hash: {value!r}")


class MalformedHash(LedgerError, ValueError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Malformed 32-byte hash: {value!r}")


class CursorShapeMismatch(LedgerError):
    """A paging cursor does not fit the ordering of the query it was handed to"""


class InvariantViolation(LedgerError):
    def __init__(self, message: str, identity: Optional[tuple] = None):
        self.identity = identity
        if identity:
            message = f"{message} (transfer={identity})"
        super().__init__(message)


class ConfigurationError(LedgerError):
    pass


class StoreUnavailable(LedgerError):
    """The relational store refused or dropped the connection"""


class StoreTimeout(LedgerError):
    """The relational store cancelled a statement on timeout"""
