# tokenledger/database/types.py

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import ARRAY, NUMERIC
from sqlalchemy.types import TypeDecorator

from ..types.errors import InvariantViolation
from ..types.new import EvmAddress, EvmHash


class EvmAddressType(TypeDecorator):
    impl = String(42)
    cache_ok = True

    def process_bind_param(self, value: Optional[EvmAddress], dialect) -> Optional[str]:
        return str(value).lower() if value else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[EvmAddress]:
        return EvmAddress(value) if value else None


class EvmHashType(TypeDecorator):
    impl = String(66)
    cache_ok = True

    def process_bind_param(self, value: Optional[EvmHash], dialect) -> Optional[str]:
        return str(value).lower() if value else None

    def process_result_value(self, value: Optional[str], dialect) -> Optional[EvmHash]:
        return EvmHash(value) if value else None


class TokenAmountType(TypeDecorator):
    """NUMERIC(78, 0) on PostgreSQL, decimal text elsewhere so no precision is lost"""
    impl = String(80)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(NUMERIC(precision=78, scale=0))
        return dialect.type_descriptor(String(80))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if dialect.name == 'postgresql':
            return Decimal(value)
        return str(Decimal(value))

    def process_result_value(self, value, dialect) -> Optional[Decimal]:
        return Decimal(value) if value is not None else None


TOKEN_ID_DIGITS = 78


def token_id_text(value) -> str:
    """Zero-padded decimal form; text order matches numeric order."""
    token_id = int(value)
    if token_id < 0 or token_id >= 10 ** TOKEN_ID_DIGITS:
        raise InvariantViolation(f"token id out of range: {value!r}")
    return format(token_id, f"0{TOKEN_ID_DIGITS}d")


class TokenIdType(TypeDecorator):
    """A single token id: NUMERIC(78, 0) on PostgreSQL, fixed-width text elsewhere"""
    impl = String(TOKEN_ID_DIGITS)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(NUMERIC(precision=78, scale=0))
        return dialect.type_descriptor(String(TOKEN_ID_DIGITS))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if dialect.name == 'postgresql':
            return Decimal(int(value))
        return token_id_text(value)

    def process_result_value(self, value, dialect) -> Optional[int]:
        return int(value) if value is not None else None


class NumericArrayType(TypeDecorator):
    """
    NUMERIC(78, 0)[] on PostgreSQL, a JSON array elsewhere.

    Subclasses choose how an element is written into the JSON array and
    how it is read back.
    """
    impl = JSON(none_as_null=True)
    cache_ok = True

    def encode_element(self, value):
        raise NotImplementedError

    def decode_element(self, value):
        raise NotImplementedError

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(ARRAY(NUMERIC(precision=78, scale=0)))
        return dialect.type_descriptor(JSON(none_as_null=True))

    def process_bind_param(self, value, dialect) -> Optional[List]:
        if value is None:
            return None
        if dialect.name == 'postgresql':
            return [Decimal(v) for v in value]
        return [self.encode_element(v) for v in value]

    def process_result_value(self, value, dialect) -> Optional[List]:
        if value is None:
            return None
        return [self.decode_element(v) for v in value]


class TokenIdArrayType(NumericArrayType):
    """JSON elements are fixed-width text so containment and ordering work past 64 bits"""
    cache_ok = True

    def encode_element(self, value) -> str:
        return token_id_text(value)

    def decode_element(self, value) -> int:
        return int(value)


class AmountArrayType(NumericArrayType):
    cache_ok = True

    def encode_element(self, value) -> str:
        return str(Decimal(value))

    def decode_element(self, value) -> Decimal:
        return Decimal(value)
