# tokenledger/types/new.py

from typing import NewType, Union

from eth_utils import is_hex, is_hex_address, remove_0x_prefix

from .errors import MalformedAddress, MalformedHash

EvmAddress = NewType('EvmAddress', str)
EvmHash = NewType('EvmHash', str)
HexStr = NewType('HexStr', str)


def to_evm_address(value: Union[str, bytes]) -> EvmAddress:
    """Normalize a 20-byte address to lowercase 0x-hex, failing fast on bad input."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise MalformedAddress(value)
        return EvmAddress('0x' + bytes(value).hex())

    if not isinstance(value, str) or not is_hex_address(value):
        raise MalformedAddress(value)

    return EvmAddress('0x' + remove_0x_prefix(value).lower())


def to_evm_hash(value: Union[str, bytes]) -> EvmHash:
    """Normalize a 32-byte transaction/block hash or event topic."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 32:
            raise MalformedHash(value)
        return EvmHash('0x' + bytes(value).hex())

    if not isinstance(value, str) or not is_hex(value):
        raise MalformedHash(value)

    unprefixed = remove_0x_prefix(value)
    if len(unprefixed) != 64:
        raise MalformedHash(value)

    return EvmHash('0x' + unprefixed.lower())
