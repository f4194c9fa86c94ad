"""
Utility functions for the UserIntent SDK.
"""
from typing import Union

from web3 import Web3

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
UINT16_MAX = 2 ** 16 - 1

AddressLike = Union[str, bytes]


def address_to_bytes(address: AddressLike) -> bytes:
    """
    Convert an address to its raw 20-byte form

    Args:
        address: Hex string (with or without 0x prefix) or raw bytes

    Returns:
        20 raw bytes

    Raises:
        ValueError: If the value is not a 20-byte address
    """
    if isinstance(address, (bytes, bytearray)):
        raw = bytes(address)
    elif isinstance(address, str):
        hex_str = address[2:] if address.startswith(("0x", "0X")) else address
        try:
            raw = bytes.fromhex(hex_str)
        except ValueError as e:
            raise ValueError(f"Invalid address hex: {address!r}") from e
    else:
        raise ValueError(f"Address must be str or bytes, got {type(address).__name__}")

    if len(raw) != 20:
        raise ValueError(f"Address must be 20 bytes, got {len(raw)}")
    return raw


def to_checksum(address: AddressLike) -> str:
    """Normalize any address representation to an EIP-55 checksum string"""
    return Web3.to_checksum_address(address_to_bytes(address))


def same_address(a: AddressLike, b: AddressLike) -> bool:
    return address_to_bytes(a) == address_to_bytes(b)


def function_selector(signature: str) -> bytes:
    """Return the 4-byte selector for a Solidity function signature"""
    return bytes(Web3.keccak(text=signature)[:4])


def uint_to_bytes(value: int, size: int) -> bytes:
    """
    Encode an unsigned integer as fixed-width big-endian bytes

    Raises:
        ValueError: If the value is negative or does not fit in ``size`` bytes
    """
    if value < 0:
        raise ValueError(f"Unsigned value must be non-negative, got {value}")
    if value >= 1 << (8 * size):
        raise ValueError(f"Value {value} does not fit in {size} bytes")
    return value.to_bytes(size, "big")


def read_uint(buffer: bytes, start: int, size: int) -> int:
    return int.from_bytes(buffer[start:start + size], "big")


def hex_to_bytes(value: str) -> bytes:
    """
    Decode a hex string with or without a 0x prefix

    Raises:
        ValueError: If the string is not valid hex
    """
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)
