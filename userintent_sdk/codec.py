"""
Packed intent codec.

An intent is a contiguous byte buffer with a fixed 46-byte prefix followed
by a variable body::

    sender (20) | standard (20) | headerLength (2) | instructionsLength (2)
    | signatureLength (2) | header | instructions | signature | extra...

All integers are unsigned big-endian. Bytes past the signature are opaque
extra data (for example nested intents) and are never consumed here.
"""
import logging
from typing import List, Tuple

from .exceptions import MalformedIntentError
from .models import UserIntent
from .utils import AddressLike, UINT16_MAX, address_to_bytes, read_uint, to_checksum

logger = logging.getLogger(__name__)

ADDRESS_LENGTH = 20
SENDER_STANDARD_LENGTH = 40
PREFIX_LENGTH = 46


def get_sender_and_standard(buffer: bytes) -> Tuple[str, str]:
    """
    Read the sender and standard addresses from an intent

    Args:
        buffer: Packed intent bytes

    Returns:
        Tuple of (sender, standard) as checksum addresses

    Raises:
        MalformedIntentError: If the buffer is shorter than 40 bytes
    """
    if len(buffer) < SENDER_STANDARD_LENGTH:
        raise MalformedIntentError(
            f"Intent too short for sender and standard: {len(buffer)} bytes"
        )
    return to_checksum(buffer[0:20]), to_checksum(buffer[20:40])


def get_lengths(buffer: bytes) -> Tuple[int, int, int]:
    """
    Read the three segment lengths from an intent

    Returns:
        Tuple of (header_length, instructions_length, signature_length)

    Raises:
        MalformedIntentError: If the buffer is shorter than 46 bytes
    """
    if len(buffer) < PREFIX_LENGTH:
        raise MalformedIntentError(
            f"Intent too short for length prefix: {len(buffer)} bytes"
        )
    return read_uint(buffer, 40, 2), read_uint(buffer, 42, 2), read_uint(buffer, 44, 2)


def total_intent_length(buffer: bytes) -> int:
    """Number of bytes the intent at the start of ``buffer`` occupies"""
    header_length, instructions_length, signature_length = get_lengths(buffer)
    return header_length + instructions_length + signature_length + PREFIX_LENGTH


def pack_intent(
    sender: AddressLike,
    standard: AddressLike,
    header: bytes,
    instructions: bytes,
    signature: bytes = b"",
    extra: bytes = b"",
) -> bytes:
    """
    Pack intent segments into the wire format

    Args:
        sender: Account the intent acts for
        standard: Address of the standard interpreting the intent
        header: Standard-specific header bytes
        instructions: Standard-specific instruction bytes
        signature: Signature bytes
        extra: Opaque trailing data appended after the signature

    Returns:
        Packed intent bytes

    Raises:
        ValueError: If an address is not 20 bytes or a segment exceeds 65535 bytes
    """
    for name, segment in (("header", header), ("instructions", instructions), ("signature", signature)):
        if len(segment) > UINT16_MAX:
            raise ValueError(f"{name} is {len(segment)} bytes, maximum is {UINT16_MAX}")

    return b"".join([
        address_to_bytes(sender),
        address_to_bytes(standard),
        len(header).to_bytes(2, "big"),
        len(instructions).to_bytes(2, "big"),
        len(signature).to_bytes(2, "big"),
        bytes(header),
        bytes(instructions),
        bytes(signature),
        bytes(extra),
    ])


def decode_intent(buffer: bytes) -> UserIntent:
    """
    Slice an intent buffer into its segments

    Raises:
        MalformedIntentError: If the buffer is shorter than its declared length
    """
    header_length, instructions_length, signature_length = get_lengths(buffer)
    total = header_length + instructions_length + signature_length + PREFIX_LENGTH
    if len(buffer) < total:
        raise MalformedIntentError(
            f"Intent declares {total} bytes but buffer holds {len(buffer)}"
        )

    header_end = PREFIX_LENGTH + header_length
    instructions_end = header_end + instructions_length
    return UserIntent(
        sender=buffer[0:20],
        standard=buffer[20:40],
        header=bytes(buffer[PREFIX_LENGTH:header_end]),
        instructions=bytes(buffer[header_end:instructions_end]),
        signature=bytes(buffer[instructions_end:total]),
        extra=bytes(buffer[total:]),
    )


def split_intents(buffer: bytes) -> List[bytes]:
    """
    Split a transport buffer holding several concatenated intents

    Raises:
        MalformedIntentError: If any intent is truncated
    """
    intents = []
    offset = 0
    while offset < len(buffer):
        remaining = buffer[offset:]
        length = total_intent_length(remaining)
        if len(remaining) < length:
            raise MalformedIntentError(
                f"Intent at offset {offset} declares {length} bytes but only {len(remaining)} remain"
            )
        intents.append(bytes(remaining[:length]))
        offset += length
    logger.debug(f"Split transport buffer into {len(intents)} intents")
    return intents
