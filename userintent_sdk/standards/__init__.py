"""
Intent standards for the UserIntent SDK.
"""
from .base import IntentStandard
from .registry import StandardRegistry
from .relayed_execution import (
    RelayedExecutionStandard,
    decode_header,
    decode_instructions,
    encode_execution,
    encode_header,
    encode_instructions,
)

__all__ = [
    "IntentStandard",
    "StandardRegistry",
    "RelayedExecutionStandard",
    "decode_header",
    "decode_instructions",
    "encode_execution",
    "encode_header",
    "encode_instructions",
]
