"""
UserIntent SDK - packed intent encoding, validation and relaying.
"""
from .client import IntentClient
from .codec import (
    decode_intent,
    get_lengths,
    get_sender_and_standard,
    pack_intent,
    split_intents,
    total_intent_length,
)
from .context import ValidationContext
from .exceptions import (
    ExecutionFailedError,
    InsufficientFundsError,
    IntentAlreadyUsedError,
    IntentError,
    IntentExpiredError,
    InvalidSignatureError,
    MalformedIntentError,
    TransactionError,
    UnauthorizedRelayerError,
    UnknownStandardError,
    ValidationOutcome,
)
from .executor import AccountExecutor
from .models import Operation, TxReceipt, UserIntent
from .replay import InMemoryReplayStore
from .signer import LocalSigner
from .standards import IntentStandard, RelayedExecutionStandard, StandardRegistry
from .version import __version__

__all__ = [
    "IntentClient",
    "AccountExecutor",
    "IntentStandard",
    "RelayedExecutionStandard",
    "StandardRegistry",
    "InMemoryReplayStore",
    "LocalSigner",
    "ValidationContext",
    "Operation",
    "TxReceipt",
    "UserIntent",
    "decode_intent",
    "get_lengths",
    "get_sender_and_standard",
    "pack_intent",
    "split_intents",
    "total_intent_length",
    "ValidationOutcome",
    "IntentError",
    "MalformedIntentError",
    "InvalidSignatureError",
    "IntentAlreadyUsedError",
    "IntentExpiredError",
    "UnauthorizedRelayerError",
    "InsufficientFundsError",
    "ExecutionFailedError",
    "UnknownStandardError",
    "TransactionError",
    "__version__",
]
