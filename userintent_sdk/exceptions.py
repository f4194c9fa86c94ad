"""
Exceptions for the UserIntent SDK.
"""
from enum import Enum
from typing import Optional


class ValidationOutcome(str, Enum):
    """
    Result codes for intent validation and execution.

    Every rejection raised by a standard maps onto exactly one of these
    values, so relayers can surface them verbatim to submitters.
    """
    APPROVED = "APPROVED"
    MALFORMED_INTENT = "MALFORMED_INTENT"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    INTENT_ALREADY_USED = "INTENT_ALREADY_USED"
    INTENT_EXPIRED = "INTENT_EXPIRED"
    UNAUTHORIZED_RELAYER = "UNAUTHORIZED_RELAYER"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    UNKNOWN_STANDARD = "UNKNOWN_STANDARD"


class IntentError(Exception):
    """Base exception for all intent-related errors."""
    outcome: Optional[ValidationOutcome] = None


class MalformedIntentError(IntentError):
    """Raised when an intent buffer does not match its declared layout."""
    outcome = ValidationOutcome.MALFORMED_INTENT


class InvalidSignatureError(IntentError):
    """Raised when the recovered signer differs from the declared sender."""
    outcome = ValidationOutcome.INVALID_SIGNATURE


class IntentAlreadyUsedError(IntentError):
    """Raised when the replay marker for an intent is already set."""
    outcome = ValidationOutcome.INTENT_ALREADY_USED


class IntentExpiredError(IntentError):
    """Raised when the current time is past the intent's expiry."""
    outcome = ValidationOutcome.INTENT_EXPIRED


class UnauthorizedRelayerError(IntentError):
    """Raised when an intent is bound to a different relayer."""
    outcome = ValidationOutcome.UNAUTHORIZED_RELAYER


class InsufficientFundsError(IntentError):
    """Raised when the sender cannot cover the relayer payment."""
    outcome = ValidationOutcome.INSUFFICIENT_FUNDS


class ExecutionFailedError(IntentError):
    """Raised when an operation in an executed batch fails."""
    outcome = ValidationOutcome.EXECUTION_FAILED

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class UnknownStandardError(IntentError):
    """Raised when an intent names a standard that is not registered."""
    outcome = ValidationOutcome.UNKNOWN_STANDARD


class TransactionError(IntentError):
    """Raised when submitting an intent to the chain fails."""
    pass
