"""
Base interface for intent standards.

A standard owns the meaning of an intent's header and instructions: it
validates the intent against a context and projects it into an ordered list
of operations for the sender's account to execute.
"""
import abc
import logging
from typing import List, Tuple

from ..context import ValidationContext
from ..exceptions import IntentError, ValidationOutcome
from ..models import Operation
from ..replay import ReplayBatch
from ..utils import AddressLike, to_checksum

logger = logging.getLogger(__name__)


class IntentStandard(abc.ABC):
    """Validation and unpacking rules identified by a standard address"""

    def __init__(self, address: AddressLike):
        self.address = to_checksum(address)

    @abc.abstractmethod
    def validate(self, buffer: bytes, context: ValidationContext) -> ValidationOutcome:
        """
        Validate an intent

        Returns:
            ValidationOutcome.APPROVED

        Raises:
            IntentError: Subclass for the first failing check
        """

    @abc.abstractmethod
    def unpack_operations(
        self, buffer: bytes, context: ValidationContext
    ) -> Tuple[ValidationOutcome, List[Operation]]:
        """
        Validate an intent and project it into executable operations

        Raises:
            IntentError: Subclass for the first failing check
        """

    @abc.abstractmethod
    def handle_call(self, account: AddressLike, data: bytes, batch: ReplayBatch) -> None:
        """Apply an operation that an account batch addressed to this standard"""

    def check(self, buffer: bytes, context: ValidationContext) -> ValidationOutcome:
        """
        Non-raising form of :meth:`validate`

        Errors without a validation outcome, such as a failed chain read,
        still propagate.
        """
        try:
            return self.validate(buffer, context)
        except IntentError as e:
            if e.outcome is None:
                raise
            logger.warning(f"Intent rejected by {self.address}: {e}")
            return e.outcome

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"
