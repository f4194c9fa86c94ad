"""
Registry of intent standards.

Accounts opt into standards explicitly; an intent is only dispatched to a
standard its sender has registered.
"""
import logging
import threading
from typing import Dict, Set, Tuple

from ..codec import get_sender_and_standard
from ..exceptions import UnknownStandardError
from ..utils import AddressLike, address_to_bytes, to_checksum
from .base import IntentStandard

logger = logging.getLogger(__name__)


class StandardRegistry:
    """Maps standard addresses to implementations and tracks account opt-ins"""

    def __init__(self):
        self._standards: Dict[bytes, IntentStandard] = {}
        self._enabled: Set[Tuple[bytes, bytes]] = set()
        self._lock = threading.RLock()

    def add_standard(self, standard: IntentStandard) -> None:
        with self._lock:
            self._standards[address_to_bytes(standard.address)] = standard
        logger.debug(f"Added standard {standard!r}")

    def register(self, account: AddressLike, standard: AddressLike) -> None:
        """
        Enable a standard for an account

        Raises:
            UnknownStandardError: If no implementation exists for the standard
        """
        key = address_to_bytes(standard)
        with self._lock:
            if key not in self._standards:
                raise UnknownStandardError(f"No implementation for standard {to_checksum(standard)}")
            self._enabled.add((address_to_bytes(account), key))
        logger.info(f"Account {to_checksum(account)} registered standard {to_checksum(standard)}")

    def unregister(self, account: AddressLike, standard: AddressLike) -> None:
        with self._lock:
            self._enabled.discard((address_to_bytes(account), address_to_bytes(standard)))
        logger.info(f"Account {to_checksum(account)} unregistered standard {to_checksum(standard)}")

    def is_registered(self, account: AddressLike, standard: AddressLike) -> bool:
        with self._lock:
            return (address_to_bytes(account), address_to_bytes(standard)) in self._enabled

    def get(self, standard: AddressLike) -> IntentStandard:
        """
        Look up a standard implementation

        Raises:
            UnknownStandardError: If no implementation exists for the standard
        """
        with self._lock:
            implementation = self._standards.get(address_to_bytes(standard))
        if implementation is None:
            raise UnknownStandardError(f"No implementation for standard {to_checksum(standard)}")
        return implementation

    def resolve(self, buffer: bytes) -> IntentStandard:
        """
        Find the standard an intent should be dispatched to

        Raises:
            MalformedIntentError: If the buffer is too short to name a standard
            UnknownStandardError: If the sender has not registered the standard
        """
        sender, standard = get_sender_and_standard(buffer)
        if not self.is_registered(sender, standard):
            raise UnknownStandardError(f"Account {sender} has not registered standard {standard}")
        return self.get(standard)
