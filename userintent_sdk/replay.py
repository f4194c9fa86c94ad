"""
Replay-marker stores.

A replay marker records that a signed intent payload has been consumed by
an account. Marks are write-once per ``(account, hash)``; writing the same
mark twice is a no-op.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Protocol, Set, Tuple

from .utils import AddressLike, address_to_bytes

logger = logging.getLogger(__name__)

_Key = Tuple[bytes, bytes]


class ReplayView(Protocol):
    """Read-only access to replay markers"""

    def has_hash(self, account: AddressLike, intent_hash: bytes) -> bool:
        ...


class ReplayBatch:
    """
    Marks staged during one batch execution.

    Staged marks are visible through ``has_hash`` but only reach the backing
    store when the owning batch commits.
    """

    def __init__(self, store: "InMemoryReplayStore"):
        self._store = store
        self._staged: Set[_Key] = set()

    def mark(self, account: AddressLike, intent_hash: bytes) -> None:
        self._staged.add(_key(account, intent_hash))

    def has_hash(self, account: AddressLike, intent_hash: bytes) -> bool:
        return _key(account, intent_hash) in self._staged or self._store.has_hash(account, intent_hash)

    @property
    def staged(self) -> Set[_Key]:
        return set(self._staged)


class InMemoryReplayStore:
    """Thread-safe in-memory replay-marker store"""

    def __init__(self):
        self._marks: Set[_Key] = set()
        self._lock = threading.RLock()

    def has_hash(self, account: AddressLike, intent_hash: bytes) -> bool:
        with self._lock:
            return _key(account, intent_hash) in self._marks

    def mark(self, account: AddressLike, intent_hash: bytes) -> None:
        """Mark a hash as used; marking an already-used hash does nothing"""
        key = _key(account, intent_hash)
        with self._lock:
            if key in self._marks:
                logger.debug(f"Replay marker 0x{intent_hash.hex()} already set")
                return
            self._marks.add(key)

    @contextmanager
    def batch(self) -> Iterator[ReplayBatch]:
        """
        Stage marks for an all-or-nothing batch

        Marks staged inside the ``with`` block are committed when it exits
        normally and discarded if it raises. The store lock is held for the
        whole block, so checks made inside it cannot race another batch.
        """
        with self._lock:
            pending = ReplayBatch(self)
            yield pending
            self._marks.update(pending.staged)
        logger.debug(f"Committed {len(pending.staged)} replay markers")

    def __len__(self) -> int:
        with self._lock:
            return len(self._marks)


def _key(account: AddressLike, intent_hash: bytes) -> _Key:
    if len(intent_hash) != 32:
        raise ValueError(f"Intent hash must be 32 bytes, got {len(intent_hash)}")
    return address_to_bytes(account), bytes(intent_hash)
