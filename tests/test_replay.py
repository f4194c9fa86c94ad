"""
Tests for the in-memory replay-marker store.
"""
import threading

import pytest

from userintent_sdk.replay import InMemoryReplayStore

ACCOUNT = "0x" + "aa" * 20
OTHER_ACCOUNT = "0x" + "bb" * 20
HASH = b"\x01" * 32


def test_mark_and_check():
    store = InMemoryReplayStore()
    assert not store.has_hash(ACCOUNT, HASH)
    store.mark(ACCOUNT, HASH)
    assert store.has_hash(ACCOUNT, HASH)
    assert store.has_hash(ACCOUNT.upper().replace("0X", "0x"), HASH)
    assert not store.has_hash(OTHER_ACCOUNT, HASH)


def test_second_mark_is_noop():
    store = InMemoryReplayStore()
    store.mark(ACCOUNT, HASH)
    store.mark(ACCOUNT, HASH)
    assert len(store) == 1


def test_rejects_bad_hash_length():
    store = InMemoryReplayStore()
    with pytest.raises(ValueError, match="32 bytes"):
        store.mark(ACCOUNT, b"\x01" * 31)


def test_batch_commits_on_success():
    store = InMemoryReplayStore()
    with store.batch() as batch:
        batch.mark(ACCOUNT, HASH)
        assert batch.has_hash(ACCOUNT, HASH)
        assert not store.has_hash(ACCOUNT, HASH)
    assert store.has_hash(ACCOUNT, HASH)


def test_batch_discards_on_error():
    store = InMemoryReplayStore()
    with pytest.raises(RuntimeError):
        with store.batch() as batch:
            batch.mark(ACCOUNT, HASH)
            raise RuntimeError("operation failed")
    assert not store.has_hash(ACCOUNT, HASH)
    assert len(store) == 0


def test_concurrent_marks():
    store = InMemoryReplayStore()
    hashes = [i.to_bytes(32, "big") for i in range(200)]

    def worker():
        for h in hashes:
            store.mark(ACCOUNT, h)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == len(hashes)


def test_batch_blocks_other_threads_until_commit():
    store = InMemoryReplayStore()
    seen = []

    def reader():
        seen.append(store.has_hash(ACCOUNT, HASH))

    with store.batch() as batch:
        batch.mark(ACCOUNT, HASH)
        t = threading.Thread(target=reader)
        t.start()
        t.join(timeout=0.1)
        assert t.is_alive()
    t.join()

    assert seen == [True]
