"""
Pytest fixtures for the UserIntent SDK tests.
"""
import pytest
from web3.providers.rpc import HTTPProvider

from userintent_sdk.context import ValidationContext
from userintent_sdk.replay import InMemoryReplayStore
from userintent_sdk.signer import LocalSigner
from userintent_sdk.standards import RelayedExecutionStandard
from userintent_sdk.utils import ZERO_ADDRESS

from tests.test_helpers import (
    FakeBalances,
    TEST_CHAIN_ID,
    TEST_NOW,
    TEST_OTHER_PRIV_KEY,
    TEST_PRIV_KEY,
    TEST_RELAYER_PRIV_KEY,
    TEST_STANDARD,
)


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    Works for all tests because it is autouse.
    """
    def _dummy(self, method, params=None, _=None):
        if method in {"eth_chainId"}:
            return {"jsonrpc": "2.0", "id": 1, "result": hex(TEST_CHAIN_ID)}
        if method in {"eth_gasPrice"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture
def sender():
    """Deterministic signer for the intent sender"""
    return LocalSigner(TEST_PRIV_KEY)


@pytest.fixture
def other_signer():
    return LocalSigner(TEST_OTHER_PRIV_KEY)


@pytest.fixture
def relayer():
    return LocalSigner(TEST_RELAYER_PRIV_KEY)


@pytest.fixture
def standard():
    return RelayedExecutionStandard(TEST_STANDARD)


@pytest.fixture
def replay_store():
    return InMemoryReplayStore()


@pytest.fixture
def balances(sender):
    """Sender holds plenty of native currency and nothing else"""
    fake = FakeBalances()
    fake.set(sender.address, ZERO_ADDRESS, 10 ** 18)
    return fake


@pytest.fixture
def context(balances, replay_store, relayer):
    return ValidationContext(
        current_time=TEST_NOW,
        chain_id=TEST_CHAIN_ID,
        balances=balances,
        replay=replay_store,
        relayer=relayer.address,
    )


@pytest.fixture
def make_intent(standard, sender):
    """Factory for signed relayed-execution intents with sensible defaults"""
    def _make(**overrides):
        params = dict(
            signer=sender,
            chain_id=TEST_CHAIN_ID,
            expiry=TEST_NOW + 1000,
            payment_token=ZERO_ADDRESS,
            payment_amount=1000,
            executions=(),
        )
        params.update(overrides)
        return standard.create_intent(**params)
    return _make
