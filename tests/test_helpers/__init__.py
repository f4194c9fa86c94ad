from .intent_builder import (
    FakeBalances,
    raw_intent,
    TEST_CHAIN_ID,
    TEST_NOW,
    TEST_OTHER_PRIV_KEY,
    TEST_OTHER_STANDARD,
    TEST_PRIV_KEY,
    TEST_RELAYER_PRIV_KEY,
    TEST_RPC_URL,
    TEST_STANDARD,
    TEST_TARGET,
    TEST_TOKEN,
)
