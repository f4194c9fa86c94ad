#!/usr/bin/env python3
"""
Example of signing and relaying an intent with the UserIntent SDK.
"""
import os
import time

from userintent_sdk import IntentClient, LocalSigner, ValidationOutcome


def main():
    """
    Demonstrate basic usage of the IntentClient.

    This example shows how to:
    1. Initialize a relayer client for a configured network
    2. Sign an intent paying the relayer in native currency
    3. Validate and submit the intent
    """
    network = os.environ.get("NETWORK", "local")
    sender_key = os.environ.get("SENDER_PRIVATE_KEY")
    relayer_key = os.environ.get("RELAYER_PRIVATE_KEY")

    if not sender_key or not relayer_key:
        print("ERROR: SENDER_PRIVATE_KEY and RELAYER_PRIVATE_KEY environment variables are required")
        return

    client = IntentClient.from_network(network, priv_key=relayer_key)

    sender = LocalSigner(sender_key)
    intent = client.create_intent(
        sender,
        expiry=int(time.time()) + 600,
        payment_amount=10 ** 14,
        assign_to_self=True,
    )
    print(f"Intent: 0x{intent.hex()}")

    outcome = client.validate_intent(intent)
    if outcome != ValidationOutcome.APPROVED:
        print(f"Intent rejected: {outcome.value}")
        return

    try:
        tx_receipt = client.submit_intent(intent)
        print(f"Transaction hash: {tx_receipt.tx_hash}")
        print(f"Status: {'Success' if tx_receipt.status == 1 else 'Failed'}")
    except Exception as e:
        print(f"Error submitting intent: {str(e)}")


if __name__ == "__main__":
    main()
