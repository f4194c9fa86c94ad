"""
Signers for packed intents.

Intents are signed as EIP-191 personal messages over their 32-byte intent
hash, giving a 65-byte ``r || s || v`` signature.
"""
import logging
from typing import Protocol

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount

from .utils import to_checksum

logger = logging.getLogger(__name__)


class Signer(Protocol):
    """Protocol for custom intent signers"""
    address: str

    def sign_hash(self, intent_hash: bytes) -> bytes:
        """Sign a 32-byte intent hash and return the 65-byte signature"""
        ...


class LocalSigner:
    """Signer backed by a private key held in memory"""

    def __init__(self, private_key: str):
        self._account: LocalAccount = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def account(self) -> LocalAccount:
        return self._account

    def sign_hash(self, intent_hash: bytes) -> bytes:
        if len(intent_hash) != 32:
            raise ValueError(f"Intent hash must be 32 bytes, got {len(intent_hash)}")
        signed = self._account.sign_message(encode_defunct(primitive=intent_hash))
        return bytes(signed.signature)

    def sign_transaction(self, transaction_dict):
        return self._account.sign_transaction(transaction_dict)


def recover_signer(intent_hash: bytes, signature: bytes) -> str:
    """
    Recover the address that signed an intent hash

    Raises:
        ValueError: If the signature cannot be recovered
    """
    try:
        address = Account.recover_message(encode_defunct(primitive=intent_hash), signature=signature)
    except Exception as e:
        raise ValueError(f"Signature recovery failed: {e}") from e
    return to_checksum(address)
