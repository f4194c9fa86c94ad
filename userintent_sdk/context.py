"""
Validation context passed into intent standards.
"""
from dataclasses import dataclass
from typing import Optional, Protocol

from .replay import ReplayView
from .utils import AddressLike


class BalanceOracle(Protocol):
    """Balance lookups; ``token`` is the zero address for native currency"""

    def balance_of(self, account: AddressLike, token: AddressLike) -> int:
        ...


@dataclass
class ValidationContext:
    """
    Environment an intent is validated against.

    Attributes:
        current_time: Epoch seconds used for expiry checks
        chain_id: Network identifier bound into the signed payload
        balances: Oracle answering native and token balance queries
        replay: Store answering whether a payload hash was already used
        relayer: Identity of the relayer unpacking the intent, if any
    """
    current_time: int
    chain_id: int
    balances: BalanceOracle
    replay: ReplayView
    relayer: Optional[str] = None
