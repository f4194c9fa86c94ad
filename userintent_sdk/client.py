"""
IntentClient - relayer client for packed user intents.
"""
import logging
import time
import urllib.parse
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from web3 import Web3
from web3.exceptions import Web3Exception
from web3.types import TxReceipt as Web3TxReceipt

from .codec import get_sender_and_standard
from .config import NetworkConfig
from .context import ValidationContext
from .exceptions import TransactionError, ValidationOutcome
from .models import Operation, TxReceipt
from .signer import LocalSigner, Signer
from .standards.relayed_execution import RelayedExecutionStandard
from .utils import ZERO_ADDRESS, AddressLike, same_address, to_checksum

ERC20_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    }
]

STANDARD_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "owner", "type": "address"},
            {"internalType": "bytes32", "name": "hash", "type": "bytes32"}
        ],
        "name": "checkHash",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function"
    }
]

ACCOUNT_ABI = [
    {
        "inputs": [{"internalType": "bytes", "name": "intent", "type": "bytes"}],
        "name": "executeUserIntent",
        "outputs": [{"internalType": "bytes[]", "name": "", "type": "bytes[]"}],
        "stateMutability": "payable",
        "type": "function"
    }
]


class TransactionSigner(Protocol):
    """Protocol for custom relayer signers"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return signed tx object"""
        ...


class Web3BalanceOracle:
    """Balance oracle answering from chain state"""

    def __init__(self, w3: Web3):
        self.w3 = w3

    def balance_of(self, account: AddressLike, token: AddressLike) -> int:
        account = to_checksum(account)
        try:
            if same_address(token, ZERO_ADDRESS):
                return self.w3.eth.get_balance(account)
            contract = self.w3.eth.contract(address=to_checksum(token), abi=ERC20_ABI)
            return contract.functions.balanceOf(account).call()
        except Exception as e:
            raise TransactionError(f"Failed to read balance of {account}: {e}") from e


class Web3ReplayView:
    """Replay markers read from a deployed standard contract"""

    def __init__(self, w3: Web3, standard_address: AddressLike):
        self.contract = w3.eth.contract(address=to_checksum(standard_address), abi=STANDARD_ABI)

    def has_hash(self, account: AddressLike, intent_hash: bytes) -> bool:
        try:
            return bool(self.contract.functions.checkHash(to_checksum(account), intent_hash).call())
        except Exception as e:
            raise TransactionError(f"Failed to read replay marker for {account}: {e}") from e


class IntentClient:
    """
    Client for relaying packed intents.

    This client handles:
    1. Building validation contexts from live chain state
    2. Validating and unpacking intents against a relayed execution standard
    3. Submitting intents to the sender's account contract
    """

    def __init__(
        self,
        rpc_url: str,
        standard_address: str,
        priv_key: Optional[str] = None,
        signer: Optional[TransactionSigner] = None,
        chain_id: Optional[int] = None,
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the IntentClient

        Args:
            rpc_url: Ethereum RPC endpoint URL
            standard_address: Address of the relayed execution standard contract
            priv_key: Relayer private key (optional if signer provided)
            signer: Custom relayer signer (optional if priv_key provided)
            chain_id: Chain id to bind intents to (read from the node if omitted)
            timeout: Timeout for RPC requests in seconds
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If neither priv_key nor signer is provided
            ValueError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        if not priv_key and not signer:
            raise ValueError("Either priv_key or signer must be provided")

        parsed = urllib.parse.urlparse(rpc_url)
        host = parsed.netloc.split(':')[0]
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ValueError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")

        self.rpc_url = rpc_url
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

        self.signer = signer or LocalSigner(priv_key)
        self.standard = RelayedExecutionStandard(standard_address)
        self._chain_id = chain_id
        self.balances = Web3BalanceOracle(self.w3)
        self.replay = Web3ReplayView(self.w3, self.standard.address)

    @classmethod
    def from_network(
        cls,
        network: str,
        priv_key: Optional[str] = None,
        signer: Optional[TransactionSigner] = None,
        rpc_url: Optional[str] = None,
        **kwargs
    ) -> "IntentClient":
        """
        Create a client for a network defined in networks.json

        Args:
            network: Network name, e.g. "sepolia"
            priv_key: Relayer private key (optional if signer provided)
            signer: Custom relayer signer (optional if priv_key provided)
            rpc_url: Override for the configured RPC URL
            **kwargs: Passed through to the constructor

        Raises:
            ValueError: If the network is unknown or has no standard address
        """
        return cls(
            rpc_url=NetworkConfig.get_rpc_url(network, rpc_url),
            standard_address=NetworkConfig.get_standard_address(network),
            priv_key=priv_key,
            signer=signer,
            chain_id=NetworkConfig.get_chain_id(network),
            **kwargs
        )

    @property
    def address(self) -> str:
        """Relayer address"""
        return self.signer.address

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = self.w3.eth.chain_id
            self.logger.debug(f"Using chain id {self._chain_id} reported by node")
        return self._chain_id

    def build_context(self, current_time: Optional[int] = None) -> ValidationContext:
        """
        Build a validation context from the latest block

        Args:
            current_time: Override for the block timestamp

        Returns:
            Context bound to this relayer
        """
        if current_time is None:
            try:
                current_time = int(self.w3.eth.get_block("latest")["timestamp"])
            except Web3Exception as e:
                self.logger.warning(f"Could not read latest block, using local clock: {e}")
                current_time = int(time.time())
        return ValidationContext(
            current_time=current_time,
            chain_id=self.chain_id,
            balances=self.balances,
            replay=self.replay,
            relayer=self.address,
        )

    def validate_intent(self, intent: bytes, context: Optional[ValidationContext] = None) -> ValidationOutcome:
        """
        Validate an intent, reporting rejection as an outcome

        Returns:
            ValidationOutcome for the first failing check, or APPROVED

        Raises:
            TransactionError: If chain state cannot be read
        """
        return self.standard.check(intent, context or self.build_context())

    def unpack_intent(
        self, intent: bytes, context: Optional[ValidationContext] = None
    ) -> Tuple[ValidationOutcome, List[Operation]]:
        """
        Validate an intent and return the operations it would execute

        Raises:
            IntentError: Subclass for the first failing check
        """
        return self.standard.unpack_operations(intent, context or self.build_context())

    def create_intent(
        self,
        signer: Signer,
        expiry: int,
        payment_token: AddressLike = ZERO_ADDRESS,
        payment_amount: int = 0,
        executions: Sequence[Operation] = (),
        assign_to_self: bool = False,
    ) -> bytes:
        """Sign an intent for this client's standard and chain"""
        return self.standard.create_intent(
            signer,
            chain_id=self.chain_id,
            expiry=expiry,
            payment_token=payment_token,
            payment_amount=payment_amount,
            executions=executions,
            assigned_relayer=self.address if assign_to_self else None,
        )

    def submit_intent(
        self,
        intent: bytes,
        gas: Optional[int] = None,
        gas_price_override: Optional[int] = None,
        poll_interval: Optional[float] = None,
        wait_for_receipt: bool = True
    ) -> TxReceipt:
        """
        Submit an intent to its sender's account contract

        The intent is unpacked locally first so rejected intents never cost gas.

        Args:
            intent: Packed intent bytes
            gas: Gas limit to use (if None, will be estimated or use default)
            gas_price_override: Gas price to use (if None, will use current network price)
            poll_interval: How often to poll for receipt (in seconds, default=0.1)
            wait_for_receipt: Whether to wait for the transaction receipt (default=True)

        Returns:
            Transaction receipt object

        Raises:
            IntentError: If the intent fails local validation
            TransactionError: If the blockchain transaction fails
        """
        self.unpack_intent(intent)
        sender, _ = get_sender_and_standard(intent)
        account = self.w3.eth.contract(address=sender, abi=ACCOUNT_ABI)

        try:
            nonce = self.w3.eth.get_transaction_count(self.address)

            if gas is None:
                try:
                    gas = account.functions.executeUserIntent(intent).estimate_gas({'from': self.address})
                    # Add 10% buffer to gas estimate
                    gas = int(gas * 1.1)
                    self.logger.debug(f"Estimated gas: {gas}")
                except Exception as e:
                    gas = 500000
                    self.logger.warning(f"Gas estimation failed, using default: {gas}. Error: {e}")

            tx_params = {
                'from': self.address,
                'nonce': nonce,
                'gas': gas,
                'gasPrice': gas_price_override if gas_price_override is not None else self.w3.eth.gas_price,
            }
            tx = account.functions.executeUserIntent(intent).build_transaction(tx_params)

            try:
                signed_tx = self.signer.sign_transaction(tx)
            except Exception as e:
                self.logger.error(f"Transaction signing failed: {e}")
                raise TransactionError(f"Failed to sign transaction: {str(e)}")

            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
            self.logger.info(f"Intent submitted for {sender}: {tx_hash.hex()}")

            if wait_for_receipt:
                receipt = self.w3.eth.wait_for_transaction_receipt(
                    tx_hash,
                    timeout=120,
                    poll_latency=poll_interval or 0.1
                )
                return self._convert_receipt(receipt)

            return TxReceipt(
                transactionHash=tx_hash.hex() if isinstance(tx_hash, bytes) else tx_hash,
                blockNumber=0,
                blockHash="0x" + "00" * 32,
                status=0,  # Status unknown yet
                gasUsed=0,
                **{"from": self.address},
                to=sender,
                logs=[]
            )
        except TransactionError:
            raise
        except Exception as e:
            self.logger.error(f"Intent submission failed: {e}")
            raise TransactionError(f"Transaction failed: {str(e)}") from e

    def _convert_receipt(self, web3_receipt: Web3TxReceipt) -> TxReceipt:
        """Convert a Web3 receipt to our TxReceipt model"""
        receipt_dict = dict(web3_receipt)
        for key, value in list(receipt_dict.items()):
            if isinstance(value, bytes):
                receipt_dict[key] = '0x' + value.hex()
        return TxReceipt.model_validate(receipt_dict)
