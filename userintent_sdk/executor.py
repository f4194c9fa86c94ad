"""
Reference account executor.

Runs the operations unpacked from an intent as one all-or-nothing batch:
the replay marker written by the standard's self-call is only committed if
every operation in the batch succeeds.
"""
import logging
from typing import Callable, List, Optional

from .codec import split_intents
from .context import BalanceOracle, ValidationContext
from .exceptions import ExecutionFailedError, MalformedIntentError
from .models import Operation
from .replay import InMemoryReplayStore
from .standards.registry import StandardRegistry
from .utils import AddressLike, same_address, to_checksum

logger = logging.getLogger(__name__)

Dispatch = Callable[[Operation], None]


class AccountExecutor:
    """
    Executes intents for a single account.

    ``dispatch`` applies one non-standard operation and raises on failure.
    Dispatch is expected to be transactional with the batch, e.g. by
    buffering effects until ``execute_intent`` returns.
    """

    def __init__(
        self,
        account: AddressLike,
        registry: StandardRegistry,
        replay_store: InMemoryReplayStore,
        dispatch: Dispatch,
        logger: Optional[logging.Logger] = None,
    ):
        self.account = to_checksum(account)
        self.registry = registry
        self.replay_store = replay_store
        self.dispatch = dispatch
        self.logger = logger or logging.getLogger(__name__)

    def execute_intent(
        self,
        buffer: bytes,
        current_time: int,
        chain_id: int,
        balances: BalanceOracle,
        relayer: AddressLike,
    ) -> List[Operation]:
        """
        Validate, unpack and execute one intent

        Args:
            buffer: Packed intent bytes
            current_time: Epoch seconds used for expiry checks
            chain_id: Network identifier
            balances: Balance oracle used for the funds check
            relayer: Relayer executing the intent

        Returns:
            The operations that were executed

        Raises:
            IntentError: If the intent is rejected
            ExecutionFailedError: If any operation fails; nothing is committed
        """
        standard = self.registry.resolve(buffer)
        sender = to_checksum(buffer[0:20])
        if not same_address(sender, self.account):
            raise MalformedIntentError(f"Intent sender {sender} is not account {self.account}")

        context = ValidationContext(
            current_time=current_time,
            chain_id=chain_id,
            balances=balances,
            replay=self.replay_store,
            relayer=to_checksum(relayer),
        )
        with self.replay_store.batch() as batch:
            # replay check and commit happen under one store lock
            _, operations = standard.unpack_operations(buffer, context)
            for index, operation in enumerate(operations):
                try:
                    if same_address(operation.target, standard.address):
                        standard.handle_call(sender, operation.data, batch)
                    else:
                        self.dispatch(operation)
                except Exception as e:
                    self.logger.error(f"Operation {index} failed, batch reverted: {e}")
                    raise ExecutionFailedError(f"Operation {index} failed: {e}", index=index) from e

        self.logger.info(f"Executed intent with {len(operations)} operations for {sender}")
        return operations

    def execute_many(
        self,
        transport_buffer: bytes,
        current_time: int,
        chain_id: int,
        balances: BalanceOracle,
        relayer: AddressLike,
    ) -> List[List[Operation]]:
        """Execute each intent of a concatenated transport buffer in order"""
        return [
            self.execute_intent(intent, current_time, chain_id, balances, relayer)
            for intent in split_intents(transport_buffer)
        ]
