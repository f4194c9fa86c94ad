"""
Relayed execution standard.

Header layout::

    expiry (uint64, 8) [| assigned relayer (20)]

Instructions layout::

    payment token (20) | payment amount (uint128, 16) | execution count (1)
    | count x (length (uint16, 2) | target (20) | value (uint256, 32) | call data)

The signature is a 65-byte EIP-191 signature over the intent hash, which
binds the header and instructions to this standard's address and the chain
id. The payment token is the zero address when the relayer is paid in the
native currency.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from eth_abi import encode
from web3 import Web3

from ..codec import PREFIX_LENGTH, get_lengths, get_sender_and_standard, pack_intent
from ..context import ValidationContext
from ..exceptions import (
    ExecutionFailedError,
    InsufficientFundsError,
    IntentAlreadyUsedError,
    IntentExpiredError,
    InvalidSignatureError,
    MalformedIntentError,
    UnauthorizedRelayerError,
    ValidationOutcome,
)
from ..models import Operation, RelayedExecutionHeader, RelayedExecutionInstructions
from ..replay import ReplayBatch
from ..signer import Signer, recover_signer
from ..utils import (
    UINT16_MAX,
    ZERO_ADDRESS,
    AddressLike,
    address_to_bytes,
    function_selector,
    read_uint,
    same_address,
    to_checksum,
    uint_to_bytes,
)
from .base import IntentStandard

logger = logging.getLogger(__name__)

EXPIRY_LENGTH = 8
HEADER_LENGTH = EXPIRY_LENGTH
HEADER_WITH_RELAYER_LENGTH = EXPIRY_LENGTH + 20
MIN_INSTRUCTIONS_LENGTH = 36
PAYMENT_HEADER_LENGTH = 37
SIGNATURE_LENGTH = 65
EXECUTION_PREFIX_LENGTH = 2
MIN_EXECUTION_LENGTH = 52
MAX_EXECUTIONS = 255

MARK_HASH_SELECTOR = function_selector("markHash(bytes32)")
TRANSFER_SELECTOR = function_selector("transfer(address,uint256)")


@dataclass(frozen=True)
class _Layout:
    """Offsets of a structurally valid intent, shared by validation and unpacking"""
    sender: str
    header_length: int
    instructions_start: int
    instructions_end: int
    signature_end: int


def _execution_bounds(buffer: bytes, start: int, end: int) -> List[Tuple[int, int]]:
    """
    Walk the execution table of the instructions in ``buffer[start:end]``

    Returns:
        (body_start, body_end) for every execution entry, in table order

    Raises:
        MalformedIntentError: If the entries do not partition the table exactly
    """
    cursor = start + PAYMENT_HEADER_LENGTH - 1
    if cursor >= end:
        raise MalformedIntentError("Instructions are missing the execution count")
    count = buffer[cursor]
    cursor += 1

    bounds = []
    for i in range(count):
        if cursor + EXECUTION_PREFIX_LENGTH > end:
            raise MalformedIntentError(f"Execution {i} length prefix overruns instructions")
        length = read_uint(buffer, cursor, EXECUTION_PREFIX_LENGTH)
        cursor += EXECUTION_PREFIX_LENGTH
        if cursor + length > end:
            raise MalformedIntentError(f"Execution {i} declares {length} bytes, past end of instructions")
        if length < MIN_EXECUTION_LENGTH:
            raise MalformedIntentError(
                f"Execution {i} is {length} bytes, minimum is {MIN_EXECUTION_LENGTH}"
            )
        bounds.append((cursor, cursor + length))
        cursor += length

    if cursor != end:
        raise MalformedIntentError(
            f"Execution table ends at {cursor - start} but instructions are {end - start} bytes"
        )
    return bounds


def _decode_execution(buffer: bytes, start: int, end: int) -> Operation:
    return Operation(
        target=buffer[start:start + 20],
        value=read_uint(buffer, start + 20, 32),
        data=bytes(buffer[start + MIN_EXECUTION_LENGTH:end]),
    )


def encode_header(expiry: int, assigned_relayer: Optional[AddressLike] = None) -> bytes:
    """Encode a relayed-execution header"""
    header = uint_to_bytes(expiry, EXPIRY_LENGTH)
    if assigned_relayer is not None:
        header += address_to_bytes(assigned_relayer)
    return header


def decode_header(header: bytes) -> RelayedExecutionHeader:
    """
    Decode a relayed-execution header

    Raises:
        MalformedIntentError: If the header is neither 8 nor 28 bytes
    """
    if len(header) not in (HEADER_LENGTH, HEADER_WITH_RELAYER_LENGTH):
        raise MalformedIntentError(f"Invalid header length: {len(header)}")
    relayer = header[EXPIRY_LENGTH:] if len(header) == HEADER_WITH_RELAYER_LENGTH else None
    return RelayedExecutionHeader(expiry=read_uint(header, 0, EXPIRY_LENGTH), assigned_relayer=relayer)


def encode_execution(operation: Operation) -> bytes:
    """Encode one execution entry body (without its length prefix)"""
    return address_to_bytes(operation.target) + uint_to_bytes(operation.value, 32) + operation.data


def encode_instructions(
    payment_token: AddressLike,
    payment_amount: int,
    executions: Sequence[Operation] = (),
) -> bytes:
    """
    Encode relayed-execution instructions

    Raises:
        ValueError: If there are more than 255 executions, an execution is
            longer than 65535 bytes, or the payment amount exceeds uint128
    """
    if len(executions) > MAX_EXECUTIONS:
        raise ValueError(f"At most {MAX_EXECUTIONS} executions allowed, got {len(executions)}")

    parts = [
        address_to_bytes(payment_token),
        uint_to_bytes(payment_amount, 16),
        bytes([len(executions)]),
    ]
    for operation in executions:
        body = encode_execution(operation)
        if len(body) > UINT16_MAX:
            raise ValueError(f"Execution is {len(body)} bytes, maximum is {UINT16_MAX}")
        parts.append(len(body).to_bytes(EXECUTION_PREFIX_LENGTH, "big"))
        parts.append(body)
    return b"".join(parts)


def decode_instructions(instructions: bytes) -> RelayedExecutionInstructions:
    """
    Decode relayed-execution instructions

    Raises:
        MalformedIntentError: If the payment header or execution table is malformed
    """
    if len(instructions) < MIN_INSTRUCTIONS_LENGTH:
        raise MalformedIntentError(f"Invalid instructions length: {len(instructions)}")
    bounds = _execution_bounds(instructions, 0, len(instructions))
    return RelayedExecutionInstructions(
        payment_token=instructions[0:20],
        payment_amount=read_uint(instructions, 20, 16),
        executions=[_decode_execution(instructions, s, e) for s, e in bounds],
    )


class RelayedExecutionStandard(IntentStandard):
    """
    Standard letting a relayer execute a signed batch for a fee.

    Intents must carry no trailing extra data. Each approved intent unpacks
    into a replay-marker self-call, the relayer payment, and the signed
    executions, in that order.
    """

    def intent_hash(self, buffer: bytes, chain_id: int) -> bytes:
        """
        Hash of the signed payload bound to this standard and chain

        Raises:
            MalformedIntentError: If the buffer is shorter than its declared payload
        """
        header_length, instructions_length, _ = get_lengths(buffer)
        payload_end = PREFIX_LENGTH + header_length + instructions_length
        if len(buffer) < payload_end:
            raise MalformedIntentError("Intent is shorter than its declared payload")
        return self._hash_payload(bytes(buffer[PREFIX_LENGTH:payload_end]), chain_id)

    def _hash_payload(self, payload: bytes, chain_id: int) -> bytes:
        return bytes(Web3.keccak(encode(["bytes", "address", "uint256"], [payload, self.address, chain_id])))

    def create_intent(
        self,
        signer: Signer,
        chain_id: int,
        expiry: int,
        payment_token: AddressLike = ZERO_ADDRESS,
        payment_amount: int = 0,
        executions: Sequence[Operation] = (),
        assigned_relayer: Optional[AddressLike] = None,
        sender: Optional[AddressLike] = None,
    ) -> bytes:
        """
        Build and sign a relayed-execution intent

        Args:
            signer: Signer whose address must match the sender
            chain_id: Network the intent is valid on
            expiry: Last epoch second at which the intent may execute
            payment_token: Token paid to the relayer, zero address for native
            payment_amount: Amount paid to the relayer
            executions: Operations to run for the sender
            assigned_relayer: Only relayer allowed to execute, if any
            sender: Account the intent acts for (defaults to the signer)

        Returns:
            Packed, signed intent bytes
        """
        header = encode_header(expiry, assigned_relayer)
        instructions = encode_instructions(payment_token, payment_amount, executions)
        signature = signer.sign_hash(self._hash_payload(header + instructions, chain_id))
        return pack_intent(sender or signer.address, self.address, header, instructions, signature)

    def _layout(self, buffer: bytes) -> _Layout:
        sender, standard = get_sender_and_standard(buffer)
        header_length, instructions_length, signature_length = get_lengths(buffer)

        if not same_address(standard, self.address):
            raise MalformedIntentError(f"Intent is addressed to standard {standard}, not {self.address}")
        if header_length not in (HEADER_LENGTH, HEADER_WITH_RELAYER_LENGTH):
            raise MalformedIntentError(f"Invalid header length: {header_length}")
        if instructions_length < MIN_INSTRUCTIONS_LENGTH:
            raise MalformedIntentError(f"Invalid instructions length: {instructions_length}")
        if signature_length != SIGNATURE_LENGTH:
            raise MalformedIntentError(f"Invalid signature length: {signature_length}")

        instructions_start = PREFIX_LENGTH + header_length
        instructions_end = instructions_start + instructions_length
        signature_end = instructions_end + signature_length
        if signature_end != len(buffer):
            raise MalformedIntentError(
                f"Intent declares {signature_end} bytes but buffer holds {len(buffer)}"
            )
        return _Layout(sender, header_length, instructions_start, instructions_end, signature_end)

    def _validated(self, buffer: bytes, context: ValidationContext) -> Tuple[_Layout, bytes, List[Tuple[int, int]]]:
        """Run every validation check in order; returns layout, hash and execution bounds"""
        layout = self._layout(buffer)

        intent_hash = self._hash_payload(bytes(buffer[PREFIX_LENGTH:layout.instructions_end]), context.chain_id)
        signature = bytes(buffer[layout.instructions_end:layout.signature_end])
        try:
            signer = recover_signer(intent_hash, signature)
        except ValueError as e:
            raise InvalidSignatureError(str(e)) from e
        if not same_address(signer, layout.sender):
            raise InvalidSignatureError(f"Intent signed by {signer}, expected {layout.sender}")

        if context.replay.has_hash(layout.sender, intent_hash):
            raise IntentAlreadyUsedError(f"Intent 0x{intent_hash.hex()} already used by {layout.sender}")

        expiry = read_uint(buffer, PREFIX_LENGTH, EXPIRY_LENGTH)
        if expiry < context.current_time:
            raise IntentExpiredError(f"Intent expired at {expiry}, current time is {context.current_time}")

        start = layout.instructions_start
        token = to_checksum(buffer[start:start + 20])
        amount = read_uint(buffer, start + 20, 16)
        balance = context.balances.balance_of(layout.sender, token)
        if balance < amount:
            raise InsufficientFundsError(
                f"Sender {layout.sender} holds {balance} of {token}, payment requires {amount}"
            )

        bounds = _execution_bounds(buffer, start, layout.instructions_end)
        return layout, intent_hash, bounds

    def validate(self, buffer: bytes, context: ValidationContext) -> ValidationOutcome:
        self._validated(buffer, context)
        logger.debug(f"Intent approved by {self.address}")
        return ValidationOutcome.APPROVED

    def unpack_operations(
        self, buffer: bytes, context: ValidationContext
    ) -> Tuple[ValidationOutcome, List[Operation]]:
        layout, intent_hash, bounds = self._validated(buffer, context)

        if context.relayer is None:
            raise ValueError("Unpacking requires the relayer identity in the context")
        if layout.header_length == HEADER_WITH_RELAYER_LENGTH:
            relayer_start = PREFIX_LENGTH + EXPIRY_LENGTH
            assigned = to_checksum(buffer[relayer_start:relayer_start + 20])
            if not same_address(assigned, context.relayer):
                raise UnauthorizedRelayerError(
                    f"Intent is assigned to relayer {assigned}, not {to_checksum(context.relayer)}"
                )

        start = layout.instructions_start
        token = to_checksum(buffer[start:start + 20])
        amount = read_uint(buffer, start + 20, 16)

        operations = [Operation(target=self.address, value=0, data=MARK_HASH_SELECTOR + intent_hash)]
        if same_address(token, ZERO_ADDRESS):
            operations.append(Operation(target=context.relayer, value=amount, data=b""))
        else:
            transfer_args = encode(["address", "uint256"], [to_checksum(context.relayer), amount])
            operations.append(Operation(target=token, value=0, data=TRANSFER_SELECTOR + transfer_args))
        operations.extend(_decode_execution(buffer, s, e) for s, e in bounds)

        logger.debug(f"Unpacked {len(operations)} operations for {layout.sender}")
        return ValidationOutcome.APPROVED, operations

    def handle_call(self, account: AddressLike, data: bytes, batch: ReplayBatch) -> None:
        if data[:4] == MARK_HASH_SELECTOR and len(data) == 36:
            batch.mark(account, data[4:])
            return
        raise ExecutionFailedError(f"Unsupported call to {self.address}: 0x{data[:4].hex()}")
