"""
Data models for the UserIntent SDK.
"""
from typing import Dict, Any, Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .utils import to_checksum


def _hex(value: bytes) -> str:
    return "0x" + value.hex()


class Operation(BaseModel):
    """Atomic (target, value, data) unit handed to an account executor"""
    model_config = ConfigDict(frozen=True)

    target: str
    value: int = Field(0, ge=0)
    data: bytes = b""

    @field_validator("target", mode="before")
    @classmethod
    def _checksum_target(cls, v):
        return to_checksum(v)

    @field_serializer("data", when_used="json")
    def _data_hex(self, v: bytes) -> str:
        return _hex(v)


class UserIntent(BaseModel):
    """Read-only view of a packed intent buffer"""
    model_config = ConfigDict(frozen=True)

    sender: str
    standard: str
    header: bytes
    instructions: bytes
    signature: bytes
    extra: bytes = b""

    @field_validator("sender", "standard", mode="before")
    @classmethod
    def _checksum(cls, v):
        return to_checksum(v)

    @field_serializer("header", "instructions", "signature", "extra", when_used="json")
    def _bytes_hex(self, v: bytes) -> str:
        return _hex(v)

    @property
    def total_length(self) -> int:
        return 46 + len(self.header) + len(self.instructions) + len(self.signature)


class RelayedExecutionHeader(BaseModel):
    """Header of a relayed-execution intent"""
    model_config = ConfigDict(frozen=True)

    expiry: int = Field(..., ge=0, lt=2 ** 64)
    assigned_relayer: Optional[str] = None

    @field_validator("assigned_relayer", mode="before")
    @classmethod
    def _checksum_relayer(cls, v):
        return None if v is None else to_checksum(v)


class RelayedExecutionInstructions(BaseModel):
    """Payment and execution table of a relayed-execution intent"""
    model_config = ConfigDict(frozen=True)

    payment_token: str
    payment_amount: int = Field(..., ge=0, lt=2 ** 128)
    executions: List[Operation] = Field(default_factory=list)

    @field_validator("payment_token", mode="before")
    @classmethod
    def _checksum_token(cls, v):
        return to_checksum(v)


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain"""
    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    logs: List[Dict[str, Any]]

    model_config = ConfigDict(populate_by_name=True)
