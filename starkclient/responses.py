"""Small gateway responses: errors, fee estimates, call results and contract addresses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .codec import ufe_hex_deserialize
from .field_element import FieldElement

_U64_MAX = (1 << 64) - 1
_HEX_CHARS = frozenset("0123456789abcdefABCDEF")


def _mapping(data: object, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for {what}, got {type(data).__name__}")
    return data


def _require(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _l1_address(value: object, field: str) -> bytes:
    if (
        not isinstance(value, str)
        or not value.startswith("0x")
        or len(value) != 42
        or any(char not in _HEX_CHARS for char in value[2:])
    ):
        raise ValueError(f"field `{field}` must be a 0x-prefixed 20-byte hex address")
    return bytes.fromhex(value[2:])


class StarknetErrorCode(Enum):
    """Error codes reported by the sequencer."""

    BLOCK_NOT_FOUND = "StarknetErrorCode.BLOCK_NOT_FOUND"
    ENTRY_POINT_NOT_FOUND_IN_CONTRACT = "StarknetErrorCode.ENTRY_POINT_NOT_FOUND_IN_CONTRACT"
    INVALID_PROGRAM = "StarknetErrorCode.INVALID_PROGRAM"
    TRANSACTION_FAILED = "StarknetErrorCode.TRANSACTION_FAILED"
    TRANSACTION_NOT_FOUND = "StarknetErrorCode.TRANSACTION_NOT_FOUND"
    UNINITIALIZED_CONTRACT = "StarknetErrorCode.UNINITIALIZED_CONTRACT"
    MALFORMED_REQUEST = "StarkErrorCode.MALFORMED_REQUEST"


@dataclass(frozen=True)
class StarknetError:
    """An error body returned by the gateway instead of data."""

    code: StarknetErrorCode
    message: str

    @classmethod
    def from_json(cls, data: object) -> "StarknetError":
        data = _mapping(data, "StarkNet error")
        raw_code = _require(data, "code")
        try:
            code = StarknetErrorCode(raw_code)
        except ValueError:
            raise ValueError(f"unknown StarkNet error code: {raw_code!r}") from None
        message = _require(data, "message")
        if not isinstance(message, str):
            raise ValueError("field `message` must be a string")
        return cls(code=code, message=message)

    def __str__(self) -> str:
        return f"{self.code.name}: {self.message}"


class FeeUnit(Enum):
    WEI = "wei"


@dataclass(frozen=True)
class FeeEstimate:
    amount: int
    unit: FeeUnit

    @classmethod
    def from_json(cls, data: object) -> "FeeEstimate":
        data = _mapping(data, "fee estimate")
        amount = _require(data, "amount")
        if isinstance(amount, bool) or not isinstance(amount, int) or not 0 <= amount <= _U64_MAX:
            raise ValueError("field `amount` must be an unsigned 64-bit integer")
        raw_unit = _require(data, "unit")
        try:
            unit = FeeUnit(raw_unit)
        except ValueError:
            raise ValueError(f"unknown fee unit: {raw_unit!r}") from None
        return cls(amount=amount, unit=unit)


@dataclass(frozen=True)
class CallContractResult:
    result: tuple[FieldElement, ...]

    @classmethod
    def from_json(cls, data: object) -> "CallContractResult":
        data = _mapping(data, "call result")
        values = _require(data, "result")
        if not isinstance(values, list):
            raise ValueError("field `result` must be a list")
        return cls(result=tuple(ufe_hex_deserialize(item) for item in values))


@dataclass(frozen=True)
class ContractAddresses:
    """L1 addresses of the core StarkNet contracts, as 20-byte values."""

    starknet: bytes
    gps_statement_verifier: bytes

    @classmethod
    def from_json(cls, data: object) -> "ContractAddresses":
        data = _mapping(data, "contract addresses")
        return cls(
            starknet=_l1_address(_require(data, "Starknet"), "Starknet"),
            gps_statement_verifier=_l1_address(
                _require(data, "GpsStatementVerifier"), "GpsStatementVerifier"
            ),
        )