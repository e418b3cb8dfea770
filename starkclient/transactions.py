"""Transactions, transaction statuses and receipts as reported by the feeder gateway."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from .codec import (
    pending_block_hash_deserialize,
    ufe_hex_deserialize,
    ufe_hex_option_deserialize,
)
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


def _u64(value: object, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise ValueError(f"field `{field}` must be an unsigned 64-bit integer")
    return value


def _optional_u64(data: Mapping[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    return None if value is None else _u64(value, key)


def _felt(data: Mapping[str, Any], key: str) -> FieldElement:
    return ufe_hex_deserialize(_require(data, key))


def _optional_felt(data: Mapping[str, Any], key: str) -> Optional[FieldElement]:
    return ufe_hex_option_deserialize(data.get(key))


def _felt_list(data: Mapping[str, Any], key: str) -> tuple[FieldElement, ...]:
    values = _require(data, key)
    if not isinstance(values, list):
        raise ValueError(f"field `{key}` must be a list")
    return tuple(ufe_hex_deserialize(item) for item in values)


def _object_list(data: Mapping[str, Any], key: str, parse: Any) -> tuple:
    values = _require(data, key)
    if not isinstance(values, list):
        raise ValueError(f"field `{key}` must be a list")
    return tuple(parse(item) for item in values)


def _optional_str(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string")
    return value


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _l1_address(value: object, field: str) -> bytes:
    if (
        not isinstance(value, str)
        or not value.startswith("0x")
        or len(value) != 42
        or any(char not in _HEX_CHARS for char in value[2:])
    ):
        raise ValueError(f"field `{field}` must be a 0x-prefixed 20-byte hex address")
    return bytes.fromhex(value[2:])


class TransactionStatus(Enum):
    """Lifecycle status of a transaction."""

    NOT_RECEIVED = "NOT_RECEIVED"
    RECEIVED = "RECEIVED"
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    ACCEPTED_ON_L2 = "ACCEPTED_ON_L2"
    ACCEPTED_ON_L1 = "ACCEPTED_ON_L1"


class EntryPointType(Enum):
    """Kind of contract entry point."""

    EXTERNAL = "EXTERNAL"
    L1_HANDLER = "L1_HANDLER"
    CONSTRUCTOR = "CONSTRUCTOR"


def _status(value: object) -> TransactionStatus:
    try:
        return TransactionStatus(value)
    except ValueError:
        raise ValueError(f"unknown transaction status: {value!r}") from None


def _entry_point_type(value: object) -> EntryPointType:
    try:
        return EntryPointType(value)
    except ValueError:
        raise ValueError(f"unknown entry point type: {value!r}") from None


@dataclass(frozen=True)
class TransactionFailureReason:
    code: str
    error_message: Optional[str] = None

    @classmethod
    def from_json(cls, data: object) -> "TransactionFailureReason":
        data = _mapping(data, "transaction failure reason")
        code = _require(data, "code")
        if not isinstance(code, str):
            raise ValueError("field `code` must be a string")
        return cls(code=code, error_message=_optional_str(data, "error_message"))


def _optional_failure(value: object) -> Optional[TransactionFailureReason]:
    return None if value is None else TransactionFailureReason.from_json(value)


@dataclass(frozen=True)
class DeployTransaction:
    constructor_calldata: tuple[FieldElement, ...]
    contract_address: FieldElement
    contract_address_salt: FieldElement
    transaction_hash: FieldElement
    class_hash: Optional[FieldElement] = None

    @classmethod
    def from_json(cls, data: object) -> "DeployTransaction":
        data = _mapping(data, "deploy transaction")
        return cls(
            constructor_calldata=_felt_list(data, "constructor_calldata"),
            contract_address=_felt(data, "contract_address"),
            contract_address_salt=_felt(data, "contract_address_salt"),
            transaction_hash=_felt(data, "transaction_hash"),
            class_hash=_optional_felt(data, "class_hash"),
        )


@dataclass(frozen=True)
class InvokeFunctionTransaction:
    contract_address: FieldElement
    entry_point_type: EntryPointType
    entry_point_selector: FieldElement
    calldata: tuple[FieldElement, ...]
    signature: tuple[FieldElement, ...]
    transaction_hash: FieldElement
    max_fee: FieldElement

    @classmethod
    def from_json(cls, data: object) -> "InvokeFunctionTransaction":
        data = _mapping(data, "invoke transaction")
        return cls(
            contract_address=_felt(data, "contract_address"),
            entry_point_type=_entry_point_type(_require(data, "entry_point_type")),
            entry_point_selector=_felt(data, "entry_point_selector"),
            calldata=_felt_list(data, "calldata"),
            signature=_felt_list(data, "signature"),
            transaction_hash=_felt(data, "transaction_hash"),
            max_fee=_felt(data, "max_fee"),
        )


Transaction = Union[DeployTransaction, InvokeFunctionTransaction]


def parse_transaction(data: object) -> Transaction:
    """Parse a transaction tagged by its "type" field."""
    data = _mapping(data, "transaction")
    kind = _require(data, "type")
    if kind == "DEPLOY":
        return DeployTransaction.from_json(data)
    if kind == "INVOKE_FUNCTION":
        return InvokeFunctionTransaction.from_json(data)
    raise ValueError(f"unknown transaction type: {kind!r}")


@dataclass(frozen=True)
class TransactionStatusInfo:
    status: TransactionStatus
    block_hash: Optional[FieldElement] = None
    transaction_failure_reason: Optional[TransactionFailureReason] = None

    @classmethod
    def from_json(cls, data: object) -> "TransactionStatusInfo":
        data = _mapping(data, "transaction status")
        if "status" not in data and "tx_status" not in data:
            raise ValueError("missing field `status`")
        return cls(
            status=_status(_first_present(data, "status", "tx_status")),
            block_hash=pending_block_hash_deserialize(data.get("block_hash")),
            transaction_failure_reason=_optional_failure(
                _first_present(data, "transaction_failure_reason", "tx_failure_reason")
            ),
        )


@dataclass(frozen=True)
class TransactionInfo:
    status: TransactionStatus
    block_hash: Optional[FieldElement] = None
    block_number: Optional[int] = None
    transaction: Optional[Transaction] = None
    transaction_failure_reason: Optional[TransactionFailureReason] = None
    transaction_index: Optional[int] = None

    @classmethod
    def from_json(cls, data: object) -> "TransactionInfo":
        data = _mapping(data, "transaction info")
        raw_tx = data.get("transaction")
        return cls(
            status=_status(_require(data, "status")),
            block_hash=pending_block_hash_deserialize(data.get("block_hash")),
            block_number=_optional_u64(data, "block_number"),
            transaction=None if raw_tx is None else parse_transaction(raw_tx),
            transaction_failure_reason=_optional_failure(data.get("transaction_failure_reason")),
            transaction_index=_optional_u64(data, "transaction_index"),
        )


@dataclass(frozen=True)
class BuiltinInstanceCounter:
    pedersen_builtin: Optional[int] = None
    range_check_builtin: Optional[int] = None
    bitwise_builtin: Optional[int] = None
    output_builtin: Optional[int] = None
    ecdsa_builtin: Optional[int] = None
    ec_op_builtin: Optional[int] = None

    @classmethod
    def from_json(cls, data: object) -> "BuiltinInstanceCounter":
        data = _mapping(data, "builtin instance counter")
        return cls(
            pedersen_builtin=_optional_u64(data, "pedersen_builtin"),
            range_check_builtin=_optional_u64(data, "range_check_builtin"),
            bitwise_builtin=_optional_u64(data, "bitwise_builtin"),
            output_builtin=_optional_u64(data, "output_builtin"),
            ecdsa_builtin=_optional_u64(data, "ecdsa_builtin"),
            ec_op_builtin=_optional_u64(data, "ec_op_builtin"),
        )


@dataclass(frozen=True)
class ExecutionResources:
    n_steps: int
    n_memory_holes: int
    builtin_instance_counter: BuiltinInstanceCounter

    @classmethod
    def from_json(cls, data: object) -> "ExecutionResources":
        data = _mapping(data, "execution resources")
        return cls(
            n_steps=_u64(_require(data, "n_steps"), "n_steps"),
            n_memory_holes=_u64(_require(data, "n_memory_holes"), "n_memory_holes"),
            builtin_instance_counter=BuiltinInstanceCounter.from_json(
                _require(data, "builtin_instance_counter")
            ),
        )


@dataclass(frozen=True)
class L1ToL2Message:
    from_address: bytes
    to_address: FieldElement
    selector: FieldElement
    payload: tuple[FieldElement, ...]
    nonce: Optional[FieldElement] = None

    @classmethod
    def from_json(cls, data: object) -> "L1ToL2Message":
        data = _mapping(data, "L1 to L2 message")
        return cls(
            from_address=_l1_address(_require(data, "from_address"), "from_address"),
            to_address=_felt(data, "to_address"),
            selector=_felt(data, "selector"),
            payload=_felt_list(data, "payload"),
            nonce=_optional_felt(data, "nonce"),
        )


@dataclass(frozen=True)
class L2ToL1Message:
    from_address: FieldElement
    to_address: bytes
    payload: tuple[FieldElement, ...]

    @classmethod
    def from_json(cls, data: object) -> "L2ToL1Message":
        data = _mapping(data, "L2 to L1 message")
        return cls(
            from_address=_felt(data, "from_address"),
            to_address=_l1_address(_require(data, "to_address"), "to_address"),
            payload=_felt_list(data, "payload"),
        )


@dataclass(frozen=True)
class Event:
    from_address: FieldElement
    keys: tuple[FieldElement, ...]
    data: tuple[FieldElement, ...]

    @classmethod
    def from_json(cls, data: object) -> "Event":
        data = _mapping(data, "event")
        return cls(
            from_address=_felt(data, "from_address"),
            keys=_felt_list(data, "keys"),
            data=_felt_list(data, "data"),
        )


def _optional_l1_message(value: object) -> Optional[L1ToL2Message]:
    return None if value is None else L1ToL2Message.from_json(value)


@dataclass(frozen=True)
class TransactionReceipt:
    status: TransactionStatus
    transaction_hash: FieldElement
    events: tuple[Event, ...]
    l2_to_l1_messages: tuple[L2ToL1Message, ...]
    block_hash: Optional[FieldElement] = None
    block_number: Optional[int] = None
    execution_resources: Optional[ExecutionResources] = None
    l1_to_l2_consumed_message: Optional[L1ToL2Message] = None
    transaction_failure_reason: Optional[TransactionFailureReason] = None
    transaction_index: Optional[int] = None
    actual_fee: Optional[FieldElement] = None

    @classmethod
    def from_json(cls, data: object) -> "TransactionReceipt":
        data = _mapping(data, "transaction receipt")
        resources = data.get("execution_resources")
        return cls(
            status=_status(_require(data, "status")),
            transaction_hash=_felt(data, "transaction_hash"),
            events=_object_list(data, "events", Event.from_json),
            l2_to_l1_messages=_object_list(data, "l2_to_l1_messages", L2ToL1Message.from_json),
            block_hash=pending_block_hash_deserialize(data.get("block_hash")),
            block_number=_optional_u64(data, "block_number"),
            execution_resources=(
                None if resources is None else ExecutionResources.from_json(resources)
            ),
            l1_to_l2_consumed_message=_optional_l1_message(data.get("l1_to_l2_consumed_message")),
            transaction_failure_reason=_optional_failure(data.get("transaction_failure_reason")),
            transaction_index=_optional_u64(data, "transaction_index"),
            actual_fee=_optional_felt(data, "actual_fee"),
        )


@dataclass(frozen=True)
class ConfirmedTransactionReceipt:
    transaction_hash: FieldElement
    transaction_index: int
    execution_resources: ExecutionResources
    l2_to_l1_messages: tuple[L2ToL1Message, ...]
    events: tuple[Event, ...]
    l1_to_l2_consumed_message: Optional[L1ToL2Message] = None
    actual_fee: Optional[FieldElement] = None

    @classmethod
    def from_json(cls, data: object) -> "ConfirmedTransactionReceipt":
        data = _mapping(data, "confirmed transaction receipt")
        return cls(
            transaction_hash=_felt(data, "transaction_hash"),
            transaction_index=_u64(_require(data, "transaction_index"), "transaction_index"),
            execution_resources=ExecutionResources.from_json(_require(data, "execution_resources")),
            l2_to_l1_messages=_object_list(data, "l2_to_l1_messages", L2ToL1Message.from_json),
            events=_object_list(data, "events", Event.from_json),
            l1_to_l2_consumed_message=_optional_l1_message(data.get("l1_to_l2_consumed_message")),
            actual_fee=_optional_felt(data, "actual_fee"),
        )