"""Traces of transaction execution, including internal calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .codec import ufe_hex_deserialize
from .field_element import FieldElement
from .transactions import EntryPointType, ExecutionResources

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


def _list(data: Mapping[str, Any], key: str) -> list:
    values = _require(data, key)
    if not isinstance(values, list):
        raise ValueError(f"field `{key}` must be a list")
    return values


def _felt(data: Mapping[str, Any], key: str) -> FieldElement:
    return ufe_hex_deserialize(_require(data, key))


def _optional_felt(data: Mapping[str, Any], key: str) -> Optional[FieldElement]:
    value = data.get(key)
    return None if value is None else ufe_hex_deserialize(value)


def _felt_list(data: Mapping[str, Any], key: str) -> tuple[FieldElement, ...]:
    return tuple(ufe_hex_deserialize(item) for item in _list(data, key))


def _l1_address(value: object, field: str) -> bytes:
    if (
        not isinstance(value, str)
        or not value.startswith("0x")
        or len(value) != 42
        or any(char not in _HEX_CHARS for char in value[2:])
    ):
        raise ValueError(f"field `{field}` must be a 0x-prefixed 20-byte hex address")
    return bytes.fromhex(value[2:])


@dataclass(frozen=True)
class OrderedEventResponse:
    order: int
    keys: tuple[FieldElement, ...]
    data: tuple[FieldElement, ...]

    @classmethod
    def from_json(cls, data: object) -> "OrderedEventResponse":
        data = _mapping(data, "ordered event")
        return cls(
            order=_u64(_require(data, "order"), "order"),
            keys=_felt_list(data, "keys"),
            data=_felt_list(data, "data"),
        )


@dataclass(frozen=True)
class OrderedL2ToL1MessageResponse:
    order: int
    to_address: bytes
    payload: tuple[FieldElement, ...]

    @classmethod
    def from_json(cls, data: object) -> "OrderedL2ToL1MessageResponse":
        data = _mapping(data, "ordered L2 to L1 message")
        return cls(
            order=_u64(_require(data, "order"), "order"),
            to_address=_l1_address(_require(data, "to_address"), "to_address"),
            payload=_felt_list(data, "payload"),
        )


@dataclass(frozen=True)
class FunctionInvocation:
    """The user-relevant information about one function call and its internal calls."""

    caller_address: FieldElement
    contract_address: FieldElement
    calldata: tuple[FieldElement, ...]
    result: tuple[FieldElement, ...]
    execution_resources: ExecutionResources
    internal_calls: tuple["FunctionInvocation", ...]
    events: tuple[OrderedEventResponse, ...]
    messages: tuple[OrderedL2ToL1MessageResponse, ...]
    code_address: Optional[FieldElement] = None
    selector: Optional[FieldElement] = None
    entry_point_type: Optional[EntryPointType] = None

    @classmethod
    def from_json(cls, data: object) -> "FunctionInvocation":
        data = _mapping(data, "function invocation")
        raw_type = data.get("entry_point_type")
        if raw_type is None:
            entry_point_type = None
        else:
            try:
                entry_point_type = EntryPointType(raw_type)
            except ValueError:
                raise ValueError(f"unknown entry point type: {raw_type!r}") from None
        return cls(
            caller_address=_felt(data, "caller_address"),
            contract_address=_felt(data, "contract_address"),
            calldata=_felt_list(data, "calldata"),
            result=_felt_list(data, "result"),
            execution_resources=ExecutionResources.from_json(
                _require(data, "execution_resources")
            ),
            internal_calls=tuple(cls.from_json(call) for call in _list(data, "internal_calls")),
            events=tuple(OrderedEventResponse.from_json(e) for e in _list(data, "events")),
            messages=tuple(
                OrderedL2ToL1MessageResponse.from_json(m) for m in _list(data, "messages")
            ),
            code_address=_optional_felt(data, "code_address"),
            selector=_optional_felt(data, "selector"),
            entry_point_type=entry_point_type,
        )


@dataclass(frozen=True)
class TransactionTrace:
    """Execution trace of a transaction."""

    function_invocation: FunctionInvocation
    signature: tuple[FieldElement, ...]

    @classmethod
    def from_json(cls, data: object) -> "TransactionTrace":
        data = _mapping(data, "transaction trace")
        return cls(
            function_invocation=FunctionInvocation.from_json(
                _require(data, "function_invocation")
            ),
            signature=_felt_list(data, "signature"),
        )