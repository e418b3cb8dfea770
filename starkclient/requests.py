"""Transaction requests sent to the gateway and the gateway's answer to them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Mapping, Optional, Union

from .codec import (
    base64_serialize,
    ufe_hex_deserialize,
    ufe_hex_option_deserialize,
    ufe_hex_serialize,
)
from .field_element import FieldElement

if TYPE_CHECKING:
    from .contract import AbiEntry


def _mapping(data: object, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for {what}, got {type(data).__name__}")
    return data


def _require(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _list(data: Mapping[str, Any], key: str) -> list:
    values = _require(data, key)
    if not isinstance(values, list):
        raise ValueError(f"field `{key}` must be a list")
    return values


def _freeze(instance: object, *names: str) -> None:
    for name in names:
        object.__setattr__(instance, name, tuple(getattr(instance, name)))


class AddTransactionResultCode(Enum):
    TRANSACTION_RECEIVED = "TRANSACTION_RECEIVED"


@dataclass(frozen=True)
class AddTransactionResult:
    """The gateway's acknowledgement of a submitted transaction."""

    code: AddTransactionResultCode
    transaction_hash: FieldElement
    address: Optional[FieldElement] = None

    @classmethod
    def from_json(cls, data: object) -> "AddTransactionResult":
        data = _mapping(data, "add transaction result")
        raw_code = _require(data, "code")
        try:
            code = AddTransactionResultCode(raw_code)
        except ValueError:
            raise ValueError(f"unknown result code: {raw_code!r}") from None
        return cls(
            code=code,
            transaction_hash=ufe_hex_deserialize(_require(data, "transaction_hash")),
            address=ufe_hex_option_deserialize(data.get("address")),
        )


@dataclass(frozen=True)
class EntryPoint:
    selector: FieldElement
    offset: FieldElement

    @classmethod
    def from_json(cls, data: object) -> "EntryPoint":
        data = _mapping(data, "entry point")
        return cls(
            selector=ufe_hex_deserialize(_require(data, "selector")),
            offset=ufe_hex_deserialize(_require(data, "offset")),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "selector": ufe_hex_serialize(self.selector),
            "offset": ufe_hex_serialize(self.offset),
        }


@dataclass(frozen=True)
class EntryPointsByType:
    constructor: tuple[EntryPoint, ...] = ()
    external: tuple[EntryPoint, ...] = ()
    l1_handler: tuple[EntryPoint, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "constructor", "external", "l1_handler")

    @classmethod
    def from_json(cls, data: object) -> "EntryPointsByType":
        data = _mapping(data, "entry points by type")
        return cls(
            constructor=tuple(EntryPoint.from_json(e) for e in _list(data, "CONSTRUCTOR")),
            external=tuple(EntryPoint.from_json(e) for e in _list(data, "EXTERNAL")),
            l1_handler=tuple(EntryPoint.from_json(e) for e in _list(data, "L1_HANDLER")),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "CONSTRUCTOR": [entry.to_json() for entry in self.constructor],
            "EXTERNAL": [entry.to_json() for entry in self.external],
            "L1_HANDLER": [entry.to_json() for entry in self.l1_handler],
        }


@dataclass(frozen=True)
class ContractDefinition:
    """A compressed program together with its entry points and optional ABI."""

    program: bytes
    entry_points_by_type: EntryPointsByType
    abi: Optional[tuple["AbiEntry", ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "program", bytes(self.program))
        if self.abi is not None:
            _freeze(self, "abi")

    def to_json(self) -> dict[str, Any]:
        from .contract import abi_entry_to_json

        result: dict[str, Any] = {
            "program": base64_serialize(self.program),
            "entry_points_by_type": self.entry_points_by_type.to_json(),
        }
        if self.abi is not None:
            result["abi"] = [abi_entry_to_json(entry) for entry in self.abi]
        return result


@dataclass(frozen=True)
class DeployTransactionRequest:
    transaction_type: ClassVar[str] = "DEPLOY"

    constructor_calldata: tuple[FieldElement, ...]
    contract_address_salt: FieldElement
    contract_definition: ContractDefinition

    def __post_init__(self) -> None:
        _freeze(self, "constructor_calldata")

    def to_json(self) -> dict[str, Any]:
        return {
            "constructor_calldata": [str(item) for item in self.constructor_calldata],
            "contract_address_salt": ufe_hex_serialize(self.contract_address_salt),
            "contract_definition": self.contract_definition.to_json(),
        }


@dataclass(frozen=True)
class InvokeFunctionTransactionRequest:
    transaction_type: ClassVar[str] = "INVOKE_FUNCTION"

    contract_address: FieldElement
    entry_point_selector: FieldElement
    calldata: tuple[FieldElement, ...]
    signature: tuple[FieldElement, ...]
    max_fee: FieldElement

    def __post_init__(self) -> None:
        _freeze(self, "calldata", "signature")

    def to_json(self) -> dict[str, Any]:
        return {
            "contract_address": ufe_hex_serialize(self.contract_address),
            "entry_point_selector": ufe_hex_serialize(self.entry_point_selector),
            "calldata": [str(item) for item in self.calldata],
            "signature": [str(item) for item in self.signature],
            "max_fee": ufe_hex_serialize(self.max_fee),
        }


TransactionRequest = Union[DeployTransactionRequest, InvokeFunctionTransactionRequest]