"""State updates reported by the feeder gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .codec import ufe_hex_deserialize
from .field_element import FieldElement


def _mapping(data: object, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for {what}, got {type(data).__name__}")
    return data


def _require(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _list(value: object, field: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"field `{field}` must be a list")
    return value


def _felt(data: Mapping[str, Any], key: str) -> FieldElement:
    return ufe_hex_deserialize(_require(data, key))


@dataclass(frozen=True)
class StorageDiff:
    key: FieldElement
    value: FieldElement

    @classmethod
    def from_json(cls, data: object) -> "StorageDiff":
        data = _mapping(data, "storage diff")
        return cls(key=_felt(data, "key"), value=_felt(data, "value"))


@dataclass(frozen=True)
class DeployedContract:
    address: FieldElement
    contract_hash: FieldElement

    @classmethod
    def from_json(cls, data: object) -> "DeployedContract":
        data = _mapping(data, "deployed contract")
        return cls(address=_felt(data, "address"), contract_hash=_felt(data, "contract_hash"))


@dataclass(frozen=True)
class StateDiff:
    storage_diffs: dict[FieldElement, tuple[StorageDiff, ...]]
    deployed_contracts: tuple[DeployedContract, ...]

    @classmethod
    def from_json(cls, data: object) -> "StateDiff":
        data = _mapping(data, "state diff")
        raw_diffs = _mapping(_require(data, "storage_diffs"), "storage diffs")
        storage_diffs = {
            ufe_hex_deserialize(address): tuple(
                StorageDiff.from_json(item) for item in _list(diffs, "storage_diffs")
            )
            for address, diffs in raw_diffs.items()
        }
        deployed = _list(_require(data, "deployed_contracts"), "deployed_contracts")
        return cls(
            storage_diffs=storage_diffs,
            deployed_contracts=tuple(DeployedContract.from_json(item) for item in deployed),
        )


@dataclass(frozen=True)
class StateUpdate:
    new_root: FieldElement
    old_root: FieldElement
    state_diff: StateDiff
    block_hash: Optional[FieldElement] = None

    @classmethod
    def from_json(cls, data: object) -> "StateUpdate":
        data = _mapping(data, "state update")
        raw_hash = data.get("block_hash")
        return cls(
            new_root=_felt(data, "new_root"),
            old_root=_felt(data, "old_root"),
            state_diff=StateDiff.from_json(_require(data, "state_diff")),
            block_hash=None if raw_hash is None else ufe_hex_deserialize(raw_hash),
        )