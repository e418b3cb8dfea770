"""Block identifiers and blocks as reported by the feeder gateway."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from .codec import ufe_hex_deserialize, ufe_hex_option_deserialize
from .field_element import FieldElement
from .transactions import ConfirmedTransactionReceipt, Transaction, parse_transaction

_U64_MAX = (1 << 64) - 1


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


@dataclass(frozen=True)
class BlockId:
    """Identifies a block by hash, by number, or as the pending or latest block."""

    class Kind(Enum):
        HASH = "hash"
        NUMBER = "number"
        PENDING = "pending"
        LATEST = "latest"

    kind: "BlockId.Kind"
    value: Union[FieldElement, int, None] = None

    @classmethod
    def by_hash(cls, block_hash: FieldElement) -> "BlockId":
        """The block with the given hash."""
        if not isinstance(block_hash, FieldElement):
            raise TypeError("block hash must be a FieldElement")
        return cls(cls.Kind.HASH, block_hash)

    @classmethod
    def by_number(cls, number: int) -> "BlockId":
        """The block with the given number."""
        return cls(cls.Kind.NUMBER, _u64(number, "block number"))

    @classmethod
    def pending(cls) -> "BlockId":
        """The block currently being built."""
        return cls(cls.Kind.PENDING)

    @classmethod
    def latest(cls) -> "BlockId":
        """The most recent closed block."""
        return cls(cls.Kind.LATEST)


class BlockStatus(Enum):
    """Lifecycle status of a block."""

    PENDING = "PENDING"
    ABORTED = "ABORTED"
    REVERTED = "REVERTED"
    ACCEPTED_ON_L2 = "ACCEPTED_ON_L2"
    ACCEPTED_ON_L1 = "ACCEPTED_ON_L1"


@dataclass(frozen=True)
class Block:
    parent_block_hash: FieldElement
    timestamp: int
    status: BlockStatus
    gas_price: FieldElement
    transactions: tuple[Transaction, ...]
    transaction_receipts: tuple[ConfirmedTransactionReceipt, ...]
    block_hash: Optional[FieldElement] = None
    block_number: Optional[int] = None
    sequencer_address: Optional[FieldElement] = None
    state_root: Optional[FieldElement] = None

    @classmethod
    def from_json(cls, data: object) -> "Block":
        data = _mapping(data, "block")
        raw_status = _require(data, "status")
        try:
            status = BlockStatus(raw_status)
        except ValueError:
            raise ValueError(f"unknown block status: {raw_status!r}") from None
        block_number = data.get("block_number")
        return cls(
            parent_block_hash=ufe_hex_deserialize(_require(data, "parent_block_hash")),
            timestamp=_u64(_require(data, "timestamp"), "timestamp"),
            status=status,
            gas_price=ufe_hex_deserialize(_require(data, "gas_price")),
            transactions=tuple(parse_transaction(tx) for tx in _list(data, "transactions")),
            transaction_receipts=tuple(
                ConfirmedTransactionReceipt.from_json(receipt)
                for receipt in _list(data, "transaction_receipts")
            ),
            block_hash=ufe_hex_option_deserialize(data.get("block_hash")),
            block_number=None if block_number is None else _u64(block_number, "block_number"),
            sequencer_address=ufe_hex_option_deserialize(data.get("sequencer_address")),
            state_root=ufe_hex_option_deserialize(data.get("state_root")),
        )