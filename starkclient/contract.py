"""Contract ABI entries, deployed contract code and compiled contract artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from .codec import ufe_hex_deserialize, ufe_hex_serialize
from .field_element import FieldElement
from .requests import EntryPointsByType

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


def _check_fields(data: Mapping[str, Any], allowed: frozenset, what: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValueError(f"unknown field `{unknown[0]}` in {what}")


def _as_str(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field `{field}` must be a string")
    return value


def _str(data: Mapping[str, Any], key: str) -> str:
    return _as_str(_require(data, key), key)


def _u64(value: object, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise ValueError(f"field `{field}` must be an unsigned 64-bit integer")
    return value


def _as_list(value: object, field: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"field `{field}` must be a list")
    return value


def _list(data: Mapping[str, Any], key: str) -> list:
    return _as_list(_require(data, key), key)


def _optional(data: Mapping[str, Any], key: str, parse: Callable[[Any], Any]) -> Any:
    value = data.get(key)
    return None if value is None else parse(value)


# ---------------------------------------------------------------- ABI


@dataclass(frozen=True)
class AbiInput:
    name: str
    type: str


@dataclass(frozen=True)
class AbiOutput:
    name: str
    type: str


@dataclass(frozen=True)
class AbiEventData:
    name: str
    type: str


@dataclass(frozen=True)
class AbiMember:
    name: str
    offset: int
    type: str


@dataclass(frozen=True)
class AbiConstructorEntry:
    name: str
    inputs: tuple[AbiInput, ...]
    outputs: tuple[AbiOutput, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))


@dataclass(frozen=True)
class AbiFunctionEntry:
    name: str
    inputs: tuple[AbiInput, ...]
    outputs: tuple[AbiOutput, ...]
    state_mutability: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))


@dataclass(frozen=True)
class AbiStructEntry:
    name: str
    size: int
    members: tuple[AbiMember, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", tuple(self.members))


@dataclass(frozen=True)
class AbiL1HandlerEntry:
    name: str
    inputs: tuple[AbiInput, ...]
    outputs: tuple[AbiOutput, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))


@dataclass(frozen=True)
class AbiEventEntry:
    name: str
    keys: tuple[None, ...]
    data: tuple[AbiEventData, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "data", tuple(self.data))


AbiEntry = Union[
    AbiConstructorEntry, AbiFunctionEntry, AbiStructEntry, AbiL1HandlerEntry, AbiEventEntry
]


def _parse_typed(cls: type, data: object, what: str) -> Any:
    data = _mapping(data, what)
    return cls(name=_str(data, "name"), type=_str(data, "type"))


def _typed_json(item: Any) -> dict[str, Any]:
    return {"name": item.name, "type": item.type}


def _inputs(data: Mapping[str, Any]) -> tuple[AbiInput, ...]:
    return tuple(_parse_typed(AbiInput, item, "input") for item in _list(data, "inputs"))


def _outputs(data: Mapping[str, Any]) -> tuple[AbiOutput, ...]:
    return tuple(_parse_typed(AbiOutput, item, "output") for item in _list(data, "outputs"))


def _parse_constructor(data: Mapping[str, Any]) -> AbiConstructorEntry:
    return AbiConstructorEntry(_str(data, "name"), _inputs(data), _outputs(data))


def _parse_function(data: Mapping[str, Any]) -> AbiFunctionEntry:
    return AbiFunctionEntry(
        _str(data, "name"),
        _inputs(data),
        _outputs(data),
        _optional(data, "stateMutability", lambda v: _as_str(v, "stateMutability")),
    )


def _parse_member(data: object) -> AbiMember:
    data = _mapping(data, "member")
    return AbiMember(
        name=_str(data, "name"),
        offset=_u64(_require(data, "offset"), "offset"),
        type=_str(data, "type"),
    )


def _parse_struct(data: Mapping[str, Any]) -> AbiStructEntry:
    return AbiStructEntry(
        _str(data, "name"),
        _u64(_require(data, "size"), "size"),
        tuple(_parse_member(item) for item in _list(data, "members")),
    )


def _parse_l1_handler(data: Mapping[str, Any]) -> AbiL1HandlerEntry:
    return AbiL1HandlerEntry(_str(data, "name"), _inputs(data), _outputs(data))


def _parse_event(data: Mapping[str, Any]) -> AbiEventEntry:
    keys = _list(data, "keys")
    if any(key is not None for key in keys):
        raise ValueError("field `keys` must only hold null values")
    return AbiEventEntry(
        _str(data, "name"),
        tuple(None for _ in keys),
        tuple(_parse_typed(AbiEventData, item, "event data") for item in _list(data, "data")),
    )


_ABI_PARSERS: dict[str, Callable[[Mapping[str, Any]], AbiEntry]] = {
    "constructor": _parse_constructor,
    "function": _parse_function,
    "struct": _parse_struct,
    "l1_handler": _parse_l1_handler,
    "event": _parse_event,
}


def parse_abi_entry(data: object) -> AbiEntry:
    """Parse one ABI entry, dispatching on its "type" field."""
    if not isinstance(data, Mapping) or not isinstance(data.get("type"), str):
        raise ValueError("invalid type field")
    kind = data["type"]
    parser = _ABI_PARSERS.get(kind)
    if parser is None:
        raise ValueError(f"unknown ABI entry type: {kind}")
    try:
        return parser(data)
    except ValueError as err:
        raise ValueError(f"invalid {kind} variant: {err}") from err


def abi_entry_to_json(entry: AbiEntry) -> dict[str, Any]:
    """Encode an ABI entry as a JSON object tagged with its type."""
    if isinstance(entry, AbiConstructorEntry):
        return {
            "type": "constructor",
            "name": entry.name,
            "inputs": [_typed_json(i) for i in entry.inputs],
            "outputs": [_typed_json(o) for o in entry.outputs],
        }
    if isinstance(entry, AbiFunctionEntry):
        return {
            "type": "function",
            "name": entry.name,
            "inputs": [_typed_json(i) for i in entry.inputs],
            "outputs": [_typed_json(o) for o in entry.outputs],
            "stateMutability": entry.state_mutability,
        }
    if isinstance(entry, AbiStructEntry):
        return {
            "type": "struct",
            "name": entry.name,
            "size": entry.size,
            "members": [
                {"name": m.name, "offset": m.offset, "type": m.type} for m in entry.members
            ],
        }
    if isinstance(entry, AbiL1HandlerEntry):
        return {
            "type": "l1_handler",
            "name": entry.name,
            "inputs": [_typed_json(i) for i in entry.inputs],
            "outputs": [_typed_json(o) for o in entry.outputs],
        }
    if isinstance(entry, AbiEventEntry):
        return {
            "type": "event",
            "name": entry.name,
            "keys": [None for _ in entry.keys],
            "data": [_typed_json(d) for d in entry.data],
        }
    raise TypeError(f"not an ABI entry: {type(entry).__name__}")


@dataclass(frozen=True)
class ContractCode:
    """Bytecode and ABI of a deployed contract."""

    bytecode: tuple[FieldElement, ...]
    abi: Optional[tuple[AbiEntry, ...]] = None

    @classmethod
    def from_json(cls, data: object) -> "ContractCode":
        data = _mapping(data, "contract code")
        return cls(
            bytecode=tuple(ufe_hex_deserialize(item) for item in _list(data, "bytecode")),
            abi=_optional(
                data,
                "abi",
                lambda v: tuple(parse_abi_entry(item) for item in _as_list(v, "abi")),
            ),
        )


# ---------------------------------------------------------------- artifacts


@dataclass(frozen=True)
class ApTrackingData:
    group: int
    offset: int


@dataclass(frozen=True)
class FlowTrackingData:
    ap_tracking: ApTrackingData
    reference_ids: dict[str, int]


@dataclass(frozen=True)
class Hint:
    accessible_scopes: tuple[str, ...]
    code: str
    flow_tracking_data: FlowTrackingData


@dataclass(frozen=True)
class Reference:
    ap_tracking_data: ApTrackingData
    pc: int
    value: str


@dataclass(frozen=True)
class ReferenceManager:
    references: tuple[Reference, ...]


@dataclass(frozen=True)
class IdentifierMember:
    cairo_type: str
    offset: int


@dataclass(frozen=True)
class Identifier:
    type: str
    decorators: Optional[tuple[str, ...]] = None
    cairo_type: Optional[str] = None
    full_name: Optional[str] = None
    members: Optional[dict[str, IdentifierMember]] = None
    references: Optional[tuple[Reference, ...]] = None
    size: Optional[int] = None
    pc: Optional[int] = None
    destination: Optional[str] = None
    value: Optional[Union[int, float]] = None


def _parse_ap_tracking(data: object) -> ApTrackingData:
    data = _mapping(data, "ap tracking data")
    _check_fields(data, frozenset({"group", "offset"}), "ap tracking data")
    return ApTrackingData(
        group=_u64(_require(data, "group"), "group"),
        offset=_u64(_require(data, "offset"), "offset"),
    )


def _ap_tracking_json(item: ApTrackingData) -> dict[str, Any]:
    return {"group": item.group, "offset": item.offset}


def _parse_flow_tracking(data: object) -> FlowTrackingData:
    data = _mapping(data, "flow tracking data")
    _check_fields(data, frozenset({"ap_tracking", "reference_ids"}), "flow tracking data")
    raw_ids = _mapping(_require(data, "reference_ids"), "reference ids")
    return FlowTrackingData(
        ap_tracking=_parse_ap_tracking(_require(data, "ap_tracking")),
        reference_ids={key: _u64(value, "reference_ids") for key, value in raw_ids.items()},
    )


def _flow_tracking_json(item: FlowTrackingData) -> dict[str, Any]:
    return {
        "ap_tracking": _ap_tracking_json(item.ap_tracking),
        "reference_ids": {key: item.reference_ids[key] for key in sorted(item.reference_ids)},
    }


def _parse_hint(data: object) -> Hint:
    data = _mapping(data, "hint")
    _check_fields(data, frozenset({"accessible_scopes", "code", "flow_tracking_data"}), "hint")
    return Hint(
        accessible_scopes=tuple(
            _as_str(scope, "accessible_scopes") for scope in _list(data, "accessible_scopes")
        ),
        code=_str(data, "code"),
        flow_tracking_data=_parse_flow_tracking(_require(data, "flow_tracking_data")),
    )


def _hint_json(item: Hint) -> dict[str, Any]:
    return {
        "accessible_scopes": list(item.accessible_scopes),
        "code": item.code,
        "flow_tracking_data": _flow_tracking_json(item.flow_tracking_data),
    }


def _parse_reference(data: object) -> Reference:
    data = _mapping(data, "reference")
    _check_fields(data, frozenset({"ap_tracking_data", "pc", "value"}), "reference")
    return Reference(
        ap_tracking_data=_parse_ap_tracking(_require(data, "ap_tracking_data")),
        pc=_u64(_require(data, "pc"), "pc"),
        value=_str(data, "value"),
    )


def _reference_json(item: Reference) -> dict[str, Any]:
    return {
        "ap_tracking_data": _ap_tracking_json(item.ap_tracking_data),
        "pc": item.pc,
        "value": item.value,
    }


def _parse_reference_manager(data: object) -> ReferenceManager:
    data = _mapping(data, "reference manager")
    _check_fields(data, frozenset({"references"}), "reference manager")
    return ReferenceManager(tuple(_parse_reference(r) for r in _list(data, "references")))


def _parse_identifier_member(data: object) -> IdentifierMember:
    data = _mapping(data, "identifier member")
    _check_fields(data, frozenset({"cairo_type", "offset"}), "identifier member")
    return IdentifierMember(
        cairo_type=_str(data, "cairo_type"),
        offset=_u64(_require(data, "offset"), "offset"),
    )


def _number(value: object) -> Union[int, float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("field `value` must be a number")
    return value


_IDENTIFIER_FIELDS = frozenset(
    {
        "decorators",
        "cairo_type",
        "full_name",
        "members",
        "references",
        "size",
        "pc",
        "destination",
        "type",
        "value",
    }
)


def _parse_identifier(data: object) -> Identifier:
    data = _mapping(data, "identifier")
    _check_fields(data, _IDENTIFIER_FIELDS, "identifier")
    return Identifier(
        type=_str(data, "type"),
        decorators=_optional(
            data,
            "decorators",
            lambda v: tuple(_as_str(d, "decorators") for d in _as_list(v, "decorators")),
        ),
        cairo_type=_optional(data, "cairo_type", lambda v: _as_str(v, "cairo_type")),
        full_name=_optional(data, "full_name", lambda v: _as_str(v, "full_name")),
        members=_optional(
            data,
            "members",
            lambda v: {
                key: _parse_identifier_member(member)
                for key, member in _mapping(v, "members").items()
            },
        ),
        references=_optional(
            data,
            "references",
            lambda v: tuple(_parse_reference(r) for r in _as_list(v, "references")),
        ),
        size=_optional(data, "size", lambda v: _u64(v, "size")),
        pc=_optional(data, "pc", lambda v: _u64(v, "pc")),
        destination=_optional(data, "destination", lambda v: _as_str(v, "destination")),
        value=_optional(data, "value", _number),
    )


def _identifier_json(item: Identifier) -> dict[str, Any]:
    members = (
        None
        if item.members is None
        else {
            key: {"cairo_type": item.members[key].cairo_type, "offset": item.members[key].offset}
            for key in sorted(item.members)
        }
    )
    candidates = (
        ("decorators", None if item.decorators is None else list(item.decorators)),
        ("cairo_type", item.cairo_type),
        ("full_name", item.full_name),
        ("members", members),
        (
            "references",
            None if item.references is None else [_reference_json(r) for r in item.references],
        ),
        ("size", item.size),
        ("pc", item.pc),
        ("destination", item.destination),
        ("type", item.type),
        ("value", item.value),
    )
    return {key: value for key, value in candidates if key == "type" or value is not None}


def _hint_key(key: object) -> int:
    if not isinstance(key, str) or not key.isascii() or not key.isdigit():
        raise ValueError(f"invalid hint key: {key!r}")
    return _u64(int(key), "hints")


_PROGRAM_FIELDS = frozenset(
    {
        "attributes",
        "builtins",
        "data",
        "debug_info",
        "hints",
        "identifiers",
        "main_scope",
        "prime",
        "reference_manager",
    }
)


@dataclass(frozen=True)
class Program:
    """A compiled Cairo program; attributes and debug info are dropped on reading."""

    builtins: tuple[str, ...]
    data: tuple[FieldElement, ...]
    hints: dict[int, tuple[Hint, ...]]
    identifiers: dict[str, Identifier]
    main_scope: str
    prime: str
    reference_manager: ReferenceManager

    @classmethod
    def from_json(cls, data: object) -> "Program":
        data = _mapping(data, "program")
        _check_fields(data, _PROGRAM_FIELDS, "program")
        raw_hints = _mapping(_require(data, "hints"), "hints")
        raw_identifiers = _mapping(_require(data, "identifiers"), "identifiers")
        return cls(
            builtins=tuple(_as_str(b, "builtins") for b in _list(data, "builtins")),
            data=tuple(ufe_hex_deserialize(item) for item in _list(data, "data")),
            hints={
                _hint_key(key): tuple(_parse_hint(h) for h in _as_list(value, "hints"))
                for key, value in raw_hints.items()
            },
            identifiers={
                key: _parse_identifier(value) for key, value in raw_identifiers.items()
            },
            main_scope=_str(data, "main_scope"),
            prime=_str(data, "prime"),
            reference_manager=_parse_reference_manager(_require(data, "reference_manager")),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "builtins": list(self.builtins),
            "data": [ufe_hex_serialize(item) for item in self.data],
            "hints": {
                str(key): [_hint_json(h) for h in self.hints[key]] for key in sorted(self.hints)
            },
            "identifiers": {
                name: _identifier_json(self.identifiers[name])
                for name in sorted(self.identifiers)
            },
            "main_scope": self.main_scope,
            "prime": self.prime,
            "reference_manager": {
                "references": [_reference_json(r) for r in self.reference_manager.references]
            },
        }


@dataclass(frozen=True)
class ContractArtifact:
    """A compiled contract: ABI, entry points and program."""

    abi: tuple[AbiEntry, ...]
    entry_points_by_type: EntryPointsByType
    program: Program

    @classmethod
    def from_json(cls, data: object) -> "ContractArtifact":
        data = _mapping(data, "contract artifact")
        _check_fields(
            data, frozenset({"abi", "entry_points_by_type", "program"}), "contract artifact"
        )
        return cls(
            abi=tuple(parse_abi_entry(entry) for entry in _list(data, "abi")),
            entry_points_by_type=EntryPointsByType.from_json(
                _require(data, "entry_points_by_type")
            ),
            program=Program.from_json(_require(data, "program")),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "abi": [abi_entry_to_json(entry) for entry in self.abi],
            "entry_points_by_type": self.entry_points_by_type.to_json(),
            "program": self.program.to_json(),
        }