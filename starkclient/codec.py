"""JSON encodings of field elements and byte strings used by the gateway."""

from __future__ import annotations

import base64
from typing import Optional

from .field_element import FieldElement, FieldElementError


def _parse_hex(value: object) -> FieldElement:
    if not isinstance(value, str):
        raise ValueError(f"expected a hex string, got {type(value).__name__}")
    try:
        return FieldElement.from_hex_be(value)
    except FieldElementError as err:
        raise ValueError(f"invalid hex string: {err}") from err


def ufe_hex_serialize(value: FieldElement) -> str:
    """Encode as "0x" followed by 64 lower-case hex digits."""
    return f"{value:#064x}"


def ufe_hex_deserialize(value: object) -> FieldElement:
    """Decode a hex string into a field element."""
    return _parse_hex(value)


def ufe_hex_option_serialize(value: Optional[FieldElement]) -> Optional[str]:
    """Encode an optional element; None stays None."""
    return None if value is None else ufe_hex_serialize(value)


def ufe_hex_option_deserialize(value: object) -> Optional[FieldElement]:
    """Decode a hex string; an empty string or None gives None."""
    if value is None or value == "":
        return None
    return _parse_hex(value)


def pending_block_hash_deserialize(value: object) -> Optional[FieldElement]:
    """Decode a block hash that may be empty, "pending" or "None"."""
    if value is None or value in ("", "pending", "None"):
        return None
    return _parse_hex(value)


def base64_serialize(data: bytes) -> str:
    """Encode bytes as standard padded base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")