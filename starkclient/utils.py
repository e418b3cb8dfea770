"""Selectors, StarkNet keccak, Cairo short strings and chain identifiers."""

from __future__ import annotations

from enum import Enum

from Crypto.Hash import keccak

from .field_element import FieldElement

DEFAULT_ENTRY_POINT_NAME = "__default__"
DEFAULT_L1_ENTRY_POINT_NAME = "__l1_default__"

MAINNET = FieldElement.from_mont(
    (17696389056366564951, 18446744073709551615, 18446744073709551615, 502562008147966918)
)
TESTNET = FieldElement.from_mont(
    (3753493103916128178, 18446744073709548950, 18446744073709551615, 398700013197595345)
)


class NonAsciiNameError(ValueError):
    """A name contained non-ASCII characters."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"the provided name contains non-ASCII characters: {name}")


class CairoShortStringToFeltError(ValueError):
    """A string could not be encoded as a Cairo short string."""

    class Kind(Enum):
        NON_ASCII_CHARACTER = "Cairo string can only contain ASCII characters"
        STRING_TOO_LONG = "short string exceeds maximum length of 31 characters"

    def __init__(self, kind: "CairoShortStringToFeltError.Kind") -> None:
        self.kind = kind
        super().__init__(kind.value)


class ParseCairoShortStringError(ValueError):
    """A field element could not be decoded as a Cairo short string."""

    class Kind(Enum):
        VALUE_OUT_OF_RANGE = "field element value out of range"
        UNEXPECTED_NULL_TERMINATOR = "unexpected null terminator"

    def __init__(self, kind: "ParseCairoShortStringError.Kind") -> None:
        self.kind = kind
        super().__init__(kind.value)


def starknet_keccak(data: bytes) -> FieldElement:
    """Keccak-256 of data with the top 6 bits cleared, as a field element."""
    hasher = keccak.new(digest_bits=256)
    hasher.update(bytes(data))
    digest = bytearray(hasher.digest())
    digest[0] &= 0b00000011
    return FieldElement.from_bytes_be(bytes(digest))


def get_selector_from_name(func_name: str) -> FieldElement:
    """Entry point selector for a function name."""
    if func_name in (DEFAULT_ENTRY_POINT_NAME, DEFAULT_L1_ENTRY_POINT_NAME):
        return FieldElement.ZERO
    if not func_name.isascii():
        raise NonAsciiNameError(func_name)
    return starknet_keccak(func_name.encode("ascii"))


def cairo_short_string_to_felt(value: str) -> FieldElement:
    """Encode an ASCII string of at most 31 characters as a field element."""
    if not value.isascii():
        raise CairoShortStringToFeltError(CairoShortStringToFeltError.Kind.NON_ASCII_CHARACTER)
    if len(value) > 31:
        raise CairoShortStringToFeltError(CairoShortStringToFeltError.Kind.STRING_TOO_LONG)
    return FieldElement(int.from_bytes(value.encode("ascii"), "big"))


def parse_cairo_short_string(felt: FieldElement) -> str:
    """Decode a field element holding a Cairo short string."""
    if felt == FieldElement.ZERO:
        return ""
    be_bytes = felt.to_bytes_be()
    if be_bytes[0] > 0:
        raise ParseCairoShortStringError(ParseCairoShortStringError.Kind.VALUE_OUT_OF_RANGE)
    chars: list[str] = []
    for byte in be_bytes:
        if byte == 0:
            if chars:
                raise ParseCairoShortStringError(
                    ParseCairoShortStringError.Kind.UNEXPECTED_NULL_TERMINATOR
                )
        else:
            chars.append(chr(byte))
    return "".join(chars)