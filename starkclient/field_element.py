"""Elements of the STARK prime field."""

from __future__ import annotations

import re
from functools import total_ordering
from typing import Iterable, Optional

# p = 2^251 + 17 * 2^192 + 1
PRIME = (1 << 251) + 17 * (1 << 192) + 1

_BYTE_COUNT = 32
_LIMB_MASK = (1 << 64) - 1
_U256_LIMIT = 1 << 256

# Montgomery radix R = 2^256 mod p and its inverse.
_R_INV = pow(1 << 256, -1, PRIME)

# Tonelli-Shanks parameters: p - 1 = 2^TWO_ADICITY * T with T odd.
_TWO_ADICITY = 192
_T = 0x800000000000011
_T_MINUS_ONE_DIV_TWO = 0x400000000000008
_MODULUS_MINUS_ONE_DIV_TWO = (PRIME - 1) // 2
_TWO_ADIC_ROOT_OF_UNITY_MONT = (
    0x4106BCCD64A2BDD8,
    0xAAADA25731FE3BE9,
    0x0A35C5BE60505574,
    0x07222E32C47AFC26,
)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_FORMAT_SPEC = re.compile(
    r"(?P<alt>#)?(?P<zero>0)?(?P<width>\d+)?(?P<kind>[xXd]?)\Z"
)


class FieldElementError(ValueError):
    """Base class for field element conversion errors."""


class FromDecStrError(FieldElementError):
    """A decimal string could not be converted into a field element."""


class FromHexError(FieldElementError):
    """A hexadecimal string could not be converted into a field element."""


class FromByteArrayError(FieldElementError):
    """A byte string could not be converted into a field element."""


def _limbs_to_int(limbs: Iterable[int]) -> int:
    limbs = tuple(limbs)
    if len(limbs) != 4:
        raise ValueError("expected exactly 4 limbs")
    result = 0
    for shift, limb in zip(range(0, 256, 64), limbs):
        if not 0 <= limb <= _LIMB_MASK:
            raise ValueError("limb out of range for a 64-bit word")
        result |= limb << shift
    return result


@total_ordering
class FieldElement:
    """An immutable element of the STARK prime field, kept in canonical form."""

    __slots__ = ("_value",)

    ZERO: "FieldElement"
    ONE: "FieldElement"
    MAX: "FieldElement"

    def __init__(self, value: int = 0) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("field element value must be an int")
        if not 0 <= value < PRIME:
            raise FieldElementError("number out of range")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("FieldElement is immutable")

    @property
    def value(self) -> int:
        """The canonical integer value of the element."""
        return self._value

    @classmethod
    def from_mont(cls, limbs: Iterable[int]) -> "FieldElement":
        """Build an element from its Montgomery form given as 4 little-endian 64-bit limbs."""
        return cls(_limbs_to_int(limbs) * _R_INV % PRIME)

    @classmethod
    def from_int(cls, value: int) -> "FieldElement":
        """Build an element from a non-negative integer smaller than the prime."""
        return cls(value)

    @classmethod
    def from_dec_str(cls, value: str) -> "FieldElement":
        """Parse a decimal string; an empty string yields zero."""
        result = 0
        for char in value:
            if not "0" <= char <= "9":
                raise FromDecStrError("invalid character")
            result = result * 10 + (ord(char) - ord("0"))
            if result >= _U256_LIMIT:
                raise FromDecStrError("number out of range")
        if result >= PRIME:
            raise FromDecStrError("number out of range")
        return cls(result)

    @classmethod
    def from_hex_be(cls, value: str) -> "FieldElement":
        """Parse a big-endian hexadecimal string, with any number of leading "0x" prefixes."""
        while value.startswith("0x"):
            value = value[2:]
        if len(value.encode("utf-8")) > _BYTE_COUNT * 2:
            raise FromHexError("invalid length")
        if any(char not in _HEX_DIGITS for char in value):
            raise FromHexError("invalid character")
        number = int(value, 16) if value else 0
        if number >= PRIME:
            raise FromHexError("number out of range")
        return cls(number)

    @classmethod
    def from_bytes_be(cls, data: bytes) -> "FieldElement":
        """Build an element from exactly 32 big-endian bytes."""
        data = bytes(data)
        if len(data) != _BYTE_COUNT:
            raise FromByteArrayError("invalid length")
        number = int.from_bytes(data, "big")
        if number >= PRIME:
            raise FromByteArrayError("number out of range")
        return cls(number)

    def to_bits_le(self) -> tuple[bool, ...]:
        """Return the 256 bits of the canonical value, least significant first."""
        value = self._value
        return tuple(bool((value >> index) & 1) for index in range(256))

    def to_bytes_be(self) -> bytes:
        """Return the canonical value as 32 big-endian bytes."""
        return self._value.to_bytes(_BYTE_COUNT, "big")

    def invert(self) -> Optional["FieldElement"]:
        """Return the multiplicative inverse, or None for zero."""
        if self._value == 0:
            return None
        return FieldElement(pow(self._value, PRIME - 2, PRIME))

    def sqrt(self) -> Optional["FieldElement"]:
        """Return a square root, or None when the element is not a square."""
        value = self._value
        if value == 0:
            return FieldElement(0)
        if pow(value, _MODULUS_MINUS_ONE_DIV_TWO, PRIME) != 1:
            return None

        z = _limbs_to_int(_TWO_ADIC_ROOT_OF_UNITY_MONT) * _R_INV % PRIME
        w = pow(value, _T_MINUS_ONE_DIV_TWO, PRIME)
        x = w * value % PRIME
        b = x * w % PRIME
        v = _TWO_ADICITY
        while b != 1:
            k = 0
            b2k = b
            while b2k != 1:
                b2k = b2k * b2k % PRIME
                k += 1
            w = z
            for _ in range(v - k - 1):
                w = w * w % PRIME
            z = w * w % PRIME
            b = b * z % PRIME
            x = x * w % PRIME
            v = k
        return FieldElement(x)

    def __add__(self, other: object) -> "FieldElement":
        if not isinstance(other, FieldElement):
            return NotImplemented
        return FieldElement((self._value + other._value) % PRIME)

    def __sub__(self, other: object) -> "FieldElement":
        if not isinstance(other, FieldElement):
            return NotImplemented
        return FieldElement((self._value - other._value) % PRIME)

    def __mul__(self, other: object) -> "FieldElement":
        if not isinstance(other, FieldElement):
            return NotImplemented
        return FieldElement(self._value * other._value % PRIME)

    def __neg__(self) -> "FieldElement":
        return FieldElement(-self._value % PRIME)

    def __mod__(self, other: object) -> "FieldElement":
        """Integer remainder of the canonical values."""
        if not isinstance(other, FieldElement):
            return NotImplemented
        if self._value < other._value:
            return self
        if other._value == 0:
            raise ZeroDivisionError("division by zero")
        return FieldElement(self._value % other._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldElement):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FieldElement):
            return NotImplemented
        return self._value < other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"FieldElement(inner={self:#064x})"

    def __format__(self, spec: str) -> str:
        match = _FORMAT_SPEC.match(spec)
        if match is None:
            raise ValueError(f"invalid format specifier {spec!r} for FieldElement")
        kind = match["kind"]
        if kind in ("", "d"):
            return format(self._value, spec)
        width = 1
        if match["zero"] and match["width"]:
            width = min(int(match["width"]), 64)
        digits = format(self._value, kind).rjust(width, "0")
        prefix = "0x" if match["alt"] else ""
        return prefix + digits


FieldElement.ZERO = FieldElement.from_mont((0, 0, 0, 0))
FieldElement.ONE = FieldElement.from_mont(
    (
        18446744073709551585,
        18446744073709551615,
        18446744073709551615,
        576460752303422960,
    )
)
FieldElement.MAX = FieldElement.from_mont((32, 0, 0, 544))