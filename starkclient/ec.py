"""Elliptic curve points over the STARK field and big-integer helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .field_element import FieldElement


class SignError(ValueError):
    """An ECDSA signing operation failed."""

    class Kind(Enum):
        INVALID_MESSAGE_HASH = "Invalid message hash"
        INVALID_K = "Invalid k"

    def __init__(self, kind: "SignError.Kind") -> None:
        self.kind = kind
        super().__init__(kind.value)


class VerifyError(ValueError):
    """An ECDSA verification operation failed."""

    class Kind(Enum):
        INVALID_MESSAGE_HASH = "Invalid message hash"
        INVALID_R = "Invalid r"
        INVALID_S = "Invalid s"

    def __init__(self, kind: "VerifyError.Kind") -> None:
        self.kind = kind
        super().__init__(kind.value)


def _inverse_or_raise(value: FieldElement) -> FieldElement:
    inverse = value.invert()
    if inverse is None:
        raise ZeroDivisionError("field element zero has no inverse")
    return inverse


@dataclass(frozen=True)
class EcPoint:
    """A point on the STARK curve (alpha = 1) in affine coordinates."""

    x: FieldElement
    y: FieldElement
    infinity: bool = False

    @classmethod
    def identity(cls) -> "EcPoint":
        """The point at infinity."""
        return cls(FieldElement.ZERO, FieldElement.ZERO, True)

    def double(self) -> "EcPoint":
        """Return 2 * self."""
        if self.infinity:
            return self
        one = FieldElement.ONE
        two = one + one
        three = two + one
        # lambda = (3x^2 + a) / 2y with a = 1
        dividend = three * (self.x * self.x) + one
        lam = dividend * _inverse_or_raise(two * self.y)
        result_x = lam * lam - self.x - self.x
        result_y = lam * (self.x - result_x) - self.y
        return EcPoint(result_x, result_y, False)

    def add(self, other: "EcPoint") -> "EcPoint":
        """Return self + other; the points must have distinct x unless one is infinity."""
        if self.infinity:
            return other
        if other.infinity:
            return self
        lam = (other.y - self.y) * _inverse_or_raise(other.x - self.x)
        result_x = lam * lam - self.x - other.x
        result_y = lam * (self.x - result_x) - self.y
        return EcPoint(result_x, result_y, False)

    def subtract(self, other: "EcPoint") -> "EcPoint":
        """Return self - other."""
        return self.add(EcPoint(other.x, -other.y, other.infinity))

    def multiply(self, bits: Sequence[bool]) -> "EcPoint":
        """Multiply by a scalar given as little-endian bits."""
        product = EcPoint.identity()
        for bit in reversed(list(bits)):
            product = product.double()
            if bit:
                product = product.add(self)
        return product


def add_unbounded(augend: FieldElement, addend: FieldElement) -> int:
    """Sum of the canonical values without reduction."""
    return int(augend) + int(addend)


def bigint_mul_mod_floor(
    multiplicand: int, multiplier: FieldElement, modulus: FieldElement
) -> FieldElement:
    """(multiplicand * multiplier) mod modulus, with a floored modulo."""
    modulus_value = int(modulus)
    if modulus_value == 0:
        raise ZeroDivisionError("modulus is zero")
    return FieldElement((multiplicand * int(multiplier)) % modulus_value)


def mul_mod_floor(
    multiplicand: FieldElement, multiplier: FieldElement, modulus: FieldElement
) -> FieldElement:
    """(multiplicand * multiplier) mod modulus on canonical values."""
    return bigint_mul_mod_floor(int(multiplicand), multiplier, modulus)


def mod_inverse(operand: FieldElement, modulus: FieldElement) -> FieldElement:
    """Inverse of operand modulo modulus; raises ValueError when none exists."""
    operand_value = int(operand)
    modulus_value = int(modulus)
    if modulus_value == 0 or math.gcd(operand_value, modulus_value) != 1:
        raise ValueError("GCD must be one")
    return FieldElement(pow(operand_value, -1, modulus_value))