import pytest

from starkclient.ec import (
    EcPoint,
    SignError,
    VerifyError,
    add_unbounded,
    bigint_mul_mod_floor,
    mod_inverse,
    mul_mod_floor,
)
from starkclient.field_element import PRIME, FieldElement

P = EcPoint(FieldElement(5), FieldElement(7))
# Constant term of a curve y^2 = x^3 + x + beta passing through P.
BETA = P.y * P.y - P.x * P.x * P.x - P.x


def on_curve(point):
    return point.y * point.y == point.x * point.x * point.x + point.x + BETA


def test_identity_is_neutral():
    identity = EcPoint.identity()
    assert identity.infinity
    assert identity.add(P) == P
    assert P.add(identity) == P
    assert identity.double() == identity


def test_double_stays_on_curve():
    doubled = P.double()
    assert not doubled.infinity
    assert on_curve(doubled)


def test_add_is_commutative_and_on_curve():
    doubled = P.double()
    assert doubled.add(P) == P.add(doubled)
    assert on_curve(doubled.add(P))


def test_multiply_by_small_scalars():
    assert P.multiply([True]) == P
    assert P.multiply([False, True]) == P.double()
    assert P.multiply([True, True]) == P.double().add(P)
    assert P.multiply([]) == EcPoint.identity()
    assert P.multiply([False]).infinity


def test_subtract_inverts_add():
    triple = P.double().add(P)
    assert triple.subtract(P) == P.double()
    assert P.subtract(EcPoint.identity()) == P


def test_add_same_x_raises():
    with pytest.raises(ZeroDivisionError):
        P.add(P)


def test_add_unbounded_exceeds_prime():
    total = add_unbounded(FieldElement.MAX, FieldElement.MAX)
    assert total > PRIME
    assert total - int(FieldElement.MAX) == int(FieldElement.MAX)


def test_mod_inverse_round_trip():
    modulus = FieldElement.MAX
    value = FieldElement.from_dec_str("123456789")
    inverse = mod_inverse(value, modulus)
    assert mul_mod_floor(value, inverse, modulus) == FieldElement.ONE


def test_mod_inverse_not_coprime():
    with pytest.raises(ValueError):
        mod_inverse(FieldElement(4), FieldElement(8))


def test_bigint_mul_mod_floor_negative():
    assert bigint_mul_mod_floor(-1, FieldElement(1), FieldElement(7)) == FieldElement(6)


def test_mul_mod_floor_result_below_modulus():
    modulus = FieldElement(1000)
    result = mul_mod_floor(FieldElement.MAX, FieldElement.MAX, modulus)
    assert int(result) < 1000
    assert int(result) == (int(FieldElement.MAX) ** 2) % 1000


def test_error_messages():
    assert str(SignError(SignError.Kind.INVALID_K)) == "Invalid k"
    assert str(SignError(SignError.Kind.INVALID_MESSAGE_HASH)) == "Invalid message hash"
    assert str(VerifyError(VerifyError.Kind.INVALID_R)) == "Invalid r"
    assert str(VerifyError(VerifyError.Kind.INVALID_S)) == "Invalid s"