import pytest

from starkclient.field_element import FieldElement
from starkclient.utils import (
    MAINNET,
    TESTNET,
    CairoShortStringToFeltError,
    NonAsciiNameError,
    ParseCairoShortStringError,
    cairo_short_string_to_felt,
    get_selector_from_name,
    parse_cairo_short_string,
    starknet_keccak,
)

SHORT_STRINGS = [
    (
        "abcdefghijklmnopqrstuvwxyz",
        "156490583352162063278528710879425690470022892627113539022649722",
    ),
    (
        "1234567890123456789012345678901",
        "86921973946889608444641514252360676678984087116218318142845213717418291249",
    ),
]


def test_starknet_keccak():
    expected = FieldElement.from_hex_be(
        "0240060cdb34fcc260f41eac7474ee1d7c80b7e3607daff9ac67c7ea2ebb1c44"
    )
    assert starknet_keccak(b"execute") == expected


def test_get_selector_from_name():
    expected = FieldElement.from_hex_be(
        "0240060cdb34fcc260f41eac7474ee1d7c80b7e3607daff9ac67c7ea2ebb1c44"
    )
    assert get_selector_from_name("execute") == expected


def test_get_default_selector():
    default_selector = FieldElement.from_hex_be(
        "0000000000000000000000000000000000000000000000000000000000000000"
    )
    assert get_selector_from_name("__default__") == default_selector
    assert get_selector_from_name("__l1_default__") == default_selector


def test_get_selector_from_non_ascii_name():
    with pytest.raises(NonAsciiNameError) as info:
        get_selector_from_name("🦀")
    assert info.value.name == "🦀"


@pytest.mark.parametrize("text,felt_dec", SHORT_STRINGS)
def test_cairo_short_string_to_felt(text, felt_dec):
    assert cairo_short_string_to_felt(text) == FieldElement.from_dec_str(felt_dec)


def test_cairo_short_string_to_felt_too_long():
    with pytest.raises(CairoShortStringToFeltError) as info:
        cairo_short_string_to_felt("12345678901234567890123456789012")
    assert info.value.kind is CairoShortStringToFeltError.Kind.STRING_TOO_LONG


def test_cairo_short_string_to_felt_non_ascii():
    with pytest.raises(CairoShortStringToFeltError) as info:
        cairo_short_string_to_felt("🦀")
    assert info.value.kind is CairoShortStringToFeltError.Kind.NON_ASCII_CHARACTER


@pytest.mark.parametrize("text,felt_dec", SHORT_STRINGS)
def test_parse_cairo_short_string(text, felt_dec):
    assert parse_cairo_short_string(FieldElement.from_dec_str(felt_dec)) == text


def test_parse_cairo_short_string_too_long():
    felt = FieldElement.from_hex_be(
        "0x0111111111111111111111111111111111111111111111111111111111111111"
    )
    with pytest.raises(ParseCairoShortStringError) as info:
        parse_cairo_short_string(felt)
    assert info.value.kind is ParseCairoShortStringError.Kind.VALUE_OUT_OF_RANGE


def test_parse_cairo_short_string_unexpected_null():
    felt = FieldElement.from_hex_be(
        "0x0011111111111111111111111111111111111111111111111111111111110011"
    )
    with pytest.raises(ParseCairoShortStringError) as info:
        parse_cairo_short_string(felt)
    assert info.value.kind is ParseCairoShortStringError.Kind.UNEXPECTED_NULL_TERMINATOR


def test_parse_zero_is_empty():
    assert parse_cairo_short_string(FieldElement.ZERO) == ""


def test_short_string_round_trip():
    assert parse_cairo_short_string(cairo_short_string_to_felt("hello")) == "hello"


def test_chain_ids():
    assert parse_cairo_short_string(MAINNET) == "SN_MAIN"
    assert parse_cairo_short_string(TESTNET) == "SN_GOERLI"