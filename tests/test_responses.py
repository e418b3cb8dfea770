import json

import pytest

from starkclient.field_element import FieldElement
from starkclient.responses import (
    CallContractResult,
    ContractAddresses,
    FeeEstimate,
    FeeUnit,
    StarknetError,
    StarknetErrorCode,
)


def test_contract_addresses_deser():
    raw = (
        '{"Starknet": "0xde29d060D45901Fb19ED6C6e959EB22d8626708e", '
        '"GpsStatementVerifier": "0xAB43bA48c9edF4C2C4bB01237348D1D7B28ef168"}'
    )
    ca = ContractAddresses.from_json(json.loads(raw))
    assert ca.starknet == bytes.fromhex("de29d060D45901Fb19ED6C6e959EB22d8626708e")
    assert ca.gps_statement_verifier == bytes.fromhex(
        "AB43bA48c9edF4C2C4bB01237348D1D7B28ef168"
    )


def test_contract_addresses_short_address_raises():
    with pytest.raises(ValueError):
        ContractAddresses.from_json(
            {"Starknet": "0xde29", "GpsStatementVerifier": "0x" + "00" * 20}
        )


def test_contract_addresses_missing_field_raises():
    with pytest.raises(ValueError):
        ContractAddresses.from_json({"Starknet": "0x" + "00" * 20})


def test_fee_estimate():
    fee = FeeEstimate.from_json({"amount": 1234, "unit": "wei"})
    assert fee == FeeEstimate(1234, FeeUnit.WEI)


def test_fee_estimate_unknown_unit_raises():
    with pytest.raises(ValueError):
        FeeEstimate.from_json({"amount": 1, "unit": "gwei"})


def test_fee_estimate_negative_amount_raises():
    with pytest.raises(ValueError):
        FeeEstimate.from_json({"amount": -5, "unit": "wei"})


def test_call_contract_result():
    result = CallContractResult.from_json({"result": ["0x1", "0x0a"]})
    assert result.result == (FieldElement(1), FieldElement(10))


def test_call_contract_result_bad_hex_raises():
    with pytest.raises(ValueError):
        CallContractResult.from_json({"result": ["0xzz"]})


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("StarknetErrorCode.BLOCK_NOT_FOUND", StarknetErrorCode.BLOCK_NOT_FOUND),
        ("StarknetErrorCode.TRANSACTION_FAILED", StarknetErrorCode.TRANSACTION_FAILED),
        ("StarkErrorCode.MALFORMED_REQUEST", StarknetErrorCode.MALFORMED_REQUEST),
    ],
)
def test_starknet_error_codes(raw, expected):
    error = StarknetError.from_json({"code": raw, "message": "something went wrong"})
    assert error.code is expected
    assert error.message == "something went wrong"


def test_starknet_error_unknown_code_raises():
    with pytest.raises(ValueError):
        StarknetError.from_json({"code": "StarknetErrorCode.UNKNOWN", "message": "x"})


def test_starknet_error_str_mentions_message():
    error = StarknetError.from_json(
        {"code": "StarknetErrorCode.BLOCK_NOT_FOUND", "message": "Block not found"}
    )
    assert "Block not found" in str(error)
    assert "BLOCK_NOT_FOUND" in str(error)