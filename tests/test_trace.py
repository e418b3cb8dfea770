import pytest

from starkclient.field_element import FieldElement
from starkclient.trace import (
    FunctionInvocation,
    OrderedEventResponse,
    OrderedL2ToL1MessageResponse,
    TransactionTrace,
)
from starkclient.transactions import EntryPointType

L1_ADDRESS = "0xde29d060D45901Fb19ED6C6e959EB22d8626708e"


def _invocation(internal_calls=(), **overrides):
    raw = {
        "caller_address": "0x0",
        "contract_address": "0x123",
        "code_address": "0x123",
        "selector": "0xabc",
        "entry_point_type": "EXTERNAL",
        "calldata": ["0x1", "0x2"],
        "result": ["0x3"],
        "execution_resources": {
            "n_steps": 7,
            "n_memory_holes": 1,
            "builtin_instance_counter": {"pedersen_builtin": 2},
        },
        "internal_calls": list(internal_calls),
        "events": [],
        "messages": [],
    }
    raw.update(overrides)
    return raw


def test_trace_with_messages():
    inner = _invocation(
        messages=[{"order": 0, "to_address": L1_ADDRESS, "payload": ["0x5", "0x6"]}]
    )
    raw = {"function_invocation": _invocation([inner]), "signature": ["0x11", "0x22"]}
    trace = TransactionTrace.from_json(raw)
    assert trace.signature == (FieldElement.from_hex_be("0x11"), FieldElement.from_hex_be("0x22"))
    outer = trace.function_invocation
    assert outer.entry_point_type is EntryPointType.EXTERNAL
    assert outer.selector == FieldElement.from_hex_be("0xabc")
    assert outer.result == (FieldElement.from_hex_be("0x3"),)
    assert outer.execution_resources.builtin_instance_counter.pedersen_builtin == 2
    assert len(outer.internal_calls) == 1
    message = outer.internal_calls[0].messages[0]
    assert message.to_address == bytes.fromhex(L1_ADDRESS[2:])
    assert len(message.to_address) == 20
    assert len(message.payload) == 2
    assert outer.internal_calls[0].internal_calls == ()


def test_trace_with_events():
    raw = {
        "function_invocation": _invocation(
            events=[{"order": 3, "keys": ["0x9"], "data": ["0x1", "0x2"]}]
        ),
        "signature": [],
    }
    trace = TransactionTrace.from_json(raw)
    event = trace.function_invocation.events[0]
    assert event.order == 3
    assert event.keys == (FieldElement.from_hex_be("0x9"),)
    assert len(event.data) == 2


def test_optional_fields_may_be_null_or_missing():
    raw = _invocation(code_address=None, entry_point_type=None)
    del raw["selector"]
    invocation = FunctionInvocation.from_json(raw)
    assert invocation.code_address is None
    assert invocation.selector is None
    assert invocation.entry_point_type is None


def test_unknown_entry_point_type_rejected():
    with pytest.raises(ValueError, match="entry point type"):
        FunctionInvocation.from_json(_invocation(entry_point_type="INTERNAL"))


def test_missing_internal_calls_rejected():
    raw = _invocation()
    del raw["internal_calls"]
    with pytest.raises(ValueError, match="internal_calls"):
        FunctionInvocation.from_json(raw)


def test_invalid_l1_address_rejected():
    with pytest.raises(ValueError, match="to_address"):
        OrderedL2ToL1MessageResponse.from_json({"order": 0, "to_address": "0x12", "payload": []})


def test_negative_order_rejected():
    with pytest.raises(ValueError, match="order"):
        OrderedEventResponse.from_json({"order": -1, "keys": [], "data": []})


def test_missing_signature_rejected():
    with pytest.raises(ValueError, match="signature"):
        TransactionTrace.from_json({"function_invocation": _invocation()})