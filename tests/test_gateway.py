import json

import httpx
import pytest

from starkclient.block import BlockId, BlockStatus
from starkclient.field_element import FieldElement
from starkclient.gateway import (
    DeserializationError,
    GatewayStarknetError,
    ProviderError,
    SequencerGatewayProvider,
)
from starkclient.requests import AddTransactionResultCode, InvokeFunctionTransactionRequest
from starkclient.responses import FeeUnit, StarknetErrorCode

BLOCK_JSON = {
    "parent_block_hash": "0x1",
    "timestamp": 7,
    "status": "ACCEPTED_ON_L1",
    "gas_price": "0x2",
    "transactions": [],
    "transaction_receipts": [],
}

ERROR_JSON = {"code": "StarknetErrorCode.BLOCK_NOT_FOUND", "message": "no block"}


def make_provider(answer, seen, gateway="http://localhost/gateway",
                  feeder="http://localhost/feeder_gateway"):
    def handler(request):
        seen.append(request)
        if isinstance(answer, Exception):
            raise answer
        text = answer if isinstance(answer, str) else json.dumps(answer)
        return httpx.Response(200, text=text)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SequencerGatewayProvider(gateway, feeder, client=client)


@pytest.mark.asyncio
async def test_get_latest_block_has_no_query():
    seen = []
    provider = make_provider(BLOCK_JSON, seen)
    block = await provider.get_block(BlockId.latest())
    assert block.status is BlockStatus.ACCEPTED_ON_L1
    assert block.timestamp == 7
    assert seen[0].url.path == "/feeder_gateway/get_block"
    assert seen[0].url.query == b""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "block_id, key, expected",
    [
        (BlockId.by_number(5), "blockNumber", "5"),
        (BlockId.pending(), "blockNumber", "pending"),
        (BlockId.by_hash(FieldElement.from_hex_be("0x1234abcd")), "blockHash", "0x1234abcd"),
    ],
)
async def test_block_id_query(block_id, key, expected):
    seen = []
    provider = make_provider(BLOCK_JSON, seen)
    await provider.get_block(block_id)
    assert seen[0].url.params[key] == expected


@pytest.mark.asyncio
async def test_starknet_error_is_raised():
    provider = make_provider(ERROR_JSON, [])
    with pytest.raises(GatewayStarknetError) as info:
        await provider.get_block(BlockId.latest())
    assert info.value.error.code is StarknetErrorCode.BLOCK_NOT_FOUND
    assert info.value.error.message == "no block"


@pytest.mark.asyncio
async def test_invalid_json_is_deserialization_error():
    provider = make_provider("not json", [])
    with pytest.raises(DeserializationError) as info:
        await provider.get_last_batch_id()
    assert info.value.text == "not json"


@pytest.mark.asyncio
async def test_unmatched_body_is_deserialization_error():
    provider = make_provider({"something": "else"}, [])
    with pytest.raises(DeserializationError):
        await provider.get_block(BlockId.latest())


@pytest.mark.asyncio
async def test_transport_failure_is_provider_error():
    provider = make_provider(httpx.ConnectError("refused"), [])
    with pytest.raises(ProviderError):
        await provider.get_l1_blockchain_id()


@pytest.mark.asyncio
async def test_get_storage_at():
    seen = []
    provider = make_provider("0x1a", seen)
    address = FieldElement.from_hex_be("0x1234abcd")
    key = FieldElement.from_int(10)
    value = await provider.get_storage_at(address, key, BlockId.latest())
    assert value == FieldElement.from_hex_be("0x1a")
    assert seen[0].url.params["contractAddress"] == "0x1234abcd"
    assert seen[0].url.params["key"] == "10"


@pytest.mark.asyncio
async def test_get_code_with_empty_abi_object():
    provider = make_provider({"bytecode": [], "abi": {}}, [])
    code = await provider.get_code(FieldElement.from_int(1), BlockId.latest())
    assert code.bytecode == ()
    assert code.abi == ()


@pytest.mark.asyncio
async def test_get_block_id_by_hash():
    seen = []
    provider = make_provider(42, seen)
    number = await provider.get_block_id_by_hash(FieldElement.from_int(0))
    assert number == 42
    assert seen[0].url.params["blockHash"] == "0x0"


@pytest.mark.asyncio
async def test_add_transaction_posts_tagged_body_with_token():
    seen = []
    answer = {"code": "TRANSACTION_RECEIVED", "transaction_hash": "0x5"}
    provider = make_provider(answer, seen)
    request = InvokeFunctionTransactionRequest(
        contract_address=FieldElement.from_int(1),
        entry_point_selector=FieldElement.from_int(2),
        calldata=(FieldElement.from_int(3),),
        signature=(),
        max_fee=FieldElement.from_int(0),
    )
    result = await provider.add_transaction(request, "token")
    assert result.code is AddTransactionResultCode.TRANSACTION_RECEIVED
    assert result.transaction_hash == FieldElement.from_hex_be("0x5")
    sent = seen[0]
    assert sent.method == "POST"
    assert sent.url.path == "/gateway/add_transaction"
    assert sent.url.params["token"] == "token"
    assert sent.headers["Content-Type"] == "application/json"
    body = json.loads(sent.content)
    assert body["type"] == "INVOKE_FUNCTION"
    assert body["calldata"] == ["3"]


@pytest.mark.asyncio
async def test_estimate_fee():
    seen = []
    provider = make_provider({"amount": 100, "unit": "wei"}, seen)
    request = InvokeFunctionTransactionRequest(
        contract_address=FieldElement.from_int(1),
        entry_point_selector=FieldElement.from_int(2),
        calldata=(),
        signature=(),
        max_fee=FieldElement.from_int(0),
    )
    fee = await provider.estimate_fee(request, BlockId.pending())
    assert fee.amount == 100
    assert fee.unit is FeeUnit.WEI
    assert seen[0].url.path == "/feeder_gateway/estimate_fee"


@pytest.mark.asyncio
async def test_root_base_url_does_not_double_slash():
    seen = []
    provider = make_provider(3, seen, feeder="http://localhost")
    assert await provider.get_last_batch_id() == 3
    assert seen[0].url.path == "/get_last_batch_id"


def test_presets_point_at_their_gateways():
    goerli = SequencerGatewayProvider.starknet_alpha_goerli()
    assert goerli.gateway_url == "https://alpha4.starknet.io/gateway"
    assert goerli.feeder_gateway_url == "https://alpha4.starknet.io/feeder_gateway"
    local = SequencerGatewayProvider.starknet_nile_localhost()
    assert local.gateway_url == "http://127.0.0.1:5000/gateway"
    mainnet = SequencerGatewayProvider.starknet_alpha_mainnet()
    assert mainnet.feeder_gateway_url == "https://alpha-mainnet.starknet.io/feeder_gateway"