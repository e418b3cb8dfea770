"""Provider backed by the sequencer gateway and feeder gateway HTTP APIs."""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional, TypeVar
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

import httpx

from .block import Block, BlockId
from .codec import ufe_hex_deserialize
from .contract import ContractArtifact, ContractCode
from .field_element import FieldElement
from .provider import Provider
from .requests import AddTransactionResult, InvokeFunctionTransactionRequest, TransactionRequest
from .responses import CallContractResult, ContractAddresses, FeeEstimate, StarknetError
from .state import StateUpdate
from .trace import TransactionTrace
from .transactions import TransactionInfo, TransactionReceipt, TransactionStatusInfo

T = TypeVar("T")

_U64_MAX = (1 << 64) - 1
_UNTAGGED_MISMATCH = "data did not match any variant of untagged enum"


class ProviderError(Exception):
    """Raised when a request to the gateway fails."""


class DeserializationError(ProviderError):
    """The gateway answered with a body that could not be understood."""

    def __init__(self, error: object, text: str) -> None:
        super().__init__(f"Deserialization error: {error}, Response: {text}")
        self.error = error
        self.text = text


class GatewayStarknetError(ProviderError):
    """The gateway answered with a StarkNet error instead of data."""

    def __init__(self, error: StarknetError) -> None:
        super().__init__(str(error))
        self.error = error


def _hex(value: FieldElement) -> str:
    return hex(int.from_bytes(value.to_bytes_be(), "big"))


def _build_url(base: str, segment: str, params: list[tuple[str, str]]) -> str:
    parts = urlsplit(base)
    path = parts.path
    if len(path) > 1 or path == "":
        path += "/"
    path += quote(segment, safe="")
    query = parts.query
    if params:
        extra = urlencode(params)
        query = f"{query}&{extra}" if query else extra
    return urlunsplit((parts.scheme, parts.netloc, path, query, parts.fragment))


def _block_id_params(block_identifier: BlockId) -> list[tuple[str, str]]:
    kind = block_identifier.kind
    if kind is BlockId.Kind.HASH:
        return [("blockHash", _hex(block_identifier.value))]
    if kind is BlockId.Kind.NUMBER:
        return [("blockNumber", str(block_identifier.value))]
    if kind is BlockId.Kind.PENDING:
        return [("blockNumber", "pending")]
    return []


def _u64(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise ValueError("expected an unsigned 64-bit integer")
    return value


def _raw_field_element(value: object) -> FieldElement:
    if not isinstance(value, str):
        raise ValueError("expected a hex string")
    return ufe_hex_deserialize(value)


def _empty_contract_code(value: object) -> ContractCode:
    if not isinstance(value, Mapping):
        raise ValueError("expected an object")
    bytecode = value.get("bytecode")
    if not isinstance(bytecode, list) or not all(isinstance(i, Mapping) for i in bytecode):
        raise ValueError("expected `bytecode` to be a list of objects")
    if not isinstance(value.get("abi"), Mapping):
        raise ValueError("expected `abi` to be an object")
    return ContractCode(bytecode=(), abi=())


def _untagged(value: object, text: str, *parsers: Callable[[Any], T]) -> T:
    """Try each parser in turn, then a StarkNet error; raise if nothing matches."""
    for parse in parsers:
        try:
            return parse(value)
        except (ValueError, TypeError):
            continue
    try:
        error = StarknetError.from_json(value)
    except (ValueError, TypeError):
        raise DeserializationError(_UNTAGGED_MISMATCH, text) from None
    raise GatewayStarknetError(error)


class SequencerGatewayProvider(Provider):
    """Talks to a StarkNet sequencer through its gateway and feeder gateway."""

    def __init__(
        self,
        gateway_url: str,
        feeder_gateway_url: str,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.gateway_url = gateway_url
        self.feeder_gateway_url = feeder_gateway_url
        self._client = client if client is not None else httpx.AsyncClient()

    @classmethod
    def starknet_alpha_mainnet(cls) -> "SequencerGatewayProvider":
        return cls(
            "https://alpha-mainnet.starknet.io/gateway",
            "https://alpha-mainnet.starknet.io/feeder_gateway",
        )

    @classmethod
    def starknet_alpha_goerli(cls) -> "SequencerGatewayProvider":
        return cls(
            "https://alpha4.starknet.io/gateway",
            "https://alpha4.starknet.io/feeder_gateway",
        )

    @classmethod
    def starknet_nile_localhost(cls) -> "SequencerGatewayProvider":
        return cls(
            "http://127.0.0.1:5000/gateway",
            "http://127.0.0.1:5000/feeder_gateway",
        )

    def __repr__(self) -> str:
        return (
            f"SequencerGatewayProvider(gateway_url={self.gateway_url!r}, "
            f"feeder_gateway_url={self.feeder_gateway_url!r})"
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "SequencerGatewayProvider":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _gateway(self, segment: str, params: Optional[list[tuple[str, str]]] = None) -> str:
        return _build_url(self.gateway_url, segment, params or [])

    def _feeder(self, segment: str, params: Optional[list[tuple[str, str]]] = None) -> str:
        return _build_url(self.feeder_gateway_url, segment, params or [])

    @staticmethod
    def _decode(body: str) -> Any:
        try:
            return json.loads(body)
        except ValueError as err:
            raise DeserializationError(err, body) from err

    async def _get(self, url: str) -> tuple[Any, str]:
        try:
            response = await self._client.get(url)
            body = response.text
        except httpx.HTTPError as err:
            raise ProviderError(str(err)) from err
        return self._decode(body), body

    async def _post(self, url: str, payload: Any) -> tuple[Any, str]:
        try:
            content = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as err:
            raise ProviderError(str(err)) from err
        try:
            response = await self._client.post(
                url,
                content=content.encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
            body = response.text
        except httpx.HTTPError as err:
            raise ProviderError(str(err)) from err
        return self._decode(body), body

    async def add_transaction(
        self, tx: TransactionRequest, token: Optional[str] = None
    ) -> AddTransactionResult:
        params = [] if token is None else [("token", token)]
        payload = {"type": tx.transaction_type, **tx.to_json()}
        value, body = await self._post(self._gateway("add_transaction", params), payload)
        return _untagged(value, body, AddTransactionResult.from_json)

    async def get_contract_addresses(self) -> ContractAddresses:
        value, body = await self._get(self._feeder("get_contract_addresses"))
        return _untagged(value, body, ContractAddresses.from_json)

    async def call_contract(
        self, invoke_tx: InvokeFunctionTransactionRequest, block_identifier: BlockId
    ) -> CallContractResult:
        url = self._feeder("call_contract", _block_id_params(block_identifier))
        value, body = await self._post(url, invoke_tx.to_json())
        return _untagged(value, body, CallContractResult.from_json)

    async def estimate_fee(
        self, invoke_tx: InvokeFunctionTransactionRequest, block_identifier: BlockId
    ) -> FeeEstimate:
        url = self._feeder("estimate_fee", _block_id_params(block_identifier))
        value, body = await self._post(url, invoke_tx.to_json())
        return _untagged(value, body, FeeEstimate.from_json)

    async def get_block(self, block_identifier: BlockId) -> Block:
        url = self._feeder("get_block", _block_id_params(block_identifier))
        value, body = await self._get(url)
        return _untagged(value, body, Block.from_json)

    async def get_state_update(self, block_identifier: BlockId) -> StateUpdate:
        url = self._feeder("get_state_update", _block_id_params(block_identifier))
        value, body = await self._get(url)
        return _untagged(value, body, StateUpdate.from_json)

    async def get_code(
        self, contract_address: FieldElement, block_identifier: BlockId
    ) -> ContractCode:
        params = [("contractAddress", _hex(contract_address))]
        params += _block_id_params(block_identifier)
        value, body = await self._get(self._feeder("get_code", params))
        return _untagged(value, body, ContractCode.from_json, _empty_contract_code)

    async def get_full_contract(
        self, contract_address: FieldElement, block_identifier: BlockId
    ) -> ContractArtifact:
        params = [("contractAddress", _hex(contract_address))]
        params += _block_id_params(block_identifier)
        value, body = await self._get(self._feeder("get_full_contract", params))
        return _untagged(value, body, ContractArtifact.from_json)

    async def get_storage_at(
        self, contract_address: FieldElement, key: FieldElement, block_identifier: BlockId
    ) -> FieldElement:
        params = [("contractAddress", _hex(contract_address)), ("key", str(key))]
        params += _block_id_params(block_identifier)
        value, body = await self._get(self._feeder("get_storage_at", params))
        return _untagged(value, body, _raw_field_element)

    async def get_transaction_status(
        self, transaction_hash: FieldElement
    ) -> TransactionStatusInfo:
        params = [("transactionHash", _hex(transaction_hash))]
        value, body = await self._get(self._feeder("get_transaction_status", params))
        return _untagged(value, body, TransactionStatusInfo.from_json)

    async def get_transaction(self, transaction_hash: FieldElement) -> TransactionInfo:
        params = [("transactionHash", _hex(transaction_hash))]
        value, body = await self._get(self._feeder("get_transaction", params))
        return _untagged(value, body, TransactionInfo.from_json)

    async def get_transaction_receipt(self, transaction_hash: FieldElement) -> TransactionReceipt:
        params = [("transactionHash", _hex(transaction_hash))]
        value, body = await self._get(self._feeder("get_transaction_receipt", params))
        return _untagged(value, body, TransactionReceipt.from_json)

    async def get_transaction_trace(self, transaction_hash: FieldElement) -> TransactionTrace:
        params = [("transactionHash", _hex(transaction_hash))]
        value, body = await self._get(self._feeder("get_transaction_trace", params))
        return _untagged(value, body, TransactionTrace.from_json)

    async def get_block_hash_by_id(self, block_number: int) -> FieldElement:
        params = [("blockId", str(block_number))]
        value, body = await self._get(self._feeder("get_block_hash_by_id", params))
        return _untagged(value, body, _raw_field_element)

    async def get_block_id_by_hash(self, block_hash: FieldElement) -> int:
        params = [("blockHash", _hex(block_hash))]
        value, body = await self._get(self._feeder("get_block_id_by_hash", params))
        return _untagged(value, body, _u64)

    async def get_transaction_hash_by_id(self, transaction_number: int) -> FieldElement:
        params = [("transactionId", str(transaction_number))]
        value, body = await self._get(self._feeder("get_transaction_hash_by_id", params))
        return _untagged(value, body, _raw_field_element)

    async def get_transaction_id_by_hash(self, transaction_hash: FieldElement) -> int:
        params = [("transactionHash", _hex(transaction_hash))]
        value, body = await self._get(self._feeder("get_transaction_id_by_hash", params))
        return _untagged(value, body, _u64)

    async def get_last_batch_id(self) -> int:
        value, body = await self._get(self._feeder("get_last_batch_id"))
        return _untagged(value, body, _u64)

    async def get_l1_blockchain_id(self) -> int:
        value, body = await self._get(self._feeder("get_l1_blockchain_id"))
        return _untagged(value, body, _u64)