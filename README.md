# starkclient

An asynchronous Python client for StarkNet. It provides:

- `FieldElement` (`starkclient.field_element`): elements of the StarkNet prime
  field, with arithmetic, decimal and hexadecimal parsing, big-endian byte
  conversion, inversion and square roots.
- `EcPoint` (`starkclient.ec`): affine points on the Stark curve with
  doubling, addition, subtraction and scalar multiplication, plus big-integer
  helpers `add_unbounded`, `mul_mod_floor`, `bigint_mul_mod_floor` and
  `mod_inverse`.
- Selectors, the StarkNet variant of Keccak, Cairo short strings and the
  `MAINNET` / `TESTNET` chain identifiers (`starkclient.utils`).
- JSON encoders and decoders for field elements and byte strings
  (`starkclient.codec`).
- Typed, immutable objects for the gateway's blocks (`starkclient.block`),
  transactions and receipts (`starkclient.transactions`), state updates
  (`starkclient.state`), traces (`starkclient.trace`), small responses such as
  fee estimates and errors (`starkclient.responses`), transaction requests
  (`starkclient.requests`), and contract code and artifacts
  (`starkclient.contract`).
- `Provider` (`starkclient.provider`), an abstract async interface, and
  `SequencerGatewayProvider` (`starkclient.gateway`), its implementation over
  the sequencer gateway and feeder gateway HTTP APIs.
- `ContractFactory` (`starkclient.factory`) for deploying a compiled contract
  artifact.

## Installation

From a checkout of the project:

```
pip install .
```

Python 3.10 or later is required. The package depends on `httpx` and
`pycryptodome`.

## Field elements

```python
from starkclient.field_element import FieldElement

a = FieldElement.from_dec_str("10")
b = FieldElement.from_hex_be("0x7")

assert a - b == FieldElement.from_int(3)
assert len(a.to_bytes_be()) == 32
assert f"{b:#064x}" == "0x" + "0" * 63 + "7"
```

Arithmetic (`+`, `-`, `*`, unary `-`) is modulo the field prime; `%` is the
integer remainder of the canonical values. `invert()` and `sqrt()` return
`None` when there is no result. Parsing a value outside the field raises
`FromDecStrError`, `FromHexError` or `FromByteArrayError`; all derive from
`FieldElementError`, itself a `ValueError`.

## Selectors and short strings

```python
from starkclient.field_element import FieldElement
from starkclient.utils import (
    cairo_short_string_to_felt,
    get_selector_from_name,
    parse_cairo_short_string,
)

selector = get_selector_from_name("execute")
assert selector == FieldElement.from_hex_be(
    "0240060cdb34fcc260f41eac7474ee1d7c80b7e3607daff9ac67c7ea2ebb1c44"
)

felt = cairo_short_string_to_felt("hello")
assert parse_cairo_short_string(felt) == "hello"
```

`__default__` and `__l1_default__` map to the zero selector. Non-ASCII names
raise `NonAsciiNameError`. Strings that are not ASCII or longer than 31
characters raise `CairoShortStringToFeltError`; values that are not valid
short strings raise `ParseCairoShortStringError`. Each of these error
classes carries a `kind` telling which case occurred.

## Querying the gateway

```python
import asyncio

from starkclient.block import BlockId
from starkclient.gateway import SequencerGatewayProvider


async def main():
    async with SequencerGatewayProvider.starknet_alpha_goerli() as provider:
        block = await provider.get_block(BlockId.latest())
        print(block.block_number, block.status, len(block.transactions))


asyncio.run(main())
```

A block can be selected with `BlockId.latest()`, `BlockId.pending()`,
`BlockId.by_number(n)` or `BlockId.by_hash(felt)`.

There are preset providers for mainnet (`starknet_alpha_mainnet()`), the
Goerli testnet (`starknet_alpha_goerli()`) and a local development node
(`starknet_nile_localhost()`). A provider can also be built directly from
the two base URLs, optionally with an `httpx.AsyncClient` of your own:
`SequencerGatewayProvider(gateway_url, feeder_gateway_url, client=None)`.
Close it with `await provider.aclose()` or use it as an async context
manager.

When the gateway answers with a StarkNet error, `GatewayStarknetError` is
raised; its `error` attribute holds the `StarknetError`. When the body cannot
be decoded, the error is `DeserializationError`, which keeps the raw body in
`text`. HTTP failures raise `ProviderError`, the base class of both.

## Deploying a contract

```python
import asyncio
import json

from starkclient.contract import ContractArtifact
from starkclient.factory import ContractFactory
from starkclient.field_element import FieldElement
from starkclient.gateway import SequencerGatewayProvider


async def main():
    with open("artifact.json") as handle:
        artifact = ContractArtifact.from_json(json.load(handle))

    async with SequencerGatewayProvider.starknet_alpha_goerli() as provider:
        factory = ContractFactory(artifact, provider)
        result = await factory.deploy([FieldElement.from_dec_str("123456")], None)
        print(result.code, result.transaction_hash, result.address)


asyncio.run(main())
```

The program is serialised to JSON and gzip-compressed once, when the factory
is created (failures raise `ContractFactoryError`). Each deployment uses a
fresh random 31-byte salt.

## What the package does not do

- It does not sign transactions. There is no ECDSA signing or verification,
  no key derivation and no Pedersen hash; `SignError` and `VerifyError` in
  `starkclient.ec` are error types only.
- It has no account support: no wallet, no nonce handling and no building of
  multi-call invoke transactions. Invoke requests must be assembled and signed
  by the caller.
- It has no command-line tool.

## Running the tests

```
pip install ".[test]"
pytest
```