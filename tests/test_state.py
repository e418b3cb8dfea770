import pytest

from starkclient.field_element import FieldElement
from starkclient.state import DeployedContract, StateDiff, StateUpdate, StorageDiff

CONTRACT = "0x243b1e9ae747179e11ac685548ee1d6c5691ee9bda33ab0adee6f4838bddc55"
KEY = "0x37501df619c4fc4e96f6c0243f55e3abe7d1aca7db9af8f3740ba3696b3fdac"
DEPLOYED = "0x7da57050effcee2a29d8ed3e3e42f9371bb827cbf96c1d2bcedbefd9004c72c"
CONTRACT_HASH = "02c3348ad109f7f3967df6494b3c48741d61675d9a7915b265aa7101a631dc33"


def _update_json():
    return {
        "block_hash": "0x7b44bda3371fa91541e719493b1638b71c7ccf2304dc67bbadb028dbfa16dec",
        "new_root": "0x1",
        "old_root": "0x2",
        "state_diff": {
            "storage_diffs": {CONTRACT: [{"key": KEY, "value": "0x1a"}]},
            "deployed_contracts": [{"address": DEPLOYED, "contract_hash": CONTRACT_HASH}],
        },
    }


def test_state_update_deser():
    update = StateUpdate.from_json(_update_json())
    diff = update.state_diff.storage_diffs[FieldElement.from_hex_be(CONTRACT)][0]
    assert diff.key == FieldElement.from_hex_be(KEY)
    assert diff.value == FieldElement.from_hex_be("0x1a")

    deployed = update.state_diff.deployed_contracts[0]
    assert deployed.address == FieldElement.from_hex_be(DEPLOYED)
    assert deployed.contract_hash == FieldElement.from_hex_be(CONTRACT_HASH)
    assert update.new_root == FieldElement.from_hex_be("0x1")
    assert update.old_root == FieldElement.from_hex_be("0x2")


def test_missing_block_hash_is_none():
    raw = _update_json()
    del raw["block_hash"]
    assert StateUpdate.from_json(raw).block_hash is None


def test_null_block_hash_is_none():
    raw = _update_json()
    raw["block_hash"] = None
    assert StateUpdate.from_json(raw).block_hash is None


def test_empty_block_hash_rejected():
    raw = _update_json()
    raw["block_hash"] = ""
    with pytest.raises(ValueError):
        StateUpdate.from_json(raw)


def test_missing_new_root_rejected():
    raw = _update_json()
    del raw["new_root"]
    with pytest.raises(ValueError, match="new_root"):
        StateUpdate.from_json(raw)


def test_empty_state_diff():
    diff = StateDiff.from_json({"storage_diffs": {}, "deployed_contracts": []})
    assert diff.storage_diffs == {}
    assert diff.deployed_contracts == ()


def test_storage_diff_invalid_hex():
    with pytest.raises(ValueError, match="invalid hex string"):
        StorageDiff.from_json({"key": "0xzz", "value": "0x1"})


def test_deployed_contract_requires_hash():
    with pytest.raises(ValueError, match="contract_hash"):
        DeployedContract.from_json({"address": DEPLOYED})