import json

import pytest

from plugrpc.addresses import bech32_decode, bech32_encode
from plugrpc.results import (
    AccessTuple,
    access_list_replace,
    log_to_json,
    proof_account_to_json,
    rpc_transaction_to_json,
    storage_key_count,
)
from plugrpc.rpc_types import (
    AccountResult,
    Log,
    RPCTransaction,
    StorageResult,
    encode_bytes,
    encode_uint64,
)

PREFIX = "gx"
ADDR = bytes(range(1, 21))
KEY_A = bytes([0xAA]) * 32
KEY_B = bytes([0xBB]) * 32
KEY_C = bytes([0xCC]) * 32


def test_access_list_replace_empty_is_none():
    assert access_list_replace([]) is None
    assert access_list_replace(None) is None


def test_access_list_replace_and_key_count():
    entries = access_list_replace([(ADDR, [KEY_A, KEY_B]), (bytes(20), [KEY_C])])
    assert [entry.address for entry in entries] == [ADDR, bytes(20)]
    assert entries[0].storage_keys == [KEY_A, KEY_B]
    assert storage_key_count(entries) == 3
    assert storage_key_count(None) == 0


def test_access_tuple_round_trip():
    entry = AccessTuple(address=ADDR, storage_keys=[KEY_A, KEY_B])
    text = json.dumps(entry.to_json(PREFIX))
    assert AccessTuple.from_json(text, PREFIX) == entry


def test_access_tuple_address_is_bech32():
    encoded = AccessTuple(address=ADDR, storage_keys=[]).to_json(PREFIX)
    assert bech32_decode(encoded["address"]) == (PREFIX, ADDR)
    assert encoded["storageKeys"] == []


def test_access_tuple_empty_address_encodes_empty():
    encoded = AccessTuple(address=b"", storage_keys=None).to_json(PREFIX)
    assert encoded == {"address": "", "storageKeys": None}


def test_access_tuple_missing_address():
    with pytest.raises(ValueError, match="missing required field 'address' for AccessTuple"):
        AccessTuple.from_json('{"storageKeys": []}', PREFIX)


def test_access_tuple_missing_storage_keys():
    text = json.dumps({"address": bech32_encode(PREFIX, ADDR)})
    with pytest.raises(
        ValueError, match="missing required field 'storageKeys' for AccessTuple"
    ):
        AccessTuple.from_json(text, PREFIX)


def test_access_tuple_wrong_prefix():
    text = json.dumps({"address": bech32_encode("other", ADDR), "storageKeys": []})
    with pytest.raises(ValueError, match="invalid Bech32 prefix"):
        AccessTuple.from_json(text, PREFIX)


def test_access_tuple_bad_hash_length():
    data = {"address": bech32_encode(PREFIX, ADDR), "storageKeys": ["0x1234"]}
    with pytest.raises(ValueError):
        AccessTuple.from_json(data, PREFIX)


def test_access_tuple_empty_address_decodes_empty():
    entry = AccessTuple.from_json({"address": "", "storageKeys": []}, PREFIX)
    assert entry.address == b""
    assert entry.storage_keys == []


def test_log_to_json():
    log = Log(
        address="0x" + ADDR.hex(),
        topics=["0x" + KEY_A.hex()],
        data=b"\x01\x02",
        block_number=5,
        tx_hash="0x" + KEY_B.hex(),
        tx_index=2,
        block_hash="0x" + KEY_C.hex(),
        index=7,
        removed=True,
    )
    encoded = log_to_json(log, PREFIX)
    assert bech32_decode(encoded["address"]) == (PREFIX, ADDR)
    assert encoded["topics"] == [encode_bytes(KEY_A)]
    assert encoded["data"] == encode_bytes(b"\x01\x02")
    assert encoded["blockNumber"] == encode_uint64(5)
    assert encoded["transactionHash"] == encode_bytes(KEY_B)
    assert encoded["transactionIndex"] == encode_uint64(2)
    assert encoded["blockHash"] == encode_bytes(KEY_C)
    assert encoded["logIndex"] == encode_uint64(7)
    assert encoded["removed"] is True


def test_log_short_address_is_left_padded():
    encoded = log_to_json(Log(address="0x1"), PREFIX)
    assert bech32_decode(encoded["address"]) == (PREFIX, bytes(19) + b"\x01")
    assert encoded["data"] == "0x"


def test_proof_account_to_json():
    proof = StorageResult(key="0x01", value=10, proof=["p"])
    result = AccountResult(
        address=ADDR,
        account_proof=["acc"],
        balance=1000,
        code_hash=KEY_A,
        nonce=3,
        storage_proof=[proof],
    )
    encoded = proof_account_to_json(result, PREFIX)
    plain = result.to_json()
    assert bech32_decode(encoded["address"]) == (PREFIX, ADDR)
    for key in ("accountProof", "balance", "codeHash", "nonce", "storageHash"):
        assert encoded[key] == plain[key]
    assert encoded["storageProof"] == [proof.to_json()]


def test_proof_account_zero_address_still_bech32():
    encoded = proof_account_to_json(AccountResult(), PREFIX)
    assert bech32_decode(encoded["address"]) == (PREFIX, bytes(20))
    assert encoded["storageProof"] is None


def test_rpc_transaction_contract_creation():
    tx = RPCTransaction(from_address=ADDR, gas=21000, nonce=1, value=5, accesses=[])
    encoded = rpc_transaction_to_json(tx, PREFIX)
    assert encoded["to"] == ""
    assert "accessList" not in encoded
    assert "maxFeePerGas" not in encoded
    assert bech32_decode(encoded["from"]) == (PREFIX, ADDR)


def test_rpc_transaction_matches_plain_fields():
    recipient = bytes([9]) * 20
    tx = RPCTransaction(
        from_address=ADDR,
        to=recipient,
        gas=50000,
        hash=KEY_A,
        input=b"\xde\xad",
        nonce=4,
        type=2,
        block_hash=KEY_B,
        block_number=12,
        gas_price=100,
        gas_fee_cap=200,
        gas_tip_cap=3,
        transaction_index=0,
        value=1,
        accesses=[(recipient, [KEY_C])],
        chain_id=520,
        v=1,
        r=2,
        s=3,
    )
    encoded = rpc_transaction_to_json(tx, PREFIX)
    plain = tx.to_json()
    assert set(encoded) == set(plain)
    for key in plain:
        if key not in ("from", "to", "accessList"):
            assert encoded[key] == plain[key]
    assert bech32_decode(encoded["to"]) == (PREFIX, recipient)
    entries = [AccessTuple.from_json(item, PREFIX) for item in encoded["accessList"]]
    assert entries == [AccessTuple(address=recipient, storage_keys=[KEY_C])]