"""JSON forms of RPC results whose addresses are written as bech32 account addresses."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from plugrpc.addresses import Bech32Error, bech32_decode, bech32_encode
from plugrpc.rpc_types import (
    ADDRESS_LENGTH,
    HASH_LENGTH,
    AccessList,
    AccountResult,
    Log,
    RPCTransaction,
    encode_big,
    encode_bytes,
    encode_uint64,
)

MAX_ADDRESS_LENGTH = 255
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def _acc_address(data: bytes | None, prefix: str) -> str:
    """Return the bech32 account form of an address; empty for no address."""
    if not data:
        return ""
    return bech32_encode(prefix, bytes(data))


def _acc_address_from_bech32(text: str, prefix: str) -> bytes:
    if not text.strip():
        return b""
    hrp, data = bech32_decode(text)
    if hrp != prefix:
        raise Bech32Error(f"invalid Bech32 prefix; expected {prefix}, got {hrp}")
    if not data:
        raise Bech32Error("addresses cannot be empty")
    if len(data) > MAX_ADDRESS_LENGTH:
        raise Bech32Error(f"address max length is {MAX_ADDRESS_LENGTH}, got {len(data)}")
    return data


def _decode_hash(value: Any) -> bytes:
    if not isinstance(value, str):
        raise ValueError("hash must be a JSON string")
    if value[:2] not in ("0x", "0X"):
        raise ValueError("hex string without 0x prefix")
    raw = value[2:]
    if len(raw) != 2 * HASH_LENGTH:
        raise ValueError(f"hex string has length {len(raw)}, want {2 * HASH_LENGTH}")
    if not _HEX_DIGITS.fullmatch(raw):
        raise ValueError("invalid hex string")
    return bytes.fromhex(raw)


def _loose_hex(text: str) -> bytes:
    """Decode hex leniently: optional 0x, odd length padded, stop at a bad digit."""
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    if len(text) % 2:
        text = "0" + text
    out = bytearray()
    for start in range(0, len(text), 2):
        pair = text[start : start + 2]
        if not _HEX_DIGITS.fullmatch(pair):
            break
        out.append(int(pair, 16))
    return bytes(out)


def _fit(data: bytes, length: int) -> bytes:
    if len(data) > length:
        return data[-length:]
    return data.rjust(length, b"\x00")


def _as_address(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return _fit(_loose_hex(value), ADDRESS_LENGTH)
    return _fit(bytes(value), ADDRESS_LENGTH)


def _as_hash(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return _fit(_loose_hex(value), HASH_LENGTH)
    return _fit(bytes(value), HASH_LENGTH)


def _opt_big(n: int | None) -> str | None:
    return None if n is None else encode_big(n)


@dataclass
class AccessTuple:
    """An access list entry whose address is a bech32 account address."""

    address: bytes = b""
    storage_keys: list[bytes] | None = None

    def to_json(self, prefix: str) -> dict[str, Any]:
        return {
            "address": _acc_address(self.address, prefix),
            "storageKeys": (
                None
                if self.storage_keys is None
                else [encode_bytes(key) for key in self.storage_keys]
            ),
        }

    @classmethod
    def from_json(
        cls, data: str | bytes | bytearray | Mapping[str, Any], prefix: str
    ) -> AccessTuple:
        """Decode an entry; raise ValueError if a required field is missing or invalid."""
        if isinstance(data, Mapping):
            obj: Any = dict(data)
        else:
            try:
                obj = json.loads(data)
            except (json.JSONDecodeError, UnicodeDecodeError) as err:
                raise ValueError(f"invalid access tuple JSON: {err}") from err
        if obj is None:
            obj = {}
        if not isinstance(obj, dict):
            raise ValueError("access tuple JSON must be an object")
        address: bytes | None = None
        keys_raw: Any = None
        for key, value in obj.items():
            name = key.lower()
            if name == "address":
                if value is None:
                    address = None
                elif not isinstance(value, str):
                    raise ValueError("address must be a JSON string")
                else:
                    address = _acc_address_from_bech32(value, prefix)
            elif name == "storagekeys":
                keys_raw = value
        if address is None:
            raise ValueError("missing required field 'address' for AccessTuple")
        if keys_raw is None:
            raise ValueError("missing required field 'storageKeys' for AccessTuple")
        if not isinstance(keys_raw, list):
            raise ValueError("storageKeys must be a JSON array")
        return cls(address=address, storage_keys=[_decode_hash(item) for item in keys_raw])


def access_list_replace(access_list: AccessList | None) -> list[AccessTuple] | None:
    """Convert an access list of (address, keys) pairs; None when it is empty."""
    if not access_list:
        return None
    return [
        AccessTuple(
            address=_as_address(address),
            storage_keys=None if keys is None else [bytes(key) for key in keys],
        )
        for address, keys in access_list
    ]


def storage_key_count(access_list: Iterable[AccessTuple] | None) -> int:
    """Return the total number of storage keys in the access list."""
    if not access_list:
        return 0
    return sum(len(entry.storage_keys or ()) for entry in access_list)


def log_to_json(log: Log, prefix: str) -> dict[str, Any]:
    """Return the JSON form of a log with a bech32 account address."""
    return {
        "address": _acc_address(_as_address(log.address), prefix),
        "topics": [encode_bytes(_as_hash(topic)) for topic in log.topics],
        "data": encode_bytes(log.data or b""),
        "blockNumber": encode_uint64(log.block_number),
        "transactionHash": encode_bytes(_as_hash(log.tx_hash)),
        "transactionIndex": encode_uint64(log.tx_index),
        "blockHash": encode_bytes(_as_hash(log.block_hash)),
        "logIndex": encode_uint64(log.index),
        "removed": log.removed,
    }


def proof_account_to_json(result: AccountResult, prefix: str) -> dict[str, Any]:
    """Return the JSON form of an account proof with a bech32 account address."""
    return {
        "address": _acc_address(_as_address(result.address), prefix),
        "accountProof": None if result.account_proof is None else list(result.account_proof),
        "balance": _opt_big(result.balance),
        "codeHash": encode_bytes(result.code_hash),
        "nonce": encode_uint64(result.nonce),
        "storageHash": encode_bytes(result.storage_hash),
        "storageProof": (
            None
            if result.storage_proof is None
            else [item.to_json() for item in result.storage_proof]
        ),
    }


def rpc_transaction_to_json(tx: RPCTransaction, prefix: str) -> dict[str, Any]:
    """Return the JSON form of a transaction with bech32 sender and recipient."""
    result: dict[str, Any] = {
        "blockHash": None if tx.block_hash is None else encode_bytes(tx.block_hash),
        "blockNumber": _opt_big(tx.block_number),
        "from": _acc_address(_as_address(tx.from_address), prefix),
        "gas": encode_uint64(tx.gas),
        "gasPrice": _opt_big(tx.gas_price),
    }
    if tx.gas_fee_cap is not None:
        result["maxFeePerGas"] = encode_big(tx.gas_fee_cap)
    if tx.gas_tip_cap is not None:
        result["maxPriorityFeePerGas"] = encode_big(tx.gas_tip_cap)
    result.update(
        {
            "hash": encode_bytes(tx.hash),
            "input": encode_bytes(tx.input),
            "nonce": encode_uint64(tx.nonce),
            "to": "" if tx.to is None else _acc_address(_as_address(tx.to), prefix),
            "transactionIndex": (
                None if tx.transaction_index is None else encode_uint64(tx.transaction_index)
            ),
            "value": _opt_big(tx.value),
            "type": encode_uint64(tx.type),
        }
    )
    if tx.accesses is not None:
        accesses = access_list_replace(tx.accesses)
        if accesses:
            result["accessList"] = [entry.to_json(prefix) for entry in accesses]
    if tx.chain_id is not None:
        result["chainId"] = encode_big(tx.chain_id)
    result["v"] = _opt_big(tx.v)
    result["r"] = _opt_big(tx.r)
    result["s"] = _opt_big(tx.s)
    return result