"""Result types and helpers of the Ethereum JSON-RPC."""

from __future__ import annotations

import base64
import binascii
import json
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

LOG_REVERTED_FLAG = "transaction reverted"

EVENT_TYPE_FEE_MARKET = "fee_market"
ATTRIBUTE_KEY_BASE_FEE = "base_fee"
EVENT_TYPE_TX_LOG = "tx_log"
ATTRIBUTE_KEY_TX_LOG = "txLog"

MAX_UINT32 = 0xFFFFFFFF
_UINT64_LIMIT = 2**64
_DECIMAL = re.compile(r"[+-]?[0-9]+")

ADDRESS_LENGTH = 20
HASH_LENGTH = 32


class DataError(Exception):
    """An error that carries extra data for the JSON-RPC error response."""

    def __init__(self, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data

    def error_data(self) -> Any:
        return self.data


def encode_big(n: int) -> str:
    """Encode an integer as a 0x-prefixed hex quantity."""
    if n < 0:
        return f"-0x{-n:x}"
    return f"0x{n:x}"


def encode_uint64(n: int) -> str:
    """Encode an unsigned 64-bit integer as a 0x-prefixed hex quantity."""
    if not 0 <= n < _UINT64_LIMIT:
        raise ValueError(f"{n} is not an unsigned 64-bit integer")
    return f"0x{n:x}"


def encode_bytes(data: bytes) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(data).hex()


def _opt_big(n: int | None) -> str | None:
    return None if n is None else encode_big(n)


def _opt_uint64(n: int | None) -> str | None:
    return None if n is None else encode_uint64(n)


def _check_length(name: str, value: bytes | None, length: int) -> None:
    if value is not None and len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")


def err_reverted_with(data: bytes) -> DataError:
    """Return the error reported when EVM execution reverted with data."""
    return DataError("VM execution error.", encode_bytes(data))


def block_max_gas(max_gas: int) -> int:
    """Return the block gas limit, using the max uint32 when it is unlimited (-1)."""
    if max_gas == -1:
        return MAX_UINT32
    return max_gas


def _to_bytes(value: str | bytes | bytearray) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


@dataclass(frozen=True)
class EventAttribute:
    """A key/value attribute of a consensus event."""

    key: bytes
    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", _to_bytes(self.key))
        object.__setattr__(self, "value", _to_bytes(self.value))


@dataclass(frozen=True)
class Event:
    """A typed consensus event with attributes."""

    type: str
    attributes: tuple[EventAttribute, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", tuple(self.attributes))


def base_fee_from_events(events: Iterable[Event]) -> int | None:
    """Return the fee market base fee found in the events, or None."""
    key = ATTRIBUTE_KEY_BASE_FEE.encode()
    for event in events:
        if event.type != EVENT_TYPE_FEE_MARKET:
            continue
        for attr in event.attributes:
            if attr.key == key:
                try:
                    text = attr.value.decode("utf-8")
                except UnicodeDecodeError:
                    return None
                if not _DECIMAL.fullmatch(text):
                    return None
                return int(text, 10)
    return None


def _uint64_field(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {name} must be an unsigned integer")
    if not 0 <= value < _UINT64_LIMIT:
        raise ValueError(f"field {name} out of uint64 range")
    return value


def _str_field(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {name} must be a string")
    return value


@dataclass
class Log:
    """An EVM log as stored in transaction events."""

    address: str = ""
    topics: list[str] = field(default_factory=list)
    data: bytes = b""
    block_number: int = 0
    tx_hash: str = ""
    tx_index: int = 0
    block_hash: str = ""
    index: int = 0
    removed: bool = False

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> Log:
        """Decode a log from its JSON form; raise ValueError if malformed."""
        try:
            obj = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as err:
            raise ValueError(f"invalid log JSON: {err}") from err
        log = cls()
        if obj is None:
            return log
        if not isinstance(obj, dict):
            raise ValueError("log JSON must be an object")
        for key, value in obj.items():
            name = key.lower()
            if value is None:
                continue
            if name == "address":
                log.address = _str_field(key, value)
            elif name == "topics":
                if not isinstance(value, list):
                    raise ValueError("field topics must be an array")
                log.topics = [_str_field(key, item) for item in value]
            elif name == "data":
                text = _str_field(key, value)
                try:
                    log.data = base64.b64decode(text.replace("\r", "").replace("\n", ""),
                                                validate=True)
                except (binascii.Error, ValueError) as err:
                    raise ValueError(f"field data is not valid base64: {err}") from err
            elif name == "blocknumber":
                log.block_number = _uint64_field(key, value)
            elif name == "transactionhash":
                log.tx_hash = _str_field(key, value)
            elif name == "transactionindex":
                log.tx_index = _uint64_field(key, value)
            elif name == "blockhash":
                log.block_hash = _str_field(key, value)
            elif name == "logindex":
                log.index = _uint64_field(key, value)
            elif name == "removed":
                if not isinstance(value, bool):
                    raise ValueError("field removed must be a boolean")
                log.removed = value
        return log


def tx_logs_from_events(events: Iterable[Event]) -> list[Log]:
    """Decode the EVM logs carried by transaction log events."""
    key = ATTRIBUTE_KEY_TX_LOG.encode()
    return [
        Log.from_json(attr.value)
        for event in events
        if event.type == EVENT_TYPE_TX_LOG
        for attr in event.attributes
        if attr.key == key
    ]


@dataclass
class StorageResult:
    """A storage proof entry."""

    key: str
    value: int | None = None
    proof: list[str] | None = None

    def to_json(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "value": _opt_big(self.value),
            "proof": None if self.proof is None else list(self.proof),
        }


@dataclass
class AccountResult:
    """An account together with its proofs."""

    address: bytes = bytes(ADDRESS_LENGTH)
    account_proof: list[str] | None = None
    balance: int | None = None
    code_hash: bytes = bytes(HASH_LENGTH)
    nonce: int = 0
    storage_hash: bytes = bytes(HASH_LENGTH)
    storage_proof: list[StorageResult] | None = None

    def __post_init__(self) -> None:
        _check_length("address", self.address, ADDRESS_LENGTH)
        _check_length("code hash", self.code_hash, HASH_LENGTH)
        _check_length("storage hash", self.storage_hash, HASH_LENGTH)

    def to_json(self) -> dict[str, Any]:
        return {
            "address": encode_bytes(self.address),
            "accountProof": None if self.account_proof is None else list(self.account_proof),
            "balance": _opt_big(self.balance),
            "codeHash": encode_bytes(self.code_hash),
            "nonce": encode_uint64(self.nonce),
            "storageHash": encode_bytes(self.storage_hash),
            "storageProof": (
                None
                if self.storage_proof is None
                else [item.to_json() for item in self.storage_proof]
            ),
        }


AccessList = Sequence[tuple[bytes, Sequence[bytes]]]


def _access_list_json(access_list: AccessList) -> list[dict[str, Any]]:
    return [
        {
            "address": encode_bytes(address),
            "storageKeys": [encode_bytes(key) for key in keys],
        }
        for address, keys in access_list
    ]


@dataclass
class RPCTransaction:
    """A transaction in its JSON-RPC representation."""

    from_address: bytes = bytes(ADDRESS_LENGTH)
    gas: int = 0
    hash: bytes = bytes(HASH_LENGTH)
    input: bytes = b""
    nonce: int = 0
    type: int = 0
    block_hash: bytes | None = None
    block_number: int | None = None
    gas_price: int | None = None
    gas_fee_cap: int | None = None
    gas_tip_cap: int | None = None
    to: bytes | None = None
    transaction_index: int | None = None
    value: int | None = None
    accesses: AccessList | None = None
    chain_id: int | None = None
    v: int | None = None
    r: int | None = None
    s: int | None = None

    def __post_init__(self) -> None:
        _check_length("from address", self.from_address, ADDRESS_LENGTH)
        _check_length("to address", self.to, ADDRESS_LENGTH)
        _check_length("hash", self.hash, HASH_LENGTH)
        _check_length("block hash", self.block_hash, HASH_LENGTH)

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "blockHash": None if self.block_hash is None else encode_bytes(self.block_hash),
            "blockNumber": _opt_big(self.block_number),
            "from": encode_bytes(self.from_address),
            "gas": encode_uint64(self.gas),
            "gasPrice": _opt_big(self.gas_price),
        }
        if self.gas_fee_cap is not None:
            result["maxFeePerGas"] = encode_big(self.gas_fee_cap)
        if self.gas_tip_cap is not None:
            result["maxPriorityFeePerGas"] = encode_big(self.gas_tip_cap)
        result.update(
            {
                "hash": encode_bytes(self.hash),
                "input": encode_bytes(self.input),
                "nonce": encode_uint64(self.nonce),
                "to": None if self.to is None else encode_bytes(self.to),
                "transactionIndex": _opt_uint64(self.transaction_index),
                "value": _opt_big(self.value),
                "type": encode_uint64(self.type),
            }
        )
        if self.accesses is not None:
            result["accessList"] = _access_list_json(self.accesses)
        if self.chain_id is not None:
            result["chainId"] = encode_big(self.chain_id)
        result["v"] = _opt_big(self.v)
        result["r"] = _opt_big(self.r)
        result["s"] = _opt_big(self.s)
        return result


@dataclass
class FeeHistoryResult:
    """The result of a fee history query."""

    oldest_block: int | None = None
    reward: list[list[int | None]] | None = None
    base_fee: list[int | None] | None = None
    gas_used_ratio: list[float] | None = None

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"oldestBlock": _opt_big(self.oldest_block)}
        if self.reward:
            result["reward"] = [
                None if row is None else [_opt_big(item) for item in row]
                for row in self.reward
            ]
        if self.base_fee:
            result["baseFeePerGas"] = [_opt_big(item) for item in self.base_fee]
        result["gasUsedRatio"] = (
            None if self.gas_used_ratio is None else list(self.gas_used_ratio)
        )
        return result


@dataclass
class OneFeeHistory:
    """Fee data of a single block."""

    base_fee: int | None = None
    reward: list[int] = field(default_factory=list)
    gas_used_ratio: float = 0.0