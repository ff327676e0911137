"""Block numbers and block number-or-hash parameters of the Ethereum JSON-RPC."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_LIMIT = 2**64

BLOCK_PARAM_EARLIEST = "earliest"
BLOCK_PARAM_LATEST = "latest"
BLOCK_PARAM_PENDING = "pending"

GRPC_BLOCK_HEIGHT_HEADER = "x-cosmos-block-height"

_HEX = re.compile(r"[0-9a-fA-F]+")
_ZERO_DECIMAL = re.compile(r"(.*)\.0+", re.DOTALL)


class _HexError(ValueError):
    pass


class _MissingPrefixError(_HexError):
    def __init__(self) -> None:
        super().__init__("hex string without 0x prefix")


def _has_prefix(text: str) -> bool:
    return text[:2] in ("0x", "0X")


def _decode_uint64(text: str) -> int:
    """Decode a 0x-prefixed hex quantity into an unsigned 64-bit integer."""
    if not text:
        raise _HexError("empty hex string")
    if not _has_prefix(text):
        raise _MissingPrefixError()
    raw = text[2:]
    if not raw:
        raise _HexError('hex string "0x"')
    if len(raw) > 1 and raw[0] == "0":
        raise _HexError("hex number with leading zero digits")
    if not _HEX.fullmatch(raw):
        raise _HexError("invalid hex string")
    value = int(raw, 16)
    if value >= UINT64_LIMIT:
        raise _HexError("hex number > 64 bits")
    return value


def _decode_hash(text: str) -> bytes:
    """Decode a 0x-prefixed 32-byte hex hash."""
    if _has_prefix(text):
        raw = text[2:]
    elif text:
        raise _MissingPrefixError()
    else:
        raw = ""
    if len(raw) % 2:
        raise _HexError("hex string of odd length")
    if len(raw) != 64:
        raise _HexError(f"hex string has length {len(raw)}, want 64 for common.Hash")
    if not _HEX.fullmatch(raw):
        raise _HexError("invalid hex string")
    return bytes.fromhex(raw)


def _parse_int_literal(text: str) -> int | None:
    """Parse an integer literal with an optional base prefix; None if invalid or out of int64."""
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    prefix = text[:2].lower()
    if prefix in ("0x", "0o", "0b"):
        base = {"0x": 16, "0o": 8, "0b": 2}[prefix]
        digits, prefixed = text[2:], True
    elif text[:1] == "0" and len(text) > 1:
        base, digits, prefixed = 8, text[1:], True
    else:
        base, digits, prefixed = 10, text, False
    if "_" in digits and (
        digits.endswith("_") or "__" in digits or (digits.startswith("_") and not prefixed)
    ):
        return None
    cleaned = digits.replace("_", "")
    if not cleaned:
        return None
    alphabet = "0123456789abcdef"[:base]
    if any(char not in alphabet for char in cleaned.lower()):
        return None
    value = sign * int(cleaned, base)
    if not INT64_MIN <= value <= INT64_MAX:
        return None
    return value


def _lenient_uint64(text: str) -> int:
    """Read a loosely written unsigned number; anything unreadable counts as 0."""
    match = _ZERO_DECIMAL.fullmatch(text)
    if match:
        text = match.group(1)
    value = _parse_int_literal(text)
    if value is None or value < 0:
        return 0
    return value


def _to_text(data: str | bytes | bytearray) -> str:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8")
    return data


class BlockNumber(int):
    """A signed 64-bit block height; negative values name the latest or pending block."""

    def __new__(cls, value: Any = 0) -> BlockNumber:
        number = int.__new__(cls, value)
        if not INT64_MIN <= number <= INT64_MAX:
            raise ValueError(f"block number {int(number)} out of int64 range")
        return number

    def __repr__(self) -> str:
        return f"BlockNumber({int(self)})"

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> BlockNumber:
        """Parse "earliest", "latest", "pending", a hex quantity or a plain number."""
        text = _to_text(data).strip()
        if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
            text = text[1:-1]
        named = _NAMED_BLOCKS.get(text)
        if named is not None:
            return named
        try:
            number = _decode_uint64(text)
        except _MissingPrefixError:
            number = _lenient_uint64(text)
        if number > INT64_MAX:
            raise ValueError("block number larger than int64")
        return cls(number)

    def to_int64(self) -> int:
        """Return the height to query: 0 for named blocks, 1 for earliest."""
        if self < 0:
            return 0
        if self == 0:
            return 1
        return int(self)

    def tm_height(self) -> int | None:
        """Return the height for the consensus client, or None for latest/pending."""
        if self < 0:
            return None
        return self.to_int64()


ETH_PENDING_BLOCK_NUMBER = BlockNumber(-2)
ETH_LATEST_BLOCK_NUMBER = BlockNumber(-1)
ETH_EARLIEST_BLOCK_NUMBER = BlockNumber(0)

_NAMED_BLOCKS = {
    BLOCK_PARAM_EARLIEST: ETH_EARLIEST_BLOCK_NUMBER,
    BLOCK_PARAM_LATEST: ETH_LATEST_BLOCK_NUMBER,
    BLOCK_PARAM_PENDING: ETH_PENDING_BLOCK_NUMBER,
}


def new_block_number(n: int) -> BlockNumber:
    """Return n as a block number, or latest when it does not fit in int64."""
    if not INT64_MIN <= n <= INT64_MAX:
        return ETH_LATEST_BLOCK_NUMBER
    return BlockNumber(n)


def context_with_height(height: int) -> tuple[tuple[str, str], ...]:
    """Return gRPC metadata selecting a block height; empty for height 0 (latest)."""
    if height == 0:
        return ()
    return ((GRPC_BLOCK_HEIGHT_HEADER, str(height)),)


@dataclass(frozen=True)
class BlockNumberOrHash:
    """Either a block number or a block hash."""

    block_number: BlockNumber | None = None
    block_hash: bytes | None = None

    def __post_init__(self) -> None:
        if self.block_number is not None and self.block_hash is not None:
            raise ValueError(
                "cannot specify both BlockHash and BlockNumber, choose one or the other"
            )

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> BlockNumberOrHash:
        """Parse an object with blockNumber or blockHash, or a plain string."""
        try:
            value = json.loads(_to_text(data))
        except json.JSONDecodeError as err:
            raise ValueError(f"invalid JSON: {err}") from err
        if value is None:
            return cls()
        if isinstance(value, dict):
            return cls._from_object(value)
        if isinstance(value, str):
            return cls._from_string(value)
        raise ValueError("block number or hash must be a JSON object or string")

    @classmethod
    def _from_object(cls, obj: dict[str, Any]) -> BlockNumberOrHash:
        block_number: BlockNumber | None = None
        block_hash: bytes | None = None
        for key, value in obj.items():
            name = key.lower()
            if name == "blocknumber":
                block_number = (
                    None if value is None else BlockNumber.from_json(json.dumps(value))
                )
            elif name == "blockhash":
                if value is None:
                    block_hash = None
                elif not isinstance(value, str):
                    raise ValueError("block hash must be a JSON string")
                else:
                    block_hash = _decode_hash(value)
        return cls(block_number=block_number, block_hash=block_hash)

    @classmethod
    def _from_string(cls, text: str) -> BlockNumberOrHash:
        named = _NAMED_BLOCKS.get(text)
        if named is not None:
            return cls(block_number=named)
        if len(text) == 66:
            return cls(block_hash=_decode_hash(text))
        number = _decode_uint64(text)
        if number > INT64_MAX:
            raise ValueError(f"uint64 value {number} cannot exceed {INT64_MAX}")
        return cls(block_number=BlockNumber(number))