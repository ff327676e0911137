"""Address encodings: bech32, hex and EIP-55 checksummed hex."""

from __future__ import annotations

import logging
import re

from Crypto.Hash import keccak

logger = logging.getLogger(__name__)

ADDRESS_LENGTH = 20
MAX_ADDRESS_LENGTH = 255
BECH32_MAX_LENGTH = 1023

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_CHARSET_INDEX = {char: index for index, char in enumerate(_CHARSET)}
_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_HEX = re.compile(r"[0-9a-fA-F]*")


class Bech32Error(ValueError):
    """Raised when a bech32 string cannot be encoded or decoded."""


def _polymod(values: list[int]) -> int:
    checksum = 1
    for value in values:
        top = checksum >> 25
        checksum = ((checksum & 0x1FFFFFF) << 5) ^ value
        for bit, generator in enumerate(_GENERATOR):
            if (top >> bit) & 1:
                checksum ^= generator
    return checksum


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(char) >> 5 for char in hrp] + [0] + [ord(char) & 31 for char in hrp]


def _create_checksum(hrp: str, data: list[int]) -> list[int]:
    polymod = _polymod(_hrp_expand(hrp) + data + [0] * 6) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def _convert_bits(data: bytes | list[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    accumulator = 0
    bits = 0
    result: list[int] = []
    max_value = (1 << to_bits) - 1
    for value in data:
        if value >> from_bits:
            raise Bech32Error(f"invalid data range: {value}")
        accumulator = (accumulator << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            result.append((accumulator >> bits) & max_value)
    if pad:
        if bits:
            result.append((accumulator << (to_bits - bits)) & max_value)
    elif bits >= from_bits:
        raise Bech32Error("invalid incomplete group")
    elif (accumulator << (to_bits - bits)) & max_value:
        raise Bech32Error("invalid non-zero padding")
    return result


def _check_hrp(hrp: str) -> None:
    if not hrp:
        raise Bech32Error("empty human-readable part")
    for char in hrp:
        if not 33 <= ord(char) <= 126:
            raise Bech32Error(f"invalid character in human-readable part: {char!r}")


def bech32_encode(hrp: str, data: bytes) -> str:
    """Encode 8-bit data under a human-readable part as a bech32 string."""
    _check_hrp(hrp)
    hrp = hrp.lower()
    five_bit = _convert_bits(bytes(data), 8, 5, pad=True)
    combined = five_bit + _create_checksum(hrp, five_bit)
    return hrp + "1" + "".join(_CHARSET[value] for value in combined)


def bech32_decode(text: str) -> tuple[str, bytes]:
    """Decode a bech32 string into its human-readable part and 8-bit data."""
    if not 8 <= len(text) <= BECH32_MAX_LENGTH:
        raise Bech32Error(f"invalid bech32 string length {len(text)}")
    for char in text:
        if not 33 <= ord(char) <= 126:
            raise Bech32Error(f"invalid character in string: {char!r}")
    lower = text.lower()
    if lower != text and text.upper() != text:
        raise Bech32Error("string not all lowercase or all uppercase")
    separator = lower.rfind("1")
    if separator < 1 or separator + 7 > len(lower):
        raise Bech32Error("invalid separator index")
    hrp = lower[:separator]
    data: list[int] = []
    for char in lower[separator + 1 :]:
        index = _CHARSET_INDEX.get(char)
        if index is None:
            raise Bech32Error(f"invalid character not part of charset: {char!r}")
        data.append(index)
    if _polymod(_hrp_expand(hrp) + data) != 1:
        raise Bech32Error("invalid checksum")
    return hrp, bytes(_convert_bits(data[:-6], 5, 8, pad=False))


def is_hex_address(text: str) -> bool:
    """Return whether text is 40 hex digits, optionally prefixed with 0x."""
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    return len(text) == 2 * ADDRESS_LENGTH and bool(_HEX.fullmatch(text))


def _to_address(data: bytes) -> bytes:
    data = bytes(data)
    if len(data) > ADDRESS_LENGTH:
        return data[-ADDRESS_LENGTH:]
    return data.rjust(ADDRESS_LENGTH, b"\x00")


def to_checksum_address(data: bytes) -> str:
    """Return the EIP-55 checksummed hex form of a 20-byte address.

    Longer input keeps its last 20 bytes; shorter input is left-padded with zeros.
    """
    lowered = _to_address(data).hex()
    digest = keccak.new(digest_bits=256, data=lowered.encode("ascii")).hexdigest()
    return "0x" + "".join(
        char.upper() if char.isalpha() and int(digest[i], 16) >= 8 else char
        for i, char in enumerate(lowered)
    )


def _address_from_bech32(text: str, prefix: str) -> bytes:
    if not text.strip():
        raise Bech32Error("empty address string is not allowed")
    hrp, data = bech32_decode(text)
    if hrp != prefix:
        raise Bech32Error(f"invalid Bech32 prefix; expected {prefix}, got {hrp}")
    if not data:
        raise Bech32Error("addresses cannot be empty")
    if len(data) > MAX_ADDRESS_LENGTH:
        raise Bech32Error(
            f"address max length is {MAX_ADDRESS_LENGTH}, got {len(data)}"
        )
    return data


def address_translation(
    arg: str, account_prefix: str, validator_prefix: str
) -> dict[str, str] | None:
    """Describe an address in its byte, bech32, hex and EIP-55 forms.

    The argument may be a hex address or a bech32 validator or account address.
    Returns None when it is none of these.
    """
    logger.debug("rpc_addressTranslation")
    if is_hex_address(arg):
        raw = arg[2:] if arg[:2] in ("0x", "0X") else arg
        addr = bytes.fromhex(raw)
    elif arg.startswith(validator_prefix):
        addr = _address_from_bech32(arg, validator_prefix)
    elif arg.startswith(account_prefix):
        addr = _address_from_bech32(arg, account_prefix)
    else:
        return None
    return {
        "bytes": "[" + " ".join(str(byte) for byte in addr) + "]",
        "bech32": bech32_encode(account_prefix, addr),
        "hex": addr.hex().upper(),
        "EIP-55": to_checksum_address(addr),
    }