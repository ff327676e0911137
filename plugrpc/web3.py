"""The web3_ namespace of the JSON-RPC."""

from __future__ import annotations

import platform

from Crypto.Hash import keccak

DEFAULT_APP_VERSION = "plugchaind"


class Web3API:
    """Client version and hashing helpers."""

    def __init__(self, app_version: str = DEFAULT_APP_VERSION, git_commit: str = "") -> None:
        self.app_version = app_version
        self.git_commit = git_commit

    def client_version(self) -> str:
        """Return the client version in user agent form: app/commit/runtime."""
        return f"{self.app_version}/{self.git_commit}/python{platform.python_version()}"

    def sha3(self, data: bytes | str) -> bytes:
        """Return the keccak-256 hash of data, given as bytes or 0x-prefixed hex."""
        if isinstance(data, str):
            if data[:2] not in ("0x", "0X"):
                raise ValueError("hex string without 0x prefix")
            raw = data[2:]
            if len(raw) % 2:
                raise ValueError("hex string of odd length")
            data = bytes.fromhex(raw)
        return keccak.new(digest_bits=256, data=bytes(data)).digest()