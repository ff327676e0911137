"""Per-address locks that keep nonces from being read twice while signing."""

from __future__ import annotations

import threading
from collections.abc import Hashable


def _key(address: Hashable) -> Hashable:
    if isinstance(address, str):
        return address.lower()
    if isinstance(address, (bytes, bytearray, memoryview)):
        return bytes(address)
    return address


class AddrLocker:
    """Holds one mutex per account address."""

    def __init__(self) -> None:
        self._mu = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}

    def _lock(self, address: Hashable) -> threading.Lock:
        with self._mu:
            return self._locks.setdefault(_key(address), threading.Lock())

    def lock_addr(self, address: Hashable) -> None:
        """Block until the address's lock is held by the caller."""
        self._lock(address).acquire()

    def unlock_addr(self, address: Hashable) -> None:
        """Release the address's lock; raise RuntimeError if it is not held."""
        self._lock(address).release()

    def locked(self, address: Hashable) -> bool:
        """Return whether the address's lock is currently held."""
        return self._lock(address).locked()