"""Coins of the chain's native denomination."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

BASE_NATIVE_DENOM = "uplugcn"
"""Denomination used for staking, minting, governance, crisis fees and EVM state transitions."""

DISPLAY_NATIVE_DENOM = "plugcn"
"""Denomination displayed to users in client applications."""

BASE_DENOM_UNIT = 6
"""1 plugcn = 10**BASE_DENOM_UNIT uplugcn."""

DEFAULT_GAS_PRICE = 20
"""Default gas price for EVM transactions."""

_DENOM = re.compile(r"[a-zA-Z][a-zA-Z0-9/:._-]{2,127}")
_MAX_INT_BITS = 256
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DEC_PRECISION = 18


def _validate_denom(denom: str) -> None:
    if not isinstance(denom, str) or not _DENOM.fullmatch(denom):
        raise ValueError(f"invalid denom: {denom}")


def _validate_int(amount: object) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"coin amount must be an integer, got {type(amount).__name__}")
    if amount.bit_length() > _MAX_INT_BITS:
        raise OverflowError("coin amount overflows 256 bits")
    return amount


@dataclass(frozen=True)
class Coin:
    """An integer amount of a denomination."""

    denom: str
    amount: int

    def __post_init__(self) -> None:
        _validate_denom(self.denom)
        _validate_int(self.amount)
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


@dataclass(frozen=True)
class DecCoin:
    """A decimal amount of a denomination."""

    denom: str
    amount: Decimal

    def __post_init__(self) -> None:
        _validate_denom(self.denom)
        if isinstance(self.amount, bool) or not isinstance(self.amount, (int, Decimal)):
            raise TypeError(
                f"decimal coin amount must be a Decimal, got {type(self.amount).__name__}"
            )
        object.__setattr__(self, "amount", Decimal(self.amount))
        if self.amount < 0:
            raise ValueError(f"negative decimal coin amount: {self.amount}")

    def __str__(self) -> str:
        return f"{self.amount:.{_DEC_PRECISION}f}{self.denom}"


def new_socket_coin(amount: int) -> Coin:
    """Return a coin of the native denomination; raise ValueError if negative."""
    return Coin(BASE_NATIVE_DENOM, amount)


def new_socket_dec_coin(amount: int) -> DecCoin:
    """Return a decimal coin of the native denomination; raise ValueError if negative."""
    coin = Coin(BASE_NATIVE_DENOM, amount)
    return DecCoin(coin.denom, Decimal(coin.amount))


def new_socket_coin_int64(amount: int) -> Coin:
    """Return a coin of the native denomination from a 64-bit signed amount."""
    _validate_int(amount)
    if not _INT64_MIN <= amount <= _INT64_MAX:
        raise OverflowError(f"amount {amount} does not fit in a 64-bit signed integer")
    return Coin(BASE_NATIVE_DENOM, amount)