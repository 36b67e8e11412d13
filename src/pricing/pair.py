from __future__ import annotations

from typing import Protocol

from core.base_types import Currency
from core.fractions import CurrencyAmount


class Pair(Protocol):
    """
    Liquidity pair consumed by the routing core.

    Implementations must be immutable: ``get_output_amount`` returns the
    post-swap state as a new object instead of mutating reserves.
    """

    @property
    def chain_id(self) -> int: ...

    @property
    def token0(self) -> Currency: ...

    @property
    def token1(self) -> Currency: ...

    @property
    def reserve0(self) -> CurrencyAmount: ...

    @property
    def reserve1(self) -> CurrencyAmount: ...

    def involves_token(self, currency: Currency) -> bool: ...

    def get_output_amount(
        self, input_amount: CurrencyAmount
    ) -> tuple[CurrencyAmount, "Pair"]: ...


def other_token(pair: Pair, currency: Currency) -> Currency:
    """The side of ``pair`` that is not ``currency`` (token0 test only)."""
    return pair.token1 if currency == pair.token0 else pair.token0

