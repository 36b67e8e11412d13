from __future__ import annotations

from typing import Optional

from config import default_fee_bps
from core.base_types import Address, Currency
from core.errors import ChainMismatch, CurrencyMismatch, InsufficientLiquidity
from core.fractions import CurrencyAmount


class UniswapV2Pair:
    """
    Represents a Uniswap V2 liquidity pair.
    All math uses integers only, no floats anywhere.
    Instances are never mutated; swaps return a new pair.
    """

    def __init__(
        self,
        token0: Currency,
        token1: Currency,
        reserve0: int,
        reserve1: int,
        fee_bps: Optional[int] = None,  # 0.30% = 30 basis points by default
        address: Optional[Address] = None,
    ):
        if token0 == token1:
            raise ValueError("token0 and token1 must be different")
        if token0.chain_id != token1.chain_id:
            raise ChainMismatch("token0 and token1 live on different chains")
        if not isinstance(reserve0, int) or not isinstance(reserve1, int):
            raise TypeError("reserves must be int")
        if reserve0 < 0 or reserve1 < 0:
            raise ValueError("reserves must be non-negative")
        if fee_bps is None:
            fee_bps = default_fee_bps()
        if not isinstance(fee_bps, int):
            raise TypeError("fee_bps must be int")
        if fee_bps < 0 or fee_bps >= 10000:
            raise ValueError("fee_bps must be in [0, 10000)")

        self._token0 = token0
        self._token1 = token1
        self._reserve0 = CurrencyAmount(token0, reserve0)
        self._reserve1 = CurrencyAmount(token1, reserve1)
        self.fee_bps = fee_bps
        self.address = address

    @property
    def chain_id(self) -> int:
        return self._token0.chain_id

    @property
    def token0(self) -> Currency:
        return self._token0

    @property
    def token1(self) -> Currency:
        return self._token1

    @property
    def reserve0(self) -> CurrencyAmount:
        return self._reserve0

    @property
    def reserve1(self) -> CurrencyAmount:
        return self._reserve1

    def involves_token(self, currency: Currency) -> bool:
        return currency == self._token0 or currency == self._token1

    def _select_reserves_for_input(self, token_in: Currency) -> tuple[int, int, bool]:
        if token_in == self._token0:
            return self._reserve0.raw, self._reserve1.raw, True
        if token_in == self._token1:
            return self._reserve1.raw, self._reserve0.raw, False
        raise CurrencyMismatch(f"{token_in!r} not in pair", code="TOKEN")

    def get_amount_out(self, amount_in: int, token_in: Currency) -> int:
        """
        Calculate output amount for a given input.
        Must match Solidity exactly:

        amount_in_with_fee = amount_in * (10000 - fee_bps)
        numerator = amount_in_with_fee * reserve_out
        denominator = reserve_in * 10000 + amount_in_with_fee
        amount_out = numerator // denominator
        """
        if not isinstance(amount_in, int):
            raise TypeError("amount_in must be int")
        if amount_in <= 0:
            raise InsufficientLiquidity("amount_in must be positive")

        reserve_in, reserve_out, _ = self._select_reserves_for_input(token_in)
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity("reserves must be positive")

        amount_in_with_fee = amount_in * (10000 - self.fee_bps)
        numerator = amount_in_with_fee * reserve_out
        denominator = reserve_in * 10000 + amount_in_with_fee
        amount_out = numerator // denominator
        if amount_out == 0:
            raise InsufficientLiquidity("amount_in too small to produce output")
        return amount_out

    def get_output_amount(
        self, input_amount: CurrencyAmount
    ) -> tuple[CurrencyAmount, "UniswapV2Pair"]:
        """Output for ``input_amount`` plus the pair as it stands after the swap."""
        token_in = input_amount.currency
        amount_out = self.get_amount_out(input_amount.raw, token_in)
        token_out = self._token1 if token_in == self._token0 else self._token0
        next_pair = self._after_swap(input_amount.raw, amount_out, token_in)
        return CurrencyAmount(token_out, amount_out), next_pair

    def _after_swap(
        self, amount_in: int, amount_out: int, token_in: Currency
    ) -> "UniswapV2Pair":
        reserve_in, reserve_out, token_in_is_token0 = self._select_reserves_for_input(
            token_in
        )
        if amount_out >= reserve_out:
            raise InsufficientLiquidity("insufficient liquidity for this trade")

        if token_in_is_token0:
            new_reserve0 = reserve_in + amount_in
            new_reserve1 = reserve_out - amount_out
        else:
            new_reserve0 = reserve_out - amount_out
            new_reserve1 = reserve_in + amount_in

        return UniswapV2Pair(
            token0=self._token0,
            token1=self._token1,
            reserve0=new_reserve0,
            reserve1=new_reserve1,
            fee_bps=self.fee_bps,
            address=self.address,
        )

    def __repr__(self) -> str:
        return (
            f"UniswapV2Pair({self._token0.symbol}/{self._token1.symbol}, "
            f"{self._reserve0.raw}, {self._reserve1.raw}, fee_bps={self.fee_bps})"
        )
