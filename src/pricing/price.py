from __future__ import annotations

from functools import reduce
from typing import TYPE_CHECKING

from core.base_types import Currency
from core.errors import CurrencyMismatch, InsufficientLiquidity
from core.fractions import ZERO, CurrencyAmount, Percent, Ratio, Rounding

from .pair import Pair

if TYPE_CHECKING:
    from .route import WeightedPath


class PricePoint:
    """
    Price of ``base_currency`` expressed in ``quote_currency``.

    ``raw`` is the ratio of raw integer units (quote units per base unit);
    ``adjusted`` rescales it by the currencies' decimals for display.
    """

    __slots__ = ("_base", "_quote", "_raw", "_scalar")

    # denominator and numerator must be raw, i.e. in base units
    def __init__(
        self,
        base_currency: Currency,
        quote_currency: Currency,
        denominator: int,
        numerator: int,
    ):
        self._base = base_currency
        self._quote = quote_currency
        self._raw = Ratio(numerator, denominator)
        self._scalar = Ratio(
            10**base_currency.decimals, 10**quote_currency.decimals
        )

    @classmethod
    def from_ratio(
        cls, base_currency: Currency, quote_currency: Currency, raw: Ratio
    ) -> "PricePoint":
        return cls(base_currency, quote_currency, raw.denominator, raw.numerator)

    @classmethod
    def identity(cls, currency: Currency) -> "PricePoint":
        return cls(currency, currency, 1, 1)

    @classmethod
    def for_hop(cls, pair: Pair, currency_in: Currency) -> "PricePoint":
        """Mid price of one pair, entered on the ``currency_in`` side."""
        if currency_in == pair.token0:
            reserve_in, reserve_out = pair.reserve0, pair.reserve1
        else:
            reserve_in, reserve_out = pair.reserve1, pair.reserve0
        if reserve_in.raw == 0:
            raise InsufficientLiquidity("pair has an empty reserve")
        return cls(
            reserve_in.currency, reserve_out.currency, reserve_in.raw, reserve_out.raw
        )

    @classmethod
    def from_path(cls, path: "WeightedPath") -> "PricePoint":
        """
        Fully composed mid price of a path.

        Hop prices are chained within each branch, the last hop applied with
        the branch weight, and the weighted branch prices averaged over the
        total weight.
        """
        weighted = None
        total_weight = ZERO
        for branch, tokens in zip(path.branches, path.token_paths):
            hops = [
                cls.for_hop(pair, tokens[i]) for i, pair in enumerate(branch.pairs)
            ]
            chained = reduce(
                lambda acc, hop: acc.multiply(hop), hops[:-1], cls.identity(tokens[0])
            )
            branch_price = chained.multiply_with_percent(hops[-1], branch.weight)
            weighted = branch_price if weighted is None else weighted.add(branch_price)
            total_weight = total_weight.add(branch.weight.ratio)
        return cls.from_ratio(
            weighted.base_currency,
            weighted.quote_currency,
            weighted.raw.divide(total_weight),
        )

    @classmethod
    def from_path_first_hop(cls, path: "WeightedPath") -> "PricePoint":
        """Fast path: the price of the first hop of the first branch only."""
        return cls.for_hop(path.branches[0].pairs[0], path.token_paths[0][0])

    @property
    def base_currency(self) -> Currency:
        return self._base

    @property
    def quote_currency(self) -> Currency:
        return self._quote

    @property
    def numerator(self) -> int:
        return self._raw.numerator

    @property
    def denominator(self) -> int:
        return self._raw.denominator

    @property
    def raw(self) -> Ratio:
        return self._raw

    @property
    def scalar(self) -> Ratio:
        return self._scalar

    @property
    def adjusted(self) -> Ratio:
        return self._raw.multiply(self._scalar)

    def invert(self) -> "PricePoint":
        return PricePoint(self._quote, self._base, self.numerator, self.denominator)

    def multiply(self, other: "PricePoint") -> "PricePoint":
        if self._quote != other.base_currency:
            raise CurrencyMismatch(
                f"cannot chain {self._quote!r} into {other.base_currency!r}",
                code="TOKEN",
            )
        return PricePoint.from_ratio(
            self._base, other.quote_currency, self._raw.multiply(other.raw)
        )

    def multiply_with_percent(
        self, other: "PricePoint", percent: Percent
    ) -> "PricePoint":
        chained = self.multiply(other)
        return PricePoint.from_ratio(
            chained.base_currency,
            chained.quote_currency,
            chained.raw.multiply(percent.ratio),
        )

    def add(self, other: "PricePoint") -> "PricePoint":
        if self._base != other.base_currency or self._quote != other.quote_currency:
            raise CurrencyMismatch("prices quote different currency pairs")
        return PricePoint.from_ratio(self._base, self._quote, self._raw.add(other.raw))

    # performs floor division on overflow
    def quote(self, amount: CurrencyAmount) -> CurrencyAmount:
        if amount.currency != self._base:
            raise CurrencyMismatch(
                f"{amount.currency!r} is not the base currency", code="TOKEN"
            )
        return CurrencyAmount(self._quote, self._raw.multiply(amount.raw).quotient)

    def to_significant(
        self,
        significant_digits: int = 6,
        rounding: Rounding = Rounding.ROUND_HALF_UP,
        group_separator: str = "",
    ) -> str:
        return self.adjusted.to_significant(
            significant_digits, rounding, group_separator
        )

    def to_fixed(
        self,
        decimal_places: int = 4,
        rounding: Rounding = Rounding.ROUND_HALF_UP,
        group_separator: str = "",
    ) -> str:
        return self.adjusted.to_fixed(decimal_places, rounding, group_separator)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PricePoint):
            return NotImplemented
        return (
            self._base == other.base_currency
            and self._quote == other.quote_currency
            and self._raw.equal_to(other.raw)
        )

    def __hash__(self) -> int:
        return hash((self._base, self._quote, self._raw))

    def __repr__(self) -> str:
        base = self._base.symbol or self._base.address.checksum
        quote = self._quote.symbol or self._quote.address.checksum
        return f"PricePoint({base}->{quote}, {self.numerator}/{self.denominator})"

