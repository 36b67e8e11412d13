from __future__ import annotations

import logging
from enum import Enum
from functools import cmp_to_key
from typing import Iterable, Protocol

from core.errors import (
    CurrencyMismatch,
    InsufficientLiquidity,
    NegativeSlippageTolerance,
    UnsupportedDirection,
)
from core.fractions import ONE, ZERO, CurrencyAmount, Percent, Ratio
from core.serializer import CanonicalSerializer

from .price import PricePoint
from .route import WeightedPath

logger = logging.getLogger(__name__)


class TradeDirection(Enum):
    EXACT_IN = "exact_in"  # amount fixes the input
    EXACT_OUT = "exact_out"  # amount fixes the output


class InputOutput(Protocol):
    @property
    def input_amount(self) -> CurrencyAmount: ...

    @property
    def output_amount(self) -> CurrencyAmount: ...


def compute_price_impact(
    mid_price: PricePoint, input_amount: CurrencyAmount, output_amount: CurrencyAmount
) -> Percent:
    """
    Returns the shortfall of the realized output against the mid-price quote.

    slippage = (exact_quote - output) / exact_quote, on raw (undecimaled) units
    """
    exact_quote = mid_price.raw.multiply(input_amount.raw)
    if exact_quote.equal_to(ZERO):
        raise InsufficientLiquidity("mid price quotes no output for this input")
    slippage = exact_quote.subtract(output_amount.raw).divide(exact_quote)
    return Percent.from_ratio(slippage)


def split_amount(
    amount: CurrencyAmount, weights: list[Percent]
) -> list[CurrencyAmount]:
    """
    Split ``amount`` by weight. Shares are floored; the last share takes the
    remainder so the parts always sum to ``amount``.
    """
    total = sum((weight.ratio for weight in weights), ZERO)
    shares = [
        Ratio(amount.raw).multiply(weight.ratio).divide(total).quotient
        for weight in weights[:-1]
    ]
    shares.append(amount.raw - sum(shares))
    return [CurrencyAmount(amount.currency, share) for share in shares]


def input_output_comparator(a: InputOutput, b: InputOutput) -> int:
    """
    Orders by output descending, then input ascending: the best trades give
    the most output for the least input and sort first.
    """
    if a.input_amount.currency != b.input_amount.currency:
        raise CurrencyMismatch(
            "trades spend different currencies", code="INPUT_CURRENCY"
        )
    if a.output_amount.currency != b.output_amount.currency:
        raise CurrencyMismatch(
            "trades return different currencies", code="OUTPUT_CURRENCY"
        )

    if a.output_amount.equal_to(b.output_amount):
        if a.input_amount.equal_to(b.input_amount):
            return 0
        return -1 if a.input_amount.less_than(b.input_amount) else 1
    return 1 if a.output_amount.less_than(b.output_amount) else -1


def trade_comparator(a: "TradeExecution", b: "TradeExecution") -> int:
    """
    Extends ``input_output_comparator`` with lower price impact first, then
    fewer hops (each hop costs gas).
    """
    io_comp = input_output_comparator(a, b)
    if io_comp != 0:
        return io_comp

    if a.price_impact.less_than(b.price_impact):
        return -1
    if a.price_impact.greater_than(b.price_impact):
        return 1

    return a.path.num_hops - b.path.num_hops


class TradeExecution:
    """
    A trade executed against a weighted path.
    Does not account for slippage, i.e. trades that front run this trade and
    move the price.

    The amount is split across branches by weight and each branch is threaded
    through its pairs in order. Pairs are never mutated: the post-trade state
    of every pair is kept in ``next_pairs`` and drives ``next_mid_price``.
    """

    def __init__(
        self,
        path: WeightedPath,
        amount: CurrencyAmount,
        direction: TradeDirection = TradeDirection.EXACT_IN,
    ):
        direction = TradeDirection(direction)
        if direction is not TradeDirection.EXACT_IN:
            raise UnsupportedDirection(direction)
        if amount.currency != path.input:
            raise CurrencyMismatch(
                f"{amount.currency!r} is not the path input", code="INPUT"
            )
        if amount.raw <= 0:
            raise InsufficientLiquidity("trade amount must be positive")

        # post-trade state per pair object; a pair shared by branches is threaded
        # through its latest state
        latest: dict[int, object] = {}
        branch_amounts = []
        outputs = []
        for branch, branch_in in zip(
            path.branches, split_amount(amount, [b.weight for b in path.branches])
        ):
            amounts = [branch_in]
            for pair in branch.pairs:
                current = latest.get(id(pair), pair)
                amount_out, next_pair = current.get_output_amount(amounts[-1])
                latest[id(pair)] = next_pair
                amounts.append(amount_out)
            branch_amounts.append(tuple(amounts))
            outputs.append(amounts[-1])

        output_amount = outputs[0]
        for branch_out in outputs[1:]:
            output_amount = output_amount.add(branch_out)

        self._path = path
        self._direction = direction
        self._branch_amounts = tuple(branch_amounts)
        self._next_pairs = tuple(
            tuple(latest[id(pair)] for pair in branch.pairs)
            for branch in path.branches
        )
        self._input_amount = amount
        self._output_amount = output_amount
        self._execution_price = PricePoint(
            amount.currency, output_amount.currency, amount.raw, output_amount.raw
        )
        self._next_mid_price = path.with_pairs(self._next_pairs).mid_price
        self._price_impact = compute_price_impact(
            path.mid_price, amount, output_amount
        )
        logger.debug(
            "Trade %s: %s -> %s over %d hop(s), impact %s%%",
            direction.value,
            amount,
            output_amount,
            path.num_hops,
            self._price_impact.to_significant(4),
        )

    @classmethod
    def exact_in(
        cls, path: WeightedPath, amount_in: CurrencyAmount
    ) -> "TradeExecution":
        """Constructs an exact-in trade with the given amount in and path."""
        return cls(path, amount_in, TradeDirection.EXACT_IN)

    @classmethod
    def exact_out(
        cls, path: WeightedPath, amount_out: CurrencyAmount
    ) -> "TradeExecution":
        """Exact-out trades are not supported yet; always raises."""
        return cls(path, amount_out, TradeDirection.EXACT_OUT)

    @property
    def path(self) -> WeightedPath:
        return self._path

    @property
    def direction(self) -> TradeDirection:
        return self._direction

    @property
    def input_amount(self) -> CurrencyAmount:
        """The input amount for the trade assuming no slippage."""
        return self._input_amount

    @property
    def output_amount(self) -> CurrencyAmount:
        """The output amount for the trade assuming no slippage."""
        return self._output_amount

    @property
    def branch_amounts(self) -> tuple[tuple[CurrencyAmount, ...], ...]:
        """Amount at each step of each branch: [input, after_hop1, ...]."""
        return self._branch_amounts

    @property
    def next_pairs(self) -> tuple[tuple, ...]:
        return self._next_pairs

    @property
    def execution_price(self) -> PricePoint:
        """Realized output per input of this trade."""
        return self._execution_price

    @property
    def next_mid_price(self) -> PricePoint:
        """The mid price after the trade executes, from post-trade reserves."""
        return self._next_mid_price

    @property
    def price_impact(self) -> Percent:
        return self._price_impact

    def minimum_amount_out(self, slippage_tolerance: Percent) -> CurrencyAmount:
        """
        Minimum amount that must be received for the given slippage tolerance.
        Exact-in trades already know their output, so it is returned as is.
        """
        _check_tolerance(slippage_tolerance)
        if self._direction is TradeDirection.EXACT_IN:
            return self._output_amount
        return tolerated_output(self._output_amount, slippage_tolerance)

    def maximum_amount_in(self, slippage_tolerance: Percent) -> CurrencyAmount:
        """
        Maximum amount that may be spent for the given slippage tolerance.
        Exact-in trades spend exactly their input, so it is returned as is.
        """
        _check_tolerance(slippage_tolerance)
        if self._direction is TradeDirection.EXACT_IN:
            return self._input_amount
        return tolerated_input(self._input_amount, slippage_tolerance)

    def to_dict(self) -> dict:
        """Deterministic snapshot of every derived field."""
        return {
            "direction": self._direction.value,
            "chain_id": self._path.chain_id,
            "token_paths": [list(tokens) for tokens in self._path.token_paths],
            "weights": [branch.weight for branch in self._path.branches],
            "input_amount": self._input_amount,
            "output_amount": self._output_amount,
            "branch_amounts": [list(amounts) for amounts in self._branch_amounts],
            "mid_price": self._path.mid_price.raw,
            "execution_price": self._execution_price.raw,
            "next_mid_price": self._next_mid_price.raw,
            "price_impact": self._price_impact,
        }

    @property
    def fingerprint(self) -> str:
        """keccak256 of the canonical snapshot, as 0x-prefixed hex."""
        return CanonicalSerializer.fingerprint(self.to_dict())

    def __repr__(self) -> str:
        return (
            f"TradeExecution({self._direction.value}, {self._input_amount} -> "
            f"{self._output_amount}, impact={self._price_impact})"
        )


def _check_tolerance(slippage_tolerance: Percent) -> None:
    if slippage_tolerance.less_than(ZERO):
        raise NegativeSlippageTolerance(
            f"slippage tolerance {slippage_tolerance!r} is negative"
        )


def tolerated_output(
    amount_out: CurrencyAmount, slippage_tolerance: Percent
) -> CurrencyAmount:
    """Least output accepted for a fixed-output quote: floor(out / (1 + tol))."""
    _check_tolerance(slippage_tolerance)
    adjusted = ONE.add(slippage_tolerance.ratio).invert().multiply(amount_out.raw)
    return CurrencyAmount(amount_out.currency, adjusted.quotient)


def tolerated_input(
    amount_in: CurrencyAmount, slippage_tolerance: Percent
) -> CurrencyAmount:
    """Most input spent for a fixed-output quote: floor(in * (1 + tol))."""
    _check_tolerance(slippage_tolerance)
    adjusted = ONE.add(slippage_tolerance.ratio).multiply(amount_in.raw)
    return CurrencyAmount(amount_in.currency, adjusted.quotient)


def best_trade_exact_in(
    paths: Iterable[WeightedPath], amount_in: CurrencyAmount, max_results: int = 3
) -> list[TradeExecution]:
    """
    Build an exact-in trade for every candidate path and return the best
    ``max_results`` of them, ordered by ``trade_comparator``. Paths that
    cannot fill the amount are skipped.
    """
    if max_results <= 0:
        raise ValueError("max_results must be positive")
    trades = []
    for path in paths:
        try:
            trades.append(TradeExecution.exact_in(path, amount_in))
        except InsufficientLiquidity as exc:
            logger.debug("Skipping %r: %s", path, exc)
    trades.sort(key=cmp_to_key(trade_comparator))
    return trades[:max_results]

