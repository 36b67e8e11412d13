from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from core.base_types import Currency
from core.errors import ChainMismatch, CurrencyMismatch, EmptyPath
from core.fractions import Percent

from .pair import Pair, other_token
from .price import PricePoint

logger = logging.getLogger(__name__)

FULL_WEIGHT = Percent(100)


@dataclass(frozen=True)
class RouteBranch:
    """One parallel split of a route: a chain of pairs carrying a weight."""

    pairs: tuple
    weight: Percent = FULL_WEIGHT

    def __post_init__(self) -> None:
        object.__setattr__(self, "pairs", tuple(self.pairs))
        if not isinstance(self.weight, Percent):
            raise TypeError("weight must be a Percent")
        if not self.weight.greater_than(0):
            raise ValueError("branch weight must be positive")

    @property
    def num_hops(self) -> int:
        return len(self.pairs)


class WeightedPath:
    """
    A swap route through one or more pools, possibly split into weighted
    parallel branches that all start at ``input``.

    With ``strict`` (the default) every branch must start in a pair holding
    ``input``, every hop must hold the currency reaching it, and every branch
    must end in ``output``. The mid price is composed at construction.

    With ``strict=False`` the next currency of each hop is inferred from the
    pair's token0 alone and membership is not checked. The mid price is then
    composed on first access and raises ``CurrencyMismatch`` if the hops do
    not chain; ``first_hop_price`` is always available.
    """

    def __init__(
        self,
        branches: Sequence[RouteBranch],
        input: Currency,
        output: Optional[Currency] = None,
        strict: bool = True,
    ):
        branches = tuple(
            b if isinstance(b, RouteBranch) else RouteBranch(b) for b in branches
        )
        if not branches or any(branch.num_hops == 0 for branch in branches):
            raise EmptyPath("route needs at least one branch with one pair")

        chain_id = branches[0].pairs[0].chain_id
        if any(pair.chain_id != chain_id for b in branches for pair in b.pairs):
            raise ChainMismatch("all pairs must share one chain id")

        token_paths = tuple(
            self._walk_branch(branch, input, strict) for branch in branches
        )
        if output is None:
            output = token_paths[-1][-1]
        if strict and any(tokens[-1] != output for tokens in token_paths):
            raise CurrencyMismatch(
                f"route does not end in {output!r}", code="OUTPUT"
            )

        self._branches = branches
        self._token_paths = token_paths
        self._input = input
        self._output = output
        self._strict = strict
        self._chain_id = chain_id
        self._mid_price = PricePoint.from_path(self) if strict else None
        logger.debug(
            "Built path %r -> %r: %d branch(es), %d hop(s)",
            input,
            output,
            len(branches),
            self.num_hops,
        )

    @classmethod
    def single(
        cls,
        pairs: Sequence[Pair],
        input: Currency,
        output: Optional[Currency] = None,
        strict: bool = True,
    ) -> "WeightedPath":
        """Route with one branch carrying the whole amount."""
        return cls([RouteBranch(tuple(pairs))], input, output, strict)

    @staticmethod
    def _walk_branch(
        branch: RouteBranch, input: Currency, strict: bool
    ) -> tuple[Currency, ...]:
        tokens = [input]
        for i, pair in enumerate(branch.pairs):
            current = tokens[i]
            if strict and not pair.involves_token(current):
                code = "INPUT" if i == 0 else "PATH"
                raise CurrencyMismatch(f"{current!r} not in hop {i}", code=code)
            tokens.append(other_token(pair, current))
        return tuple(tokens)

    @property
    def branches(self) -> tuple[RouteBranch, ...]:
        return self._branches

    @property
    def token_paths(self) -> tuple[tuple[Currency, ...], ...]:
        """Currencies visited by each branch: input → intermediate... → output."""
        return self._token_paths

    @property
    def input(self) -> Currency:
        return self._input

    @property
    def output(self) -> Currency:
        return self._output

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def pairs(self) -> tuple:
        return tuple(pair for branch in self._branches for pair in branch.pairs)

    @property
    def num_hops(self) -> int:
        return sum(branch.num_hops for branch in self._branches)

    @property
    def mid_price(self) -> PricePoint:
        """Weighted, fully composed mid price across all hops and branches."""
        if self._mid_price is None:
            self._mid_price = PricePoint.from_path(self)
        return self._mid_price

    @property
    def first_hop_price(self) -> PricePoint:
        """Mid price of the first hop of the first branch only."""
        return PricePoint.from_path_first_hop(self)

    def with_pairs(self, branch_pairs: Sequence[Sequence[Pair]]) -> "WeightedPath":
        """Same route shape and weights over a new set of pair states."""
        if len(branch_pairs) != len(self._branches):
            raise ValueError("branch count must match")
        branches = [
            RouteBranch(tuple(pairs), branch.weight)
            for branch, pairs in zip(self._branches, branch_pairs)
        ]
        return WeightedPath(branches, self._input, self._output, self._strict)

    def __repr__(self) -> str:
        return (
            f"WeightedPath({self._input!r} -> {self._output!r}, "
            f"branches={len(self._branches)}, hops={self.num_hops})"
        )
