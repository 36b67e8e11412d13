"""Tests for pricing.route: WeightedPath construction and validation."""

import pytest

from core.base_types import Currency
from core.errors import ChainMismatch, CurrencyMismatch, EmptyPath
from core.fractions import Percent
from pricing.route import RouteBranch, WeightedPath
from pricing.uniswap_v2_pair import UniswapV2Pair

WETH = Currency(1, "0x0000000000000000000000000000000000000001", 18, "WETH")
USDC = Currency(1, "0x0000000000000000000000000000000000000002", 6, "USDC")
DAI = Currency(1, "0x0000000000000000000000000000000000000003", 18, "DAI")
WETH_OP = Currency(10, "0x0000000000000000000000000000000000000001", 18, "WETH")
USDC_OP = Currency(10, "0x0000000000000000000000000000000000000002", 6, "USDC")


def _pair(token0, token1, reserve0=10**24, reserve1=10**24):
    return UniswapV2Pair(token0, token1, reserve0, reserve1, fee_bps=30)


class TestValidation:
    def test_no_branches(self):
        with pytest.raises(EmptyPath) as exc_info:
            WeightedPath([], WETH)
        assert exc_info.value.code == "PAIRS"

    def test_branch_without_pairs(self):
        with pytest.raises(EmptyPath):
            WeightedPath([RouteBranch([])], WETH)

    def test_mixed_chains(self):
        branches = [
            RouteBranch([_pair(WETH, USDC)], Percent(50)),
            RouteBranch([_pair(WETH_OP, USDC_OP)], Percent(50)),
        ]
        with pytest.raises(ChainMismatch) as exc_info:
            WeightedPath(branches, WETH)
        assert exc_info.value.code == "CHAIN_IDS"

    def test_empty_checked_before_chain(self):
        branches = [RouteBranch([_pair(WETH, USDC)]), RouteBranch([])]
        with pytest.raises(EmptyPath):
            WeightedPath(branches, WETH)

    def test_input_must_be_in_first_pair(self):
        with pytest.raises(CurrencyMismatch) as exc_info:
            WeightedPath.single([_pair(USDC, DAI)], WETH)
        assert exc_info.value.code == "INPUT"

    def test_every_hop_must_connect(self):
        with pytest.raises(CurrencyMismatch) as exc_info:
            WeightedPath.single([_pair(WETH, USDC), _pair(WETH, DAI)], WETH)
        assert exc_info.value.code == "PATH"

    def test_output_must_end_every_branch(self):
        with pytest.raises(CurrencyMismatch) as exc_info:
            WeightedPath.single([_pair(WETH, USDC)], WETH, DAI)
        assert exc_info.value.code == "OUTPUT"

    def test_branches_must_agree_on_output(self):
        branches = [
            RouteBranch([_pair(WETH, USDC)], Percent(50)),
            RouteBranch([_pair(WETH, DAI)], Percent(50)),
        ]
        with pytest.raises(CurrencyMismatch):
            WeightedPath(branches, WETH)

    def test_relaxed_skips_output_membership(self):
        path = WeightedPath.single([_pair(WETH, USDC)], WETH, DAI, strict=False)
        assert path.output == DAI
        assert path.token_paths == ((WETH, USDC),)

    def test_relaxed_input_outside_first_pair(self):
        # WETH is not in USDC/DAI; the hop is read from the token1 side
        path = WeightedPath.single([_pair(USDC, DAI)], WETH, strict=False)
        assert path.token_paths == ((WETH, USDC),)
        assert path.output == USDC
        first_hop = path.first_hop_price
        assert first_hop.base_currency == DAI
        assert first_hop.quote_currency == USDC
        with pytest.raises(CurrencyMismatch) as exc_info:
            path.mid_price
        assert exc_info.value.code == "TOKEN"

    def test_relaxed_consistent_path_prices(self):
        path = WeightedPath.single(
            [_pair(WETH, USDC, 1000 * 10**18, 2_000_000 * 10**6)], WETH, strict=False
        )
        assert path.mid_price.to_significant() == "2000"
        assert path.mid_price is path.mid_price

    def test_non_positive_weight(self):
        with pytest.raises(ValueError, match="positive"):
            RouteBranch([_pair(WETH, USDC)], Percent(0))


class TestStructure:
    def test_token_path_follows_pairs(self):
        # second pair is stored DAI/USDC, entered from the USDC side
        path = WeightedPath.single([_pair(WETH, USDC), _pair(DAI, USDC)], WETH)
        assert path.token_paths == ((WETH, USDC, DAI),)
        assert path.input == WETH
        assert path.output == DAI
        assert path.chain_id == 1

    def test_output_defaults_to_last_currency_reached(self):
        path = WeightedPath.single([_pair(USDC, WETH)], WETH)
        assert path.output == USDC

    def test_hop_counts(self):
        branches = [
            RouteBranch([_pair(WETH, USDC), _pair(USDC, DAI)], Percent(60)),
            RouteBranch([_pair(WETH, DAI)], Percent(40)),
        ]
        path = WeightedPath(branches, WETH, DAI)
        assert path.num_hops == 3
        assert len(path.pairs) == 3
        assert [b.weight for b in path.branches] == [Percent(60), Percent(40)]

    def test_mid_price_and_first_hop_price(self):
        path = WeightedPath.single(
            [
                _pair(WETH, USDC, 1000 * 10**18, 2_000_000 * 10**6),
                _pair(USDC, DAI, 1_000_000 * 10**6, 1_000_000 * 10**18),
            ],
            WETH,
        )
        assert path.mid_price.quote_currency == DAI
        assert path.first_hop_price.quote_currency == USDC
        assert path.mid_price.to_significant() == "2000"

    def test_with_pairs_keeps_shape(self):
        original = _pair(WETH, USDC, 1000 * 10**18, 2_000_000 * 10**6)
        path = WeightedPath(
            [RouteBranch([original], Percent(30))], WETH, strict=True
        )
        moved = _pair(WETH, USDC, 1000 * 10**18, 1_000_000 * 10**6)
        rebuilt = path.with_pairs([[moved]])
        assert rebuilt.branches[0].weight == Percent(30)
        assert rebuilt.output == USDC
        assert rebuilt.mid_price.to_significant() == "1000"
        assert path.mid_price.to_significant() == "2000"

    def test_with_pairs_branch_count(self):
        path = WeightedPath.single([_pair(WETH, USDC)], WETH)
        with pytest.raises(ValueError, match="branch count"):
            path.with_pairs([])
