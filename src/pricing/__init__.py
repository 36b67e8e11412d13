from .pair import Pair
from .price import PricePoint
from .route import RouteBranch, WeightedPath
from .trade import (
    TradeDirection,
    TradeExecution,
    best_trade_exact_in,
    input_output_comparator,
    tolerated_input,
    tolerated_output,
    trade_comparator,
)
from .uniswap_v2_pair import UniswapV2Pair

__all__ = [
    "Pair",
    "PricePoint",
    "RouteBranch",
    "WeightedPath",
    "TradeDirection",
    "TradeExecution",
    "best_trade_exact_in",
    "input_output_comparator",
    "tolerated_input",
    "tolerated_output",
    "trade_comparator",
    "UniswapV2Pair",
]
