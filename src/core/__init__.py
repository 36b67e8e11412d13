from .base_types import Address, Currency, NativeCurrencies, currency_equals, native
from .errors import (
    ChainMismatch,
    CurrencyMismatch,
    EmptyPath,
    InsufficientLiquidity,
    NegativeSlippageTolerance,
    PricingError,
    UnsupportedDirection,
)
from .fractions import CurrencyAmount, Percent, Ratio, Rounding
from .serializer import CanonicalSerializer

__all__ = [
    "Address",
    "Currency",
    "NativeCurrencies",
    "currency_equals",
    "native",
    "Ratio",
    "Percent",
    "CurrencyAmount",
    "Rounding",
    "CanonicalSerializer",
    "PricingError",
    "EmptyPath",
    "ChainMismatch",
    "CurrencyMismatch",
    "NegativeSlippageTolerance",
    "InsufficientLiquidity",
    "UnsupportedDirection",
]
