"""Precondition failures raised by the pricing core.

Each error carries a short stable ``code`` so callers can branch on the
failure kind without parsing messages.
"""

from __future__ import annotations

from typing import Optional


class PricingError(Exception):
    """Base class for pricing and routing precondition violations."""

    code = "PRICING"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        if code is not None:
            self.code = code
        super().__init__(message or self.code)


class EmptyPath(PricingError):
    """A path was built with no branches, or a branch with no pairs."""

    code = "PAIRS"


class ChainMismatch(PricingError):
    """Pairs within one path span more than one chain id."""

    code = "CHAIN_IDS"


class CurrencyMismatch(PricingError):
    """Two currency-bearing values were required to share a currency."""

    code = "TOKEN"


class NegativeSlippageTolerance(PricingError):
    """A slippage tolerance below zero was supplied."""

    code = "SLIPPAGE_TOLERANCE"


class InsufficientLiquidity(PricingError):
    """A pair cannot fill the requested amount."""

    code = "LIQUIDITY"


class UnsupportedDirection(NotImplementedError):
    """The requested trade direction is not implemented yet."""

    code = "EXACT_OUTPUT"

    def __init__(self, direction: object):
        self.direction = direction
        super().__init__(f"{direction} trades are not supported")
