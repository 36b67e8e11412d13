"""
Exact rational values: Ratio, Percent and CurrencyAmount.

All arithmetic is done on Python ints by cross-multiplication. Values are
never reduced between operations and never converted to float; Decimal is
used only to render the final string in ``to_significant`` / ``to_fixed``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_UP, ROUND_UP, Decimal
from enum import Enum
from typing import Union

from .base_types import Currency
from .errors import CurrencyMismatch


class Rounding(str, Enum):
    ROUND_DOWN = ROUND_DOWN  # toward zero
    ROUND_HALF_UP = ROUND_HALF_UP
    ROUND_UP = ROUND_UP  # away from zero


def _check_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


def _round_div(numerator: int, denominator: int, rounding: Rounding) -> int:
    """Divide two non-negative ints, rounding the quotient per ``rounding``."""
    quotient, remainder = divmod(numerator, denominator)
    if remainder == 0 or rounding is Rounding.ROUND_DOWN:
        return quotient
    if rounding is Rounding.ROUND_UP:
        return quotient + 1
    if 2 * remainder >= denominator:
        return quotient + 1
    return quotient


def _to_decimal(value: int, places: int) -> Decimal:
    """Exact Decimal for ``value * 10**-places`` (no context rounding)."""
    sign = 1 if value < 0 else 0
    digits = tuple(int(ch) for ch in str(abs(value)))
    return Decimal((sign, digits, -places))


def _render(value: Decimal, group_separator: str) -> str:
    if not group_separator:
        return format(value, "f")
    return format(value, ",f").replace(",", group_separator)


def _floor_log10(numerator: int, denominator: int) -> int:
    """Largest e with 10**e <= numerator / denominator (both positive)."""
    exponent = len(str(numerator)) - len(str(denominator))

    def at_least(e: int) -> bool:
        if e >= 0:
            return numerator >= denominator * 10**e
        return numerator * 10**-e >= denominator

    while not at_least(exponent):
        exponent -= 1
    while at_least(exponent + 1):
        exponent += 1
    return exponent


RatioLike = Union["Ratio", int]


@dataclass(frozen=True, eq=False)
class Ratio:
    """
    Arbitrary-precision rational number.

    The denominator is never zero and is kept positive; the value is not
    reduced to lowest terms (see ``reduce``).
    """

    numerator: int
    denominator: int = 1

    def __post_init__(self) -> None:
        _check_int(self.numerator, "numerator")
        _check_int(self.denominator, "denominator")
        if self.denominator == 0:
            raise ZeroDivisionError("Ratio denominator must be non-zero")
        if self.denominator < 0:
            object.__setattr__(self, "numerator", -self.numerator)
            object.__setattr__(self, "denominator", -self.denominator)

    @staticmethod
    def parse(value: RatioLike) -> "Ratio":
        if isinstance(value, Ratio):
            return value
        if isinstance(value, (Percent, CurrencyAmount)):
            return value.ratio
        return Ratio(_check_int(value, "value"))

    @property
    def quotient(self) -> int:
        """Floor division of numerator by denominator."""
        return self.numerator // self.denominator

    @property
    def remainder(self) -> int:
        return self.numerator - self.quotient * self.denominator

    def reduce(self) -> "Ratio":
        divisor = math.gcd(self.numerator, self.denominator)
        return Ratio(self.numerator // divisor, self.denominator // divisor)

    def invert(self) -> "Ratio":
        return Ratio(self.denominator, self.numerator)

    def add(self, other: RatioLike) -> "Ratio":
        other = Ratio.parse(other)
        if self.denominator == other.denominator:
            return Ratio(self.numerator + other.numerator, self.denominator)
        return Ratio(
            self.numerator * other.denominator + other.numerator * self.denominator,
            self.denominator * other.denominator,
        )

    def subtract(self, other: RatioLike) -> "Ratio":
        other = Ratio.parse(other)
        if self.denominator == other.denominator:
            return Ratio(self.numerator - other.numerator, self.denominator)
        return Ratio(
            self.numerator * other.denominator - other.numerator * self.denominator,
            self.denominator * other.denominator,
        )

    def multiply(self, other: RatioLike) -> "Ratio":
        other = Ratio.parse(other)
        return Ratio(
            self.numerator * other.numerator, self.denominator * other.denominator
        )

    def divide(self, other: RatioLike) -> "Ratio":
        other = Ratio.parse(other)
        return Ratio(
            self.numerator * other.denominator, self.denominator * other.numerator
        )

    def less_than(self, other: RatioLike) -> bool:
        other = Ratio.parse(other)
        return self.numerator * other.denominator < other.numerator * self.denominator

    def equal_to(self, other: RatioLike) -> bool:
        other = Ratio.parse(other)
        return self.numerator * other.denominator == other.numerator * self.denominator

    def greater_than(self, other: RatioLike) -> bool:
        other = Ratio.parse(other)
        return self.numerator * other.denominator > other.numerator * self.denominator

    def to_significant(
        self,
        significant_digits: int = 6,
        rounding: Rounding = Rounding.ROUND_HALF_UP,
        group_separator: str = "",
    ) -> str:
        """
        Format with ``significant_digits`` significant digits.

        Trailing zeros after the decimal point are dropped, so ``3/2`` at six
        digits renders as ``1.5``.
        """
        if not isinstance(significant_digits, int) or significant_digits <= 0:
            raise ValueError(f"{significant_digits} is not a positive integer")
        rounding = Rounding(rounding)
        numerator = abs(self.numerator)
        if numerator == 0:
            return "0"

        shift = significant_digits - 1 - _floor_log10(numerator, self.denominator)
        if shift >= 0:
            scaled = _round_div(numerator * 10**shift, self.denominator, rounding)
        else:
            scaled = _round_div(numerator, self.denominator * 10**-shift, rounding)
        if self.numerator < 0:
            scaled = -scaled

        text = _render(_to_decimal(scaled, shift), group_separator)
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    def to_fixed(
        self,
        decimal_places: int = 4,
        rounding: Rounding = Rounding.ROUND_HALF_UP,
        group_separator: str = "",
    ) -> str:
        """Format with exactly ``decimal_places`` digits after the point."""
        if not isinstance(decimal_places, int) or decimal_places < 0:
            raise ValueError(f"{decimal_places} is negative")
        rounding = Rounding(rounding)
        scaled = _round_div(
            abs(self.numerator) * 10**decimal_places, self.denominator, rounding
        )
        if self.numerator < 0 and scaled != 0:
            scaled = -scaled
        return _render(_to_decimal(scaled, decimal_places), group_separator)

    def __add__(self, other: RatioLike) -> "Ratio":
        return self.add(other)

    def __radd__(self, other: int) -> "Ratio":
        return Ratio.parse(other).add(self)

    def __sub__(self, other: RatioLike) -> "Ratio":
        return self.subtract(other)

    def __rsub__(self, other: int) -> "Ratio":
        return Ratio.parse(other).subtract(self)

    def __mul__(self, other: RatioLike) -> "Ratio":
        return self.multiply(other)

    def __rmul__(self, other: int) -> "Ratio":
        return Ratio.parse(other).multiply(self)

    def __truediv__(self, other: RatioLike) -> "Ratio":
        return self.divide(other)

    def __rtruediv__(self, other: int) -> "Ratio":
        return Ratio.parse(other).divide(self)

    def __neg__(self) -> "Ratio":
        return Ratio(-self.numerator, self.denominator)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Ratio, int)) and not isinstance(other, bool):
            return self.equal_to(other)
        return NotImplemented

    def __lt__(self, other: RatioLike) -> bool:
        return self.less_than(other)

    def __le__(self, other: RatioLike) -> bool:
        return not self.greater_than(other)

    def __gt__(self, other: RatioLike) -> bool:
        return self.greater_than(other)

    def __ge__(self, other: RatioLike) -> bool:
        return not self.less_than(other)

    def __hash__(self) -> int:
        reduced = self.reduce()
        if reduced.denominator == 1:
            return hash(reduced.numerator)
        return hash((reduced.numerator, reduced.denominator))

    def __repr__(self) -> str:
        return f"Ratio({self.numerator}, {self.denominator})"


ZERO = Ratio(0)
ONE = Ratio(1)
ONE_HUNDRED = Ratio(100)


class Percent:
    """
    A ratio read as a percentage: ``Percent(50)`` is 50%, ``Percent(1, 1)``
    is 100%. Formatting renders the value multiplied by 100.
    """

    __slots__ = ("_ratio",)

    def __init__(self, numerator: int, denominator: int = 100):
        self._ratio = Ratio(numerator, denominator)

    @classmethod
    def from_ratio(cls, ratio: Ratio) -> "Percent":
        return cls(ratio.numerator, ratio.denominator)

    @property
    def ratio(self) -> Ratio:
        return self._ratio

    @property
    def numerator(self) -> int:
        return self._ratio.numerator

    @property
    def denominator(self) -> int:
        return self._ratio.denominator

    def add(self, other: Percent | RatioLike) -> "Percent":
        return Percent.from_ratio(self._ratio.add(Ratio.parse(other)))

    def subtract(self, other: Percent | RatioLike) -> "Percent":
        return Percent.from_ratio(self._ratio.subtract(Ratio.parse(other)))

    def multiply(self, other: Percent | RatioLike) -> "Percent":
        return Percent.from_ratio(self._ratio.multiply(Ratio.parse(other)))

    def divide(self, other: Percent | RatioLike) -> "Percent":
        return Percent.from_ratio(self._ratio.divide(Ratio.parse(other)))

    def less_than(self, other: Percent | RatioLike) -> bool:
        return self._ratio.less_than(Ratio.parse(other))

    def equal_to(self, other: Percent | RatioLike) -> bool:
        return self._ratio.equal_to(Ratio.parse(other))

    def greater_than(self, other: Percent | RatioLike) -> bool:
        return self._ratio.greater_than(Ratio.parse(other))

    def to_significant(
        self,
        significant_digits: int = 5,
        rounding: Rounding = Rounding.ROUND_HALF_UP,
    ) -> str:
        return self._ratio.multiply(ONE_HUNDRED).to_significant(
            significant_digits, rounding
        )

    def to_fixed(
        self, decimal_places: int = 2, rounding: Rounding = Rounding.ROUND_HALF_UP
    ) -> str:
        return self._ratio.multiply(ONE_HUNDRED).to_fixed(decimal_places, rounding)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Percent):
            return self.equal_to(other)
        return NotImplemented

    def __lt__(self, other: Percent) -> bool:
        return self.less_than(other)

    def __gt__(self, other: Percent) -> bool:
        return self.greater_than(other)

    def __hash__(self) -> int:
        return hash(("percent", self._ratio))

    def __repr__(self) -> str:
        return f"Percent({self.numerator}, {self.denominator})"

    def __str__(self) -> str:
        return f"{self.to_significant()}%"


@dataclass(frozen=True, eq=False)
class CurrencyAmount:
    """
    An amount of one currency.

    Stores the raw integer in base units (wei-equivalent); the rational value
    is ``raw / 10**decimals``.
    """

    currency: Currency
    raw: int

    def __post_init__(self) -> None:
        if not isinstance(self.currency, Currency):
            raise TypeError("currency must be a Currency")
        _check_int(self.raw, "raw")

    @classmethod
    def from_human(
        cls, currency: Currency, amount: str | Decimal
    ) -> "CurrencyAmount":
        """Create from a human-readable amount (e.g. '1.5' ETH)."""
        if isinstance(amount, float):
            raise TypeError("amount must be a string or Decimal, not float")
        if isinstance(amount, str):
            decimal_amount = Decimal(amount)
        elif isinstance(amount, Decimal):
            decimal_amount = amount
        else:
            raise TypeError("amount must be a string or Decimal")

        sign, digits, exponent = decimal_amount.as_tuple()
        if not isinstance(exponent, int):
            raise ValueError("amount must be finite")
        exponent += currency.decimals
        if exponent < 0 and any(digits[exponent:]):
            raise ValueError("amount has more precision than decimals allow")
        magnitude = int("".join(str(d) for d in digits) or "0")
        raw = magnitude * 10**exponent if exponent >= 0 else magnitude // 10**-exponent
        return cls(currency, -raw if sign else raw)

    @property
    def decimal_scale(self) -> int:
        return 10**self.currency.decimals

    @property
    def ratio(self) -> Ratio:
        return Ratio(self.raw, self.decimal_scale)

    @property
    def human(self) -> Decimal:
        """Returns the exact human-readable decimal."""
        return _to_decimal(self.raw, self.currency.decimals)

    def _check_currency(self, other: "CurrencyAmount") -> None:
        if not isinstance(other, CurrencyAmount):
            raise TypeError("expected a CurrencyAmount")
        if self.currency != other.currency:
            raise CurrencyMismatch(
                f"{self.currency!r} does not match {other.currency!r}"
            )

    def add(self, other: "CurrencyAmount") -> "CurrencyAmount":
        self._check_currency(other)
        return CurrencyAmount(self.currency, self.raw + other.raw)

    def subtract(self, other: "CurrencyAmount") -> "CurrencyAmount":
        self._check_currency(other)
        return CurrencyAmount(self.currency, self.raw - other.raw)

    def less_than(self, other: "CurrencyAmount") -> bool:
        self._check_currency(other)
        return self.raw < other.raw

    def equal_to(self, other: "CurrencyAmount") -> bool:
        self._check_currency(other)
        return self.raw == other.raw

    def greater_than(self, other: "CurrencyAmount") -> bool:
        self._check_currency(other)
        return self.raw > other.raw

    def to_significant(
        self,
        significant_digits: int = 6,
        rounding: Rounding = Rounding.ROUND_DOWN,
        group_separator: str = "",
    ) -> str:
        return self.ratio.to_significant(significant_digits, rounding, group_separator)

    def to_fixed(
        self,
        decimal_places: int | None = None,
        rounding: Rounding = Rounding.ROUND_DOWN,
        group_separator: str = "",
    ) -> str:
        if decimal_places is None:
            decimal_places = self.currency.decimals
        if decimal_places > self.currency.decimals:
            raise ValueError("decimal_places exceeds currency decimals")
        return self.ratio.to_fixed(decimal_places, rounding, group_separator)

    def to_exact(self, group_separator: str = "") -> str:
        """Full-precision rendering with trailing zeros removed."""
        text = _render(self.human, group_separator)
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    def __add__(self, other: "CurrencyAmount") -> "CurrencyAmount":
        return self.add(other)

    def __sub__(self, other: "CurrencyAmount") -> "CurrencyAmount":
        return self.subtract(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurrencyAmount):
            return NotImplemented
        return self.currency == other.currency and self.raw == other.raw

    def __lt__(self, other: "CurrencyAmount") -> bool:
        return self.less_than(other)

    def __gt__(self, other: "CurrencyAmount") -> bool:
        return self.greater_than(other)

    def __hash__(self) -> int:
        return hash((self.currency, self.raw))

    def __repr__(self) -> str:
        return f"CurrencyAmount({self.currency!r}, {self.raw})"

    def __str__(self) -> str:
        return f"{self.to_exact()} {self.currency.symbol or ''}".strip()
