"""Core identity types: addresses, currencies and the native-currency registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from eth_utils.address import is_address, to_checksum_address

from config import native_currency_specs

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class Address:
    """EVM address with validation and checksumming."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("Address value must be a string")
        if not is_address(self.value):
            raise ValueError("Invalid Ethereum address")
        object.__setattr__(self, "value", to_checksum_address(self.value))

    @property
    def checksum(self) -> str:
        return self.value

    @property
    def lower(self) -> str:
        return self.value.lower()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Address):
            return self.lower == other.lower
        if isinstance(other, str):
            return self.lower == other.lower()
        return False

    def __hash__(self) -> int:
        return hash(self.lower)


@dataclass(frozen=True, eq=False)
class Currency:
    """
    A token (or the chain's native coin) on a specific chain.

    Identity is (chain_id, address); symbol, name and decimals are metadata
    and do not take part in equality.
    """

    chain_id: int
    address: Address
    decimals: int
    symbol: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.chain_id, int) or self.chain_id <= 0:
            raise ValueError("chain_id must be a positive integer")
        if isinstance(self.address, str):
            object.__setattr__(self, "address", Address(self.address))
        if not isinstance(self.address, Address):
            raise TypeError("address must be an Address or str")
        if not isinstance(self.decimals, int) or not 0 <= self.decimals < 256:
            raise ValueError("decimals must be an integer in [0, 255]")

    @property
    def is_native(self) -> bool:
        return self.address == ZERO_ADDRESS

    def equals(self, other: "Currency") -> bool:
        """Returns True if both refer to the same asset on the same chain."""
        if self is other:
            return True
        return self.chain_id == other.chain_id and self.address == other.address

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Currency):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.chain_id, self.address.lower))

    def __repr__(self) -> str:
        label = self.symbol or self.address.checksum
        return f"Currency({label}, chain_id={self.chain_id})"


def currency_equals(a: Currency, b: Currency) -> bool:
    return a.equals(b)


class NativeCurrencies:
    """
    Registry of native currencies keyed by chain id.

    Passed explicitly to whatever needs it, so several chain configurations
    can live side by side in one process.
    """

    def __init__(self, currencies: Iterable[Currency] = ()):
        self._by_chain: dict[int, Currency] = {}
        for currency in currencies:
            self.register(currency)

    @classmethod
    def from_config(cls) -> "NativeCurrencies":
        """Build a registry from the NATIVE_CURRENCIES setting."""
        return cls(
            native(chain_id, symbol=symbol, decimals=decimals)
            for chain_id, symbol, decimals in native_currency_specs()
        )

    def register(self, currency: Currency) -> None:
        if not currency.is_native:
            raise ValueError("native currency must use the zero address")
        self._by_chain[currency.chain_id] = currency

    def get(self, chain_id: int) -> Currency:
        try:
            return self._by_chain[chain_id]
        except KeyError:
            raise KeyError(
                f"No native currency registered for chain {chain_id}"
            ) from None

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._by_chain

    def __len__(self) -> int:
        return len(self._by_chain)


def native(
    chain_id: int, symbol: str = "ETH", decimals: int = 18, name: str | None = None
) -> Currency:
    return Currency(
        chain_id=chain_id,
        address=Address(ZERO_ADDRESS),
        decimals=decimals,
        symbol=symbol,
        name=name or symbol,
    )
