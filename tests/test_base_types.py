import pytest

from core.base_types import (
    Address,
    Currency,
    NativeCurrencies,
    currency_equals,
    native,
)

DEAD = "0x000000000000000000000000000000000000dead"


def test_address_invalid_raises():
    with pytest.raises(ValueError, match="Invalid Ethereum address"):
        Address("invalid")


def test_address_case_insensitive_equality():
    lower = Address("0x000000000000000000000000000000000000dead")
    upper = Address("0x000000000000000000000000000000000000DEAD")
    assert lower == upper
    assert hash(lower) == hash(upper)


def test_currency_equality_ignores_address_case_and_metadata():
    a = Currency(1, DEAD, 18, "DEAD")
    b = Currency(1, DEAD.upper().replace("0X", "0x"), 6, "OTHER", "Other")
    assert a == b
    assert len({a, b}) == 1


def test_currency_differs_across_chains():
    assert Currency(1, DEAD, 18) != Currency(10, DEAD, 18)
    assert not currency_equals(Currency(1, DEAD, 18), Currency(10, DEAD, 18))
    shouting = DEAD.upper().replace("0X", "0x")
    assert currency_equals(Currency(1, DEAD, 18), Currency(1, shouting, 0))


def test_currency_rejects_bad_decimals():
    with pytest.raises(ValueError, match="decimals"):
        Currency(1, DEAD, -1)


def test_currency_rejects_non_positive_chain_id():
    with pytest.raises(ValueError, match="chain_id"):
        Currency(0, DEAD, 18)


def test_native_currency_uses_zero_address():
    eth = native(1)
    assert eth.is_native
    assert eth.symbol == "ETH"
    assert not Currency(1, DEAD, 18).is_native


class TestNativeCurrencies:
    def test_register_and_get(self):
        registry = NativeCurrencies([native(1), native(56, symbol="BNB")])
        assert registry.get(56).symbol == "BNB"
        assert 1 in registry
        assert len(registry) == 2

    def test_unknown_chain_raises(self):
        with pytest.raises(KeyError, match="chain 137"):
            NativeCurrencies().get(137)

    def test_rejects_non_native(self):
        with pytest.raises(ValueError, match="zero address"):
            NativeCurrencies([Currency(1, DEAD, 18)])

    def test_registries_are_independent(self):
        mainnet = NativeCurrencies([native(1)])
        other = NativeCurrencies([native(1, symbol="GETH")])
        assert mainnet.get(1) == other.get(1)
        assert mainnet.get(1).symbol != other.get(1).symbol

    def test_from_config(self, monkeypatch):
        monkeypatch.setenv("NATIVE_CURRENCIES", "1:ETH:18, 56:BNB:18")
        registry = NativeCurrencies.from_config()
        assert registry.get(1).symbol == "ETH"
        assert registry.get(56).symbol == "BNB"
        assert registry.get(56).chain_id == 56
