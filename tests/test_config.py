import pytest

from config import default_fee_bps, get_env, get_int_env, native_currency_specs


def test_get_env_default(monkeypatch):
    monkeypatch.delenv("PRICING_TEST_UNSET", raising=False)
    assert get_env("PRICING_TEST_UNSET", "fallback") == "fallback"


def test_get_env_required_missing(monkeypatch):
    monkeypatch.delenv("PRICING_TEST_UNSET", raising=False)
    with pytest.raises(SystemExit, match="PRICING_TEST_UNSET"):
        get_env("PRICING_TEST_UNSET", required=True)


def test_get_int_env_parses_underscores(monkeypatch):
    monkeypatch.setenv("PRICING_TEST_INT", "1_000")
    assert get_int_env("PRICING_TEST_INT", 5) == 1000


def test_get_int_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("PRICING_TEST_INT", "ten")
    with pytest.raises(ValueError, match="PRICING_TEST_INT"):
        get_int_env("PRICING_TEST_INT", 5)


def test_default_fee_bps(monkeypatch):
    monkeypatch.delenv("UNISWAP_V2_FEE_BPS", raising=False)
    assert default_fee_bps() == 30
    monkeypatch.setenv("UNISWAP_V2_FEE_BPS", "25")
    assert default_fee_bps() == 25


def test_native_currency_specs_default(monkeypatch):
    monkeypatch.delenv("NATIVE_CURRENCIES", raising=False)
    assert native_currency_specs() == [(1, "ETH", 18)]


def test_native_currency_specs_invalid_entry(monkeypatch):
    monkeypatch.setenv("NATIVE_CURRENCIES", "1:ETH")
    with pytest.raises(ValueError, match="Invalid NATIVE_CURRENCIES"):
        native_currency_specs()
