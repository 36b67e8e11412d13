import pytest

from core.base_types import Currency
from core.fractions import CurrencyAmount, Percent, Ratio
from core.serializer import CanonicalSerializer, to_canonical

USDC = Currency(1, "0x0000000000000000000000000000000000000002", 6, "USDC")


def test_nested_objects_sorted_keys():
    obj = {"b": 1, "a": {"d": 4, "c": 3}}
    serialized = CanonicalSerializer.serialize(obj)
    assert serialized == b'{"a":{"c":3,"d":4},"b":1}'


def test_ratio_integers_become_strings():
    assert to_canonical(Ratio(2**80, 3)) == {
        "numerator": str(2**80),
        "denominator": "3",
    }


def test_percent_serializes_as_ratio():
    assert to_canonical(Percent(5)) == {"numerator": "5", "denominator": "100"}


def test_currency_amount():
    serialized = CanonicalSerializer.serialize(CurrencyAmount(USDC, 1_500_000))
    assert serialized == (
        b'{"currency":{"address":"0x0000000000000000000000000000000000000002",'
        b'"chain_id":1},"raw":"1500000"}'
    )


def test_tuples_become_lists():
    assert CanonicalSerializer.serialize((1, 2)) == b"[1,2]"


def test_floats_are_rejected():
    with pytest.raises(ValueError, match="Floating point"):
        CanonicalSerializer.serialize({"value": 1.23})


def test_unsupported_type_rejected():
    with pytest.raises(TypeError, match="Unsupported type"):
        CanonicalSerializer.serialize({"value": object()})


def test_fingerprint_is_keccak_hex():
    fingerprint = CanonicalSerializer.fingerprint({"a": Ratio(1, 2)})
    assert fingerprint.startswith("0x")
    assert len(fingerprint) == 66
    assert fingerprint == CanonicalSerializer.fingerprint({"a": Ratio(1, 2)})
    assert fingerprint != CanonicalSerializer.fingerprint({"a": Ratio(2, 4)})
