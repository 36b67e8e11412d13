"""Canonical serialization for deterministic, replayable pricing results."""

from __future__ import annotations

import json
from typing import Any

from eth_utils.crypto import keccak

from .base_types import Address, Currency
from .fractions import CurrencyAmount, Percent, Ratio


def to_canonical(obj: Any) -> Any:
    """
    Lower pricing values to JSON-safe primitives.

    Integers inside rationals and amounts become decimal strings so that
    consumers without big-int support read them losslessly.
    """
    if isinstance(obj, Ratio):
        return {"numerator": str(obj.numerator), "denominator": str(obj.denominator)}
    if isinstance(obj, Percent):
        return to_canonical(obj.ratio)
    if isinstance(obj, Currency):
        return {"chain_id": obj.chain_id, "address": obj.address.checksum}
    if isinstance(obj, Address):
        return obj.checksum
    if isinstance(obj, CurrencyAmount):
        return {"currency": to_canonical(obj.currency), "raw": str(obj.raw)}
    if isinstance(obj, dict):
        return {key: to_canonical(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_canonical(item) for item in obj]
    return obj


def _validate_for_serialization(obj: Any) -> None:
    if isinstance(obj, float):
        raise ValueError("Floating point values are not allowed")

    if isinstance(obj, dict):
        for key, value in obj.items():
            if not isinstance(key, str):
                raise TypeError("All dictionary keys must be strings")
            _validate_for_serialization(value)
        return

    if isinstance(obj, list):
        for item in obj:
            _validate_for_serialization(item)
        return

    if obj is None or isinstance(obj, (str, int, bool)):
        return

    raise TypeError(f"Unsupported type for serialization: {type(obj).__name__}")


class CanonicalSerializer:
    """
    Produces deterministic JSON for pricing snapshots.

    Rules:
    - Pricing values lowered via ``to_canonical``
    - Keys sorted alphabetically (recursive)
    - No whitespace
    - Floats rejected
    """

    @staticmethod
    def serialize(obj: Any) -> bytes:
        """Returns canonical bytes representation."""
        canonical = to_canonical(obj)
        _validate_for_serialization(canonical)
        payload = json.dumps(
            canonical,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return payload.encode("utf-8")

    @staticmethod
    def hash(obj: Any) -> bytes:
        """Returns keccak256 of canonical serialization."""
        return keccak(CanonicalSerializer.serialize(obj))

    @staticmethod
    def fingerprint(obj: Any) -> str:
        return "0x" + CanonicalSerializer.hash(obj).hex()
