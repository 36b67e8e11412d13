import os
from pathlib import Path

from dotenv import load_dotenv

_ENV_LOADED = False

DEFAULT_FEE_BPS = 30
DEFAULT_NATIVE_CURRENCIES = "1:ETH:18"


def _load_env() -> None:
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    env_path = Path(__file__).resolve().parents[1] / ".env"
    load_dotenv(dotenv_path=env_path)
    _ENV_LOADED = True


def get_env(
    name: str, default: str | None = None, required: bool = False
) -> str | None:
    _load_env()
    value = os.environ.get(name, default)
    if required and (value is None or value == ""):
        raise SystemExit(f"{name} env var is required")
    return value


def get_int_env(name: str, default: int) -> int:
    value = get_env(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value.strip().replace("_", ""))
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def default_fee_bps() -> int:
    """Swap fee applied by UniswapV2Pair when none is passed explicitly."""
    return get_int_env("UNISWAP_V2_FEE_BPS", DEFAULT_FEE_BPS)


def native_currency_specs() -> list[tuple[int, str, int]]:
    """
    Parse NATIVE_CURRENCIES into (chain_id, symbol, decimals) tuples.

    Format: comma-separated ``chain_id:symbol:decimals`` entries,
    e.g. ``1:ETH:18,56:BNB:18``.
    """
    raw = get_env("NATIVE_CURRENCIES") or DEFAULT_NATIVE_CURRENCIES
    specs: list[tuple[int, str, int]] = []
    for chunk in raw.split(","):
        text = chunk.strip()
        if text == "":
            continue
        parts = text.split(":")
        if len(parts) != 3:
            raise ValueError(f"Invalid NATIVE_CURRENCIES entry: {text!r}")
        chain_id, symbol, decimals = parts
        specs.append((int(chain_id), symbol.strip(), int(decimals)))
    return specs
