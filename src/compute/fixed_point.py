"""
fixed_point.py

8-decimal fixed-point price codec. Prices on the oracle are integers scaled
by 10^8 ("1 unit" == 100000000); all arithmetic stays in integers.
"""

from __future__ import annotations

import re

from src.hedera.config import PRICE_DECIMALS
from src.hedera.errors import InvalidPriceFormat

SCALE = 10 ** PRICE_DECIMALS
UINT256_MAX = 2 ** 256 - 1

_DECIMAL_RE = re.compile(r"^([0-9]+)(?:\.([0-9]*))?$")
_RAW_RE = re.compile(r"^[0-9]+$")


def decimal_to_scaled(value: str) -> int:
    """
    '0.06123' -> 6123000, '12' -> 1200000000

    Fraction is right-padded with zeros or truncated to 8 digits (no rounding).
    """
    m = _DECIMAL_RE.match(value.strip())
    if not m:
        raise InvalidPriceFormat(value)
    int_part, frac_raw = m.group(1), m.group(2) or ""
    frac = (frac_raw + "0" * PRICE_DECIMALS)[:PRICE_DECIMALS]
    digits = f"{int_part}{frac}".lstrip("0") or "0"
    return int(digits)


def parse_raw_price(value: str) -> int:
    """Validate an already-scaled integer price (e.g. --priceRaw 6123000)."""
    raw = value.strip()
    if not _RAW_RE.match(raw):
        raise InvalidPriceFormat(value, "raw price must be a non-negative integer")
    scaled = int(raw)
    if scaled > UINT256_MAX:
        raise InvalidPriceFormat(value, "raw price does not fit in uint256")
    return scaled


def scaled_to_decimal_string(value: int) -> str:
    """6123000 -> '0.06123000'"""
    if value < 0:
        raise ValueError(f"scaled price must be non-negative, got {value}")
    whole, frac = divmod(value, SCALE)
    return f"{whole}.{frac:0{PRICE_DECIMALS}d}"


def format_usdc(value: int) -> str:
    return f"${scaled_to_decimal_string(value)} USDC"
