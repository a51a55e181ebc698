# src/compute/swap_math.py
"""
Price math for limit-order execution.

Cross rate:
  A/B = (A/USD) / (B/USD), kept in the 8-decimal integer domain.

Slippage band:
  one-sided; a price below the trigger but within `tolerance_percent` of it
  counts as "near trigger".
"""

from __future__ import annotations

import math

from src.compute.fixed_point import SCALE
from src.hedera.errors import ZeroDenominator

BPS_SCALE = 10_000  # basis points * 100 for two-decimal percent precision


def cross_rate(price_a_usd: int, price_b_usd: int) -> int:
    """Price of A in units of B, scaled by 10^8 (floor division)."""
    if price_b_usd == 0:
        raise ZeroDenominator("Quote token price from oracle is zero")
    return (price_a_usd * SCALE) // price_b_usd


def tolerance_bps(tolerance_percent: float) -> int:
    """1 -> 100, 0.125 -> 13, 1.005 -> 100 (half-up on the float product)."""
    return math.floor(tolerance_percent * 100 + 0.5)


def is_within_tolerance(current_price: int, trigger_price: int, tolerance_percent: float) -> bool:
    if tolerance_percent <= 0:
        return current_price >= trigger_price
    bps = tolerance_bps(tolerance_percent)
    threshold = trigger_price * (BPS_SCALE - bps) // BPS_SCALE
    return current_price >= threshold
