# utils.py
# Small helpers so core classes stay readable.

from __future__ import annotations


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def approach(current: float, target: float, rate: float) -> float:
    """Move current toward target by a fraction of the remaining distance.

    rate is clamped to 0..1, so the result never overshoots the target.
    """
    return current + (target - current) * clamp(rate, 0.0, 1.0)
