"""Poincare plot descriptors derived from SDNN and RMSSD."""

from __future__ import annotations

import math


def sd1(rmssd_ms: float) -> float:
    """Short-term spread: RMSSD / sqrt(2)."""
    if math.isnan(rmssd_ms):
        return math.nan
    return round(rmssd_ms / math.sqrt(2.0), 2)


def sd2(sdnn_ms: float, rmssd_ms: float) -> float:
    """Long-term spread: sqrt(2 * SDNN^2 - RMSSD^2), floored at 0 under the root."""
    if math.isnan(sdnn_ms) or math.isnan(rmssd_ms):
        return math.nan
    val = 2.0 * sdnn_ms ** 2 - rmssd_ms ** 2
    return round(math.sqrt(max(0.0, val)), 2)


def sd_ratio(sd1_val: float, sd2_val: float) -> float:
    """SD2/SD1; NaN when SD1 is 0 or undefined."""
    if math.isnan(sd1_val) or sd1_val == 0:
        return math.nan
    return round(sd2_val / sd1_val, 2)
