"""Geometric HRV measures: triangular index, TINN and Baevsky stress index."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from hrvlab.analytics.histogram import modal_bin_count
from hrvlab.analytics.stats import median

# 1/128 s expressed in ms (~7.8125 ms), the standard triangular-index bin
TRIANGULAR_BIN_WIDTH_MS = 1000.0 / 128.0

# Bin width for the mode amplitude (AMo) in the stress index
STRESS_BIN_WIDTH_MS = 50.0


def triangular_index(rr_intervals: Sequence[float]) -> float:
    """HRV triangular index: N divided by the height of the modal bin."""
    if len(rr_intervals) < 2:
        return math.nan
    max_count = modal_bin_count(rr_intervals, TRIANGULAR_BIN_WIDTH_MS)
    if max_count == 0:
        return math.nan
    return round(len(rr_intervals) / max_count, 2)


def tinn(sdnn_ms: float) -> float:
    """TINN estimate.

    Heuristic ``3 * SDNN``; no triangular interpolation is fitted.
    """
    if math.isnan(sdnn_ms):
        return math.nan
    return round(sdnn_ms * 3.0, 1)


def baevsky_stress_index(rr_intervals: Sequence[float]) -> float:
    """Baevsky stress index, ``sqrt(AMo * Mo / MxDMn)``.

    Mo is approximated by the median RR, MxDMn is the variation range and
    AMo is the modal-bin share (percent) of 50 ms bins starting at the
    shortest interval.  Returns 0 when all intervals are identical
    (MxDMn = 0).  No trend removal is applied beforehand.
    """
    n = len(rr_intervals)
    if n < 2:
        return math.nan

    arr = np.asarray(rr_intervals, dtype=np.float64)
    mo = median(arr)
    lo = float(np.min(arr))
    mx_dmn = float(np.max(arr)) - lo

    amo = modal_bin_count(arr, STRESS_BIN_WIDTH_MS, origin=lo) / n * 100.0

    si = 0.0
    if mx_dmn > 0:
        si = amo * mo / mx_dmn
    return round(math.sqrt(max(0.0, si)), 2)
