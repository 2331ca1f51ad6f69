"""Statistics primitives shared by the batch and live analysis paths.

All functions take a sequence of RR intervals in milliseconds and return
plain floats.  Fewer than two values yields NaN (or 0 for counts) rather
than raising; callers decide whether that is an error.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

NN50_THRESHOLD_MS = 50.0


def clean_rr(values: Iterable) -> list[float]:
    """Keep only finite, positive numeric RR values."""
    cleaned: list[float] = []
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (int, float, np.integer, np.floating)):
            continue
        f = float(v)
        if math.isfinite(f) and f > 0:
            cleaned.append(f)
    return cleaned


def mean_rr(rr_intervals: Sequence[float]) -> float:
    """Arithmetic mean of the RR intervals (ms)."""
    if len(rr_intervals) == 0:
        return math.nan
    return float(np.mean(np.asarray(rr_intervals, dtype=np.float64)))


def heart_rate_from_rr(rr_ms: float) -> float:
    """Convert an RR interval (ms) to beats per minute."""
    if math.isnan(rr_ms) or rr_ms == 0:
        return math.nan
    return 60000.0 / rr_ms


def sdnn(rr_intervals: Sequence[float], ddof: int = 1) -> float:
    """Standard deviation of NN intervals (ms).

    *ddof* = 1 gives the sample standard deviation used throughout the
    package.  Pass 0 for the population form.
    """
    if len(rr_intervals) < 2:
        return math.nan
    arr = np.asarray(rr_intervals, dtype=np.float64)
    return float(np.std(arr, ddof=ddof))


def successive_differences(rr_intervals: Sequence[float]) -> np.ndarray:
    """RR[i+1] - RR[i] for every adjacent pair."""
    return np.diff(np.asarray(rr_intervals, dtype=np.float64))


def rmssd(rr_intervals: Sequence[float]) -> float:
    """Root mean square of successive differences (ms), denominator n-1."""
    if len(rr_intervals) < 2:
        return math.nan
    diffs = successive_differences(rr_intervals)
    return float(np.sqrt(np.mean(diffs ** 2)))


def nn50(rr_intervals: Sequence[float], threshold: float = NN50_THRESHOLD_MS) -> int:
    """Number of successive differences whose magnitude exceeds *threshold*."""
    if len(rr_intervals) < 2:
        return 0
    diffs = np.abs(successive_differences(rr_intervals))
    return int(np.sum(diffs > threshold))


def pnn50(rr_intervals: Sequence[float], threshold: float = NN50_THRESHOLD_MS) -> float:
    """Percentage of successive differences exceeding *threshold*."""
    if len(rr_intervals) < 2:
        return math.nan
    return nn50(rr_intervals, threshold) / (len(rr_intervals) - 1) * 100.0


def median(values: Sequence[float]) -> float:
    """Median, averaging the two middle elements for even lengths."""
    if len(values) == 0:
        return math.nan
    return float(np.median(np.asarray(values, dtype=np.float64)))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
