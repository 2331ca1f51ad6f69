"""Equal-width histograms of RR intervals.

Two binning policies are used by the analyzers:

  - a fixed number of bins spread over ``[min, max]`` (display histogram),
  - the tallest bin of a fixed-width grid, starting at ``min`` (Baevsky
    AMo) or anchored at zero (HRV triangular index).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

# Bin width used when every value is identical
FALLBACK_BIN_WIDTH_MS = 1.0


@dataclass(frozen=True)
class Histogram:
    """Bin labels, per-bin counts and the tallest bin."""

    labels: tuple[str, ...]
    counts: tuple[int, ...]
    max_count: int
    bin_start: float = 0.0
    bin_width: float = 0.0

    @property
    def num_bins(self) -> int:
        return len(self.counts)

    def to_dict(self) -> dict:
        return {
            "labels": list(self.labels),
            "counts": list(self.counts),
            "max_count": self.max_count,
            "bin_start": self.bin_start,
            "bin_width": self.bin_width,
        }


def _labels(start: float, width: float, num_bins: int) -> tuple[str, ...]:
    return tuple(
        f"{start + i * width:.0f}-{start + (i + 1) * width:.0f}ms"
        for i in range(num_bins)
    )


def _bin_counts(arr: np.ndarray, start: float, width: float, num_bins: int) -> np.ndarray:
    idx = np.floor((arr - start) / width).astype(np.int64)
    idx = np.clip(idx, 0, num_bins - 1)
    return np.bincount(idx, minlength=num_bins)


def build_histogram(values: Sequence[float], num_bins: int = 30) -> Histogram:
    """Bin *values* into *num_bins* equal-width buckets over ``[min, max]``.

    The maximum value lands in the last bin.  If all values are equal the
    bin width falls back to 1 ms so the binning is still defined.
    """
    if num_bins < 1:
        raise ValueError("num_bins must be at least 1")
    if len(values) == 0:
        return Histogram(labels=(), counts=(), max_count=0)

    arr = np.asarray(values, dtype=np.float64)
    lo = float(np.min(arr))
    hi = float(np.max(arr))
    width = (hi - lo) / num_bins
    if width <= 0:
        width = FALLBACK_BIN_WIDTH_MS

    counts = _bin_counts(arr, lo, width, num_bins)
    return Histogram(
        labels=_labels(lo, width, num_bins),
        counts=tuple(int(c) for c in counts),
        max_count=int(np.max(counts)),
        bin_start=lo,
        bin_width=width,
    )


def modal_bin_count(
    values: Sequence[float],
    bin_width: float,
    origin: float = 0.0,
) -> int:
    """Height of the tallest bin on a fixed-width grid starting at *origin*.

    Each value goes to bin ``floor((value - origin) / bin_width)``; only
    occupied bins are counted, so a far outlier costs nothing.  Returns 0
    for no values.
    """
    if bin_width <= 0:
        raise ValueError("bin_width must be positive")
    if len(values) == 0:
        return 0
    arr = np.asarray(values, dtype=np.float64)
    keys = np.floor((arr - origin) / bin_width).astype(np.int64)
    _, counts = np.unique(keys, return_counts=True)
    return int(np.max(counts))
