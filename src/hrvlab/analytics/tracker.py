"""Incremental HRV tracking over a bounded window of recent RR intervals.

Live metrics describe the *current* state: SDNN and RMSSD are recomputed
from the trailing window (300 intervals by default) on every sample, and
the recovery / conditioning / strain scores follow from them and the
user's calibration.

SDNN uses the same sample (n-1) standard deviation as the batch analyzer
so live and offline numbers agree for the same intervals.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import asdict, dataclass
from typing import Iterable, Sequence

from hrvlab.analytics.scores import conditioning_score, recovery_score, strain_score
from hrvlab.analytics.stats import clean_rr, rmssd, sdnn
from hrvlab.config import LIVE_RR_WINDOW, Calibration


@dataclass(frozen=True)
class LiveMetrics:
    """One live recomputation.  SDNN/RMSSD are NaN below 2 intervals."""

    sdnn: float
    rmssd: float
    recovery_score: int
    conditioning_score: float
    strain_score: int

    def to_dict(self) -> dict:
        return {
            k: (None if isinstance(v, float) and math.isnan(v) else v)
            for k, v in asdict(self).items()
        }


def compute_live_metrics(
    rr_window: Sequence[float],
    calibration: Calibration | None = None,
    hr_samples: Sequence[float] = (),
    duration_min: float = 0.0,
    ddof: int = 1,
) -> LiveMetrics:
    """Compute live metrics for one window of recent RR intervals.

    Args:
        rr_window: The trailing RR intervals (ms).
        calibration: User calibration; defaults when omitted.
        hr_samples: Heart-rate samples (bpm) of the session so far, for strain.
        duration_min: Session duration in minutes, for strain.
        ddof: Delta degrees of freedom for SDNN.
    """
    cal = calibration or Calibration()
    sdnn_val = sdnn(rr_window, ddof=ddof)
    rmssd_val = rmssd(rr_window)
    return LiveMetrics(
        sdnn=sdnn_val,
        rmssd=rmssd_val,
        recovery_score=recovery_score(rmssd_val, cal.baseline_rmssd),
        conditioning_score=conditioning_score(sdnn_val),
        strain_score=strain_score(hr_samples, duration_min, cal.hr_rest, cal.hr_max),
    )


class HRVTracker:
    """Holds the trailing RR window and recomputes metrics on each update."""

    def __init__(
        self,
        calibration: Calibration | None = None,
        window_size: int = LIVE_RR_WINDOW,
    ) -> None:
        if window_size < 2:
            raise ValueError("window_size must be at least 2")
        self.calibration = calibration or Calibration()
        self.window_size = window_size
        self._window: deque[float] = deque(maxlen=window_size)
        self.latest: LiveMetrics | None = None

    @property
    def window(self) -> list[float]:
        """Copy of the current RR window."""
        return list(self._window)

    def push(self, rr_intervals: Iterable) -> int:
        """Append valid RR intervals to the window; returns how many were kept."""
        valid = clean_rr(rr_intervals)
        self._window.extend(valid)
        return len(valid)

    def update(
        self,
        rr_intervals: Iterable = (),
        hr_samples: Sequence[float] = (),
        duration_min: float = 0.0,
    ) -> LiveMetrics:
        """Push new intervals and recompute over the trailing window."""
        self.push(rr_intervals)
        self.latest = compute_live_metrics(
            list(self._window),
            self.calibration,
            hr_samples=hr_samples,
            duration_min=duration_min,
        )
        return self.latest

    def reset(self) -> None:
        self._window.clear()
        self.latest = None
