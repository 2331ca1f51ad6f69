"""Wellness scores derived from SDNN / RMSSD and heart-rate samples.

Two families live here:

  - live scores (recovery vs. a personal baseline, conditioning from SDNN,
    strain from heart-rate reserve and session length), all integers 0-100;
  - batch report scores (conditioning, recovery, strain, energy, state),
    fixed heuristics over the whole recording, one decimal.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from hrvlab.analytics.stats import clamp

# Conditioning: SDNN range mapped onto 0-100
CONDITIONING_SDNN_MIN = 20.0
CONDITIONING_SDNN_MAX = 150.0

# Strain saturates after two hours
STRAIN_FULL_DURATION_MIN = 120.0

# Recovery window around the baseline (fraction of baseline)
RECOVERY_LOWER_FRAC = 0.5
RECOVERY_UPPER_FRAC = 1.5

STATE_OPTIMAL = "Optimal"
STATE_GOOD = "Good"
STATE_MODERATE = "Moderate"
STATE_SUBOPTIMAL = "Suboptimal"
STATE_NO_DATA = "No Data"

# (min RMSSD, min SDNN, label), checked in order, strict inequalities
STATE_THRESHOLDS = [
    (50.0, 100.0, STATE_OPTIMAL),
    (30.0, 50.0, STATE_GOOD),
    (15.0, 25.0, STATE_MODERATE),
]


def _isnan(value: float) -> bool:
    return value is None or math.isnan(value)


# ---------------------------------------------------------------------------
# Live scores
# ---------------------------------------------------------------------------


def scale(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
) -> float:
    """Linearly map *value* from [in_min, in_max] to [out_min, out_max].

    The result is clamped to the output range and rounded to an integer.
    A degenerate input range returns the middle of the output range; a
    NaN value stays NaN.
    """
    if in_min == in_max:
        return round((out_min + out_max) / 2)
    if _isnan(value):
        return math.nan
    scaled = out_min + (value - in_min) * (out_max - out_min) / (in_max - in_min)
    lo, hi = min(out_min, out_max), max(out_min, out_max)
    return round(clamp(scaled, lo, hi))


def recovery_score(rmssd_ms: float, baseline_rmssd: float) -> int:
    """Recovery 0-100 relative to the user's baseline RMSSD.

    A reading equal to the baseline scores 50; 50% of baseline scores 0
    and 150% scores 100.
    """
    if _isnan(rmssd_ms) or rmssd_ms <= 0:
        return 0
    if _isnan(baseline_rmssd) or baseline_rmssd <= 0:
        return 0
    lower = baseline_rmssd * RECOVERY_LOWER_FRAC
    upper = baseline_rmssd * RECOVERY_UPPER_FRAC
    score = (rmssd_ms - lower) / (upper - lower) * 100.0
    return round(clamp(score, 0.0, 100.0))


def conditioning_score(sdnn_ms: float) -> float:
    """SDNN 20-150 ms mapped onto 0-100 (NaN in, NaN out)."""
    return scale(sdnn_ms, CONDITIONING_SDNN_MIN, CONDITIONING_SDNN_MAX, 0, 100)


def strain_score(
    hr_samples: Sequence[float],
    duration_min: float,
    hr_rest: float,
    hr_max: float,
) -> int:
    """Strain 0-100 from mean HR as a fraction of heart-rate reserve.

    ``intensity * min(1, duration / 120 min) * 100``.  Returns 0 for empty
    samples, non-positive duration or ``hr_max <= hr_rest``.
    """
    if len(hr_samples) == 0 or duration_min <= 0:
        return 0
    if not hr_rest or not hr_max or hr_max <= hr_rest:
        return 0

    mean_hr = float(np.mean(np.asarray(hr_samples, dtype=np.float64)))
    intensity = max(0.0, (mean_hr - hr_rest) / (hr_max - hr_rest))
    duration_factor = min(1.0, duration_min / STRAIN_FULL_DURATION_MIN)
    return round(clamp(intensity * duration_factor * 100.0, 0.0, 100.0))


# ---------------------------------------------------------------------------
# Batch report scores
# ---------------------------------------------------------------------------


def report_conditioning(sdnn_ms: float, rmssd_ms: float) -> float:
    if _isnan(sdnn_ms) or _isnan(rmssd_ms):
        return math.nan
    return round(clamp((rmssd_ms + sdnn_ms) / 2.0 / 2.5, 0.0, 100.0), 1)


def report_recovery(rmssd_ms: float) -> float:
    if _isnan(rmssd_ms):
        return math.nan
    return round(clamp(rmssd_ms / 1.5, 0.0, 100.0), 1)


def report_strain(rmssd_ms: float) -> float:
    """Inverse of :func:`report_recovery`."""
    if _isnan(rmssd_ms):
        return math.nan
    return round(clamp(100.0 - rmssd_ms / 1.5, 0.0, 100.0), 1)


def report_energy(sdnn_ms: float, rmssd_ms: float) -> float:
    if _isnan(sdnn_ms) or _isnan(rmssd_ms):
        return math.nan
    return round(clamp(sdnn_ms / 3.0 + rmssd_ms / 2.0, 0.0, 100.0), 1)


def hrv_state(sdnn_ms: float, rmssd_ms: float) -> str:
    """Categorical HRV state from fixed RMSSD/SDNN thresholds."""
    if _isnan(sdnn_ms) or _isnan(rmssd_ms):
        return STATE_NO_DATA
    for min_rmssd, min_sdnn, label in STATE_THRESHOLDS:
        if rmssd_ms > min_rmssd and sdnn_ms > min_sdnn:
            return label
    return STATE_SUBOPTIMAL
