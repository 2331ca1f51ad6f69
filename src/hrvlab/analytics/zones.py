"""Training-zone classification relative to the anaerobic threshold (AT).

Bands are fractions of AT with an inclusive lower bound.  The top band
(Intensive 2) also includes its upper bound, 1.10 x AT.  Below 0.60 x AT
the heart rate alone says little, so the zone is chosen from the recovery
score instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

ZONE_INTENSIVE_2 = "Intensive 2"
ZONE_INTENSIVE_1 = "Intensive 1"
ZONE_AT = "AT"
ZONE_3 = "Zone 3"
ZONE_2 = "Zone 2"
ZONE_1 = "Zone 1"
ZONE_TRANSITION = "Transition"
ZONE_ABOVE_MAX = "Above Max HR"

# (lower fraction of AT, label), highest first; each band runs up to the
# previous band's lower bound
ZONE_BANDS = [
    (1.05, ZONE_INTENSIVE_2),
    (1.00, ZONE_INTENSIVE_1),
    (0.96, ZONE_AT),
    (0.90, ZONE_3),
    (0.80, ZONE_2),
    (0.70, ZONE_1),
    (0.60, ZONE_TRANSITION),
]
MAX_HR_FRACTION = 1.10

# (recovery score strictly above, label) for HR below the transition band
RECOVERY_ZONES = [
    (70, "Relaxed"),
    (50, "Rest"),
    (35, "Active Light"),
    (20, "Active"),
    (10, "Really Active"),
]
RECOVERY_ZONE_FLOOR = "Very Active"

NO_HR_MESSAGE = "No HR data available."


def _recovery_zone(recovery: float) -> str:
    for threshold, label in RECOVERY_ZONES:
        if recovery > threshold:
            return label
    return RECOVERY_ZONE_FLOOR


def classify_zone(hr: float, at: float, recovery: float) -> str:
    """Name the training zone of *hr* (bpm) for anaerobic threshold *at*.

    Raises:
        ValueError: *at* is not a positive number.
    """
    if not at or at <= 0 or math.isnan(at):
        raise ValueError("anaerobic threshold must be positive")
    if hr > MAX_HR_FRACTION * at:
        return ZONE_ABOVE_MAX
    for lower, label in ZONE_BANDS:
        if hr >= lower * at:
            return label
    return _recovery_zone(recovery)


@dataclass(frozen=True)
class ZoneReport:
    avg_hr: float
    anaerobic_threshold: float
    max_hr: float  # 1.10 x AT
    recovery_score: float
    zone: str | None
    message: str | None = None

    def to_dict(self) -> dict:
        return {
            "avg_hr": None if math.isnan(self.avg_hr) else self.avg_hr,
            "anaerobic_threshold": self.anaerobic_threshold,
            "max_hr": self.max_hr,
            "recovery_score": self.recovery_score,
            "zone": self.zone,
            "message": self.message,
        }


def build_zone_report(
    hr_samples: Sequence[float],
    at: float,
    recovery: float,
) -> ZoneReport:
    """Classify the session's average heart rate."""
    if len(hr_samples) == 0:
        return ZoneReport(
            avg_hr=math.nan,
            anaerobic_threshold=at,
            max_hr=MAX_HR_FRACTION * at,
            recovery_score=recovery,
            zone=None,
            message=NO_HR_MESSAGE,
        )
    avg_hr = float(np.mean(np.asarray(hr_samples, dtype=np.float64)))
    return ZoneReport(
        avg_hr=avg_hr,
        anaerobic_threshold=at,
        max_hr=MAX_HR_FRACTION * at,
        recovery_score=recovery,
        zone=classify_zone(avg_hr, at, recovery),
    )
