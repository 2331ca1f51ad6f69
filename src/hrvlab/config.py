"""User calibration inputs and analysis defaults.

Calibration values (baseline RMSSD, resting HR, max HR, anaerobic
threshold) come from the user profile or the command line.  They are
read-only to the analysis engine; anything missing or unusable is
replaced by a default rather than propagated.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_BASELINE_RMSSD = 35.0  # ms
DEFAULT_HR_REST = 55.0  # bpm
DEFAULT_HR_MAX = 195.0  # bpm, used by strain
DEFAULT_ANAEROBIC_THRESHOLD = 180.0  # bpm, used by the live zone

# Live session windows
LIVE_RR_WINDOW = 300  # most recent RR intervals used for live metrics
DISPLAY_HR_RR_COUNT = 4  # RR intervals averaged into the displayed HR

# Batch report
DISPLAY_HISTOGRAM_BINS = 30

# Accepted profile keys -> Calibration field
_KEY_ALIASES = {
    "baseline_rmssd": "baseline_rmssd",
    "baselineRmssd": "baseline_rmssd",
    "hr_rest": "hr_rest",
    "hrRest": "hr_rest",
    "hr_max": "hr_max",
    "hrMax": "hr_max",
    "anaerobic_threshold": "anaerobic_threshold",
    "anaerobicThreshold": "anaerobic_threshold",
    "at": "anaerobic_threshold",
}


def _coerce(value: Any, default: float) -> float:
    """Return *value* as a positive finite float, or *default*."""
    if isinstance(value, bool):
        return default
    try:
        num = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(num) or num <= 0:
        return default
    return num


@dataclass(frozen=True)
class Calibration:
    """Per-user reference values for recovery, strain and zone scoring."""

    baseline_rmssd: float = DEFAULT_BASELINE_RMSSD
    hr_rest: float = DEFAULT_HR_REST
    hr_max: float = DEFAULT_HR_MAX
    anaerobic_threshold: float = DEFAULT_ANAEROBIC_THRESHOLD

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Calibration:
        """Build a calibration from a user-profile mapping.

        Unknown keys are ignored.  Missing, non-numeric, non-finite or
        non-positive values fall back to the defaults.
        """
        raw: dict[str, Any] = {}
        for key, value in (data or {}).items():
            field_name = _KEY_ALIASES.get(key)
            if field_name is not None:
                raw[field_name] = value

        return cls(
            baseline_rmssd=_coerce(raw.get("baseline_rmssd"), DEFAULT_BASELINE_RMSSD),
            hr_rest=_coerce(raw.get("hr_rest"), DEFAULT_HR_REST),
            hr_max=_coerce(raw.get("hr_max"), DEFAULT_HR_MAX),
            anaerobic_threshold=_coerce(
                raw.get("anaerobic_threshold"), DEFAULT_ANAEROBIC_THRESHOLD
            ),
        )

    def override(self, **values: Any) -> Calibration:
        """Return a copy with the given fields replaced (``None`` is skipped)."""
        defaults = {
            "baseline_rmssd": DEFAULT_BASELINE_RMSSD,
            "hr_rest": DEFAULT_HR_REST,
            "hr_max": DEFAULT_HR_MAX,
            "anaerobic_threshold": DEFAULT_ANAEROBIC_THRESHOLD,
        }
        changes = {}
        for name, value in values.items():
            if name not in defaults:
                raise TypeError(f"Unknown calibration field: {name}")
            if value is not None:
                changes[name] = _coerce(value, defaults[name])
        return replace(self, **changes)

    def to_dict(self) -> dict[str, float]:
        return {
            "baseline_rmssd": self.baseline_rmssd,
            "hr_rest": self.hr_rest,
            "hr_max": self.hr_max,
            "anaerobic_threshold": self.anaerobic_threshold,
        }


def load_calibration(path: str | Path) -> Calibration:
    """Load a calibration from a JSON user-profile file.

    A file that is not a JSON object yields the default calibration.
    """
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        logger.warning("Profile %s is not a JSON object, using defaults", path)
        return Calibration()
    return Calibration.from_mapping(data)
