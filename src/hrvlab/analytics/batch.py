"""Batch HRV analysis of a complete RR-interval recording.

:func:`analyze` makes one pass over the recording and returns an immutable
:class:`HRVSnapshot` with the time-domain, geometric, Poincare and
illustrative frequency-domain measures, the derived wellness scores and a
synthesized breathing waveform.

Nonlinear measures (deceleration/acceleration capacity, entropies, DFA,
correlation dimension, recurrence quantification, multiscale entropy) are
not computed.  They are reported as :data:`UNSUPPORTED`.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, fields
from typing import Any, Iterable

from hrvlab.analytics import geometric, poincare, scores
from hrvlab.analytics.frequency import IllustrativeFrequency, illustrative_frequency
from hrvlab.analytics.histogram import Histogram, build_histogram
from hrvlab.analytics.stats import (
    clean_rr,
    heart_rate_from_rr,
    mean_rr,
    nn50,
    pnn50,
    rmssd,
    sdnn,
)
from hrvlab.config import DISPLAY_HISTOGRAM_BINS
from hrvlab.errors import InsufficientDataError

MIN_INTERVALS = 2


class Unsupported:
    """Marker for a measure this package deliberately does not compute.

    Falsy, and refuses numeric conversion so it cannot leak into arithmetic.
    """

    _instance: Unsupported | None = None

    def __new__(cls) -> Unsupported:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSUPPORTED"

    def __bool__(self) -> bool:
        return False

    def __float__(self) -> float:
        raise TypeError("measure is not supported")

    def __int__(self) -> int:
        raise TypeError("measure is not supported")


UNSUPPORTED = Unsupported()


@dataclass(frozen=True)
class AdvancedMetrics:
    """Nonlinear measures; every field is :data:`UNSUPPORTED`."""

    deceleration_capacity: Unsupported = UNSUPPORTED
    acceleration_capacity: Unsupported = UNSUPPORTED
    deceleration_capacity_modified: Unsupported = UNSUPPORTED
    acceleration_capacity_modified: Unsupported = UNSUPPORTED
    approximate_entropy: Unsupported = UNSUPPORTED
    sample_entropy: Unsupported = UNSUPPORTED
    dfa_alpha1: Unsupported = UNSUPPORTED
    dfa_alpha2: Unsupported = UNSUPPORTED
    correlation_dimension: Unsupported = UNSUPPORTED
    recurrence_rate: Unsupported = UNSUPPORTED
    mean_line_length: Unsupported = UNSUPPORTED
    max_line_length: Unsupported = UNSUPPORTED
    determinism: Unsupported = UNSUPPORTED
    shannon_entropy: Unsupported = UNSUPPORTED
    multiscale_entropy: Unsupported = UNSUPPORTED

    def unsupported(self) -> list[str]:
        """Names of all measures marked unsupported."""
        return [f.name for f in fields(self) if isinstance(getattr(self, f.name), Unsupported)]


@dataclass(frozen=True)
class HRVSnapshot:
    """Result of one batch analysis pass.  Never mutated after construction."""

    rr_intervals: tuple[float, ...]
    n: int

    # Time domain
    mean_rr: float
    avg_hr: float
    sdnn: float
    rmssd: float
    nn50: int
    pnn50: float

    # Geometric
    histogram: Histogram
    triangular_index: float
    tinn: float
    stress_index: float

    # Poincare
    sd1: float
    sd2: float
    sd2_sd1_ratio: float

    # Illustrative (non-spectral) frequency domain
    frequency: IllustrativeFrequency

    # Wellness
    conditioning: float
    recovery: float
    strain: float
    energy: float
    state: str

    breathing_wave: tuple[float | None, ...]
    advanced: AdvancedMetrics = field(default_factory=AdvancedMetrics)

    def __repr__(self) -> str:
        return (
            f"HRVSnapshot(n={self.n}, mean_rr={self.mean_rr:.1f}ms, "
            f"sdnn={self.sdnn:.1f}ms, rmssd={self.rmssd:.1f}ms, "
            f"state={self.state})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict.  NaN becomes ``None``."""
        return {
            "n": self.n,
            "rr_intervals": list(self.rr_intervals),
            "time_domain": {
                "mean_rr": _json_num(self.mean_rr),
                "avg_hr": _json_num(self.avg_hr),
                "sdnn": _json_num(self.sdnn),
                "rmssd": _json_num(self.rmssd),
                "nn50": self.nn50,
                "pnn50": _json_num(self.pnn50),
            },
            "geometric": {
                "histogram": self.histogram.to_dict(),
                "triangular_index": _json_num(self.triangular_index),
                "tinn": _json_num(self.tinn),
                "stress_index": _json_num(self.stress_index),
            },
            "poincare": {
                "sd1": _json_num(self.sd1),
                "sd2": _json_num(self.sd2),
                "sd2_sd1_ratio": _json_num(self.sd2_sd1_ratio),
            },
            "frequency": self.frequency.to_dict(),
            "wellness": {
                "conditioning": _json_num(self.conditioning),
                "recovery": _json_num(self.recovery),
                "strain": _json_num(self.strain),
                "energy": _json_num(self.energy),
                "state": self.state,
            },
            "breathing_wave": list(self.breathing_wave),
            "unsupported": self.advanced.unsupported(),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def _json_num(value: float) -> float | None:
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def breathing_wave(rr_intervals: Iterable[float]) -> tuple[float | None, ...]:
    """Inverted waveform ``-(rr / 60)`` for display; ``None`` for unusable values."""
    wave: list[float | None] = []
    for rr in rr_intervals:
        if rr is None or math.isnan(rr) or rr == 0:
            wave.append(None)
        else:
            wave.append(round(-(rr / 60.0), 2))
    return tuple(wave)


def analyze(
    rr_intervals: Iterable,
    histogram_bins: int = DISPLAY_HISTOGRAM_BINS,
) -> HRVSnapshot:
    """Run the full batch analysis over an RR-interval recording.

    Args:
        rr_intervals: RR intervals in ms.  Non-numeric, non-finite and
            non-positive entries are dropped first.
        histogram_bins: Number of bins in the display histogram.

    Returns:
        A fully populated :class:`HRVSnapshot`.

    Raises:
        InsufficientDataError: fewer than 2 valid intervals remain.
    """
    rr = clean_rr(rr_intervals)
    n = len(rr)
    if n < MIN_INTERVALS:
        raise InsufficientDataError(n, MIN_INTERVALS)

    mean = mean_rr(rr)
    sdnn_val = sdnn(rr)
    rmssd_val = rmssd(rr)
    nn50_val = nn50(rr)

    sd1_val = poincare.sd1(rmssd_val)
    sd2_val = poincare.sd2(sdnn_val, rmssd_val)

    return HRVSnapshot(
        rr_intervals=tuple(rr),
        n=n,
        mean_rr=mean,
        avg_hr=heart_rate_from_rr(mean),
        sdnn=sdnn_val,
        rmssd=rmssd_val,
        nn50=nn50_val,
        pnn50=pnn50(rr),
        histogram=build_histogram(rr, histogram_bins),
        triangular_index=geometric.triangular_index(rr),
        tinn=geometric.tinn(sdnn_val),
        stress_index=geometric.baevsky_stress_index(rr),
        sd1=sd1_val,
        sd2=sd2_val,
        sd2_sd1_ratio=poincare.sd_ratio(sd1_val, sd2_val),
        frequency=illustrative_frequency(sdnn_val, rmssd_val),
        conditioning=scores.report_conditioning(sdnn_val, rmssd_val),
        recovery=scores.report_recovery(rmssd_val),
        strain=scores.report_strain(rmssd_val),
        energy=scores.report_energy(sdnn_val, rmssd_val),
        state=scores.hrv_state(sdnn_val, rmssd_val),
        breathing_wave=breathing_wave(rr),
    )
