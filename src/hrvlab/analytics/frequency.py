"""Illustrative frequency-domain block.

NOT a spectral estimate.  No Fourier transform or periodogram is computed:
VLF/LF/HF "powers" are fixed multiples of SDNN^2 and RMSSD^2, the peak
frequencies are constants, and the PSD curve is a coarse step shape for
plotting.  Treat every value here as a presentation aid.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Heuristic coefficients
HF_RMSSD_COEF = 0.8
LF_SDNN_COEF = 0.1
LF_HF_PENALTY = 0.1
VLF_SDNN_COEF = 0.05

# Fixed illustrative peaks (Hz)
PEAK_VLF = 0.02
PEAK_LF = 0.1
PEAK_HF = 0.25

# Band edges (Hz)
VLF_UPPER = 0.04
LF_UPPER = 0.15
HF_UPPER = 0.4

PLOT_FREQS = (
    0.01, 0.02, 0.03, 0.04, 0.05, 0.08, 0.1, 0.12, 0.15, 0.2, 0.25, 0.3, 0.35, 0.4,
)


@dataclass(frozen=True)
class IllustrativeFrequency:
    """Heuristic band powers (ms^2) and derived ratios."""

    vlf_power: float
    lf_power: float
    hf_power: float
    lf_hf_ratio: float
    peak_vlf: float
    peak_lf: float
    peak_hf: float
    relative_vlf: float  # % of total
    relative_lf: float
    relative_hf: float
    normalized_lf: float  # % of LF + HF
    normalized_hf: float
    freqs: tuple[float, ...]
    psd: tuple[float, ...]
    spectral: bool = False  # always False: values are not from a transform

    def to_dict(self) -> dict:
        return {
            "vlf_power": self.vlf_power,
            "lf_power": self.lf_power,
            "hf_power": self.hf_power,
            "lf_hf_ratio": self.lf_hf_ratio,
            "peak_vlf": self.peak_vlf,
            "peak_lf": self.peak_lf,
            "peak_hf": self.peak_hf,
            "relative_vlf": self.relative_vlf,
            "relative_lf": self.relative_lf,
            "relative_hf": self.relative_hf,
            "normalized_lf": self.normalized_lf,
            "normalized_hf": self.normalized_hf,
            "freqs": list(self.freqs),
            "psd": list(self.psd),
            "spectral": self.spectral,
        }


def _pct(part: float, whole: float) -> float:
    return round(part / whole * 100.0, 1) if whole > 0 else 0.0


def _empty() -> IllustrativeFrequency:
    return IllustrativeFrequency(
        vlf_power=0.0,
        lf_power=0.0,
        hf_power=0.0,
        lf_hf_ratio=0.0,
        peak_vlf=0.0,
        peak_lf=0.0,
        peak_hf=0.0,
        relative_vlf=0.0,
        relative_lf=0.0,
        relative_hf=0.0,
        normalized_lf=0.0,
        normalized_hf=0.0,
        freqs=PLOT_FREQS,
        psd=tuple(0.0 for _ in PLOT_FREQS),
    )


def _psd_curve(vlf: float, lf: float, hf: float) -> tuple[float, ...]:
    psd = []
    for f in PLOT_FREQS:
        if f <= VLF_UPPER:
            p = vlf / 4.0
        elif f <= LF_UPPER:
            p = lf / 8.0
        elif f <= HF_UPPER:
            p = hf / 8.0
        else:
            p = 0.0
        if f in (PEAK_VLF, PEAK_LF, PEAK_HF):
            p *= 2.0
        psd.append(p)
    return tuple(psd)


def illustrative_frequency(sdnn_ms: float, rmssd_ms: float) -> IllustrativeFrequency:
    """Derive the illustrative band powers from SDNN and RMSSD.

    Returns an all-zero block when either input is NaN or SDNN is 0.
    """
    if math.isnan(sdnn_ms) or math.isnan(rmssd_ms) or sdnn_ms == 0:
        return _empty()

    hf = max(0.0, round(rmssd_ms ** 2 * HF_RMSSD_COEF, 2))
    lf = max(0.0, round(sdnn_ms ** 2 * LF_SDNN_COEF - hf * LF_HF_PENALTY, 2))
    vlf = max(0.0, round(sdnn_ms ** 2 * VLF_SDNN_COEF, 2))

    total = vlf + lf + hf
    non_vlf = lf + hf

    return IllustrativeFrequency(
        vlf_power=vlf,
        lf_power=lf,
        hf_power=hf,
        lf_hf_ratio=round(lf / hf, 2) if hf > 0 else 0.0,
        peak_vlf=PEAK_VLF,
        peak_lf=PEAK_LF,
        peak_hf=PEAK_HF,
        relative_vlf=_pct(vlf, total),
        relative_lf=_pct(lf, total),
        relative_hf=_pct(hf, total),
        normalized_lf=_pct(lf, non_vlf),
        normalized_hf=_pct(hf, non_vlf),
        freqs=PLOT_FREQS,
        psd=_psd_curve(vlf, lf, hf),
    )
