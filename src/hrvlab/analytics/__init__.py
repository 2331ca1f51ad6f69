"""HRV analysis engine.

Modules:
    stats      -- mean, SDNN, RMSSD, NN50/pNN50 primitives
    histogram  -- equal-width RR histograms
    geometric  -- triangular index, TINN estimate, Baevsky stress index
    poincare   -- SD1, SD2, SD2/SD1
    frequency  -- illustrative (non-spectral) band powers
    scores     -- recovery / conditioning / strain / energy / state
    batch      -- full batch analysis -> HRVSnapshot
    tracker    -- live metrics over a trailing RR window
    breath     -- breath-phase state machine and breath report
    zones      -- HR training-zone classifier
    report     -- plain-text report assembly
"""

from hrvlab.analytics.stats import (
    clean_rr,
    mean_rr,
    sdnn,
    rmssd,
    nn50,
    pnn50,
)
from hrvlab.analytics.histogram import Histogram, build_histogram, modal_bin_count
from hrvlab.analytics.scores import (
    scale,
    recovery_score,
    conditioning_score,
    strain_score,
    hrv_state,
)
from hrvlab.analytics.batch import (
    analyze,
    HRVSnapshot,
    AdvancedMetrics,
    Unsupported,
    UNSUPPORTED,
)
from hrvlab.analytics.tracker import HRVTracker, LiveMetrics, compute_live_metrics
from hrvlab.analytics.breath import (
    BreathPhaseDetector,
    BreathCycle,
    BreathUpdate,
    BreathReport,
    Phase,
    build_breath_report,
)
from hrvlab.analytics.zones import classify_zone, build_zone_report, ZoneReport

__all__ = [
    # stats
    "clean_rr",
    "mean_rr",
    "sdnn",
    "rmssd",
    "nn50",
    "pnn50",
    # histogram
    "Histogram",
    "build_histogram",
    "modal_bin_count",
    # scores
    "scale",
    "recovery_score",
    "conditioning_score",
    "strain_score",
    "hrv_state",
    # batch
    "analyze",
    "HRVSnapshot",
    "AdvancedMetrics",
    "Unsupported",
    "UNSUPPORTED",
    # tracker
    "HRVTracker",
    "LiveMetrics",
    "compute_live_metrics",
    # breath
    "BreathPhaseDetector",
    "BreathCycle",
    "BreathUpdate",
    "BreathReport",
    "Phase",
    "build_breath_report",
    # zones
    "classify_zone",
    "build_zone_report",
    "ZoneReport",
]
