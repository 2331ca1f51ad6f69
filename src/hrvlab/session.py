"""Live session: the per-connection context the sample handler owns.

Each heart-rate notification goes through :meth:`LiveSession.add_sample`,
which recomputes the live HRV metrics, the training zone and the breath
phase in one synchronous pass.  All mutable state lives on the session
object; other threads read it only through :meth:`LiveSession.snapshot`.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Sequence

import numpy as np

from hrvlab.analytics.batch import HRVSnapshot, analyze
from hrvlab.analytics.breath import (
    BreathCycle,
    BreathPhaseDetector,
    BreathReport,
    BreathUpdate,
    build_breath_report,
)
from hrvlab.analytics.stats import clean_rr
from hrvlab.analytics.tracker import HRVTracker, LiveMetrics, compute_live_metrics
from hrvlab.analytics.zones import ZoneReport, build_zone_report, classify_zone
from hrvlab.config import DISPLAY_HR_RR_COUNT, LIVE_RR_WINDOW, Calibration
from hrvlab.errors import InsufficientDataError
from hrvlab.heart_rate import HeartRateSample, make_sample

logger = logging.getLogger(__name__)

# Added to the elapsed minutes for live strain so it is not 0 at the start
LIVE_STRAIN_DURATION_OFFSET_MIN = 1.0


@dataclass(frozen=True)
class Measurement:
    """A stored sample with the displayed (RR-smoothed) heart rate."""

    timestamp: float
    hr: float
    rr_intervals_ms: tuple[float, ...]


@dataclass(frozen=True)
class LiveUpdate:
    """Everything derived from one notification."""

    timestamp: float
    hr: float
    metrics: LiveMetrics
    zone: str
    breath: BreathUpdate | None  # None until two RR intervals have arrived

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "hr": self.hr,
            **self.metrics.to_dict(),
            "zone": self.zone,
            "breath": self.breath.to_dict() if self.breath else None,
        }


@dataclass(frozen=True)
class SessionState:
    """Point-in-time copy of a live session."""

    start_time: float | None
    measurements: tuple[Measurement, ...]
    rr_intervals: tuple[float, ...]
    rr_window: tuple[float, ...]
    cycles: tuple[BreathCycle, ...]
    current_cycle: BreathCycle
    latest: LiveUpdate | None


@dataclass(frozen=True)
class SessionSummary:
    """Final metrics computed when a session stops."""

    start_time: float
    duration_min: float
    sample_count: int
    rr_intervals: tuple[float, ...]
    metrics: LiveMetrics
    breath: BreathReport
    zone: ZoneReport
    snapshot: HRVSnapshot | None = field(default=None, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_time": self.start_time,
            "duration_min": self.duration_min,
            "sample_count": self.sample_count,
            "rr_count": len(self.rr_intervals),
            "metrics": self.metrics.to_dict(),
            "breath": self.breath.to_dict(),
            "zone": self.zone.to_dict(),
            "hrv": self.snapshot.to_dict() if self.snapshot else None,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def _average_hr(rr_intervals: Sequence[float]) -> float | None:
    """Rounded HR from the mean of *rr_intervals*; None when empty."""
    if len(rr_intervals) == 0:
        return None
    avg_rr = float(np.mean(np.asarray(rr_intervals, dtype=np.float64)))
    if avg_rr <= 0:
        return None
    return float(round(60000.0 / avg_rr))


class LiveSession:
    """Accumulates samples from one sensor connection."""

    def __init__(
        self,
        calibration: Calibration | None = None,
        start_time: float | None = None,
        window_size: int = LIVE_RR_WINDOW,
    ) -> None:
        self.calibration = calibration or Calibration()
        self.start_time = start_time
        self.tracker = HRVTracker(self.calibration, window_size=window_size)
        self.breath = BreathPhaseDetector()
        self.measurements: list[Measurement] = []
        self.rr_intervals: list[float] = []
        self.latest: LiveUpdate | None = None
        self._lock = threading.Lock()

    def add(self, timestamp: float, hr_bpm: float, rr_intervals_ms=None) -> LiveUpdate:
        """Convenience wrapper building the sample from raw values."""
        return self.add_sample(make_sample(timestamp, hr_bpm, rr_intervals_ms))

    def add_sample(self, sample: HeartRateSample) -> LiveUpdate:
        """Process one notification and return the derived live outputs."""
        with self._lock:
            return self._process(sample)

    def _process(self, sample: HeartRateSample) -> LiveUpdate:
        if self.start_time is None:
            self.start_time = sample.timestamp
            logger.info("Session started at %.3f", sample.timestamp)

        rr = clean_rr(sample.rr_intervals_ms)
        self.rr_intervals.extend(rr)

        recent = self.rr_intervals[-DISPLAY_HR_RR_COUNT:]
        display_hr = _average_hr(recent)
        if display_hr is None:
            display_hr = sample.hr_bpm

        self.measurements.append(Measurement(sample.timestamp, display_hr, tuple(rr)))

        elapsed_min = max(0.0, (sample.timestamp - self.start_time) / 60.0)
        metrics = self.tracker.update(
            rr,
            hr_samples=[m.hr for m in self.measurements],
            duration_min=elapsed_min + LIVE_STRAIN_DURATION_OFFSET_MIN,
        )
        zone = classify_zone(
            display_hr, self.calibration.anaerobic_threshold, metrics.recovery_score
        )

        breath_update = None
        if len(recent) > 1:
            breath_update = self.breath.update(sample.timestamp, display_hr)

        self.latest = LiveUpdate(
            timestamp=sample.timestamp,
            hr=display_hr,
            metrics=metrics,
            zone=zone,
            breath=breath_update,
        )
        return self.latest

    def snapshot(self) -> SessionState:
        """Copy of the session state for readers outside the sample handler."""
        with self._lock:
            return SessionState(
                start_time=self.start_time,
                measurements=tuple(self.measurements),
                rr_intervals=tuple(self.rr_intervals),
                rr_window=tuple(self.tracker.window),
                cycles=tuple(self.breath.completed_cycles()),
                current_cycle=replace(self.breath.current),
                latest=self.latest,
            )

    def finish(self, end_time: float | None = None) -> SessionSummary:
        """Compute the end-of-session summary.

        Args:
            end_time: Session end in seconds; defaults to the last sample.

        Raises:
            ValueError: no samples were recorded.
        """
        with self._lock:
            if not self.measurements or self.start_time is None:
                raise ValueError("Session has no samples")

            end = end_time if end_time is not None else self.measurements[-1].timestamp
            duration_min = max(0.0, (end - self.start_time) / 60.0)
            hr_samples = [m.hr for m in self.measurements]

            metrics = compute_live_metrics(
                self.rr_intervals,
                self.calibration,
                hr_samples=hr_samples,
                duration_min=duration_min,
            )

            try:
                snapshot = analyze(self.rr_intervals)
            except InsufficientDataError as exc:
                logger.warning("Skipping HRV report: %s", exc)
                snapshot = None

            summary = SessionSummary(
                start_time=self.start_time,
                duration_min=duration_min,
                sample_count=len(self.measurements),
                rr_intervals=tuple(self.rr_intervals),
                metrics=metrics,
                breath=build_breath_report(self.breath.completed_cycles()),
                zone=build_zone_report(
                    hr_samples,
                    self.calibration.anaerobic_threshold,
                    metrics.recovery_score,
                ),
                snapshot=snapshot,
            )

        logger.info(
            "Session finished: %d samples, %.1f min, %d breath cycles",
            summary.sample_count,
            summary.duration_min,
            summary.breath.total_cycles,
        )
        return summary
