"""Breath-phase detection from the heart-rate trend.

Respiratory sinus arrhythmia makes heart rate rise during inspiration and
fall during expiration.  :class:`BreathPhaseDetector` follows the averaged
HR sample by sample:

  - HR rising  -> inspiration
  - HR falling -> expiration
  - HR flat    -> keep the current phase

Elapsed time since the previous sample is credited to the active phase of
the open cycle.  A cycle is closed only on the expiration -> inspiration
edge.  This is an approximation from HR alone, not a respiratory
measurement; use it for biofeedback display, not diagnosis.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Sequence

# I/E ratio is clamped to this range
IE_RATIO_MIN = 0.4
IE_RATIO_MAX = 2.2

FREQUENCY_WINDOW_SEC = 120.0  # live breathing-frequency window
AVERAGE_WINDOW_SEC = 60.0  # live Ti/Te averaging window
REPORT_BUCKET_SEC = 60.0

NO_CYCLES_MESSAGE = "No breath cycles detected."


class Phase(Enum):
    UNINITIALIZED = "uninitialized"
    INSPIRATION = "inspiration"
    EXPIRATION = "expiration"


@dataclass
class BreathCycle:
    """Seconds spent breathing in and out, and when the cycle started."""

    time_in: float = 0.0
    time_out: float = 0.0
    start: float = 0.0

    @property
    def duration(self) -> float:
        return self.time_in + self.time_out


def clamp_ie_ratio(time_in: float, time_out: float) -> float | None:
    """Ti/Te clamped to [0.4, 2.2].

    A zero expiration time with some inspiration clamps to the upper bound;
    no time at all gives ``None``.
    """
    if time_out > 0:
        ratio = time_in / time_out
    elif time_in > 0:
        ratio = IE_RATIO_MAX
    else:
        return None
    return max(IE_RATIO_MIN, min(IE_RATIO_MAX, ratio))


@dataclass(frozen=True)
class BreathUpdate:
    """Derived breathing outputs after one sample."""

    phase: Phase
    frequency: float  # cycles started within the frequency window
    ie_ratio: float | None  # last completed cycle, clamped
    cycle_count: int
    current_time_in: float
    current_time_out: float
    avg_time_in: float  # over cycles in the last minute (or the open cycle)
    avg_time_out: float
    avg_ie_ratio: float | None

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "frequency": self.frequency,
            "ie_ratio": self.ie_ratio,
            "cycle_count": self.cycle_count,
            "current_time_in": self.current_time_in,
            "current_time_out": self.current_time_out,
            "avg_time_in": self.avg_time_in,
            "avg_time_out": self.avg_time_out,
            "avg_ie_ratio": self.avg_ie_ratio,
        }


class BreathPhaseDetector:
    """State machine over successive (timestamp, averaged HR) samples.

    Timestamps are in seconds and must be non-decreasing.
    """

    def __init__(
        self,
        frequency_window_sec: float = FREQUENCY_WINDOW_SEC,
        average_window_sec: float = AVERAGE_WINDOW_SEC,
    ) -> None:
        self.frequency_window_sec = frequency_window_sec
        self.average_window_sec = average_window_sec
        self.phase = Phase.UNINITIALIZED
        self.cycles: list[BreathCycle] = []
        self.current = BreathCycle()
        self.cycle_count = 0
        self._last_hr: float | None = None
        self._last_ts: float | None = None

    def update(self, timestamp: float, avg_hr: float) -> BreathUpdate:
        """Feed one averaged-HR sample and return the derived outputs."""
        if self._last_hr is None or self._last_ts is None:
            # First sample: open the first cycle, nothing to accumulate yet
            self.phase = Phase.INSPIRATION
            self.current = BreathCycle(start=timestamp)
        else:
            dt = max(0.0, timestamp - self._last_ts)
            if avg_hr > self._last_hr:
                if self.phase is Phase.EXPIRATION and self.current.time_out > 0:
                    self._close_cycle(timestamp)
                self.phase = Phase.INSPIRATION
                self.current.time_in += dt
            elif avg_hr < self._last_hr:
                self.phase = Phase.EXPIRATION
                self.current.time_out += dt
            elif self.phase is Phase.INSPIRATION:
                self.current.time_in += dt
            elif self.phase is Phase.EXPIRATION:
                self.current.time_out += dt

        self._last_hr = avg_hr
        self._last_ts = timestamp
        return self._derive(timestamp)

    def _close_cycle(self, timestamp: float) -> None:
        self.cycles.append(replace(self.current))
        self.cycle_count += 1
        self.current = BreathCycle(start=timestamp)

    def _derive(self, now: float) -> BreathUpdate:
        frequency = 0.0
        ie_ratio = None
        if self.cycles:
            cutoff = now - self.frequency_window_sec
            frequency = float(sum(1 for c in self.cycles if c.start > cutoff))
            last = self.cycles[-1]
            ie_ratio = clamp_ie_ratio(last.time_in, last.time_out)

        cutoff = now - self.average_window_sec
        recent = [c for c in self.cycles if c.start > cutoff]
        if recent:
            avg_ti = sum(c.time_in for c in recent) / len(recent)
            avg_te = sum(c.time_out for c in recent) / len(recent)
        else:
            avg_ti = self.current.time_in
            avg_te = self.current.time_out
        avg_ie = clamp_ie_ratio(avg_ti, avg_te)

        return BreathUpdate(
            phase=self.phase,
            frequency=frequency,
            ie_ratio=ie_ratio,
            cycle_count=self.cycle_count,
            current_time_in=self.current.time_in,
            current_time_out=self.current.time_out,
            avg_time_in=avg_ti,
            avg_time_out=avg_te,
            avg_ie_ratio=avg_ie,
        )

    def completed_cycles(self) -> list[BreathCycle]:
        """Copies of the completed cycles, safe to hand to another reader."""
        return [replace(c) for c in self.cycles]


# ---------------------------------------------------------------------------
# End-of-session report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MinuteBreath:
    minute: int  # 1-based
    frequency: int  # cycles started in this minute
    avg_time_in: float
    avg_time_out: float
    ie_ratio: float | None


@dataclass(frozen=True)
class BreathReport:
    total_cycles: int
    avg_frequency: float  # breaths/min from the mean cycle length
    avg_time_in: float
    avg_time_out: float
    avg_ie_ratio: float | None
    per_minute: tuple[MinuteBreath, ...] = field(default_factory=tuple)
    message: str | None = None

    @property
    def detected(self) -> bool:
        return self.total_cycles > 0

    def to_dict(self) -> dict:
        return {
            "total_cycles": self.total_cycles,
            "avg_frequency": None if math.isnan(self.avg_frequency) else self.avg_frequency,
            "avg_time_in": None if math.isnan(self.avg_time_in) else self.avg_time_in,
            "avg_time_out": None if math.isnan(self.avg_time_out) else self.avg_time_out,
            "avg_ie_ratio": self.avg_ie_ratio,
            "per_minute": [
                {
                    "minute": m.minute,
                    "frequency": m.frequency,
                    "avg_time_in": m.avg_time_in,
                    "avg_time_out": m.avg_time_out,
                    "ie_ratio": m.ie_ratio,
                }
                for m in self.per_minute
            ],
            "message": self.message,
        }


def build_breath_report(cycles: Sequence[BreathCycle]) -> BreathReport:
    """Aggregate completed cycles into overall and per-minute averages."""
    if len(cycles) == 0:
        return BreathReport(
            total_cycles=0,
            avg_frequency=math.nan,
            avg_time_in=math.nan,
            avg_time_out=math.nan,
            avg_ie_ratio=None,
            message=NO_CYCLES_MESSAGE,
        )

    total = len(cycles)
    avg_ti = sum(c.time_in for c in cycles) / total
    avg_te = sum(c.time_out for c in cycles) / total
    cycle_len = avg_ti + avg_te
    avg_freq = 60.0 / cycle_len if cycle_len > 0 else math.nan

    session_start = cycles[0].start
    buckets: dict[int, list[BreathCycle]] = {}
    for c in cycles:
        idx = int(math.floor((c.start - session_start) / REPORT_BUCKET_SEC))
        buckets.setdefault(idx, []).append(c)

    per_minute = []
    for idx in sorted(buckets):
        group = buckets[idx]
        ti = sum(c.time_in for c in group) / len(group)
        te = sum(c.time_out for c in group) / len(group)
        per_minute.append(
            MinuteBreath(
                minute=idx + 1,
                frequency=len(group),
                avg_time_in=ti,
                avg_time_out=te,
                ie_ratio=clamp_ie_ratio(ti, te),
            )
        )

    return BreathReport(
        total_cycles=total,
        avg_frequency=avg_freq,
        avg_time_in=avg_ti,
        avg_time_out=avg_te,
        avg_ie_ratio=clamp_ie_ratio(avg_ti, avg_te),
        per_minute=tuple(per_minute),
    )
