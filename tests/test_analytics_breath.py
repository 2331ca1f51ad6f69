"""Tests for hrvlab.analytics.breath -- breath-phase state machine and report."""

import math

import pytest

from hrvlab.analytics.breath import (
    IE_RATIO_MAX,
    IE_RATIO_MIN,
    NO_CYCLES_MESSAGE,
    BreathCycle,
    BreathPhaseDetector,
    Phase,
    build_breath_report,
    clamp_ie_ratio,
)


def feed(detector, samples):
    update = None
    for ts, hr in samples:
        update = detector.update(ts, hr)
    return update


class TestPhaseTransitions:
    def test_initial_state(self):
        d = BreathPhaseDetector()
        assert d.phase is Phase.UNINITIALIZED
        assert d.cycles == []

    def test_first_sample_opens_cycle(self):
        d = BreathPhaseDetector()
        u = d.update(10.0, 60.0)
        assert u.phase is Phase.INSPIRATION
        assert d.current.start == 10.0
        assert d.current.time_in == 0.0
        assert d.current.time_out == 0.0

    def test_rising_falling_rising_closes_one_cycle(self):
        d = BreathPhaseDetector()
        u = feed(d, [(0.0, 60.0), (2.0, 62.0), (5.0, 58.0), (6.0, 61.0)])
        assert u.cycle_count == 1
        assert len(d.cycles) == 1
        cycle = d.cycles[0]
        assert cycle.time_in == pytest.approx(2.0)
        assert cycle.time_out == pytest.approx(3.0)
        assert cycle.start == 0.0
        # new cycle opened at the edge and credited with the rising interval
        assert d.current.start == 6.0
        assert d.current.time_in == pytest.approx(1.0)

    def test_inspiration_to_expiration_keeps_cycle_open(self):
        d = BreathPhaseDetector()
        u = feed(d, [(0.0, 60.0), (2.0, 62.0), (5.0, 58.0)])
        assert u.phase is Phase.EXPIRATION
        assert u.cycle_count == 0
        assert u.current_time_in == pytest.approx(2.0)
        assert u.current_time_out == pytest.approx(3.0)

    def test_flat_hr_keeps_phase(self):
        d = BreathPhaseDetector()
        u = feed(d, [(0.0, 60.0), (1.0, 60.0), (2.0, 59.0), (4.0, 59.0)])
        assert u.phase is Phase.EXPIRATION
        assert d.current.time_in == pytest.approx(1.0)
        assert d.current.time_out == pytest.approx(3.0)

    def test_rising_after_inspiration_does_not_close(self):
        d = BreathPhaseDetector()
        u = feed(d, [(0.0, 60.0), (1.0, 61.0), (2.0, 62.0)])
        assert u.cycle_count == 0
        assert d.current.time_in == pytest.approx(2.0)


class TestDerivedOutputs:
    def test_no_cycles(self):
        d = BreathPhaseDetector()
        u = feed(d, [(0.0, 60.0), (2.0, 62.0)])
        assert u.frequency == 0.0
        assert u.ie_ratio is None
        # running cycle: Ti 2 s, Te 0 s -> upper bound, as for a closed cycle
        assert u.avg_time_in == pytest.approx(2.0)
        assert u.avg_ie_ratio == IE_RATIO_MAX

    def test_no_time_yet(self):
        u = feed(BreathPhaseDetector(), [(0.0, 60.0)])
        assert u.avg_ie_ratio is None

    def test_ie_ratio_last_cycle(self):
        d = BreathPhaseDetector()
        u = feed(d, [(0.0, 60.0), (2.0, 62.0), (5.0, 58.0), (6.0, 61.0)])
        assert u.ie_ratio == pytest.approx(2.0 / 3.0)
        assert u.avg_time_in == pytest.approx(2.0)
        assert u.avg_time_out == pytest.approx(3.0)
        assert u.frequency == 1.0

    def test_ie_ratio_clamped(self):
        d = BreathPhaseDetector()
        # 10 s in, 1 s out
        u = feed(d, [(0.0, 60.0), (10.0, 65.0), (11.0, 60.0), (12.0, 61.0)])
        assert u.ie_ratio == IE_RATIO_MAX

    def test_frequency_window(self):
        d = BreathPhaseDetector(frequency_window_sec=30.0)
        samples = []
        t = 0.0
        for _ in range(10):
            samples += [(t, 60.0), (t + 2.0, 62.0), (t + 5.0, 58.0)]
            t += 6.0
        u = feed(d, samples + [(t, 61.0)])
        assert u.cycle_count == 10
        # cycles start every 6 s; only starts after t - 30 count
        cutoff = t - 30.0
        expected = sum(1 for c in d.cycles if c.start > cutoff)
        assert u.frequency == expected
        assert u.frequency < u.cycle_count

    def test_completed_cycles_are_copies(self):
        d = BreathPhaseDetector()
        feed(d, [(0.0, 60.0), (2.0, 62.0), (5.0, 58.0), (6.0, 61.0)])
        copies = d.completed_cycles()
        copies[0].time_in = 99.0
        assert d.cycles[0].time_in == pytest.approx(2.0)

    def test_to_dict(self):
        d = BreathPhaseDetector()
        u = d.update(0.0, 60.0)
        assert u.to_dict()["phase"] == "inspiration"


class TestClampIERatio:
    def test_normal(self):
        assert clamp_ie_ratio(2.0, 4.0) == 0.5

    def test_bounds(self):
        assert clamp_ie_ratio(1.0, 10.0) == IE_RATIO_MIN
        assert clamp_ie_ratio(10.0, 1.0) == IE_RATIO_MAX

    def test_zero_expiration(self):
        assert clamp_ie_ratio(3.0, 0.0) == IE_RATIO_MAX
        assert clamp_ie_ratio(0.0, 0.0) is None


class TestBreathReport:
    def test_no_cycles(self):
        report = build_breath_report([])
        assert not report.detected
        assert report.message == NO_CYCLES_MESSAGE
        assert report.total_cycles == 0
        assert math.isnan(report.avg_frequency)
        assert report.to_dict()["avg_frequency"] is None

    def test_overall_averages(self):
        cycles = [
            BreathCycle(time_in=2.0, time_out=3.0, start=0.0),
            BreathCycle(time_in=1.0, time_out=1.0, start=30.0),
            BreathCycle(time_in=2.0, time_out=2.0, start=70.0),
        ]
        report = build_breath_report(cycles)
        assert report.detected
        assert report.total_cycles == 3
        assert report.avg_time_in == pytest.approx(5.0 / 3.0)
        assert report.avg_time_out == pytest.approx(2.0)
        assert report.avg_frequency == pytest.approx(60.0 / (5.0 / 3.0 + 2.0))
        assert report.avg_ie_ratio == pytest.approx((5.0 / 3.0) / 2.0)

    def test_per_minute_buckets(self):
        cycles = [
            BreathCycle(time_in=2.0, time_out=3.0, start=100.0),
            BreathCycle(time_in=1.0, time_out=1.0, start=130.0),
            BreathCycle(time_in=2.0, time_out=2.0, start=170.0),
            BreathCycle(time_in=1.0, time_out=4.0, start=300.0),
        ]
        report = build_breath_report(cycles)
        minutes = [m.minute for m in report.per_minute]
        assert minutes == [1, 2, 4]
        first = report.per_minute[0]
        assert first.frequency == 2
        assert first.avg_time_in == pytest.approx(1.5)
        assert first.avg_time_out == pytest.approx(2.0)
        assert first.ie_ratio == pytest.approx(0.75)
        assert report.per_minute[2].ie_ratio == IE_RATIO_MIN
