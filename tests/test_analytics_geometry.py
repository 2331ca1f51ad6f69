"""Tests for the geometric, Poincare and illustrative frequency measures."""

import math

import pytest

from hrvlab.analytics import frequency, geometric, poincare


class TestPoincare:
    def test_sd1(self):
        assert poincare.sd1(math.sqrt(2) * 10) == pytest.approx(10.0)

    def test_sd2(self):
        # 2 * 50^2 - 30^2 = 4100
        assert poincare.sd2(50.0, 30.0) == pytest.approx(math.sqrt(4100), abs=0.01)

    def test_sd2_floors_at_zero(self):
        assert poincare.sd2(5.0, 30.0) == 0.0

    def test_ratio(self):
        assert poincare.sd_ratio(10.0, 25.0) == 2.5

    def test_ratio_zero_sd1(self):
        assert math.isnan(poincare.sd_ratio(0.0, 5.0))

    def test_nan_propagates(self):
        assert math.isnan(poincare.sd1(math.nan))
        assert math.isnan(poincare.sd2(math.nan, 1.0))


class TestGeometric:
    def test_tinn(self):
        assert geometric.tinn(10.0) == 30.0
        assert math.isnan(geometric.tinn(math.nan))

    def test_triangular_short(self):
        assert math.isnan(geometric.triangular_index([800.0]))

    def test_stress_index_two_bins(self):
        rr = [800.0, 800.0, 800.0, 900.0]
        # Mo = 800, MxDMn = 100, 50 ms bins from 800: counts 3, 0, 1 -> AMo = 75
        expected = math.sqrt(75.0 * 800.0 / 100.0)
        assert geometric.baevsky_stress_index(rr) == pytest.approx(expected, abs=0.01)

    def test_stress_index_even_median(self):
        rr = [700.0, 800.0, 900.0, 1000.0]
        # Mo = 850, MxDMn = 300, each value in its own 50 ms bin -> AMo = 25
        expected = math.sqrt(25.0 * 850.0 / 300.0)
        assert geometric.baevsky_stress_index(rr) == pytest.approx(expected, abs=0.01)

    def test_stress_index_artifact_outlier(self):
        rr = [800.0, 810.0, 1e10]
        # Two of three intervals share the first bin; the range is huge
        expected = math.sqrt((200.0 / 3.0) * 810.0 / (1e10 - 800.0))
        assert geometric.baevsky_stress_index(rr) == pytest.approx(expected, abs=0.01)


class TestIllustrativeFrequency:
    @pytest.fixture
    def freq(self):
        return frequency.illustrative_frequency(sdnn_ms=50.0, rmssd_ms=30.0)

    def test_band_powers(self, freq):
        assert freq.hf_power == pytest.approx(720.0)
        assert freq.lf_power == pytest.approx(178.0)
        assert freq.vlf_power == pytest.approx(125.0)

    def test_ratios(self, freq):
        assert freq.lf_hf_ratio == pytest.approx(0.25)
        assert freq.relative_hf == pytest.approx(70.4)
        assert freq.normalized_lf == pytest.approx(19.8)
        assert freq.normalized_hf == pytest.approx(80.2)
        total = freq.relative_vlf + freq.relative_lf + freq.relative_hf
        assert total == pytest.approx(100.0, abs=0.2)

    def test_fixed_peaks(self, freq):
        assert (freq.peak_vlf, freq.peak_lf, freq.peak_hf) == (0.02, 0.1, 0.25)

    def test_psd_shape(self, freq):
        psd = dict(zip(freq.freqs, freq.psd))
        assert psd[0.01] == pytest.approx(125.0 / 4)
        assert psd[0.02] == pytest.approx(125.0 / 4 * 2)
        assert psd[0.1] == pytest.approx(178.0 / 8 * 2)
        assert psd[0.25] == pytest.approx(720.0 / 8 * 2)
        assert psd[0.4] == pytest.approx(720.0 / 8)

    def test_not_spectral(self, freq):
        assert freq.spectral is False

    def test_lf_floored(self):
        freq = frequency.illustrative_frequency(sdnn_ms=5.0, rmssd_ms=30.0)
        assert freq.lf_power == 0.0

    def test_nan_input(self):
        freq = frequency.illustrative_frequency(math.nan, 10.0)
        assert freq.hf_power == 0.0
        assert freq.lf_hf_ratio == 0.0
        assert len(freq.freqs) == len(freq.psd)
