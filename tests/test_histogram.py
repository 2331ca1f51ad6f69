"""Tests for hrvlab.analytics.histogram -- RR histograms."""

import pytest

from hrvlab.analytics.histogram import (
    FALLBACK_BIN_WIDTH_MS,
    build_histogram,
    modal_bin_count,
)


class TestBuildHistogram:
    def test_counts_sum_to_n(self, varied_rr):
        hist = build_histogram(varied_rr, 30)
        assert hist.num_bins == 30
        assert sum(hist.counts) == len(varied_rr)
        assert hist.max_count == max(hist.counts)

    def test_max_value_in_last_bin(self):
        hist = build_histogram([800.0, 900.0], 10)
        assert hist.counts[0] == 1
        assert hist.counts[-1] == 1

    def test_identical_values_fallback_width(self):
        hist = build_histogram([800.0] * 5, 30)
        assert hist.bin_width == FALLBACK_BIN_WIDTH_MS
        assert hist.counts[0] == 5
        assert hist.max_count == 5

    def test_labels(self):
        hist = build_histogram([800.0, 900.0], 2)
        assert hist.labels == ("800-850ms", "850-900ms")

    def test_empty(self):
        hist = build_histogram([], 30)
        assert hist.counts == ()
        assert hist.max_count == 0

    def test_invalid_bins(self):
        with pytest.raises(ValueError):
            build_histogram([800.0], 0)

    def test_to_dict(self):
        d = build_histogram([800.0, 900.0], 2).to_dict()
        assert d["counts"] == [1, 1]
        assert d["max_count"] == 1


class TestModalBinCount:
    def test_grid_from_minimum(self):
        values = [800.0, 820.0, 849.0, 850.0, 930.0]
        # bins start at 800: [800,850) [850,900) [900,950)
        assert modal_bin_count(values, 50.0, origin=800.0) == 3

    def test_single_value(self):
        assert modal_bin_count([800.0, 800.0], 50.0, origin=800.0) == 2

    def test_far_outlier(self):
        assert modal_bin_count([800.0, 810.0, 1e10], 50.0, origin=800.0) == 2

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            modal_bin_count([800.0], 0.0)

    def test_anchored_at_zero(self):
        width = 1000.0 / 128.0
        # 800 -> bin 102, 801 -> bin 102, 805 -> bin 103
        assert modal_bin_count([800.0, 805.0], width) == 1
        assert modal_bin_count([800.0, 801.0, 805.0], width) == 2

    def test_empty(self):
        assert modal_bin_count([], 7.8125) == 0
