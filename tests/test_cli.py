"""Tests for the hrvlab command line."""

from __future__ import annotations

import json

from click.testing import CliRunner

from hrvlab.cli import main

from tests.conftest import make_capture_entry, write_jsonl


def capture_entries(n: int = 40) -> list[dict]:
    pattern = [700.0, 700.0, 700.0, 700.0, 900.0, 900.0, 900.0, 900.0]
    return [
        make_capture_entry(1_700_000_000.0 + i, hr_bpm=75, rr_ms=[pattern[i % 8]])
        for i in range(n)
    ]


class TestAnalyzeCommand:
    def test_report(self, tmp_path, example_rr):
        rr_file = tmp_path / "rr.txt"
        rr_file.write_text("\n".join(str(v) for v in example_rr))
        result = CliRunner().invoke(main, ["analyze", str(rr_file)])
        assert result.exit_code == 0, result.output
        assert "HRV Analysis (5 RR intervals)" in result.output

    def test_json_output(self, tmp_path, example_rr):
        rr_file = tmp_path / "rr.txt"
        rr_file.write_text("\n".join(str(v) for v in example_rr))
        out = tmp_path / "snapshot.json"
        result = CliRunner().invoke(main, ["analyze", str(rr_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["n"] == 5
        assert data["time_domain"]["nn50"] == 0

    def test_insufficient_data(self, tmp_path):
        rr_file = tmp_path / "rr.txt"
        rr_file.write_text("800\n")
        result = CliRunner().invoke(main, ["analyze", str(rr_file)])
        assert result.exit_code == 1
        assert "Not enough valid RR interval data" in result.output

    def test_missing_file(self, tmp_path):
        result = CliRunner().invoke(main, ["analyze", str(tmp_path / "nope.txt")])
        assert result.exit_code == 2


class TestReplayCommand:
    def test_summary(self, tmp_path):
        capture = write_jsonl(tmp_path / "capture.jsonl", capture_entries())
        result = CliRunner().invoke(main, ["replay", str(capture)])
        assert result.exit_code == 0, result.output
        assert "Session: 40 samples" in result.output
        assert "Recovery:" in result.output
        assert "HR Zone Report" in result.output
        assert "Breathing Report" in result.output
        assert "HRV Analysis (40 RR intervals)" in result.output

    def test_live_updates(self, tmp_path):
        capture = write_jsonl(tmp_path / "capture.jsonl", capture_entries(5))
        result = CliRunner().invoke(main, ["replay", str(capture), "--live"])
        assert result.exit_code == 0, result.output
        assert result.output.count("HR ") >= 5

    def test_profile_and_override(self, tmp_path):
        capture = write_jsonl(tmp_path / "capture.jsonl", capture_entries(10))
        profile = tmp_path / "profile.json"
        profile.write_text(json.dumps({"hrRest": 60, "at": 150}))
        result = CliRunner().invoke(
            main, ["replay", str(capture), "-p", str(profile), "--at", "160"]
        )
        assert result.exit_code == 0, result.output
        assert "160.0 bpm" in result.output

    def test_outputs(self, tmp_path):
        capture = write_jsonl(tmp_path / "capture.jsonl", capture_entries())
        out = tmp_path / "summary.json"
        export_dir = tmp_path / "export"
        result = CliRunner().invoke(
            main,
            ["replay", str(capture), "-o", str(out), "--export-rr", str(export_dir)],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["sample_count"] == 40
        exported = list(export_dir.glob("rr-intervals_*.txt"))
        assert len(exported) == 1
        assert len(exported[0].read_text().split()) == 40

    def test_no_usable_samples(self, tmp_path):
        capture = tmp_path / "capture.jsonl"
        capture.write_text("garbage\n")
        result = CliRunner().invoke(main, ["replay", str(capture)])
        assert result.exit_code == 1
        assert "No usable samples" in result.output


class TestZoneCommand:
    def test_band(self):
        result = CliRunner().invoke(main, ["zone", "150", "--at", "150"])
        assert result.exit_code == 0
        assert result.output.strip() == "Intensive 1"

    def test_above_max(self):
        result = CliRunner().invoke(main, ["zone", "200"])
        assert result.output.strip() == "Above Max HR"

    def test_low_hr_uses_recovery(self):
        result = CliRunner().invoke(main, ["zone", "60", "--recovery", "80"])
        assert result.output.strip() == "Relaxed"
