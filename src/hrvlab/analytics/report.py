"""Plain-text report assembly for batch snapshots and session summaries.

Structured output is available from each result's ``to_dict()``; the
functions here only format.
"""

from __future__ import annotations

import math

from hrvlab.analytics.batch import HRVSnapshot
from hrvlab.analytics.breath import BreathReport
from hrvlab.analytics.zones import ZoneReport

RULE = "=" * 60


def _fmt(value: float | None, digits: int = 1, unit: str = "") -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "--"
    suffix = f" {unit}" if unit else ""
    return f"{value:.{digits}f}{suffix}"


def format_snapshot(snapshot: HRVSnapshot) -> str:
    """Expanded HRV report for one batch snapshot."""
    freq = snapshot.frequency
    lines = [
        RULE,
        f"  HRV Analysis ({snapshot.n} RR intervals)",
        RULE,
        "  Time domain",
        f"    Mean RR:      {_fmt(snapshot.mean_rr, 1, 'ms')}",
        f"    Avg HR:       {_fmt(snapshot.avg_hr, 1, 'bpm')}",
        f"    SDNN:         {_fmt(snapshot.sdnn, 2, 'ms')}",
        f"    RMSSD:        {_fmt(snapshot.rmssd, 2, 'ms')}",
        f"    NN50:         {snapshot.nn50}",
        f"    pNN50:        {_fmt(snapshot.pnn50, 1, '%')}",
        "  Geometric",
        f"    Triangular index: {_fmt(snapshot.triangular_index, 2)}",
        f"    TINN (est.):      {_fmt(snapshot.tinn, 1, 'ms')}",
        f"    Stress index:     {_fmt(snapshot.stress_index, 2)}",
        "  Poincare",
        f"    SD1:          {_fmt(snapshot.sd1, 2, 'ms')}",
        f"    SD2:          {_fmt(snapshot.sd2, 2, 'ms')}",
        f"    SD2/SD1:      {_fmt(snapshot.sd2_sd1_ratio, 2)}",
        "  Frequency domain (illustrative, not spectral)",
        f"    VLF / LF / HF: {_fmt(freq.vlf_power, 2)} / {_fmt(freq.lf_power, 2)} / "
        f"{_fmt(freq.hf_power, 2)} ms^2",
        f"    LF/HF:         {_fmt(freq.lf_hf_ratio, 2)}",
        f"    LF nu / HF nu: {_fmt(freq.normalized_lf, 1)} / {_fmt(freq.normalized_hf, 1)}",
        "  Wellness",
        f"    Conditioning: {_fmt(snapshot.conditioning, 1)}",
        f"    Recovery:     {_fmt(snapshot.recovery, 1)}",
        f"    Strain:       {_fmt(snapshot.strain, 1)}",
        f"    Energy:       {_fmt(snapshot.energy, 1)}",
        f"    State:        {snapshot.state}",
        "  Not computed",
        "    " + ", ".join(snapshot.advanced.unsupported()),
        RULE,
    ]
    return "\n".join(lines)


def format_breath_report(report: BreathReport) -> str:
    """Overall and per-minute breathing averages."""
    lines = ["Breathing Report"]
    if not report.detected:
        lines.append(f"  {report.message}")
        return "\n".join(lines)

    lines += [
        f"  Average frequency: {_fmt(report.avg_frequency, 2, 'breaths/min')}",
        f"  Average Ti:        {_fmt(report.avg_time_in, 2, 's')}",
        f"  Average Te:        {_fmt(report.avg_time_out, 2, 's')}",
        f"  Average I/E:       {_fmt(report.avg_ie_ratio, 2)}",
        f"  Total cycles:      {report.total_cycles}",
        "  Minute  Cycles  Ti (s)  Te (s)   I/E",
    ]
    for m in report.per_minute:
        lines.append(
            f"  {m.minute:>6}  {m.frequency:>6}  {m.avg_time_in:>6.2f}  "
            f"{m.avg_time_out:>6.2f}  {_fmt(m.ie_ratio, 2):>5}"
        )
    return "\n".join(lines)


def format_zone_report(report: ZoneReport) -> str:
    lines = ["HR Zone Report"]
    if report.zone is None:
        lines.append(f"  {report.message}")
        return "\n".join(lines)
    lines += [
        f"  Average HR:     {_fmt(report.avg_hr, 1, 'bpm')}",
        f"  AT:             {_fmt(report.anaerobic_threshold, 1, 'bpm')}",
        f"  Max HR (1.1xAT): {_fmt(report.max_hr, 1, 'bpm')}",
        f"  Recovery score: {report.recovery_score}",
        f"  Detected zone:  {report.zone}",
    ]
    return "\n".join(lines)
