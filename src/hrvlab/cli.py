"""CLI for the hrvlab HRV analysis toolkit."""

import logging

import click

from hrvlab.config import DISPLAY_HISTOGRAM_BINS


def _calibration(
    profile: str | None,
    baseline_rmssd: float | None,
    hr_rest: float | None,
    hr_max: float | None,
    at: float | None,
):
    from hrvlab.config import Calibration, load_calibration

    cal = load_calibration(profile) if profile else Calibration()
    return cal.override(
        baseline_rmssd=baseline_rmssd,
        hr_rest=hr_rest,
        hr_max=hr_max,
        anaerobic_threshold=at,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(verbose: bool) -> None:
    """hrvlab: heart rate variability from RR intervals."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("analyze")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--bins", default=DISPLAY_HISTOGRAM_BINS, show_default=True,
              type=click.IntRange(min=1), help="Display histogram bins.")
@click.option("--output", "-o", default=None, help="Write the full snapshot as JSON.")
def analyze_cmd(file: str, bins: int, output: str | None) -> None:
    """Run the batch HRV analysis on an RR text file (one value per line, ms)."""
    from hrvlab.analytics.batch import analyze
    from hrvlab.analytics.report import format_snapshot
    from hrvlab.errors import InsufficientDataError
    from hrvlab.ingest import read_rr_file

    rr = read_rr_file(file)
    try:
        snapshot = analyze(rr, histogram_bins=bins)
    except InsufficientDataError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(format_snapshot(snapshot))

    if output:
        with open(output, "w") as f:
            f.write(snapshot.to_json())
        click.echo(f"\nSnapshot written to {output}")


@main.command("replay")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--profile", "-p", default=None, type=click.Path(exists=True, dir_okay=False),
              help="JSON user profile with calibration values.")
@click.option("--baseline-rmssd", default=None, type=float, help="Baseline RMSSD (ms).")
@click.option("--hr-rest", default=None, type=float, help="Resting heart rate (bpm).")
@click.option("--hr-max", default=None, type=float, help="Maximum heart rate (bpm).")
@click.option("--at", default=None, type=float, help="Anaerobic threshold (bpm).")
@click.option("--live", is_flag=True, help="Print every live update.")
@click.option("--output", "-o", default=None, help="Write the session summary as JSON.")
@click.option("--export-rr", default=None, type=click.Path(file_okay=False),
              help="Directory to write the session's RR intervals to.")
def replay_cmd(
    file: str,
    profile: str | None,
    baseline_rmssd: float | None,
    hr_rest: float | None,
    hr_max: float | None,
    at: float | None,
    live: bool,
    output: str | None,
    export_rr: str | None,
) -> None:
    """Replay a captured heart-rate notification log as a live session."""
    from hrvlab.analytics.report import (
        format_breath_report,
        format_snapshot,
        format_zone_report,
    )
    from hrvlab.ingest import write_rr_file
    from hrvlab.replay import replay_file

    cal = _calibration(profile, baseline_rmssd, hr_rest, hr_max, at)
    result = replay_file(file, cal)

    if live:
        for u in result.updates:
            m = u.metrics
            click.echo(
                f"  [{u.timestamp:.1f}] HR {u.hr:.0f}  SDNN {m.sdnn:.1f}  "
                f"RMSSD {m.rmssd:.1f}  rec {m.recovery_score}  "
                f"cond {m.conditioning_score}  strain {m.strain_score}  {u.zone}"
            )

    if not result.updates:
        raise click.ClickException("No usable samples in capture.")

    summary = result.session.finish()

    click.echo(f"\n{'=' * 60}")
    click.echo(f"  Session: {summary.sample_count} samples, "
               f"{summary.duration_min:.1f} min, {len(summary.rr_intervals)} RR")
    click.echo(f"{'=' * 60}")
    click.echo(f"  Recovery:     {summary.metrics.recovery_score}/100")
    click.echo(f"  Conditioning: {summary.metrics.conditioning_score}/100")
    click.echo(f"  Strain:       {summary.metrics.strain_score}/100")
    click.echo("")
    click.echo(format_zone_report(summary.zone))
    click.echo("")
    click.echo(format_breath_report(summary.breath))
    if summary.snapshot is not None:
        click.echo("")
        click.echo(format_snapshot(summary.snapshot))

    if result.skipped_lines:
        click.echo(f"\n{result.skipped_lines} line(s) skipped.")

    if output:
        with open(output, "w") as f:
            f.write(summary.to_json())
        click.echo(f"\nSummary written to {output}")

    if export_rr:
        path = write_rr_file(summary.rr_intervals, export_rr)
        click.echo(f"RR intervals written to {path}")


@main.command("zone")
@click.argument("hr", type=float)
@click.option("--at", default=None, type=float,
              help="Anaerobic threshold (bpm), default 180.")
@click.option("--recovery", default=50.0, show_default=True, type=float,
              help="Recovery score used below 0.6 x AT.")
def zone_cmd(hr: float, at: float | None, recovery: float) -> None:
    """Classify a heart rate into a training zone."""
    from hrvlab.analytics.zones import classify_zone

    cal = _calibration(None, None, None, None, at)
    click.echo(classify_zone(hr, cal.anaerobic_threshold, recovery))


if __name__ == "__main__":
    main()
