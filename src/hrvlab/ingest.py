"""RR-interval text files: parsing uploads and writing exports.

The exchange format is one RR interval in milliseconds per line.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def parse_rr_text(text: str) -> list[float]:
    """Parse newline-delimited RR values, dropping anything unusable.

    Blank, non-numeric, non-finite and non-positive lines are skipped.
    """
    values: list[float] = []
    dropped = 0
    for line_num, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line:
            continue
        try:
            value = float(line)
        except ValueError:
            dropped += 1
            logger.debug("line %d: not a number (%r), skipping", line_num, line)
            continue
        if not math.isfinite(value) or value <= 0:
            dropped += 1
            logger.debug("line %d: non-positive RR (%r), skipping", line_num, line)
            continue
        values.append(value)

    if dropped:
        logger.info("Dropped %d invalid RR line(s), kept %d", dropped, len(values))
    return values


def read_rr_file(path: str | Path) -> list[float]:
    """Read and parse an RR text file."""
    with open(path) as f:
        return parse_rr_text(f.read())


def format_rr_text(rr_intervals: Iterable[float]) -> str:
    """RR values rounded to whole milliseconds, one per line."""
    return "\n".join(str(int(round(rr))) for rr in rr_intervals)


def export_filename(when: datetime | None = None) -> str:
    """``rr-intervals_YYYY-MM-DD_HH-MM.txt`` for the given time (default now)."""
    when = when or datetime.now()
    return f"rr-intervals_{when:%Y-%m-%d_%H-%M}.txt"


def write_rr_file(
    rr_intervals: Iterable[float],
    directory: str | Path = ".",
    when: datetime | None = None,
) -> Path:
    """Write an RR export into *directory* and return its path."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(when)
    with open(path, "w") as f:
        f.write(format_rr_text(rr_intervals))
    logger.info("RR intervals written to %s", path)
    return path
