"""Replay captured heart-rate notifications through a live session.

A capture is a ``.jsonl`` file, one notification per line::

    {"timestamp": "2024-02-13T12:00:00.250Z", "hex_data": "1048000320"}
    {"timestamp": 1707825600.75, "hr_bpm": 71, "rr_intervals_ms": [845.7]}

``hex_data`` (or ``raw_bytes_b64``) holds a raw 0x2A37 payload; otherwise
``hr_bpm`` and ``rr_intervals_ms`` are taken as already decoded.
"""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from hrvlab.config import Calibration
from hrvlab.heart_rate import HeartRateSample, make_sample, sample_from_payload
from hrvlab.session import LiveSession, LiveUpdate

logger = logging.getLogger(__name__)


@dataclass
class ReplayResult:
    session: LiveSession
    updates: list[LiveUpdate] = field(default_factory=list)
    total_lines: int = 0
    skipped_lines: int = 0


def parse_timestamp(value) -> float:
    """Epoch seconds from a number or an ISO-8601 string (``Z`` allowed).

    Naive ISO timestamps are taken as UTC.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.timestamp()
    raise ValueError(f"Invalid timestamp: {value!r}")


def sample_from_entry(entry: dict) -> HeartRateSample:
    """Turn one capture entry into a sample.

    Raises:
        ValueError: timestamp or payload is missing or malformed.
    """
    if "timestamp" not in entry:
        raise ValueError("entry has no timestamp")
    ts = parse_timestamp(entry["timestamp"])

    if "raw_bytes_b64" in entry:
        return sample_from_payload(ts, base64.b64decode(entry["raw_bytes_b64"]))
    if "hex_data" in entry:
        return sample_from_payload(ts, bytes.fromhex(entry["hex_data"]))
    if "hr_bpm" in entry:
        return make_sample(ts, float(entry["hr_bpm"]), entry.get("rr_intervals_ms"))
    raise ValueError("entry has neither a payload nor hr_bpm")


def replay_file(
    capture_path: str | Path,
    calibration: Calibration | None = None,
) -> ReplayResult:
    """Feed every notification of a capture file into a fresh session.

    Invalid lines are skipped and counted.

    Raises:
        FileNotFoundError: the capture file does not exist.
    """
    path = Path(capture_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {capture_path}")

    result = ReplayResult(session=LiveSession(calibration))
    logger.info("Replaying %s", path.name)

    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            result.total_lines += 1

            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                result.skipped_lines += 1
                logger.debug("[line %d] Invalid JSON, skipping", line_num)
                continue

            try:
                sample = sample_from_entry(entry)
            except (ValueError, TypeError, AttributeError) as exc:
                result.skipped_lines += 1
                logger.debug("[line %d] %s, skipping", line_num, exc)
                continue

            result.updates.append(result.session.add_sample(sample))

    logger.info(
        "Replay done: %d lines, %d samples, %d skipped",
        result.total_lines,
        len(result.updates),
        result.skipped_lines,
    )
    return result
