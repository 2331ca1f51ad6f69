"""Shared fixtures and helpers for the hrvlab test suite."""

from __future__ import annotations

import json
import struct
from pathlib import Path

import pytest


# ---------------------------------------------------------------------------
# Payload-building helpers
# ---------------------------------------------------------------------------


def make_hr_payload(
    hr_bpm: int = 72,
    rr_ms: list[float] | None = None,
    uint16: bool = False,
    energy_kj: int | None = None,
) -> bytes:
    """Build a standard 0x2A37 Heart Rate Measurement payload."""
    flags = 0
    if uint16:
        flags |= 0x01
    if energy_kj is not None:
        flags |= 0x08
    if rr_ms:
        flags |= 0x10

    buf = bytearray([flags])
    buf += struct.pack("<H", hr_bpm) if uint16 else bytes([hr_bpm])
    if energy_kj is not None:
        buf += struct.pack("<H", energy_kj)
    for rr in rr_ms or []:
        buf += struct.pack("<H", int(round(rr * 1024 / 1000)))
    return bytes(buf)


# ---------------------------------------------------------------------------
# JSONL capture file helpers
# ---------------------------------------------------------------------------


def write_jsonl(path: Path, entries: list[dict]) -> Path:
    """Write a list of dicts as JSONL to the given path."""
    with open(path, "w") as f:
        for entry in entries:
            f.write(json.dumps(entry) + "\n")
    return path


def make_capture_entry(
    timestamp: float | str,
    hr_bpm: int = 72,
    rr_ms: list[float] | None = None,
) -> dict:
    """Create a single JSONL capture entry holding a raw payload."""
    return {
        "timestamp": timestamp,
        "hex_data": make_hr_payload(hr_bpm, rr_ms).hex(),
    }


# ---------------------------------------------------------------------------
# RR fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def example_rr() -> list[float]:
    return [800.0, 810.0, 790.0, 805.0, 795.0]


@pytest.fixture
def varied_rr() -> list[float]:
    """A few hundred intervals with slow and fast oscillation."""
    import math

    return [
        850.0 + 60.0 * math.sin(i / 4.0) + 25.0 * math.sin(i / 1.3)
        for i in range(300)
    ]
