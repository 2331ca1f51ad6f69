"""Heart-rate notifications: payload parsing and sample normalisation.

A heart-rate sensor reports one notification per beat group through the
standard BLE Heart Rate Measurement characteristic (0x2A37).  This module
turns such payloads into :class:`HeartRateSample` records the live session
can consume.  Connecting to the sensor is left to the caller.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Standard BLE Heart Rate Measurement parser (0x2A37)
# ---------------------------------------------------------------------------
def parse_heart_rate(data: bytes | bytearray) -> dict:
    """Parse a standard BLE Heart Rate Measurement value.

    Bluetooth SIG Heart Rate Measurement layout:
    - Byte 0: Flags
      - Bit 0: HR format (0 = uint8, 1 = uint16)
      - Bit 1-2: Sensor contact status
      - Bit 3: Energy expended present
      - Bit 4: RR-interval present
    - Byte 1(+2): Heart rate value
    - Optional: Energy expended (uint16)
    - Optional: RR-intervals (uint16 each, in 1/1024 sec units)

    Raises:
        ValueError: the payload is too short for its flags.
    """
    if len(data) < 2:
        raise ValueError(f"Heart rate payload too short: {bytes(data).hex()}")

    flags = data[0]
    hr_format_16bit = bool(flags & 0x01)
    sensor_contact_supported = bool(flags & 0x02)
    sensor_contact_detected = bool(flags & 0x04)
    energy_expended_present = bool(flags & 0x08)
    rr_interval_present = bool(flags & 0x10)

    offset = 1

    try:
        if hr_format_16bit:
            hr_value = struct.unpack_from("<H", data, offset)[0]
            offset += 2
        else:
            hr_value = data[offset]
            offset += 1

        energy_expended = None
        if energy_expended_present:
            energy_expended = struct.unpack_from("<H", data, offset)[0]
            offset += 2
    except struct.error as exc:
        raise ValueError(f"Heart rate payload truncated: {bytes(data).hex()}") from exc

    rr_intervals: list[float] = []
    if rr_interval_present:
        while offset + 1 < len(data):
            rr_raw = struct.unpack_from("<H", data, offset)[0]
            # Convert from 1/1024 sec to milliseconds
            rr_ms = (rr_raw / 1024.0) * 1000.0
            rr_intervals.append(round(rr_ms, 1))
            offset += 2

    return {
        "hr_bpm": hr_value,
        "sensor_contact": sensor_contact_detected if sensor_contact_supported else None,
        "energy_expended_kj": energy_expended,
        "rr_intervals_ms": rr_intervals,
    }


# ---------------------------------------------------------------------------
# Streaming samples
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeartRateSample:
    """One notification: when it arrived, the HR and the RR intervals (ms)."""

    timestamp: float  # seconds
    hr_bpm: float
    rr_intervals_ms: tuple[float, ...] = field(default_factory=tuple)
    synthesized: bool = False  # RR derived from hr_bpm


def make_sample(
    timestamp: float,
    hr_bpm: float,
    rr_intervals_ms=None,
) -> HeartRateSample:
    """Build a sample, synthesizing one RR interval when the sensor sent none.

    Sensors that do not report RR still report HR; ``60000 / hr`` stands in
    for the missing interval.
    """
    rr = tuple(float(v) for v in (rr_intervals_ms or ()))
    if not rr and hr_bpm and hr_bpm > 0:
        synthetic = 60000.0 / hr_bpm
        logger.debug("No RR in notification, synthesized %.1f ms from %s bpm", synthetic, hr_bpm)
        return HeartRateSample(timestamp, float(hr_bpm), (synthetic,), synthesized=True)
    return HeartRateSample(timestamp, float(hr_bpm or 0), rr)


def sample_from_payload(timestamp: float, data: bytes | bytearray) -> HeartRateSample:
    """Parse a 0x2A37 payload into a :class:`HeartRateSample`."""
    parsed = parse_heart_rate(data)
    return make_sample(timestamp, parsed["hr_bpm"], parsed["rr_intervals_ms"])
