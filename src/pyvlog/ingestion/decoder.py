"""Decode one raw OXTS-style record into a :class:`FrameEntry`.

The record is whatever an external parser produced for one frame: a
mapping of short OXTS keys to numbers or numeric strings. The timestamp
comes from an external time index and is passed in already resolved.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pyvlog.ingestion.normalize import require_field, require_float
from pyvlog.models.samples import AccelerationSample, FrameEntry, PoseSample, VelocitySample

# Model field -> raw record key.
POSE_FIELDS: dict[str, str] = {
    "latitude": "lat",
    "longitude": "lon",
    "altitude": "alt",
    "roll": "roll",
    "pitch": "pitch",
    "yaw": "yaw",
}

VELOCITY_FIELDS: dict[str, str] = {
    "velocity_north": "vn",
    "velocity_east": "ve",
    "velocity_forward": "vf",
    "velocity_left": "vl",
    "velocity_upward": "vu",
    "angular_rate_x": "wx",
    "angular_rate_y": "wy",
    "angular_rate_z": "wz",
    "angular_rate_forward": "wf",
    "angular_rate_left": "wl",
    "angular_rate_upward": "wu",
}

ACCELERATION_FIELDS: dict[str, str] = {
    "acceleration_x": "ax",
    "acceleration_y": "ay",
    "acceleration_z": "az",
    "acceleration_forward": "af",
    "acceleration_left": "al",
    "acceleration_upward": "au",
}


def _extract(record: Mapping[str, Any], fields: Mapping[str, str], index: int | None) -> dict[str, float]:
    return {name: require_field(record, key, index=index) for name, key in fields.items()}


def decode_sample(record: Mapping[str, Any], timestamp: Any, *, index: int | None = None) -> FrameEntry:
    """Convert a raw record into pose, velocity and acceleration samples.

    Raises
    ------
    MalformedSampleError
        When the timestamp or any expected field is missing or not a finite number.
        ``index`` is carried on the error to identify the source record.
    """
    ts = require_float(timestamp, field="timestamp", index=index)

    pose = PoseSample(time=ts, **_extract(record, POSE_FIELDS, index))
    velocity = VelocitySample(timestamp=ts, **_extract(record, VELOCITY_FIELDS, index))
    acceleration = AccelerationSample(timestamp=ts, **_extract(record, ACCELERATION_FIELDS, index))
    return FrameEntry(pose=pose, velocity=velocity, acceleration=acceleration)
