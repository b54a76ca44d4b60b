from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

_KINEMATIC_KEYS = (
    "vn", "ve", "vf", "vl", "vu",
    "ax", "ay", "az", "af", "al", "au",
    "wx", "wy", "wz", "wf", "wl", "wu",
)  # fmt: skip


def oxts_record(lat: float = 0.0, lon: float = 0.0, alt: float = 0.0, yaw: float = 0.0, **extra: Any) -> dict[str, Any]:
    record: dict[str, Any] = {"lat": lat, "lon": lon, "alt": alt, "roll": 0.0, "pitch": 0.0, "yaw": yaw}
    for i, key in enumerate(_KINEMATIC_KEYS):
        record[key] = float(i) / 10.0
    record.update(extra)
    return record


@pytest.fixture
def make_record() -> Callable[..., dict[str, Any]]:
    return oxts_record
