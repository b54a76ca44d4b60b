from __future__ import annotations

from typing import Any

import pytest

from pyvlog.config import LoaderConfig
from pyvlog.ingestion.converter import VEHICLE_POSE, VEHICLE_VELOCITY, PoseConverter
from pyvlog.loader import LoaderState
from pyvlog.loaders.memory import MemoryLoader
from pyvlog.synchronizer import FrameSynchronizer
from pyvlog.trajectory import PlanarProjection


@pytest.fixture
def recording(make_record) -> PoseConverter:
    records = [make_record(lon=float(i) * 10.0, vf=float(i)) for i in range(3)]
    conv = PoseConverter(records, [0.0, 100.0, 200.0], projection=PlanarProjection())
    conv.load()
    return conv


def _loader(conv: PoseConverter, time_window: float = 0.0) -> MemoryLoader:
    return MemoryLoader(conv.get_log_metadata(), conv.build_streams(), config=LoaderConfig(time_window=time_window))


def test_connect_opens_and_emits_in_order(recording: PoseConverter) -> None:
    loader = _loader(recording)
    events: list[str] = []
    for event in ("ready", "update", "finish", "error"):
        loader.on(event, lambda e, _p: events.append(e))

    assert loader.state == LoaderState.IDLE
    loader.connect()

    assert loader.is_open()
    assert events == ["ready", "update", "finish"]
    assert loader.get_current_time() == 0.0


def test_current_frame_follows_cursor(recording: PoseConverter) -> None:
    loader = _loader(recording)
    loader.connect()

    frame = loader.get_current_frame()
    assert frame[VEHICLE_POSE].time == 0.0

    loader.seek(150.0)
    frame = loader.get_current_frame()
    assert frame[VEHICLE_POSE].time == 100.0
    assert frame[VEHICLE_VELOCITY]["value"] == 1.0

    loader.seek(10_000.0)
    assert loader.get_current_time() == 200.0
    assert loader.get_current_frame()[VEHICLE_POSE].time == 200.0


def test_time_window_applies(recording: PoseConverter) -> None:
    loader = _loader(recording, time_window=5.0)
    loader.connect()
    assert loader.get_current_time() == 5.0
    assert loader.get_time_domain() == (5.0, 200.0)


def test_buffer_range_and_close(recording: PoseConverter) -> None:
    loader = _loader(recording)
    loader.connect()
    assert loader.get_buffer_range() == (0.0, 200.0)

    loader.close()
    assert loader.state == LoaderState.CLOSED
    assert not loader.is_open()
    loader.close()
    assert loader.state == LoaderState.CLOSED


def test_custom_synchronizer(recording: PoseConverter) -> None:
    class Recorder:
        def __init__(self) -> None:
            self.times: list[float] = []

        def set_time(self, timestamp: float) -> None:
            self.times.append(timestamp)

        def get_current_frame(self, streams: Any) -> str:
            return "slice"

    sync = Recorder()
    loader = MemoryLoader(recording.get_log_metadata(), recording.build_streams(), log_synchronizer=sync)
    loader.connect()

    assert loader.get_current_frame() == "slice"
    assert sync.times == [0.4]


def test_connect_failure_moves_to_error(recording: PoseConverter) -> None:
    class Broken:
        def set_time(self, timestamp: float) -> None:
            raise RuntimeError("boom")

    loader = MemoryLoader({"start_time": 0.0, "end_time": 1.0}, {}, log_synchronizer=Broken())
    errors: list[Any] = []
    loader.on("error", lambda _e, payload: errors.append(payload))

    loader.subscribe(lambda _v: loader.get_current_frame())
    with pytest.raises(RuntimeError):
        loader.connect()

    assert loader.state == LoaderState.ERROR
    assert len(errors) == 1


class TestFrameSynchronizer:
    def test_latest_frame_at_or_before(self) -> None:
        sync = FrameSynchronizer([0.0, 1.0, 2.0], {"a": ["x", "y", "z"], "b": ["p"]})

        sync.set_time(1.5)
        assert sync.frame_index == 1
        assert sync.get_current_frame(["a", "b", "missing"]) == {"a": "y", "b": None, "missing": None}

        sync.set_time(2.0)
        assert sync.get_current_frame(["a"]) == {"a": "z"}

    def test_before_first_frame(self) -> None:
        sync = FrameSynchronizer([10.0], {"a": ["x"]})
        sync.set_time(5.0)
        assert sync.frame_index is None
        assert sync.get_current_frame(["a"]) is None
