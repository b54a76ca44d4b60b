from __future__ import annotations

import math

import pytest

from pyvlog.config import LoaderConfig
from pyvlog.exceptions import VlogError
from pyvlog.ingestion.converter import (
    VEHICLE_ACCELERATION,
    VEHICLE_POSE,
    VEHICLE_TRAJECTORY,
    VEHICLE_VELOCITY,
    PoseConverter,
)
from pyvlog.models.metadata import StreamCategory, StreamType
from pyvlog.trajectory import PlanarProjection


@pytest.fixture
def converter(make_record) -> PoseConverter:
    records = [
        make_record(lat=0.0, lon=0.0, vf=1.0, af=0.1),
        make_record(lat=0.0, lon=10.0, vf=2.0, af=0.2),
        make_record(lat=10.0, lon=10.0, vf=3.0, af=0.3),
    ]
    conv = PoseConverter(records, [0.0, 100.0, 200.0], projection=PlanarProjection())
    conv.load()
    return conv


def test_requires_load(make_record) -> None:
    conv = PoseConverter([make_record()], [0.0])
    with pytest.raises(VlogError):
        conv.convert_frame(0)


def test_convert_frame(converter: PoseConverter) -> None:
    frame = converter.convert_frame(1)

    assert frame[VEHICLE_POSE] == converter.get_pose(1)
    assert frame[VEHICLE_VELOCITY] == {"timestamp": 100.0, "value": 2.0}
    assert frame[VEHICLE_ACCELERATION] == {"timestamp": 100.0, "value": 0.2}
    assert frame[VEHICLE_TRAJECTORY] == [[0.0, 0.0, 0.0], [0.0, 10.0, 0.0]]


def test_trajectory_from_first_frame(converter: PoseConverter) -> None:
    polyline = converter.convert_frame(0)[VEHICLE_TRAJECTORY]
    assert polyline == [[0.0, 0.0, 0.0], [10.0, 0.0, 0.0], [10.0, 10.0, 0.0]]


def test_trajectory_window_from_config(make_record) -> None:
    records = [make_record(lon=float(i)) for i in range(6)]
    conv = PoseConverter(
        records,
        [float(i) for i in range(6)],
        config=LoaderConfig(trajectory_frames=2),
        projection=PlanarProjection(),
    )
    conv.load()
    assert conv.convert_frame(3)[VEHICLE_TRAJECTORY] == [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]]


def test_metadata_declarations(converter: PoseConverter) -> None:
    metadata = converter.get_metadata()

    assert metadata[VEHICLE_POSE].category == StreamCategory.VEHICLE_POSE
    assert metadata[VEHICLE_VELOCITY].unit == "m/s"
    assert metadata[VEHICLE_ACCELERATION].unit == "m/s^2"
    assert metadata[VEHICLE_ACCELERATION].type == StreamType.FLOAT
    trajectory = metadata[VEHICLE_TRAJECTORY]
    assert trajectory.category == StreamCategory.PRIMITIVE
    assert trajectory.type == StreamType.POLYLINE
    assert trajectory.style_defaults == {"strokeColor": "#57AD57AA", "strokeWidth": 1.4, "strokeWidthMinPixels": 1}
    assert trajectory.to_stream_dict()["styleDefaults"]["strokeWidth"] == 1.4


def test_log_metadata(converter: PoseConverter) -> None:
    log = converter.get_log_metadata()
    assert log.start_time == 0.0
    assert log.end_time == 200.0
    assert set(log.streams) == {VEHICLE_POSE, VEHICLE_VELOCITY, VEHICLE_ACCELERATION, VEHICLE_TRAJECTORY}


def test_build_streams(converter: PoseConverter) -> None:
    streams = converter.build_streams()

    assert len(streams[VEHICLE_POSE]) == 3
    assert [pose.time for pose in streams[VEHICLE_POSE]] == [0.0, 100.0, 200.0]
    assert [v["value"] for v in streams[VEHICLE_VELOCITY]] == [1.0, 2.0, 3.0]
    assert streams[VEHICLE_TRAJECTORY][2] == [[0.0, 0.0, 0.0]]


def test_geodetic_default_projection(make_record) -> None:
    ten = math.degrees(10.0 / 6378137.0)
    conv = PoseConverter([make_record(), make_record(lon=ten)], [0.0, 1.0])
    conv.load()
    (_, second) = conv.convert_frame(0)[VEHICLE_TRAJECTORY]
    assert second[0] == pytest.approx(10.0, abs=1e-6)
