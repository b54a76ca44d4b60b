"""Pose/GPS converter: raw per-frame records to loader-ready streams."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pyvlog.config import LoaderConfig
from pyvlog.exceptions import VlogError
from pyvlog.frames import FrameStore
from pyvlog.models.metadata import LogMetadata, StreamCategory, StreamMetadata, StreamType
from pyvlog.models.samples import PoseSample
from pyvlog.trajectory import Projection, TrajectoryBuilder

_logger = logging.getLogger(__name__)

VEHICLE_POSE = "vehicle-pose"
VEHICLE_ACCELERATION = "/vehicle/acceleration"
VEHICLE_VELOCITY = "/vehicle/velocity"
VEHICLE_TRAJECTORY = "/vehicle/trajectory"

TRAJECTORY_STYLE: dict[str, Any] = {
    "strokeColor": "#57AD57AA",
    "strokeWidth": 1.4,
    "strokeWidthMinPixels": 1,
}


class PoseConverter:
    """Converts a recording's pose records into pose, kinematics and trajectory streams.

    Every frame *must* have a pose: it is the reference point the other
    streams are timed against.
    """

    def __init__(
        self,
        records: Sequence[Mapping[str, Any]],
        timestamps: Sequence[Any],
        *,
        config: LoaderConfig | None = None,
        projection: Projection | None = None,
    ) -> None:
        self.config = config or LoaderConfig()
        self._records = records
        self._timestamps = timestamps
        self._projection = projection
        self._frames: FrameStore | None = None
        self._trajectory: TrajectoryBuilder | None = None

    @property
    def frames(self) -> FrameStore:
        if self._frames is None:
            raise VlogError("PoseConverter.load() has not been called")
        return self._frames

    @property
    def trajectory(self) -> TrajectoryBuilder:
        if self._trajectory is None:
            raise VlogError("PoseConverter.load() has not been called")
        return self._trajectory

    def load(self) -> None:
        # All frames are needed up front for the trajectory.
        self._frames = FrameStore(self._records, self._timestamps)
        self._trajectory = TrajectoryBuilder(
            self._frames,
            projection=self._projection,
            max_frames=self.config.trajectory_frames,
        )

    def __len__(self) -> int:
        return len(self.frames)

    def get_pose(self, frame_number: int) -> PoseSample:
        return self.frames.pose(frame_number)

    def convert_frame(self, frame_number: int) -> dict[str, Any]:
        """Return this frame's value for every stream declared in :meth:`get_metadata`."""
        entry = self.frames.frame(frame_number)
        _logger.debug("Converting pose frame %d/%d", frame_number, len(self.frames))

        trajectory = self.trajectory.build_trajectory(frame_number)
        return {
            VEHICLE_POSE: entry.pose,
            VEHICLE_VELOCITY: {
                "timestamp": entry.velocity.timestamp,
                "value": entry.velocity.velocity_forward,
            },
            VEHICLE_ACCELERATION: {
                "timestamp": entry.acceleration.timestamp,
                "value": entry.acceleration.acceleration_forward,
            },
            VEHICLE_TRAJECTORY: [list(vertex.as_tuple()) for vertex in trajectory],
        }

    def get_metadata(self) -> dict[str, StreamMetadata]:
        """Stream declarations for everything :meth:`convert_frame` produces."""
        return {
            VEHICLE_POSE: StreamMetadata(category=StreamCategory.VEHICLE_POSE),
            VEHICLE_ACCELERATION: StreamMetadata(
                category=StreamCategory.TIME_SERIES,
                type=StreamType.FLOAT,
                unit="m/s^2",
            ),
            VEHICLE_VELOCITY: StreamMetadata(
                category=StreamCategory.TIME_SERIES,
                type=StreamType.FLOAT,
                unit="m/s",
            ),
            VEHICLE_TRAJECTORY: StreamMetadata(
                category=StreamCategory.PRIMITIVE,
                type=StreamType.POLYLINE,
                style_defaults=dict(TRAJECTORY_STYLE),
            ),
        }

    def get_log_metadata(self) -> LogMetadata:
        timestamps = self.frames.timestamps
        return LogMetadata(
            start_time=timestamps[0] if timestamps else None,
            end_time=timestamps[-1] if timestamps else None,
            streams=self.get_metadata(),
        )

    def build_streams(self) -> dict[str, list[Any]]:
        """Convert every frame into ``{stream: [value per frame]}``."""
        streams: dict[str, list[Any]] = {name: [] for name in self.get_metadata()}
        for i in range(len(self.frames)):
            for name, value in self.convert_frame(i).items():
                streams[name].append(value)
        return streams
