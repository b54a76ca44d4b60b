"""Anchor-relative trajectories from absolute geodetic poses.

Poses are recorded independently in latitude/longitude/altitude plus
roll/pitch/yaw. A renderer wants a polyline it can draw in the vehicle's
own frame, so every pose in a window is expressed as an offset from one
anchor pose, rotated into the anchor's heading.

Projection choice
-----------------
:class:`LocalTangentProjection` is an equirectangular approximation of a
local east/north/up tangent plane. It is accurate at vehicle scale (a few
kilometres) and is not meant for global-scale displacement:

* longitude deltas are wrapped to ``[-180, 180)`` so a window straddling
  the date line stays continuous;
* the east scale ``cos(latitude)`` is floored near the poles, where the
  east axis is ill-defined anyway, so output stays finite.

Heading convention: ``yaw`` is counter-clockwise from east (OXTS). After
rotation ``x`` points along the anchor's heading and ``y`` to its left.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Sequence
from typing import Protocol

from pyvlog.exceptions import EmptyTrajectoryWindowError
from pyvlog.frames import FrameStore
from pyvlog.models.samples import PoseSample

R_EARTH = 6378137.0
_MIN_COS_LAT = 1e-6


def wrap_angle(angle: float) -> float:
    """Wrap *angle* (radians) into ``[-pi, pi)``."""
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


def wrap_degrees(delta: float) -> float:
    """Wrap *delta* (degrees) into ``[-180, 180)``."""
    return (delta + 180.0) % 360.0 - 180.0


@dataclasses.dataclass(frozen=True)
class TrajectoryVertex:
    """Offset of one pose relative to an anchor, in the anchor's frame."""

    x: float
    y: float
    z: float = 0.0
    heading: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


class Projection(Protocol):
    def displacement(self, origin: PoseSample, target: PoseSample) -> tuple[float, float, float]:
        """Return the (east, north, up) metres from *origin* to *target*."""
        ...


class LocalTangentProjection:
    """Equirectangular small-region projection around the pair's mean latitude."""

    def __init__(self, radius: float = R_EARTH) -> None:
        self.radius = radius

    def displacement(self, origin: PoseSample, target: PoseSample) -> tuple[float, float, float]:
        d_lat = math.radians(target.latitude - origin.latitude)
        d_lon = math.radians(wrap_degrees(target.longitude - origin.longitude))
        mean_lat = math.radians((origin.latitude + target.latitude) / 2.0)
        cos_lat = max(math.cos(mean_lat), _MIN_COS_LAT)
        east = self.radius * d_lon * cos_lat
        north = self.radius * d_lat
        up = target.altitude - origin.altitude
        return east, north, up


class PlanarProjection:
    """Treat longitude/latitude/altitude as local metric x/y/z.

    For simulated logs that already carry local coordinates in the pose
    fields.
    """

    def displacement(self, origin: PoseSample, target: PoseSample) -> tuple[float, float, float]:
        return (
            target.longitude - origin.longitude,
            target.latitude - origin.latitude,
            target.altitude - origin.altitude,
        )


def pose_offset(anchor: PoseSample, pose: PoseSample, projection: Projection) -> TrajectoryVertex:
    """Express *pose* relative to *anchor*, rotated by ``-anchor.yaw``."""
    east, north, up = projection.displacement(anchor, pose)
    cos_yaw = math.cos(anchor.yaw)
    sin_yaw = math.sin(anchor.yaw)
    return TrajectoryVertex(
        x=east * cos_yaw + north * sin_yaw,
        y=-east * sin_yaw + north * cos_yaw,
        z=up,
        heading=wrap_angle(pose.yaw - anchor.yaw),
    )


def forward_window(start: int, length: int, max_frames: int | None = None) -> range:
    """Frames from *start* forward, at most *max_frames* of them.

    This is the window policy used when no explicit window is given: the
    trajectory ahead of the current frame, anchored at the current frame.
    ``max_frames=None`` runs to the end of the recording.
    """
    stop = length if max_frames is None else min(length, start + max(max_frames, 0))
    return range(start, max(stop, start))


class TrajectoryBuilder:
    """Builds anchor-relative polylines over a :class:`FrameStore`."""

    def __init__(
        self,
        store: FrameStore,
        *,
        projection: Projection | None = None,
        max_frames: int | None = None,
    ) -> None:
        self._store = store
        self._projection: Projection = projection or LocalTangentProjection()
        self._max_frames = max_frames

    def window_for(self, anchor_index: int) -> range:
        return forward_window(anchor_index, len(self._store), self._max_frames)

    def build_trajectory(
        self,
        anchor_index: int | None,
        window: Sequence[int] | None = None,
    ) -> list[TrajectoryVertex]:
        """Return one vertex per window element, in window order.

        The anchor is always the first frame of the window, so the first
        vertex is exactly the origin. *anchor_index* only selects the
        forward window when *window* is ``None``.

        Raises
        ------
        EmptyTrajectoryWindowError
            When the window has no frames.
        IndexOutOfRangeError
            When the anchor or any window index is not a valid frame.
        """
        if window is None:
            if anchor_index is None:
                raise EmptyTrajectoryWindowError("Neither an anchor nor a window was given")
            # Validates the anchor before the window can come out empty.
            self._store.pose(anchor_index)
            window = self.window_for(anchor_index)
        if len(window) == 0:
            raise EmptyTrajectoryWindowError("Trajectory window is empty")

        anchor = self._store.pose(window[0])
        return [pose_offset(anchor, self._store.pose(j), self._projection) for j in window]
