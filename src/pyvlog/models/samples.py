"""Per-frame vehicle samples: pose, velocity, acceleration."""

from __future__ import annotations

from pyvlog.models._base import VlogBaseModel


class PoseSample(VlogBaseModel):
    """Vehicle state at one instant in a geodetic + orientation frame.

    Parameters
    ----------
    time : float
        Frame timestamp.
    latitude, longitude : float
        Degrees.
    altitude : float
        Metres.
    roll, pitch, yaw : float
        Radians. ``yaw`` is the heading, counter-clockwise from east.
    """

    time: float
    latitude: float
    longitude: float
    altitude: float
    roll: float
    pitch: float
    yaw: float


class VelocitySample(VlogBaseModel):
    """Body and navigation frame velocity plus angular rates."""

    timestamp: float
    velocity_north: float
    velocity_east: float
    velocity_forward: float
    velocity_left: float
    velocity_upward: float
    angular_rate_x: float
    angular_rate_y: float
    angular_rate_z: float
    angular_rate_forward: float
    angular_rate_left: float
    angular_rate_upward: float


class AccelerationSample(VlogBaseModel):
    """Body frame and sensor frame acceleration."""

    timestamp: float
    acceleration_x: float
    acceleration_y: float
    acceleration_z: float
    acceleration_forward: float
    acceleration_left: float
    acceleration_upward: float


class FrameEntry(VlogBaseModel):
    """Decoded sample for one frame."""

    pose: PoseSample
    velocity: VelocitySample
    acceleration: AccelerationSample
