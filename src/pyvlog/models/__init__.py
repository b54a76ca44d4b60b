"""Data models for pyvlog."""

from pyvlog.models._base import VlogBaseModel, to_hyphen
from pyvlog.models.metadata import LogMetadata, StreamCategory, StreamMetadata, StreamType
from pyvlog.models.samples import AccelerationSample, FrameEntry, PoseSample, VelocitySample

__all__ = [
    "AccelerationSample",
    "FrameEntry",
    "LogMetadata",
    "PoseSample",
    "StreamCategory",
    "StreamMetadata",
    "StreamType",
    "VelocitySample",
    "VlogBaseModel",
    "to_hyphen",
]
