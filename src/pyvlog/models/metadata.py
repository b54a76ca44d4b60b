"""Stream declarations and log metadata."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyvlog.models._base import VlogBaseModel


class StreamCategory(StrEnum):
    VEHICLE_POSE = "vehicle-pose"
    TIME_SERIES = "time_series"
    PRIMITIVE = "primitive"


class StreamType(StrEnum):
    FLOAT = "float"
    POLYLINE = "polyline"
    # Only ever consumed from transport metadata; converters never declare it.
    IMAGE = "image"


class StreamMetadata(VlogBaseModel):
    """Declarative description of one stream.

    Read-only configuration for the rendering layer.
    """

    model_config = ConfigDict(extra="ignore")

    category: StreamCategory
    type: StreamType | None = None
    unit: str | None = None
    style_defaults: dict[str, Any] | None = Field(default=None, alias="styleDefaults")


class LogMetadata(BaseModel):
    """Log-level metadata as handed over by a transport.

    ``start_time`` / ``end_time`` may be absent while a transport is still
    discovering the log; the loader only clamps against bounds it has.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    start_time: float | None = None
    end_time: float | None = None
    streams: dict[str, StreamMetadata] = Field(default_factory=dict)
