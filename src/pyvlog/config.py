"""Loader configuration for pyvlog."""

from __future__ import annotations

import dataclasses
import os
from typing import Any


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_optional_int(value: str | None) -> int | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in {"", "none", "all"}:
        return None
    return int(normalized)


@dataclasses.dataclass(frozen=True)
class LoaderConfig:
    """Loader and converter configuration.

    Parameters
    ----------
    time_window : float
        Margin added to ``metadata.start_time`` when computing the earliest
        seekable time. Consumers that look back over a buffer before the
        cursor need this headroom.
    image_time_scale : float
        Divisor converting internal timestamps to the unit image frames
        are displayed in.
    pose_stream : str
        Name of the stream whose per-frame ``time`` drives frame timestamps.
    trajectory_frames : int or None
        Number of frames in the forward trajectory window, including the
        anchor frame. ``None`` uses the remainder of the recording.
    debug : bool
        Log every emitted loader event at debug level.
    """

    time_window: float = 0.4
    image_time_scale: float = 1000.0
    pose_stream: str = "vehicle-pose"
    trajectory_frames: int | None = None
    debug: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> LoaderConfig:
        """Create configuration from ``VLOG_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        window_env = env.get("VLOG_TIME_WINDOW")
        if window_env is not None and "time_window" not in overrides:
            config_kwargs["time_window"] = float(window_env)

        scale_env = env.get("VLOG_IMAGE_TIME_SCALE")
        if scale_env is not None and "image_time_scale" not in overrides:
            config_kwargs["image_time_scale"] = float(scale_env)

        stream_env = env.get("VLOG_POSE_STREAM")
        if stream_env is not None and "pose_stream" not in overrides:
            config_kwargs["pose_stream"] = stream_env

        if "trajectory_frames" not in overrides:
            config_kwargs["trajectory_frames"] = _env_optional_int(env.get("VLOG_TRAJECTORY_FRAMES"))

        if "debug" not in overrides:
            config_kwargs["debug"] = _env_bool(env.get("VLOG_DEBUG"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
