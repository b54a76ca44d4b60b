"""Reference log synchronizer over fully materialized streams."""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Mapping, Sequence
from typing import Any


class FrameSynchronizer:
    """Map a timestamp to the latest frame at or before it.

    ``streams`` holds one entry per frame for each stream, aligned with
    ``timestamps``. Before the first timestamp no frame is current.
    """

    def __init__(self, timestamps: Sequence[float], streams: Mapping[str, Sequence[Any]]) -> None:
        self._timestamps = list(timestamps)
        self._streams = streams
        self._index: int | None = None
        self.time: float | None = None

    @property
    def frame_index(self) -> int | None:
        return self._index

    def set_time(self, timestamp: float) -> None:
        self.time = timestamp
        position = bisect.bisect_right(self._timestamps, timestamp) - 1
        self._index = position if position >= 0 else None

    def get_current_frame(self, stream_names: Iterable[str]) -> dict[str, Any] | None:
        """Return ``{stream: entry}`` for the current frame.

        Streams that are unknown or shorter than the timestamp list map to
        ``None``.
        """
        if self._index is None:
            return None
        frame: dict[str, Any] = {}
        for name in stream_names:
            entries = self._streams.get(name)
            frame[name] = entries[self._index] if entries is not None and self._index < len(entries) else None
        return frame
