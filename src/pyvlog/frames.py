"""Eagerly decoded, random-access frame storage for one recording."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from pyvlog.exceptions import IndexOutOfRangeError, RecordCountMismatchError, TimestampOrderError
from pyvlog.ingestion.decoder import decode_sample
from pyvlog.models.samples import FrameEntry, PoseSample

_logger = logging.getLogger(__name__)


class FrameStore:
    """All decoded frames of a recording, indexed by frame number.

    Every frame is decoded at construction: trajectories need random access
    across the whole recording, not just the frame under the cursor.
    """

    def __init__(self, records: Sequence[Mapping[str, Any]], timestamps: Sequence[Any]) -> None:
        if len(records) != len(timestamps):
            raise RecordCountMismatchError(
                f"Got {len(records)} records but {len(timestamps)} timestamps",
                records=len(records),
                timestamps=len(timestamps),
            )

        frames = [decode_sample(record, ts, index=i) for i, (record, ts) in enumerate(zip(records, timestamps))]
        times = tuple(frame.pose.time for frame in frames)
        for i in range(1, len(times)):
            if times[i] < times[i - 1]:
                raise TimestampOrderError(
                    f"Timestamp {times[i]} at frame {i} precedes {times[i - 1]} at frame {i - 1}",
                    index=i,
                )

        self._frames: tuple[FrameEntry, ...] = tuple(frames)
        self._timestamps = times
        _logger.debug("Decoded %d frames", len(self._frames))

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[FrameEntry]:
        return iter(self._frames)

    def length(self) -> int:
        return len(self._frames)

    @property
    def timestamps(self) -> tuple[float, ...]:
        return self._timestamps

    def frame(self, index: int) -> FrameEntry:
        """Return the decoded frame at *index*.

        Negative indices are rejected rather than counted from the end.
        """
        if not 0 <= index < len(self._frames):
            raise IndexOutOfRangeError(
                f"Frame index {index} out of range [0, {len(self._frames)})",
                index=index,
                length=len(self._frames),
            )
        return self._frames[index]

    def pose(self, index: int) -> PoseSample:
        return self.frame(index).pose
