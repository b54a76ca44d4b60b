"""Synchronized loader: the public access surface over a time cursor.

A loader owns a :class:`~pyvlog.state.store.ReactiveStateStore` holding
``metadata``, ``streams``, ``logSynchronizer`` and ``timestamp``. All
"current" views are memoized selectors over those keys, so advancing the
cursor only recomputes what actually depends on it.

Concrete transports subclass :class:`LoaderInterface` and implement
:meth:`~LoaderInterface.connect` / :meth:`~LoaderInterface.close`; they feed
data in through :meth:`~LoaderInterface.set` and
:meth:`~LoaderInterface._set_metadata`.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Any, Protocol

from pyvlog.config import LoaderConfig
from pyvlog.exceptions import LoaderStateError, TransportNotImplementedError
from pyvlog.ingestion.normalize import is_finite_number
from pyvlog.models.metadata import LogMetadata, StreamCategory, StreamMetadata, StreamType
from pyvlog.state.events import EventCallback, EventEmitter, EventType
from pyvlog.state.selectors import create_selector
from pyvlog.state.store import Listener, ReactiveStateStore

_logger = logging.getLogger(__name__)

TIMESTAMP_KEY = "timestamp"
METADATA_KEY = "metadata"
STREAMS_KEY = "streams"
SYNCHRONIZER_KEY = "logSynchronizer"


class LogSynchronizer(Protocol):
    """External collaborator mapping a global timestamp to per-stream slices."""

    def set_time(self, timestamp: float) -> None: ...

    def get_current_frame(self, streams: Mapping[str, StreamMetadata]) -> Any: ...


class LoaderState(StrEnum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    ERROR = "error"


_TRANSITIONS: dict[LoaderState, frozenset[LoaderState]] = {
    LoaderState.IDLE: frozenset({LoaderState.CONNECTING, LoaderState.OPEN, LoaderState.CLOSED, LoaderState.ERROR}),
    LoaderState.CONNECTING: frozenset({LoaderState.OPEN, LoaderState.CLOSED, LoaderState.ERROR}),
    LoaderState.OPEN: frozenset({LoaderState.CLOSED, LoaderState.ERROR}),
    LoaderState.ERROR: frozenset({LoaderState.CLOSED}),
    LoaderState.CLOSED: frozenset(),
}


@dataclasses.dataclass(frozen=True)
class TimeSeries:
    """One ``time_series`` stream flattened to ``(time, value)`` points."""

    name: str
    unit: str | None
    points: tuple[tuple[float, Any], ...]


def clamp(value: float, low: float | None, high: float | None) -> float:
    # The lower bound is applied last so it wins when low > high.
    if high is not None and value > high:
        value = high
    if low is not None and value < low:
        value = low
    return value


def _entry_field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def _first_image(frame: Any) -> Any:
    images = _entry_field(frame, "images") if frame is not None else None
    if not images:
        return None
    return images[0]


def _stamp_image(image: Any, timestamp: float | None) -> Any:
    """Copy *image* with ``timestamp`` set; never mutates the stream payload."""
    if timestamp is None:
        return image
    if isinstance(image, Mapping):
        return {**image, "timestamp": timestamp}
    if dataclasses.is_dataclass(image) and any(f.name == "timestamp" for f in dataclasses.fields(image)):
        return dataclasses.replace(image, timestamp=timestamp)
    if hasattr(image, "model_copy"):
        return image.model_copy(update={"timestamp": timestamp})
    return image


class LoaderInterface:
    """Base loader: store, events, time cursor and derived selectors."""

    def __init__(self, config: LoaderConfig | None = None, **options: Any) -> None:
        self.config = config or LoaderConfig()
        self.options = options
        self._store = ReactiveStateStore()
        self._events = EventEmitter()
        self._state = LoaderState.IDLE

        store = self._store
        self.get_log_start_time = create_selector(
            store,
            self.get_metadata,
            self._compute_log_start_time,
            name="log_start_time",
        )
        self.get_log_end_time = create_selector(
            store,
            self.get_metadata,
            lambda metadata: metadata.end_time if metadata is not None else None,
            name="log_end_time",
        )
        self.get_current_frame = create_selector(
            store,
            [self.get_log_synchronizer, self.get_metadata, self.get_current_time],
            self._compute_current_frame,
            name="current_frame",
        )
        self.get_time_domain = create_selector(
            store,
            [self.get_log_start_time, self.get_log_end_time],
            lambda start, end: (start, end),
            name="time_domain",
        )
        self.get_time_series = create_selector(
            store,
            [self.get_metadata, self.get_streams],
            self._compute_time_series,
            name="time_series",
        )
        self.get_timestamps = create_selector(
            store,
            self.get_streams,
            self._compute_timestamps,
            name="timestamps",
        )
        self.get_image_stream_names = create_selector(
            store,
            self.get_metadata,
            self._compute_image_stream_names,
            name="image_stream_names",
        )
        self.get_image_frames = create_selector(
            store,
            [self.get_image_stream_names, self.get_streams, self.get_timestamps],
            self._compute_image_frames,
            name="image_frames",
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event_type: str, callback: EventCallback) -> LoaderInterface:
        self._events.on(event_type, callback)
        return self

    def off(self, event_type: str, callback: EventCallback) -> LoaderInterface:
        self._events.off(event_type, callback)
        return self

    def emit(self, event_type: str, payload: Any = None) -> None:
        if self.config.debug:
            _logger.debug("emit %s", event_type)
        self._events.emit(event_type, payload)

    # ------------------------------------------------------------------
    # Store passthrough
    # ------------------------------------------------------------------

    @property
    def version(self) -> int:
        return self._store.version

    def subscribe(self, listener: Listener) -> None:
        self._store.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._store.unsubscribe(listener)

    def get(self, key: str) -> Any:
        return self._store.get(key)

    def set(self, key: str, value: Any) -> bool:
        return self._store.set(key, value)

    # ------------------------------------------------------------------
    # Connection API
    # ------------------------------------------------------------------

    @property
    def state(self) -> LoaderState:
        return self._state

    def is_open(self) -> bool:
        return self._state == LoaderState.OPEN

    def connect(self) -> None:
        raise TransportNotImplementedError(f"{type(self).__name__}.connect() must be implemented by a transport")

    def close(self) -> None:
        raise TransportNotImplementedError(f"{type(self).__name__}.close() must be implemented by a transport")

    def get_buffer_range(self) -> Any:
        raise TransportNotImplementedError(
            f"{type(self).__name__}.get_buffer_range() must be implemented by a transport"
        )

    def seek(self, timestamp: float) -> None:
        """Move the time cursor.

        With metadata present the value is clamped to the log's time domain
        so the cursor never points outside what the synchronizer can serve.
        """
        if self.get_metadata() is not None:
            start = self.get_log_start_time()
            end = self.get_log_end_time()
            clamped = clamp(timestamp, start, end)
            if clamped != timestamp:
                _logger.debug("seek %s clamped to %s (domain %s..%s)", timestamp, clamped, start, end)
            timestamp = clamped
        self._store.set(TIMESTAMP_KEY, timestamp)

    # ------------------------------------------------------------------
    # Data selector API
    # ------------------------------------------------------------------

    def get_current_time(self) -> Any:
        return self._store.get(TIMESTAMP_KEY)

    def get_metadata(self) -> LogMetadata | None:
        return self._store.get(METADATA_KEY)

    def get_log_synchronizer(self) -> LogSynchronizer | None:
        return self._store.get(SYNCHRONIZER_KEY)

    def get_streams(self) -> Mapping[str, Sequence[Any]] | None:
        return self._store.get(STREAMS_KEY)

    def _compute_log_start_time(self, metadata: LogMetadata | None) -> float | None:
        if metadata is None or metadata.start_time is None:
            return None
        return metadata.start_time + self.config.time_window

    @staticmethod
    def _compute_current_frame(
        log_synchronizer: LogSynchronizer | None,
        metadata: LogMetadata | None,
        timestamp: Any,
    ) -> Any:
        if log_synchronizer is not None and metadata is not None and is_finite_number(timestamp):
            log_synchronizer.set_time(timestamp)
            return log_synchronizer.get_current_frame(metadata.streams)
        return None

    def _compute_timestamps(self, streams: Mapping[str, Sequence[Any]] | None) -> list[Any] | None:
        poses = streams.get(self.config.pose_stream) if streams else None
        if not poses:
            return None
        return [_entry_field(pose, "time") for pose in poses]

    @staticmethod
    def _compute_image_stream_names(metadata: LogMetadata | None) -> list[str] | None:
        if metadata is None:
            return None
        return [name for name, stream in metadata.streams.items() if stream.type == StreamType.IMAGE]

    def _compute_image_frames(
        self,
        image_stream_names: list[str] | None,
        streams: Mapping[str, Sequence[Any]] | None,
        timestamps: list[Any] | None,
    ) -> dict[str, list[Any] | None] | None:
        if not streams or image_stream_names is None:
            return None

        scale = self.config.image_time_scale
        frames: dict[str, list[Any] | None] = {}
        for name in image_stream_names:
            stream = streams.get(name)
            if stream is None:
                frames[name] = None
                continue
            aligned: list[Any] = []
            for i, frame in enumerate(stream):
                image = _first_image(frame)
                if image is None:
                    aligned.append(None)
                    continue
                ts = timestamps[i] if timestamps is not None and i < len(timestamps) else None
                aligned.append(_stamp_image(image, ts / scale if is_finite_number(ts) else None))
            frames[name] = aligned
        return frames

    @staticmethod
    def _compute_time_series(
        metadata: LogMetadata | None,
        streams: Mapping[str, Sequence[Any]] | None,
    ) -> list[TimeSeries] | None:
        if metadata is None or not streams:
            return None
        series: list[TimeSeries] = []
        for name, declaration in metadata.streams.items():
            if declaration.category != StreamCategory.TIME_SERIES or name not in streams:
                continue
            points = tuple(
                (_entry_field(entry, "timestamp"), _entry_field(entry, "value"))
                for entry in streams[name]
                if entry is not None
            )
            series.append(TimeSeries(name=name, unit=declaration.unit, points=points))
        return series

    # ------------------------------------------------------------------
    # Private actions (transport side)
    # ------------------------------------------------------------------

    def _transition(self, new_state: LoaderState) -> None:
        if new_state == self._state:
            return
        if new_state not in _TRANSITIONS[self._state]:
            raise LoaderStateError(f"Cannot move loader from {self._state} to {new_state}")
        _logger.debug("Loader %s -> %s", self._state, new_state)
        self._state = new_state

    def _fail(self, error: Any) -> None:
        """Record a transport failure and surface it as an ``error`` event."""
        if self._state != LoaderState.CLOSED:
            self._transition(LoaderState.ERROR)
        self.emit(EventType.ERROR, error)

    def _set_metadata(self, metadata: LogMetadata | Mapping[str, Any]) -> None:
        if not isinstance(metadata, LogMetadata):
            metadata = LogMetadata.model_validate(metadata)
        self._store.set(METADATA_KEY, metadata)
        if self._state in (LoaderState.IDLE, LoaderState.CONNECTING):
            self._transition(LoaderState.OPEN)

        timestamp = self._store.get(TIMESTAMP_KEY)
        new_timestamp = timestamp if is_finite_number(timestamp) else metadata.start_time
        if new_timestamp is not None:
            self.seek(new_timestamp)
