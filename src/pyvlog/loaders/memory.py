"""In-memory transport over already materialized metadata and streams."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pyvlog.config import LoaderConfig
from pyvlog.loader import STREAMS_KEY, SYNCHRONIZER_KEY, LoaderInterface, LoaderState, LogSynchronizer
from pyvlog.models.metadata import LogMetadata
from pyvlog.state.events import EventType
from pyvlog.synchronizer import FrameSynchronizer

_logger = logging.getLogger(__name__)


class MemoryLoader(LoaderInterface):
    """Loader whose "transport" is a metadata object and a stream mapping.

    ``connect()`` publishes everything synchronously: streams and the
    synchronizer first, then metadata (which opens the loader and positions
    the cursor), then ``ready``, ``update`` and ``finish`` in that order.
    """

    def __init__(
        self,
        metadata: LogMetadata | Mapping[str, Any],
        streams: Mapping[str, Sequence[Any]],
        *,
        log_synchronizer: LogSynchronizer | None = None,
        config: LoaderConfig | None = None,
        **options: Any,
    ) -> None:
        super().__init__(config, **options)
        self._metadata = metadata if isinstance(metadata, LogMetadata) else LogMetadata.model_validate(metadata)
        self._streams = streams
        self._log_synchronizer = log_synchronizer

    def connect(self) -> None:
        self._transition(LoaderState.CONNECTING)
        try:
            self.set(STREAMS_KEY, self._streams)
            synchronizer = self._log_synchronizer
            if synchronizer is None:
                synchronizer = FrameSynchronizer(self.get_timestamps() or [], self._streams)
            self.set(SYNCHRONIZER_KEY, synchronizer)
            self._set_metadata(self._metadata)
        except Exception as err:
            _logger.debug("MemoryLoader connect failed", exc_info=True)
            self._fail(err)
            raise

        self.emit(EventType.READY, self._metadata)
        self.emit(EventType.UPDATE, self._streams)
        self.emit(EventType.FINISH, None)

    def close(self) -> None:
        self._transition(LoaderState.CLOSED)

    def get_buffer_range(self) -> tuple[float | None, float | None]:
        return (self._metadata.start_time, self._metadata.end_time)
