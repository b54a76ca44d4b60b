"""pyvlog - Time-synchronized access to recorded vehicle pose telemetry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyvlog")
except PackageNotFoundError:
    __version__ = "0+local"
from pyvlog.config import LoaderConfig
from pyvlog.exceptions import (
    EmptyTrajectoryWindowError,
    IndexOutOfRangeError,
    LoaderStateError,
    MalformedSampleError,
    RecordCountMismatchError,
    ReentrantMutationError,
    SelectorCycleError,
    TimestampOrderError,
    TransportNotImplementedError,
    VlogError,
)
from pyvlog.frames import FrameStore
from pyvlog.ingestion.converter import PoseConverter
from pyvlog.ingestion.decoder import decode_sample
from pyvlog.loader import LoaderInterface, LoaderState, TimeSeries
from pyvlog.loaders.memory import MemoryLoader
from pyvlog.models import (
    AccelerationSample,
    FrameEntry,
    LogMetadata,
    PoseSample,
    StreamCategory,
    StreamMetadata,
    StreamType,
    VelocitySample,
)
from pyvlog.state.events import EventType
from pyvlog.state.selectors import Selector, create_selector
from pyvlog.state.store import ReactiveStateStore
from pyvlog.synchronizer import FrameSynchronizer
from pyvlog.trajectory import (
    LocalTangentProjection,
    PlanarProjection,
    TrajectoryBuilder,
    TrajectoryVertex,
    forward_window,
)

__all__ = [
    "__version__",
    "AccelerationSample",
    "EmptyTrajectoryWindowError",
    "EventType",
    "FrameEntry",
    "FrameStore",
    "FrameSynchronizer",
    "IndexOutOfRangeError",
    "LoaderConfig",
    "LoaderInterface",
    "LoaderState",
    "LoaderStateError",
    "LocalTangentProjection",
    "LogMetadata",
    "MalformedSampleError",
    "MemoryLoader",
    "PlanarProjection",
    "PoseConverter",
    "PoseSample",
    "ReactiveStateStore",
    "RecordCountMismatchError",
    "ReentrantMutationError",
    "Selector",
    "SelectorCycleError",
    "StreamCategory",
    "StreamMetadata",
    "StreamType",
    "TimeSeries",
    "TimestampOrderError",
    "TrajectoryBuilder",
    "TrajectoryVertex",
    "TransportNotImplementedError",
    "VelocitySample",
    "VlogError",
    "create_selector",
    "decode_sample",
    "forward_window",
]
