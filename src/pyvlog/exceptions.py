"""Custom exception hierarchy for pyvlog."""

from __future__ import annotations


class VlogError(Exception):
    """Base exception for all pyvlog errors."""


class MalformedSampleError(VlogError):
    """A raw per-frame record has a missing or non-numeric field."""

    def __init__(self, message: str, *, field: str, index: int | None = None) -> None:
        self.field = field
        self.index = index
        super().__init__(message)


class RecordCountMismatchError(VlogError):
    """Record and timestamp sequences handed to the frame store differ in length."""

    def __init__(self, message: str, *, records: int, timestamps: int) -> None:
        self.records = records
        self.timestamps = timestamps
        super().__init__(message)


class TimestampOrderError(VlogError):
    """The timestamp sequence decreases somewhere."""

    def __init__(self, message: str, *, index: int) -> None:
        self.index = index
        super().__init__(message)


class IndexOutOfRangeError(VlogError, IndexError):
    """Frame index outside ``[0, length)``."""

    def __init__(self, message: str, *, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(message)


class EmptyTrajectoryWindowError(VlogError):
    """A trajectory was requested over an empty frame window."""


class SelectorCycleError(VlogError):
    """A selector was re-entered while it was still being evaluated.

    Selector graphs must be acyclic; hitting this is a wiring bug in the
    caller, never a transient condition.
    """

    def __init__(self, message: str, *, selector: str = "") -> None:
        self.selector = selector
        super().__init__(message)


class ReentrantMutationError(VlogError):
    """A store listener tried to ``set`` the key it is being notified about."""

    def __init__(self, message: str, *, key: str) -> None:
        self.key = key
        super().__init__(message)


class LoaderStateError(VlogError):
    """Illegal loader state transition (e.g. leaving ``CLOSED``)."""


class TransportNotImplementedError(VlogError, NotImplementedError):
    """A transport hook (``connect``/``close``/...) was not overridden."""
