"""Versioned, observable key/value store.

Change detection follows an identity rule that downstream memoization
depends on:

* primitives (``None``, ``bool``, ``int``, ``float``, ``str``, ``bytes``)
  of the same type compare by value;
* everything else compares by identity.

Setting an equal-but-new composite (a rebuilt dict, a fresh model) is a
change: it bumps the version, notifies listeners and makes every selector
reading that key recompute. Callers that want to avoid recomputation keep
passing the same object.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pyvlog.exceptions import ReentrantMutationError

_logger = logging.getLogger(__name__)

Listener = Callable[[int], Any]

_PRIMITIVES = (type(None), bool, int, float, str, bytes)


def _kind(value: Any) -> type:
    # int and float are one numeric kind; bool stays its own.
    return float if type(value) is int else type(value)


def same_value(old: Any, new: Any) -> bool:
    """Return True when *new* should be treated as unchanged from *old*."""
    if old is new:
        return True
    if _kind(old) is not _kind(new) or not isinstance(old, _PRIMITIVES):
        return False
    return bool(old == new)


class ReactiveStateStore:
    """In-memory store with a monotonically increasing version.

    Listeners are called synchronously as ``listener(version)``, once per
    committed mutation, in subscription order and after the value is
    stored. Fan-out runs over a snapshot of the listener list, so
    subscribing or unsubscribing from inside a listener takes effect from
    the next mutation.
    """

    def __init__(self) -> None:
        self._state: dict[str, Any] = {}
        self._version = 0
        self._listeners: list[Listener] = []
        self._notifying: set[str] = set()

    @property
    def version(self) -> int:
        return self._version

    def get(self, key: str, default: Any = None) -> Any:
        return self._state.get(key, default)

    def set(self, key: str, value: Any) -> bool:
        """Store *value* under *key*.

        Returns False (no version bump, no notification) when the value is
        unchanged under the identity rule.

        Raises
        ------
        ReentrantMutationError
            When a listener being notified about *key* tries to change it.
        """
        if key in self._state and same_value(self._state[key], value):
            return False
        if key not in self._state and value is None:
            # Unset and None read the same through get().
            return False
        if key in self._notifying:
            raise ReentrantMutationError(f"Listener attempted to set {key!r} during its own notification", key=key)

        self._state[key] = value
        self._version += 1
        version = self._version

        self._notifying.add(key)
        try:
            for listener in tuple(self._listeners):
                listener(version)
        finally:
            self._notifying.discard(key)
        return True

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            _logger.debug("unsubscribe: listener %r was not subscribed", listener)

    def snapshot(self) -> dict[str, Any]:
        """Shallow copy of the current key/value mapping."""
        return dict(self._state)
