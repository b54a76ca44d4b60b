"""Memoized, pull-based selectors over a :class:`ReactiveStateStore`.

A selector wraps a pure function of N inputs. Each input is a store key,
another selector, or a zero-argument getter that reads only from the same
store. Nothing is recomputed on write; a read resolves the inputs and
recomputes only when one of them changed since the previous read, using the
store's identity rule (:func:`~pyvlog.state.store.same_value`).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any, Union

from pyvlog.exceptions import SelectorCycleError
from pyvlog.state.store import ReactiveStateStore, same_value

SelectorInput = Union[str, "Selector", Callable[[], Any]]

_UNSET = object()


class Selector:
    """A cached derivation node.

    Call the selector (or :meth:`read`) to get its current value. If the
    store version has not moved since the last evaluation the cached result
    is returned without touching the inputs at all.
    """

    def __init__(
        self,
        store: ReactiveStateStore,
        inputs: SelectorInput | Sequence[SelectorInput],
        compute: Callable[..., Any],
        *,
        name: str | None = None,
    ) -> None:
        if isinstance(inputs, (list, tuple)):
            self._inputs: tuple[SelectorInput, ...] = tuple(inputs)
        else:
            self._inputs = (inputs,)
        self._store = store
        self._compute = compute
        self.name = name or getattr(compute, "__name__", "selector")

        self._last_args: tuple[Any, ...] | None = None
        self._result: Any = _UNSET
        self._cached_version = -1
        self._evaluating = False
        self.recompute_count = 0

    def __repr__(self) -> str:
        return f"Selector({self.name!r})"

    def __call__(self) -> Any:
        return self.read()

    @property
    def inputs(self) -> tuple[SelectorInput, ...]:
        return self._inputs

    def _resolve(self, source: SelectorInput) -> Any:
        if isinstance(source, str):
            return self._store.get(source)
        return source()

    def read(self) -> Any:
        """Return the derived value, recomputing only if an input changed.

        Raises
        ------
        SelectorCycleError
            When this selector is reached again while it is still evaluating.
        """
        if self._evaluating:
            raise SelectorCycleError(f"Selector cycle detected at {self.name!r}", selector=self.name)

        version = self._store.version
        if self._result is not _UNSET and self._cached_version == version:
            return self._result

        self._evaluating = True
        try:
            args = tuple(self._resolve(source) for source in self._inputs)
            if self._result is _UNSET or not self._same_args(args):
                self._result = self._compute(*args)
                self._last_args = args
                self.recompute_count += 1
        finally:
            self._evaluating = False

        self._cached_version = version
        return self._result

    def _same_args(self, args: tuple[Any, ...]) -> bool:
        last = self._last_args
        if last is None or len(last) != len(args):
            return False
        return all(same_value(old, new) for old, new in zip(last, args))

    def invalidate(self) -> None:
        """Drop the cached result; the next read recomputes unconditionally."""
        self._result = _UNSET
        self._last_args = None
        self._cached_version = -1

    def upstream(self) -> Iterator[Selector]:
        """Yield every selector this one transitively depends on, once each."""
        seen: set[int] = {id(self)}
        stack: list[SelectorInput] = list(reversed(self._inputs))
        while stack:
            node = stack.pop()
            if not isinstance(node, Selector) or id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            stack.extend(reversed(node.inputs))


def create_selector(
    store: ReactiveStateStore,
    inputs: SelectorInput | Sequence[SelectorInput],
    compute: Callable[..., Any],
    *,
    name: str | None = None,
) -> Selector:
    """Build a :class:`Selector`; shorthand used by loaders."""
    return Selector(store, inputs, compute, name=name)
