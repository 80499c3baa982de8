"""Observable cells: state that tracks its readers.

When an Observable is read inside a Computed or Reaction evaluation,
the dependency is automatically registered. When the Observable changes,
all dependents are invalidated and eager ones re-run.

All state lives in _anchor, instances are thin handles holding an _id.

`None` is the empty value: a cell holding None has not been written yet
as far as the promise layer is concerned.
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from promisefx._tracking import begin_batch, end_batch, schedule, track
from promisefx import _anchor
from promisefx.errors import DisposedError

T = TypeVar("T")

logger = logging.getLogger("promisefx.observable")


class Observable(Generic[T]):
    """A single observable value with automatic dependency tracking."""

    __slots__ = ("_id",)

    def __init__(self, value: T | None = None) -> None:
        self._id = _anchor.new_id()
        _anchor.values[self._id] = value
        _anchor.observers[self._id] = set()

    def get(self) -> T | None:
        """Read the value. If inside a derivation, registers the dependency."""
        value = self.peek()
        track(self)
        return value

    def peek(self) -> T | None:
        """Read the value without registering a dependency."""
        if self.disposed:
            raise DisposedError(f"Observable #{self._id} has been disposed")
        return _anchor.values[self._id]

    def set(self, value: T | None) -> None:
        """Write a new value and notify observers if it changed."""
        old = self.peek()
        if old is not value and old != value:
            _anchor.values[self._id] = value
            self._notify()

    def _notify(self) -> None:
        """Invalidate all observers, then re-run the eager ones."""
        begin_batch()
        try:
            for observer in list(_anchor.observers[self._id]):
                schedule(observer)
        finally:
            end_batch()

    def _add_observer(self, observer) -> None:
        _anchor.observers[self._id].add(observer)

    def _remove_observer(self, observer) -> None:
        """Remove an observer. Called during dependency cleanup."""
        _anchor.observers.get(self._id, set()).discard(observer)

    @property
    def disposed(self) -> bool:
        return self._id not in _anchor.values

    def dispose(self) -> None:
        """Release the value and observer set. Reading afterwards raises DisposedError."""
        _anchor.release(self._id)

    def __repr__(self) -> str:
        if self.disposed:
            return "Observable(disposed)"
        return f"Observable({_anchor.values[self._id]!r})"


class WriteOnce(Generic[T]):
    """A cell that accepts only its first non-empty write.

    Later writes are discarded, as are writes after dispose(), so several
    producers can race to settle the same cell without any locking:

        winner = WriteOnce()
        winner.set("a")
        winner.set("b")
        winner.get()  # "a"
    """

    __slots__ = ("_cell",)

    def __init__(self, cell: Observable[T] | None = None) -> None:
        self._cell = cell if cell is not None else Observable()

    def get(self) -> T | None:
        return self._cell.get()

    def peek(self) -> T | None:
        return self._cell.peek()

    def set(self, value: T | None) -> None:
        if not self._cell.disposed and self._cell.peek() is None:
            self._cell.set(value)
        else:
            logger.debug("Discarded write of %r to %r", value, self)

    @property
    def written(self) -> bool:
        """Has the first non-empty write landed?"""
        return not self._cell.disposed and self._cell.peek() is not None

    @property
    def disposed(self) -> bool:
        return self._cell.disposed

    def dispose(self) -> None:
        self._cell.dispose()

    def __repr__(self) -> str:
        if self._cell.disposed:
            return "WriteOnce(disposed)"
        return f"WriteOnce({self._cell.peek()!r})"
