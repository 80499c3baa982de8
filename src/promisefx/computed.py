"""Computed values: derived state with automatic dependency tracking.

A Computed wraps a function. When evaluated, it tracks which cells
the function reads and caches the result. When any dependency changes,
the cached value is invalidated.

By default a Computed is lazy, it only recomputes when read. An eager
Computed evaluates once at construction and re-evaluates as soon as it is
invalidated, on the writer's stack. Eager computeds pull their
dependencies, so a lazy dependency is always brought up to date first.

All state lives in _anchor, instances are thin handles holding an _id.
"""

from __future__ import annotations

from typing import TypeVar, Generic, Callable
from promisefx._tracking import current_derivation, schedule, track
from promisefx import _anchor
from promisefx.errors import DisposedError

T = TypeVar("T")

_UNSET = object()


class Computed(Generic[T]):
    """A derived value that auto-tracks dependencies and caches the result."""

    __slots__ = ("_id",)

    def __init__(self, fn: Callable[[], T], *, eager: bool = False) -> None:
        self._id = _anchor.new_id()
        _anchor.derivation_fns[self._id] = fn
        _anchor.cached_values[self._id] = _UNSET
        _anchor.dirty_flags[self._id] = True
        _anchor.eager_flags[self._id] = eager
        _anchor.dependencies[self._id] = set()
        _anchor.observers[self._id] = set()
        if eager:
            self._recompute()

    @property
    def _fn(self) -> Callable[[], T]:
        return _anchor.derivation_fns[self._id]

    @property
    def _dependencies(self) -> set:
        return _anchor.dependencies[self._id]

    @_dependencies.setter
    def _dependencies(self, value: set) -> None:
        _anchor.dependencies[self._id] = value

    @property
    def eager(self) -> bool:
        return _anchor.eager_flags.get(self._id, False)

    @property
    def disposed(self) -> bool:
        return self._id not in _anchor.derivation_fns

    def get(self) -> T:
        """Read the computed value. Recomputes if dirty."""
        value = self.peek()
        track(self)
        return value

    def peek(self) -> T:
        """Read the computed value without registering a dependency."""
        if self.disposed:
            raise DisposedError(f"{type(self).__name__} #{self._id} has been disposed")
        if _anchor.dirty_flags[self._id]:
            self._recompute()
        return _anchor.cached_values[self._id]

    def _recompute(self) -> None:
        """Re-evaluate the function, tracking dependencies."""
        for dep in _anchor.dependencies[self._id]:
            dep._remove_observer(self)
        _anchor.dependencies[self._id].clear()

        token = current_derivation.set(self)
        try:
            _anchor.cached_values[self._id] = self._fn()
        finally:
            current_derivation.reset(token)

        _anchor.dirty_flags[self._id] = False

    def _invalidate(self) -> bool:
        """Mark dirty and propagate to our own observers.

        Returns True when the scheduler should re-evaluate us (eager only).
        """
        if _anchor.dirty_flags.get(self._id, True):
            return False
        _anchor.dirty_flags[self._id] = True
        for observer in list(_anchor.observers[self._id]):
            schedule(observer)
        return _anchor.eager_flags[self._id]

    def _run(self) -> None:
        """Called by the scheduler for eager computeds after invalidation.

        A dependent may already have pulled a fresh value through get().
        """
        if _anchor.dirty_flags.get(self._id, False):
            self._recompute()

    def _add_observer(self, observer) -> None:
        _anchor.observers[self._id].add(observer)

    def _remove_observer(self, observer) -> None:
        _anchor.observers.get(self._id, set()).discard(observer)

    def dispose(self) -> None:
        """Disconnect from all dependencies and release this computed's state.

        Reading a disposed computed raises DisposedError. Idempotent.
        """
        if self.disposed:
            return
        for dep in _anchor.dependencies[self._id]:
            dep._remove_observer(self)
        _anchor.release(self._id)

    def __repr__(self) -> str:
        if self.disposed:
            return f"{type(self).__name__}(disposed)"
        dirty = _anchor.dirty_flags[self._id]
        val = _anchor.cached_values[self._id]
        state = "dirty" if dirty else f"cached={val!r}"
        name = getattr(self._fn, "__name__", type(self).__name__)
        return f"Computed({name}, {state})"


def computed(fn: Callable[[], T]) -> Computed[T]:
    """Decorator/factory to create a Computed from a function.

    Usage:
        counter = Observable(0)

        @computed
        def doubled():
            return counter.get() * 2

        doubled.get()  # 0
        counter.set(5)
        doubled.get()  # 10
    """
    return Computed(fn)
