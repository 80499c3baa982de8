"""Promise-nodes: promises that are also reactive cells.

A PromiseNode sits on a value cell and a reject cell. Its `state` is a
latched StateNode over the pair, and every chaining method builds a new,
independent PromiseNode out of Resolver nodes over the parent's cells.
There is no callback list anywhere: `then` is graph composition.

Reading a PromiseNode (`node.get()`) is a tracked read of its value cell,
so promises drop straight into Computeds and Reactions:

    user = to_promise(fetch_user())
    greeting = Computed(lambda: f"Hello {user.get()}" if user.get() else "...")

Rejections are values carried on the reject path. A `then` without an
`on_rejected` handler passes the parent's rejection through unchanged.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from promisefx.errors import DisposedError, EmptySettlementError
from promisefx.observable import Observable
from promisefx.resolver import resolve
from promisefx.state import State, StateNode, derive_state

T = TypeVar("T")

logger = logging.getLogger("promisefx.promise")


class PromiseNode(Generic[T]):
    """A promise whose eventual value is readable as a reactive cell."""

    __slots__ = (
        "_value_cell",
        "_reject_cell",
        "_state",
        "_owns_value",
        "_owns_reject",
        "_disposed",
    )

    def __init__(
        self,
        value_cell,
        reject_cell=None,
        already_fulfilled: bool = False,
        *,
        owns_value: bool = True,
        owns_reject: bool = True,
    ) -> None:
        if reject_cell is None:
            reject_cell = Observable()
            owns_reject = True
        self._value_cell = value_cell
        self._reject_cell = reject_cell
        self._owns_value = owns_value
        self._owns_reject = owns_reject
        self._disposed = False
        self._state = derive_state(value_cell, reject_cell, already_fulfilled)

    # --- Cell surface ---

    def get(self) -> T | None:
        """Read the eventual value. If inside a derivation, registers the dependency."""
        return self._value_cell.get()

    def peek(self) -> T | None:
        """Read the eventual value without registering a dependency."""
        return _peek(self._value_cell)

    @property
    def state(self) -> StateNode:
        return self._state

    @property
    def value(self) -> T | None:
        return self.peek()

    @property
    def reason(self):
        """The reject cell's current content, untracked."""
        return _peek(self._reject_cell)

    @property
    def disposed(self) -> bool:
        return self._disposed

    # --- Promise surface ---

    def then(
        self,
        on_fulfilled: Callable | None = None,
        on_rejected: Callable | None = None,
    ) -> PromiseNode:
        if self._disposed:
            raise DisposedError(f"cannot chain on disposed {self!r}")
        return PromiseNode(
            resolve(on_fulfilled, self._value_cell, self._state, State.FULFILLED),
            resolve(on_rejected, self._reject_cell, self._state, State.REJECTED),
        )

    def done(self, on_fulfilled: Callable) -> PromiseNode:
        return self.then(on_fulfilled)

    def catch(self, on_rejected: Callable) -> PromiseNode:
        return self.then(None, on_rejected)

    fail = catch

    def always(self, on_settled: Callable) -> PromiseNode:
        """Register on_settled on both paths; it fires for whichever settles."""
        return self.then(on_settled, on_settled)

    def dispose(self) -> None:
        """Tear down the state node and every cell this node owns. Idempotent.

        Owned cells release their reactive state, so reading a disposed
        node's value raises DisposedError.
        """
        if self._disposed:
            return
        logger.debug("Disposing %r", self)
        self._disposed = True
        self._state.dispose()
        if self._owns_reject:
            _dispose(self._reject_cell)
        if self._owns_value:
            _dispose(self._value_cell)

    def __repr__(self) -> str:
        if self._disposed:
            return "PromiseNode(disposed)"
        if self._state.latched is State.FULFILLED:
            return f"PromiseNode(fulfilled={self.value!r})"
        if self._state.latched is State.REJECTED:
            return f"PromiseNode(rejected={self.reason!r})"
        return "PromiseNode(pending)"


def wrap(
    value_cell,
    reject_cell=None,
    already_fulfilled: bool = False,
    *,
    owns_value: bool = True,
    owns_reject: bool = True,
) -> PromiseNode:
    """Attach the promise lifecycle to a value cell (and optional reject cell)."""
    return PromiseNode(
        value_cell,
        reject_cell,
        already_fulfilled,
        owns_value=owns_value,
        owns_reject=owns_reject,
    )


class Deferred(Generic[T]):
    """A promise settled from the outside.

    The first call to resolve() or reject() wins; later ones are ignored, as
    are settlements after the promise has been disposed.

        d = Deferred()
        d.promise.then(print)
        d.resolve("ready")  # prints "ready"
    """

    __slots__ = ("_value", "_reason", "_promise")

    def __init__(self) -> None:
        self._value: Observable[T] = Observable()
        self._reason: Observable = Observable()
        self._promise = PromiseNode(self._value, self._reason)

    @property
    def promise(self) -> PromiseNode[T]:
        return self._promise

    @property
    def settled(self) -> bool:
        if self._promise.disposed:
            return self._promise.state.settled
        return self._value.peek() is not None or self._reason.peek() is not None

    def resolve(self, value: T) -> None:
        self._settle(self._value, value)

    def reject(self, reason) -> None:
        self._settle(self._reason, reason)

    def _settle(self, cell: Observable, payload) -> None:
        if payload is None:
            raise EmptySettlementError("a promise cannot settle with None")
        if self._promise.disposed:
            logger.debug("Ignoring settlement of disposed %r", self._promise)
            return
        if self.settled:
            logger.warning("Ignoring settlement of already settled %r", self._promise)
            return
        cell.set(payload)


def _peek(cell):
    peek = getattr(cell, "peek", None)
    return peek() if peek is not None else cell.get()


def _dispose(cell) -> None:
    dispose = getattr(cell, "dispose", None)
    if dispose is not None:
        dispose()
