"""Resolver nodes: the chaining primitive under PromiseNode.then().

A Resolver mirrors a source cell once a state node reaches a target state,
optionally passing the source value through a callback on the way. The
callback fires at most once; whatever it returns is cached as the
resolver's value for good. A None return falls back to the raw source
value.

Resolvers are eager computeds, so callbacks run synchronously on the stack
of whichever write settled the state. The callback body is untracked:
cells it reads or writes never become dependencies of the resolver.

A callback that raises still counts as fired. The error propagates to the
writer, and the next evaluation falls back to the raw source value, so the
chained node settles with the parent's value on the same path.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from promisefx._tracking import untracked
from promisefx.computed import Computed
from promisefx.state import State

T = TypeVar("T")

logger = logging.getLogger("promisefx.resolver")


class Resolver(Computed[T]):
    """Fire a callback once when `state` reaches `target`, then hold its result."""

    __slots__ = ("_callback", "_source", "_state", "_target", "_fired", "_resolved")

    def __init__(self, callback: Callable | None, source, state, target: State) -> None:
        self._callback = callback
        self._source = source
        self._state = state
        self._target = target
        self._fired = False
        self._resolved = None
        super().__init__(self._evaluate, eager=True)

    @property
    def fired(self) -> bool:
        return self._fired

    def _evaluate(self):
        if self._state.get() != self._target:
            return None

        if self._callback is not None and not self._fired:
            # Flag first: a callback that raises still counts as fired.
            self._fired = True
            value = self._source.get()
            logger.debug("Firing %r for %s", self._callback, self._target)
            self._resolved = untracked(lambda: self._callback(value))

        if self._resolved is None:
            self._resolved = self._source.get()

        return self._resolved

    def __repr__(self) -> str:
        name = getattr(self._callback, "__name__", None) if self._callback else None
        return f"Resolver({name or 'passthrough'}, {self._target}, fired={self._fired})"


def resolve(callback: Callable | None, source, state, target: State) -> Resolver:
    """Build a resolver node over `source`, gated on `state == target`."""
    return Resolver(callback, source, state, target)
