"""Settlement state: the latched lifecycle of a promise-node.

A StateNode watches a value cell and a reject cell and reports one of
PENDING, FULFILLED, REJECTED. The first time either cell holds something
other than None the node latches; from then on it returns the latched
state without reading the cells at all, so it also drops its
subscriptions.

StateNode is an eager Computed: the latch closes on the writer's stack,
even if nothing is reading the state yet.
"""

from __future__ import annotations

import logging
from enum import Enum

from promisefx.computed import Computed

logger = logging.getLogger("promisefx.state")


class State(str, Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"

    def __str__(self) -> str:
        return self.value


class StateNode(Computed[State]):
    """Derived, monotonic settlement state of a (value, reject) cell pair."""

    __slots__ = ("_value_cell", "_reject_cell", "_latched")

    def __init__(self, value_cell, reject_cell, *, start_fulfilled: bool = False) -> None:
        self._value_cell = value_cell
        self._reject_cell = reject_cell
        self._latched = State.FULFILLED if start_fulfilled else State.PENDING
        super().__init__(self._derive, eager=True)

    @property
    def latched(self) -> State:
        """The stored state, without evaluating or tracking."""
        return self._latched

    @property
    def settled(self) -> bool:
        return self._latched is not State.PENDING

    def _derive(self) -> State:
        if self._latched is not State.PENDING:
            return self._latched
        if self._value_cell.get() is not None:
            return self._transition(State.FULFILLED)
        if self._reject_cell.get() is not None:
            return self._transition(State.REJECTED)
        return State.PENDING

    def _transition(self, state: State) -> State:
        """Move out of PENDING. Settled nodes never move again."""
        if self._latched is State.PENDING:
            self._latched = state
            logger.debug("%r settled", self)
        return self._latched

    def __repr__(self) -> str:
        return f"StateNode({self._latched})"


def derive_state(value_cell, reject_cell, start_fulfilled: bool = False) -> StateNode:
    """Build the latched state node for a value/reject cell pair."""
    return StateNode(value_cell, reject_cell, start_fulfilled=start_fulfilled)
