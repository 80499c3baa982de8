"""Reactions: side effects driven by a tracked data function.

A Reaction is an eager Computed over data_fn. Whenever a cell data_fn read
changes, data_fn re-runs on the writer's stack (or at the end of the
enclosing batch), and effect_fn is called with the result if it differs
from the previous one. effect_fn itself runs outside any tracking scope.

    node = to_promise(cell)
    r = reaction(node.state.get, print)
    cell.set("ready")  # prints "fulfilled"
    r.dispose()
"""

from __future__ import annotations

from typing import Callable, TypeVar

from promisefx._tracking import untracked
from promisefx.computed import Computed

T = TypeVar("T")


class Reaction(Computed[T]):
    """Call effect_fn with each new result of data_fn."""

    __slots__ = ("_effect_fn", "_last")

    def __init__(
        self,
        data_fn: Callable[[], T],
        effect_fn: Callable[[T], None],
        *,
        fire_immediately: bool = False,
    ) -> None:
        self._effect_fn = effect_fn
        super().__init__(data_fn, eager=True)
        self._last = self.peek()
        if fire_immediately:
            untracked(lambda: effect_fn(self._last))

    def _run(self) -> None:
        if self.disposed:
            return
        value = self.peek()
        if value != self._last:
            self._last = value
            untracked(lambda: self._effect_fn(value))

    def __repr__(self) -> str:
        if self.disposed:
            return "Reaction(disposed)"
        return f"Reaction({getattr(self._fn, '__name__', 'data_fn')}, {self._last!r})"


def reaction(
    data_fn: Callable[[], T],
    effect_fn: Callable[[T], None],
    *,
    fire_immediately: bool = False,
) -> Reaction[T]:
    """Track data_fn's cells; call effect_fn when the result changes.

    With fire_immediately, effect_fn also sees the first result. Returns
    the Reaction (call .dispose() to stop).
    """
    return Reaction(data_fn, effect_fn, fire_immediately=fire_immediately)
