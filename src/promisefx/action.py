"""Actions and transactions: batched settlement.

Wrapping writes in an @action or `with transaction()` defers re-evaluation
of eager derivations (state nodes, resolvers, reactions) until the
outermost scope exits. Invalidation still happens on each write, so
anything that reads inside the batch sees fresh values.

Settling both cells of a promise inside one transaction resolves the race
deterministically: the value cell is checked before the reject cell.
"""

from __future__ import annotations

import functools
from typing import TypeVar, Callable, ParamSpec
from contextlib import contextmanager
from promisefx._tracking import begin_batch, end_batch

P = ParamSpec("P")
R = TypeVar("R")


def action(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: batch all cell writes inside fn.

    Callbacks and reactions only fire after fn returns, not during.

    Usage:
        first = Deferred()
        second = Deferred()
        both = all_of(first.promise, second.promise)

        @action
        def load():
            first.resolve("a")
            second.resolve("b")
            # both.state is still pending in here
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        begin_batch()
        try:
            return fn(*args, **kwargs)
        finally:
            end_batch()

    return wrapper


@contextmanager
def transaction():
    """Context manager for batching writes.

    Usage:
        with transaction():
            value.set("ok")
            reason.set("too late")
            # the promise settles here, fulfilled
    """
    begin_batch()
    try:
        yield
    finally:
        end_batch()
