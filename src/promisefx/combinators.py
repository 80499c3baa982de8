"""Aggregation combinators over promises, cells, and plain values.

Both accept either one list/tuple of inputs or the inputs as separate
arguments:

    all_of([a, b, c]) == all_of(a, b, c)

all_of (alias when): fulfills with every input's value, in input order,
once all of them have settled. The first rejection rejects the aggregate
and freezes it; inputs still outstanding are not cancelled, only ignored.

race: settles like whichever input settles first, fulfilled or rejected.
A plain value in the inputs is already settled, so it wins on the spot
and later inputs are not even subscribed to.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from promisefx.convert import to_promise
from promisefx.errors import EmptySettlementError
from promisefx.inputs import Input, classify
from promisefx.observable import Observable, WriteOnce
from promisefx.promise import PromiseNode, wrap

logger = logging.getLogger("promisefx.combinators")


def _normalize(inputs: tuple) -> list[Input]:
    if len(inputs) == 1 and isinstance(inputs[0], (list, tuple)):
        inputs = inputs[0]
    return [classify(obj) for obj in inputs]


def all_of(*inputs: Any) -> PromiseNode[list]:
    sources = _normalize(inputs)
    results: list = [None] * len(sources)
    remaining = len(sources)
    resolved: Observable[list] = Observable()
    rejection: WriteOnce = WriteOnce()

    def recorder(index: int) -> Callable[[Any], None]:
        def record(value: Any) -> None:
            nonlocal remaining
            results[index] = value
            remaining -= 1
            if remaining == 0 and not resolved.disposed:
                resolved.set(results)

        return record

    logger.debug("all_of over %d inputs", len(sources))
    if not sources:
        resolved.set(results)
    for index, source in enumerate(sources):
        if source.is_eventual:
            to_promise(source).then(recorder(index), rejection.set)
        else:
            recorder(index)(source.payload)

    return wrap(resolved, rejection)


when = all_of


def race(*inputs: Any) -> PromiseNode:
    winner: WriteOnce = WriteOnce()
    loser: WriteOnce = WriteOnce()

    def settle(cell: WriteOnce) -> Callable[[Any], None]:
        # One gate across both cells: a late rejection cannot follow a win.
        def write(payload: Any) -> None:
            if winner.written or loser.written:
                logger.debug("race already settled, dropping %r", payload)
                return
            cell.set(payload)

        return write

    for source in _normalize(inputs):
        if source.is_eventual:
            to_promise(source).then(settle(winner), settle(loser))
            continue
        if source.payload is None:
            raise EmptySettlementError("a promise cannot settle with None")
        settle(winner)(source.payload)
        break

    return wrap(winner, loser)

