"""to_promise(): the conversion entry point.

Turns anything into a PromiseNode:

- a PromiseNode comes back as-is;
- a foreign promise (anything with then(on_fulfilled, on_rejected)) is
  subscribed to, and whichever callback it calls settles a fresh node;
- a reactive cell is wrapped in place and settles when it is first
  written with something other than None. The cell stays the caller's:
  the node never writes or disposes it;
- any other value gives a node that is fulfilled from the start.
"""

from __future__ import annotations

import logging
from typing import Any

from promisefx.errors import EmptySettlementError
from promisefx.inputs import InputKind, classify
from promisefx.observable import Observable
from promisefx.promise import Deferred, PromiseNode, wrap

logger = logging.getLogger("promisefx.convert")


def to_promise(obj: Any) -> PromiseNode:
    """Normalize a promise-node, foreign promise, cell, or value (or an Input)."""
    source = classify(obj)

    if source.kind is InputKind.NODE:
        return source.payload

    if source.kind is InputKind.PROMISE:
        return _from_foreign(source.payload)

    if source.kind is InputKind.CELL:
        return wrap(source.payload, owns_value=False)

    if source.payload is None:
        raise EmptySettlementError("a promise cannot settle with None")
    return wrap(Observable(source.payload), None, True)


def _from_foreign(foreign) -> PromiseNode:
    deferred: Deferred = Deferred()
    logger.debug("Subscribing to foreign promise %r", foreign)
    foreign.then(deferred.resolve, deferred.reject)
    return deferred.promise

