"""Dependency tracking engine.

Uses contextvars to track which cells are read during a computed/reaction
evaluation, building the dependency graph automatically.

Invalidation is always immediate: a write marks every dependent computed
dirty straight away. Re-evaluation of eager derivations (reactions, eager
computeds) is deferred while inside an @action or `with transaction()` and
flushed once at the end of the outermost scope. A lone write is its own
batch, so the whole dependent graph is marked before anything re-runs and
eager derivations pull fresh values, dependencies first.
"""

from __future__ import annotations

import contextvars
import logging
from typing import TYPE_CHECKING, Callable, TypeVar

if TYPE_CHECKING:
    from promisefx.computed import Computed

    Derivation = Computed

T = TypeVar("T")

logger = logging.getLogger("promisefx.tracking")

# The currently-evaluating derivation (computed or reaction).
# When set, any cell read registers itself as a dependency.
current_derivation: contextvars.ContextVar[Derivation | None] = contextvars.ContextVar(
    "current_derivation", default=None
)

# Batch depth counter. When > 0, re-evaluation is deferred.
_batch_depth: int = 0

# Derivations that were invalidated during a batch, awaiting flush.
_pending: set[Derivation] = set()


def track(cell) -> None:
    """Register `cell` as a dependency of the currently-evaluating derivation."""
    derivation = current_derivation.get()
    if derivation is not None:
        cell._add_observer(derivation)
        derivation._dependencies.add(cell)


def begin_batch() -> None:
    """Enter a batching scope. Nested batches are supported."""
    global _batch_depth
    _batch_depth += 1


def end_batch() -> None:
    """Exit a batching scope. When the outermost scope exits, flush pending derivations."""
    global _batch_depth
    _batch_depth -= 1
    if _batch_depth == 0:
        _flush_pending()


def schedule(derivation: Derivation) -> None:
    """Invalidate a derivation and, if it is eager, re-evaluate it.

    Inside a batch the re-evaluation is deferred. Otherwise it runs
    immediately on the caller's stack.
    """
    if not derivation._invalidate():
        return
    if _batch_depth > 0:
        _pending.add(derivation)
    else:
        derivation._run()


def _flush_pending() -> None:
    """Run all pending derivations. Handles derivations scheduled during flush.

    One derivation raising does not stop the others: every pending
    derivation runs, then the first error is re-raised.
    """
    error: Exception | None = None
    while _pending:
        # Snapshot and clear, derivations may schedule new ones during run.
        batch = list(_pending)
        _pending.clear()
        for derivation in batch:
            try:
                derivation._run()
            except Exception as exc:
                if error is None:
                    error = exc
                else:
                    logger.error("Error in %r while flushing", derivation, exc_info=True)
    if error is not None:
        raise error


def untracked(fn: Callable[[], T]) -> T:
    """Call fn without registering any of its reads as dependencies.

    Usage:
        total = Computed(lambda: a.get() + untracked(b.get))
        # total re-evaluates when a changes, not when b does
    """
    token = current_derivation.set(None)
    try:
        return fn()
    finally:
        current_derivation.reset(token)


def get_pending_count() -> int:
    """Number of derivations waiting to run. Useful for testing."""
    return len(_pending)
