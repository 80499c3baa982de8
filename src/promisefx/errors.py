"""promisefx error hierarchy.

Rejections are values on the reject path, not exceptions. These classes
only report misuse at the API boundary.
"""


class PromiseError(Exception):
    """Base error for all promisefx operations."""


class EmptySettlementError(PromiseError, ValueError):
    """A promise cannot settle with None: None means "not settled yet"."""


class DisposedError(PromiseError):
    """Operation on a promise-node or cell that has already been disposed."""
