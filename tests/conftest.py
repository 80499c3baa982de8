"""Shared fixtures."""

import pytest


class _ForeignPromise:
    """Minimal thenable standing in for another promise library.

    Settles at most once; callbacks registered after settlement run
    immediately, like an already-resolved promise.
    """

    def __init__(self):
        self._callbacks = []
        self._outcome = None

    def then(self, on_fulfilled=None, on_rejected=None):
        if self._outcome is None:
            self._callbacks.append((on_fulfilled, on_rejected))
        else:
            self._deliver(on_fulfilled, on_rejected)

    def resolve(self, value):
        self._settle(("fulfilled", value))

    def reject(self, reason):
        self._settle(("rejected", reason))

    def _settle(self, outcome):
        if self._outcome is not None:
            return
        self._outcome = outcome
        callbacks, self._callbacks = self._callbacks, []
        for on_fulfilled, on_rejected in callbacks:
            self._deliver(on_fulfilled, on_rejected)

    def _deliver(self, on_fulfilled, on_rejected):
        kind, payload = self._outcome
        callback = on_fulfilled if kind == "fulfilled" else on_rejected
        if callback is not None:
            callback(payload)


@pytest.fixture
def foreign():
    """Factory for pending foreign promises."""
    return _ForeignPromise
