"""Textual integration for promisefx. Opt-in: requires textual.

on_settled() runs a UI effect once a promise-node settles, guarded so it
never touches the widget tree while the app is not running or is paused
for widget replacement. NoMatches from widget queries is swallowed; other
errors propagate. Settlements that happen off the app's thread are
marshaled through app.call_from_thread.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches
from promisefx.reaction import reaction as _reaction
from promisefx.state import State

logger = logging.getLogger("promisefx.textual")

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded effects during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def on_settled(app, node, effect_fn):
    """Call effect_fn(state, payload) when node settles, if the app is safe.

    payload is the value for a fulfilled node and the reason for a rejected
    one. An effect skipped because the app was unsafe is not replayed.
    Returns the underlying reaction (call .dispose() to stop).
    """
    _main = threading.get_ident()

    def _guarded(state):
        if state is State.PENDING:
            return
        # The state is latched, so this runs at most once per node.
        payload = node.peek() if state is State.FULFILLED else node.reason
        if not is_safe(app):
            logger.debug("App not safe, skipping settlement effect for %r", node)
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, state, payload)
        else:
            _safe(state, payload)

    def _safe(state, payload):
        try:
            effect_fn(state, payload)
        except NoMatches:
            logger.debug("Widget gone before settlement effect ran", exc_info=True)

    return _reaction(node.state.get, _guarded, fire_immediately=True)
