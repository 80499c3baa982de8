"""promisefx: promises that are also reactive cells."""

from importlib.metadata import version as _version

__version__ = _version("promisefx")

from promisefx._tracking import get_pending_count, untracked
from promisefx.observable import Observable, WriteOnce
from promisefx.computed import Computed, computed
from promisefx.reaction import Reaction, reaction
from promisefx.action import action, transaction
from promisefx.errors import PromiseError, EmptySettlementError, DisposedError
from promisefx.state import State, StateNode, derive_state
from promisefx.resolver import Resolver, resolve
from promisefx.promise import PromiseNode, Deferred, wrap
from promisefx.inputs import Input, InputKind, classify
from promisefx.convert import to_promise
from promisefx.combinators import all_of, when, race
# textual NOT auto-imported, opt-in only

__all__ = [
    "Observable",
    "WriteOnce",
    "Computed",
    "computed",
    "Reaction",
    "reaction",
    "action",
    "transaction",
    "untracked",
    "get_pending_count",
    "PromiseError",
    "EmptySettlementError",
    "DisposedError",
    "State",
    "StateNode",
    "derive_state",
    "Resolver",
    "resolve",
    "PromiseNode",
    "Deferred",
    "wrap",
    "Input",
    "InputKind",
    "classify",
    "to_promise",
    "all_of",
    "when",
    "race",
]
