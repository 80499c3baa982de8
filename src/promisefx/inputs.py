"""Input classification for the conversion entry point and combinators.

Every input to to_promise(), all_of() and race() is one of four kinds.
classify() is the only place that probes an object's capabilities; callers
that already know what they hold can build an Input directly and skip it:

    to_promise(Input.cell(settings))   # never mistaken for a thenable
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from promisefx.computed import Computed
from promisefx.observable import Observable, WriteOnce
from promisefx.promise import PromiseNode

# Everything that offers a tracked get().
CELL_TYPES = (Observable, WriteOnce, Computed)


class InputKind(Enum):
    VALUE = "value"
    CELL = "cell"
    PROMISE = "promise"
    NODE = "node"


@dataclass(frozen=True, slots=True)
class Input:
    kind: InputKind
    payload: Any

    @classmethod
    def value(cls, payload: Any) -> Input:
        return cls(InputKind.VALUE, payload)

    @classmethod
    def cell(cls, payload: Any) -> Input:
        return cls(InputKind.CELL, payload)

    @classmethod
    def promise(cls, payload: Any) -> Input:
        return cls(InputKind.PROMISE, payload)

    @classmethod
    def node(cls, payload: PromiseNode) -> Input:
        return cls(InputKind.NODE, payload)

    @property
    def is_eventual(self) -> bool:
        """Does this input settle later rather than being a plain value?"""
        return self.kind is not InputKind.VALUE


def classify(obj: Any) -> Input:
    """Wrap obj in an Input. An Input passes through untouched."""
    if isinstance(obj, Input):
        return obj
    if isinstance(obj, PromiseNode):
        return Input.node(obj)
    if isinstance(obj, CELL_TYPES):
        return Input.cell(obj)
    if callable(getattr(obj, "then", None)):
        return Input.promise(obj)
    return Input.value(obj)
