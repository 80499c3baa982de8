"""Data anchor: plain Python structures that hold all reactive state.

Cells and computeds are thin handles holding an _id; the raw values,
observer sets, and derivation bookkeeping live here. Disposal releases
an id's entries.
"""

import itertools

# Cell state
values: dict[int, object] = {}
observers: dict[int, set] = {}  # cell_id -> set of derivations

# Derivation state (Computed and its subclasses)
dependencies: dict[int, set] = {}  # deriv_id -> set of cell-like handles
dirty_flags: dict[int, bool] = {}
eager_flags: dict[int, bool] = {}
cached_values: dict[int, object] = {}
derivation_fns: dict[int, object] = {}  # deriv_id -> callable

_TABLES = (
    values,
    observers,
    dependencies,
    dirty_flags,
    eager_flags,
    cached_values,
    derivation_fns,
)

_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def release(id_: int) -> None:
    """Drop every entry held for id_."""
    for table in _TABLES:
        table.pop(id_, None)
