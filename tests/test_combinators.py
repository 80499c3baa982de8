"""Tests for all_of / when and race."""

import pytest

from promisefx import _anchor
from promisefx import (
    Deferred,
    EmptySettlementError,
    Observable,
    PromiseNode,
    State,
    all_of,
    race,
    to_promise,
    when,
)


class TestAllOf:
    def test_is_a_promise_node(self):
        assert isinstance(all_of([Observable(), Observable()]), PromiseNode)

    def test_when_is_an_alias(self):
        assert when is all_of

    def test_fulfills_after_last_write(self):
        a = Observable()
        b = Observable()
        aggregate = all_of([a, b])
        a.set("p")
        assert aggregate.state.get() is State.PENDING
        b.set("q")
        assert aggregate.state.get() is State.FULFILLED
        assert aggregate.get() == ["p", "q"]

    def test_keeps_input_order(self):
        first = Deferred()
        second = Deferred()
        seen = []
        all_of([first.promise, second.promise]).then(seen.append)
        second.resolve("b")
        first.resolve("a")
        assert seen == [["a", "b"]]

    def test_variadic_arguments(self):
        a = Observable()
        b = Observable()
        aggregate = all_of(a, b)
        a.set("foo")
        b.set("bar")
        assert aggregate.get() == ["foo", "bar"]

    def test_mixed_values_and_promises(self, foreign):
        source = foreign()
        aggregate = all_of([5, source])
        source.resolve("x")
        assert aggregate.get() == [5, "x"]

    def test_plain_values_only(self):
        aggregate = all_of([1, 2])
        assert aggregate.state.get() is State.FULFILLED
        assert aggregate.get() == [1, 2]

    def test_empty(self):
        aggregate = all_of([])
        assert aggregate.state.get() is State.FULFILLED
        assert aggregate.get() == []

    def test_first_rejection_wins(self, foreign):
        cell = Observable()
        source = foreign()
        seen = []
        all_of([source, cell]).fail(seen.append)
        source.reject("foo")
        assert seen == ["foo"]

    def test_rejection_freezes_aggregate(self):
        first = Deferred()
        second = Deferred()
        aggregate = all_of(first.promise, second.promise)
        first.reject("first")
        second.reject("second")
        assert aggregate.state.get() is State.REJECTED
        assert aggregate.reason == "first"

    def test_later_fulfilments_are_inert(self):
        first = Deferred()
        second = Deferred()
        aggregate = all_of(first.promise, second.promise)
        first.reject("no")
        second.resolve("yes")
        assert aggregate.state.get() is State.REJECTED
        assert aggregate.get() is None

    def test_callback_fires_once(self):
        a = Observable()
        calls = []
        all_of([a]).then(calls.append)
        a.set(1)
        a.set(2)
        assert calls == [[1]]

    def test_settlement_after_dispose_is_dropped(self):
        first = Deferred()
        second = Deferred()
        third = Deferred()
        aggregate = all_of(first.promise, second.promise, third.promise)
        aggregate.dispose()
        first.resolve("a")
        second.reject("b")
        third.resolve("c")
        assert aggregate.disposed

    def test_dispose_releases_aggregate_cells(self):
        aggregate = all_of([1, 2])
        value_id = aggregate._value_cell._id
        aggregate.dispose()
        assert value_id not in _anchor.values


class TestRace:
    def test_is_a_promise_node(self):
        assert isinstance(race(["foo"]), PromiseNode)

    def test_plain_value_wins(self, foreign):
        slow = foreign()
        slower = foreign()
        seen = []
        race([slow, "foo", slower]).then(seen.append)
        slow.resolve("bar")
        slower.resolve("baz")
        assert seen == ["foo"]

    def test_plain_value_stops_subscription(self):
        later = Observable()
        node = race(["now", later])
        later.set("later")
        assert node.get() == "now"
        assert _anchor.observers[later._id] == set()

    def test_variadic_arguments(self):
        node = race("foo", "bar")
        assert isinstance(node, PromiseNode)
        assert node.get() == "foo"

    def test_first_rejection(self, foreign):
        source = foreign()
        seen = []
        race([source, Observable()]).fail(seen.append)
        source.reject("foo")
        assert seen == ["foo"]

    def test_first_settlement_decides(self):
        a = Deferred()
        b = Deferred()
        node = race(a.promise, b.promise)
        b.resolve("b")
        a.resolve("a")
        assert node.state.get() is State.FULFILLED
        assert node.get() == "b"

    def test_late_rejection_ignored(self):
        a = Deferred()
        b = Deferred()
        node = race(a.promise, b.promise)
        a.resolve("a")
        b.reject("b")
        assert node.state.get() is State.FULFILLED
        assert node.reason is None

    def test_late_fulfilment_ignored(self):
        a = Deferred()
        b = Deferred()
        node = race(a.promise, b.promise)
        a.reject("a")
        b.resolve("b")
        assert node.state.get() is State.REJECTED
        assert node.reason == "a"
        assert node.get() is None

    def test_already_settled_input_wins(self):
        node = race(to_promise("early"), "literal")
        assert node.get() == "early"

    def test_empty_stays_pending(self):
        assert race([]).state.get() is State.PENDING

    def test_none_value_refused(self):
        with pytest.raises(EmptySettlementError):
            race([None])

    def test_settlement_after_dispose_is_dropped(self):
        a = Deferred()
        b = Deferred()
        node = race(a.promise, b.promise)
        node.dispose()
        a.resolve("a")
        b.reject("b")
        assert node.disposed
