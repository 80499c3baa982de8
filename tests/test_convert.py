"""Tests for to_promise(): observables, foreign promises, and plain values."""

import pytest

from promisefx import (
    Computed,
    EmptySettlementError,
    Input,
    Observable,
    PromiseNode,
    State,
    to_promise,
)


class TestFromObservable:
    def test_is_a_promise_node(self):
        assert isinstance(to_promise(Observable()), PromiseNode)

    def test_initial_state_pending(self):
        node = to_promise(Observable())
        assert node.state.get() == "pending"

    def test_resolves_when_written(self):
        cell = Observable()
        node = to_promise(cell)
        cell.set("v")
        assert node.state.get() == "fulfilled"
        assert node.get() == "v"

    def test_then_fires_on_write(self):
        cell = Observable()
        seen = []
        to_promise(cell).then(seen.append)
        cell.set("foo")
        assert seen == ["foo"]

    def test_state_is_latched(self):
        cell = Observable()
        node = to_promise(cell)
        cell.set("v")
        cell.set(None)
        assert node.state.get() is State.FULFILLED

    def test_prefilled_cell_settles_at_once(self):
        node = to_promise(Observable("ready"))
        assert node.state.get() is State.FULFILLED

    def test_accepts_computed(self):
        source = Observable()
        node = to_promise(Computed(lambda: source.get()))
        source.set(1)
        assert node.state.get() is State.FULFILLED


class TestFromForeignPromise:
    def test_is_a_promise_node(self, foreign):
        assert isinstance(to_promise(foreign()), PromiseNode)

    def test_resolves(self, foreign):
        source = foreign()
        node = to_promise(source)
        seen = []
        node.then(seen.append)
        source.resolve("foo")
        assert seen == ["foo"]
        assert node.state.get() is State.FULFILLED

    def test_rejects(self, foreign):
        source = foreign()
        node = to_promise(source)
        seen = []
        node.fail(lambda reason: seen.append((reason, node.state.get())))
        source.reject("foo")
        assert seen == [("foo", State.REJECTED)]

    def test_already_settled(self, foreign):
        source = foreign()
        source.resolve("done")
        assert to_promise(source).get() == "done"

    def test_none_settlement_refused(self, foreign):
        source = foreign()
        to_promise(source)
        with pytest.raises(EmptySettlementError):
            source.resolve(None)


class TestFromValue:
    def test_fulfilled_from_the_start(self):
        node = to_promise("foo")
        assert node.state.get() is State.FULFILLED
        assert node.get() == "foo"

    def test_then_fires_synchronously(self):
        seen = []
        to_promise("foo").then(seen.append)
        assert seen == ["foo"]

    def test_none_refused(self):
        with pytest.raises(EmptySettlementError):
            to_promise(None)

    def test_falsy_value(self):
        assert to_promise(False).state.get() is State.FULFILLED


class TestIdentity:
    def test_node_is_returned_unchanged(self):
        node = to_promise(Observable())
        assert to_promise(node) is node

    def test_chained_node_is_returned_unchanged(self):
        node = to_promise("x").then(lambda v: v * 2)
        assert to_promise(node) is node


class TestExplicitInput:
    def test_value_input_skips_probing(self, foreign):
        """A thenable passed as Input.value is treated as a plain value."""
        source = foreign()
        node = to_promise(Input.value(source))
        assert node.state.get() is State.FULFILLED
        assert node.get() is source

    def test_cell_input(self):
        cell = Observable()
        node = to_promise(Input.cell(cell))
        cell.set(1)
        assert node.get() == 1
