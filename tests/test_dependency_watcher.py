# tests/test_dependency_watcher.py

from __future__ import annotations

import pytest

from async_hooks.core.reactive import Ref, unref
from async_hooks.core.state import StateSnapshot
from async_hooks.tasks.controller import TaskController
from async_hooks.tasks.watcher import DependencyWatcher

from .fakes import GatedOperation, flush


def _watched(fn_binding, params_binding=None) -> tuple[TaskController, DependencyWatcher]:
    c = TaskController(unref(fn_binding), unref(params_binding))
    return c, DependencyWatcher(c, fn_binding, params_binding)


@pytest.mark.asyncio
async def test_watcher_does_not_fire_on_initial_bind(gate: GatedOperation) -> None:
    c, w = _watched(Ref(gate), Ref("p"))
    await flush()

    assert len(gate.calls) == 1
    assert c.generation == 1
    assert w.watching is True


@pytest.mark.asyncio
async def test_changed_operation_soft_restarts_with_old_data_visible(gate: GatedOperation) -> None:
    async def first(params, signal):
        return "done"

    fn = Ref(first)
    c, _w = _watched(fn)
    await flush()
    assert c.state.snapshot() == StateSnapshot(False, None, "done")

    fn.value = gate
    await flush()
    assert c.state.snapshot() == StateSnapshot(True, None, "done")

    gate.resolve(0, "done again")
    await flush()
    assert c.state.snapshot() == StateSnapshot(False, None, "done again")


@pytest.mark.asyncio
async def test_changed_params_restart_with_new_params(gate: GatedOperation) -> None:
    params = Ref({"page": 1})
    _c, _w = _watched(gate, params)

    params.value = {"page": 2}
    await flush()

    assert [p for p, _ in gate.calls] == [{"page": 1}, {"page": 2}]


@pytest.mark.asyncio
async def test_changes_in_one_turn_coalesce_into_one_restart(gate: GatedOperation) -> None:
    fn = Ref(gate)
    params = Ref(1)
    c, _w = _watched(fn, params)

    other = GatedOperation()
    fn.value = other
    params.value = 2
    params.value = 3
    await flush()

    assert c.generation == 2
    assert len(other.calls) == 1
    assert other.calls[0][0] == 3


@pytest.mark.asyncio
async def test_change_and_revert_in_one_turn_is_ignored(gate: GatedOperation) -> None:
    original = {"q": "a"}
    params = Ref(original)
    c, w = _watched(gate, params)

    params.value = {"q": "b"}
    assert w.pending is True
    params.value = original
    await flush()

    assert c.generation == 1
    assert len(gate.calls) == 1


@pytest.mark.asyncio
async def test_static_bindings_are_not_watched(gate: GatedOperation) -> None:
    _c, w = _watched(gate, {"static": True})

    assert w.watching is False


@pytest.mark.asyncio
async def test_dispose_unsubscribes_and_drops_pending_restart(gate: GatedOperation) -> None:
    fn = Ref(gate)
    params = Ref(1)
    c, w = _watched(fn, params)

    params.value = 2
    w.dispose()
    w.dispose()
    await flush()

    assert fn.subscriber_count == 0
    assert params.subscriber_count == 0
    assert w.watching is False
    assert c.generation == 1

    params.value = 3
    await flush()
    assert len(gate.calls) == 1
