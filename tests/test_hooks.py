# tests/test_hooks.py

from __future__ import annotations

import pytest

from async_hooks.core.reactive import Ref
from async_hooks.core.scope import Scope
from async_hooks.core.state import StateSnapshot
from async_hooks.hooks import use_async_task

from .fakes import GatedOperation, flush


@pytest.mark.asyncio
async def test_use_async_task_returns_initial_values() -> None:
    async def op(params, signal):
        return None

    handle = use_async_task(op)

    assert handle.is_loading is True
    assert handle.error is None
    assert handle.data is None
    assert callable(handle.retry)
    assert callable(handle.abort)
    handle.dispose()


@pytest.mark.asyncio
async def test_accepts_ref_wrapped_operation_and_params() -> None:
    async def op(params, signal):
        return params["msg"]

    handle = use_async_task(Ref(op), Ref({"msg": "done"}))
    await flush()

    assert handle.state.snapshot() == StateSnapshot(False, None, "done")
    handle.dispose()


@pytest.mark.asyncio
async def test_changing_wrapped_operation_keeps_old_data_while_loading() -> None:
    async def first(params, signal):
        return "done"

    async def second(params, signal):
        return "done again"

    fn = Ref(first)
    seen: list[StateSnapshot] = []
    handle = use_async_task(fn, on_change=lambda s: seen.append(s.snapshot()))
    await flush()
    assert handle.state.snapshot() == StateSnapshot(False, None, "done")

    fn.value = second
    await flush()

    assert handle.state.snapshot() == StateSnapshot(False, None, "done again")
    assert seen == [
        StateSnapshot(True, None, None),
        StateSnapshot(False, None, "done"),
        StateSnapshot(True, None, "done"),
        StateSnapshot(False, None, "done again"),
    ]
    handle.dispose()


@pytest.mark.asyncio
async def test_retry_reinvokes_wrapped_operation() -> None:
    calls = []

    async def op(params, signal):
        calls.append(params)
        return "done"

    handle = use_async_task(Ref(op))
    assert len(calls) == 1

    handle.retry()
    await flush()

    assert len(calls) == 2
    handle.dispose()


@pytest.mark.asyncio
async def test_leaving_scope_block_aborts_the_task(gate: GatedOperation) -> None:
    with Scope("widget") as scope:
        handle = use_async_task(gate)
        signal = gate.calls[0][1]
        assert handle.is_loading is True

    assert scope.disposed is True
    assert signal.aborted is True
    assert handle.disposed is True
    assert handle.is_loading is False


@pytest.mark.asyncio
async def test_explicit_scope_wins_over_current_scope(gate: GatedOperation, scope: Scope) -> None:
    with Scope("outer"):
        handle = use_async_task(gate, scope=scope)
    assert handle.disposed is False

    scope.dispose()
    assert handle.disposed is True


@pytest.mark.asyncio
async def test_handle_as_context_manager(gate: GatedOperation) -> None:
    with use_async_task(gate) as handle:
        signal = gate.calls[0][1]

    assert signal.aborted is True
    assert handle.disposed is True


@pytest.mark.asyncio
async def test_abort_from_handle_never_sets_error(gate: GatedOperation) -> None:
    handle = use_async_task(gate)

    handle.abort()
    gate.reject(0, RuntimeError("too late"))
    await flush()

    assert handle.state.snapshot() == StateSnapshot(False, None, None)
    handle.dispose()


@pytest.mark.asyncio
async def test_subscribe_reports_changes(gate: GatedOperation) -> None:
    handle = use_async_task(gate)
    seen = []
    unsubscribe = handle.subscribe(lambda s: seen.append(s.snapshot()))

    gate.resolve(0, 7)
    await flush()
    unsubscribe()
    handle.retry()

    assert seen == [StateSnapshot(False, None, 7)]
    handle.dispose()


@pytest.mark.asyncio
async def test_disposed_handle_ignores_ref_changes(gate: GatedOperation) -> None:
    params = Ref(1)
    handle = use_async_task(gate, params)

    handle.dispose()
    params.value = 2
    await flush()

    assert len(gate.calls) == 1
    assert params.subscriber_count == 0


def test_use_async_task_rejects_non_callable() -> None:
    with pytest.raises(TypeError):
        use_async_task(Ref(None))


@pytest.mark.asyncio
async def test_on_teardown_runs_after_abort(gate: GatedOperation) -> None:
    handle = use_async_task(gate)
    signal = gate.calls[0][1]
    seen = []
    handle.on_teardown(lambda: seen.append(signal.aborted))

    handle.dispose()
    handle.dispose()

    assert seen == [True]
