"""Step engine tests."""

import asyncio
from enum import Enum

import pytest

from gasless.history import InMemoryStepRecorder
from gasless.stepper import StepEngine, StepStatus


class Step(str, Enum):
    FIRST = "FIRST"
    SECOND = "SECOND"
    THIRD = "THIRD"


def make_engine(**kwargs) -> StepEngine[Step]:
    return StepEngine(list(Step), name="test", **kwargs)


def test_initial_states_are_waiting_in_declared_order():
    engine = make_engine()

    assert list(engine.steps) == [Step.FIRST, Step.SECOND, Step.THIRD]
    assert all(s.status is StepStatus.WAITING for s in engine.steps.values())
    assert engine.global_state is StepStatus.WAITING


def test_engine_rejects_empty_or_duplicate_steps():
    with pytest.raises(ValueError):
        StepEngine([])
    with pytest.raises(ValueError):
        StepEngine([Step.FIRST, Step.FIRST])


@pytest.mark.parametrize(
    "statuses, expected",
    [
        ((StepStatus.WAITING, StepStatus.WAITING, StepStatus.WAITING), StepStatus.WAITING),
        ((StepStatus.SUCCESS, StepStatus.WAITING, StepStatus.WAITING), StepStatus.WAITING),
        ((StepStatus.SUCCESS, StepStatus.ACTIVE, StepStatus.WAITING), StepStatus.ACTIVE),
        ((StepStatus.SUCCESS, StepStatus.SUCCESS, StepStatus.SUCCESS), StepStatus.SUCCESS),
        ((StepStatus.SUCCESS, StepStatus.ERROR, StepStatus.WAITING), StepStatus.ERROR),
        ((StepStatus.ACTIVE, StepStatus.ACTIVE, StepStatus.ERROR), StepStatus.ERROR),
    ],
)
def test_global_state_aggregation(statuses, expected):
    engine = make_engine()
    for step, status in zip(Step, statuses):
        engine.update_step_status(step, status)

    assert engine.global_state is expected


@pytest.mark.asyncio
async def test_do_step_stores_result_and_success():
    engine = make_engine()

    async def operation():
        assert engine.step(Step.FIRST).status is StepStatus.ACTIVE
        assert engine.global_state is StepStatus.ACTIVE
        return "done"

    result = await engine.do_step(Step.FIRST, operation)

    assert result == "done"
    state = engine.step(Step.FIRST)
    assert state.status is StepStatus.SUCCESS
    assert state.result == "done"
    assert state.error is None


@pytest.mark.asyncio
async def test_do_step_records_and_reraises_errors():
    engine = make_engine()
    boom = RuntimeError("boom")

    async def operation():
        raise boom

    with pytest.raises(RuntimeError) as excinfo:
        await engine.do_step(Step.SECOND, operation)

    assert excinfo.value is boom
    state = engine.step(Step.SECOND)
    assert state.status is StepStatus.ERROR
    assert state.error is boom
    assert engine.global_state is StepStatus.ERROR


@pytest.mark.asyncio
async def test_do_step_replays_successful_step_without_running_it():
    # A succeeded step is skipped entirely, not re-run with a suppressed side effect.
    engine = make_engine()
    calls = []

    async def operation():
        calls.append(1)
        return len(calls)

    first = await engine.do_step(Step.FIRST, operation)
    second = await engine.do_step(Step.FIRST, operation)

    assert first == second == 1
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_failed_step_runs_again():
    engine = make_engine()
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise ValueError("first try")
        return "ok"

    with pytest.raises(ValueError):
        await engine.do_step(Step.FIRST, flaky)
    assert await engine.do_step(Step.FIRST, flaky) == "ok"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_reset_states_clears_everything():
    engine = make_engine()

    async def ok():
        return 42

    async def fail():
        raise RuntimeError("nope")

    await engine.do_step(Step.FIRST, ok)
    with pytest.raises(RuntimeError):
        await engine.do_step(Step.SECOND, fail)
    old_run = engine.run_id

    engine.reset_states()

    assert engine.run_id != old_run
    for state in engine.steps.values():
        assert state.status is StepStatus.WAITING
        assert state.result is None
        assert state.error is None
    assert engine.global_state is StepStatus.WAITING


def test_unknown_step_raises_key_error():
    class Other(str, Enum):
        NOPE = "NOPE"

    engine = make_engine()
    with pytest.raises(KeyError):
        engine.update_step_status(Other.NOPE, StepStatus.SUCCESS)


def test_steps_returns_snapshot():
    engine = make_engine()
    snapshot = engine.steps
    snapshot[Step.FIRST].status = StepStatus.SUCCESS

    assert engine.step(Step.FIRST).status is StepStatus.WAITING


@pytest.mark.asyncio
async def test_recorder_receives_transitions():
    recorder = InMemoryStepRecorder()
    engine = make_engine(recorder=recorder)

    async def ok():
        return "x"

    async def fail():
        raise RuntimeError("bad")

    await engine.do_step(Step.FIRST, ok)
    with pytest.raises(RuntimeError):
        await engine.do_step(Step.SECOND, fail)
    engine.update_step_status(Step.THIRD, StepStatus.SUCCESS)

    run = recorder.get_run(engine.run_id)
    assert run is not None
    assert run.saga == "test"
    assert [(s.step_name, s.status) for s in run.steps] == [
        ("FIRST", "SUCCESS"),
        ("SECOND", "ERROR"),
        ("THIRD", "SUCCESS"),
    ]
    assert run.steps[1].error == "bad"
    assert run.steps[0].started_at is not None
    assert run.steps[2].started_at is None


@pytest.mark.asyncio
async def test_cancelled_step_ends_in_error_and_can_run_again():
    recorder = InMemoryStepRecorder()
    engine = make_engine(recorder=recorder)

    async def hang():
        await asyncio.Event().wait()

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(engine.do_step(Step.FIRST, hang), 0.01)

    state = engine.step(Step.FIRST)
    assert state.status is StepStatus.ERROR
    assert isinstance(state.error, asyncio.CancelledError)
    assert engine.global_state is StepStatus.ERROR
    run = recorder.get_run(engine.run_id)
    assert [(s.step_name, s.status) for s in run.steps] == [("FIRST", "ERROR")]

    async def ok():
        return "done"

    assert await engine.do_step(Step.FIRST, ok) == "done"
    assert engine.step(Step.FIRST).status is StepStatus.SUCCESS


def test_status_overrides_only_record_real_transitions():
    recorder = InMemoryStepRecorder()
    engine = make_engine(recorder=recorder)

    engine.update_step_status(Step.FIRST, StepStatus.ACTIVE)
    engine.update_step_status(Step.SECOND, StepStatus.WAITING)

    run = recorder.get_run(engine.run_id)
    assert len(run.steps) == 1
    assert run.steps[0].step_name == "FIRST"
    assert run.steps[0].started_at is not None
    assert run.steps[0].completed_at is None
    assert run.steps[0].status is None

    engine.update_step_status(Step.FIRST, StepStatus.SUCCESS)

    assert len(run.steps) == 1
    assert run.steps[0].status == "SUCCESS"
    assert run.steps[0].completed_at is not None
