"""Step engine tracking per-step status of a saga."""

from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import contextmanager
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    Optional,
    Type,
    TypeVar,
)

from pydantic import BaseModel, ConfigDict

from .errors import SagaInProgressError
from .history import StepRecorder

logger = logging.getLogger(__name__)

StepIdT = TypeVar("StepIdT", bound=Enum)
T = TypeVar("T")


class StepStatus(str, Enum):
    WAITING = "WAITING"
    ACTIVE = "ACTIVE"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class StepState(BaseModel):
    """Status of one step plus its stored result or error."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: StepStatus = StepStatus.WAITING
    result: Any = None
    error: Optional[BaseException] = None


class StepEngine(Generic[StepIdT]):
    """Ordered map of step ids to step state with an execution wrapper.

    Keys are fixed at construction, in execution order. A step that already
    succeeded is never run again; ``do_step`` replays its stored result.
    """

    def __init__(
        self,
        step_ids: Iterable[StepIdT],
        name: str = "saga",
        recorder: Optional[StepRecorder] = None,
    ) -> None:
        order = list(step_ids)
        if not order:
            raise ValueError("A step engine needs at least one step")
        if len(set(order)) != len(order):
            raise ValueError("Step ids must be unique")
        self.name = name
        self._recorder = recorder
        self._steps: Dict[StepIdT, StepState] = {step: StepState() for step in order}
        self.run_id = self._start_run()

    def _start_run(self) -> str:
        run_id = str(uuid.uuid4())
        if self._recorder is not None:
            self._recorder.start_run(run_id, self.name)
        return run_id

    def _state(self, step_id: StepIdT) -> StepState:
        try:
            return self._steps[step_id]
        except KeyError:
            raise KeyError(f"Unknown step {step_id!r} for {self.name}") from None

    @property
    def steps(self) -> Dict[StepIdT, StepState]:
        """Snapshot of every step state, in execution order."""
        return {step: state.model_copy() for step, state in self._steps.items()}

    def step(self, step_id: StepIdT) -> StepState:
        return self._state(step_id).model_copy()

    @property
    def global_state(self) -> StepStatus:
        """Aggregate status derived from all steps."""
        statuses = [state.status for state in self._steps.values()]
        if StepStatus.ERROR in statuses:
            return StepStatus.ERROR
        if all(status is StepStatus.SUCCESS for status in statuses):
            return StepStatus.SUCCESS
        if StepStatus.ACTIVE in statuses:
            return StepStatus.ACTIVE
        return StepStatus.WAITING

    async def do_step(
        self, step_id: StepIdT, operation: Callable[[], Awaitable[T]]
    ) -> T:
        """Run ``operation`` as ``step_id`` and store its outcome.

        Raises:
            Exception: Whatever ``operation`` raised, after recording it as
                the step's error.
            asyncio.CancelledError: If the step is cancelled, for instance by
                ``asyncio.wait_for``; the step is left in ``ERROR``.
        """
        state = self._state(step_id)
        if state.status is StepStatus.SUCCESS:
            logger.debug(f"{self.name}: step {step_id.value} already succeeded, replaying")
            return state.result

        self._steps[step_id] = StepState(status=StepStatus.ACTIVE)
        logger.debug(f"{self.name}: step {step_id.value} started")
        if self._recorder is not None:
            self._recorder.mark_step_started(self.run_id, step_id.value)

        try:
            result = await operation()
        except Exception as e:
            self._steps[step_id] = StepState(status=StepStatus.ERROR, error=e)
            if self._recorder is not None:
                self._recorder.mark_step_completed(
                    self.run_id, step_id.value, StepStatus.ERROR.value, error=str(e)
                )
            logger.error(f"{self.name}: step {step_id.value} failed: {e}")
            raise
        except asyncio.CancelledError as e:
            # a cancelled step must not stay ACTIVE
            self._steps[step_id] = StepState(status=StepStatus.ERROR, error=e)
            if self._recorder is not None:
                self._recorder.mark_step_completed(
                    self.run_id, step_id.value, StepStatus.ERROR.value, error="cancelled"
                )
            logger.warning(f"{self.name}: step {step_id.value} cancelled")
            raise

        self._steps[step_id] = StepState(status=StepStatus.SUCCESS, result=result)
        if self._recorder is not None:
            self._recorder.mark_step_completed(
                self.run_id, step_id.value, StepStatus.SUCCESS.value
            )
        logger.debug(f"{self.name}: step {step_id.value} succeeded")
        return result

    def update_step_status(self, step_id: StepIdT, status: StepStatus) -> None:
        """Override a step status directly, keeping any stored result.

        Only ``ACTIVE`` and the terminal statuses reach the recorder; going
        back to ``WAITING`` is not a history event.
        """
        state = self._state(step_id)
        self._steps[step_id] = state.model_copy(update={"status": status})
        if self._recorder is None:
            return
        if status is StepStatus.ACTIVE:
            self._recorder.mark_step_started(self.run_id, step_id.value)
        elif status in (StepStatus.SUCCESS, StepStatus.ERROR):
            self._recorder.mark_step_completed(self.run_id, step_id.value, status.value)

    def reset_states(self) -> None:
        """Set every step back to ``WAITING`` and drop results and errors."""
        for step in self._steps:
            self._steps[step] = StepState()
        self.run_id = self._start_run()
        logger.debug(f"{self.name}: steps reset, new run {self.run_id}")


class Saga(Generic[StepIdT]):
    """Base for saga orchestrators owning one step engine each."""

    step_ids: Type[StepIdT]

    def __init__(self, recorder: Optional[StepRecorder] = None) -> None:
        self.stepper: StepEngine[StepIdT] = StepEngine(
            list(self.step_ids), name=type(self).__name__, recorder=recorder
        )
        self._busy = False

    @property
    def steps(self) -> Dict[StepIdT, StepState]:
        return self.stepper.steps

    @property
    def global_state(self) -> StepStatus:
        return self.stepper.global_state

    @property
    def busy(self) -> bool:
        return self._busy

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Reject re-entry while a previous invocation is still running."""
        if self._busy:
            raise SagaInProgressError(f"{type(self).__name__} is already running")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _reset_if_failed(self) -> None:
        if self.stepper.global_state is StepStatus.ERROR:
            logger.info(f"{type(self).__name__}: previous run failed, restarting")
            self.stepper.reset_states()


__all__ = ["StepStatus", "StepState", "StepEngine", "Saga"]
