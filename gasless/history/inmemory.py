"""In-memory implementation of the step recorder."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from .models import SagaRun, StepRecord
from .recorder import StepRecorder


class InMemoryStepRecorder(StepRecorder):
    """Keep step history in local memory.

    Data is not persisted across process restarts. Every saga reset opens a
    new run, so only the latest ``max_runs`` runs are retained; the oldest
    is dropped first. ``max_runs=None`` keeps everything.
    """

    def __init__(self, max_runs: Optional[int] = 100) -> None:
        if max_runs is not None and max_runs < 1:
            raise ValueError("max_runs must be at least 1")
        self.max_runs = max_runs
        self._runs: Dict[str, SagaRun] = {}
        self._step_id = 0

    def start_run(self, run_id: str, saga: str) -> None:
        if run_id in self._runs:
            return
        self._runs[run_id] = SagaRun(run_id=run_id, saga=saga)
        if self.max_runs is not None:
            while len(self._runs) > self.max_runs:
                del self._runs[next(iter(self._runs))]

    def mark_step_started(self, run_id: str, step_name: str) -> None:
        run = self._runs.get(run_id)
        if not run:
            return
        self._step_id += 1
        run.steps.append(
            StepRecord(
                id=self._step_id,
                run_id=run_id,
                step_name=step_name,
                started_at=datetime.now(timezone.utc),
            )
        )

    def mark_step_completed(
        self, run_id: str, step_name: str, status: str, error: Optional[str] = None
    ) -> None:
        run = self._runs.get(run_id)
        if not run:
            return
        for step in reversed(run.steps):
            if step.step_name == step_name and step.completed_at is None:
                step.completed_at = datetime.now(timezone.utc)
                step.status = status
                step.error = error
                return
        # direct status overrides have no matching start
        run.steps.append(
            StepRecord(
                run_id=run_id,
                step_name=step_name,
                completed_at=datetime.now(timezone.utc),
                status=status,
                error=error,
            )
        )

    def get_run(self, run_id: str) -> Optional[SagaRun]:
        return self._runs.get(run_id)

    def list_runs(self) -> list[SagaRun]:
        return list(self._runs.values())
