"""Recorder abstraction for saga step history."""

from __future__ import annotations

from typing import Optional, Protocol

from .models import SagaRun


class StepRecorder(Protocol):
    """Protocol for step history backends."""

    def start_run(self, run_id: str, saga: str) -> None:
        """Register a new saga run."""

    def mark_step_started(self, run_id: str, step_name: str) -> None:
        """Record start of a step."""

    def mark_step_completed(
        self, run_id: str, step_name: str, status: str, error: Optional[str] = None
    ) -> None:
        """Record completion of a step."""

    def get_run(self, run_id: str) -> Optional[SagaRun]:
        """Retrieve a run by id."""

    def list_runs(self) -> list[SagaRun]:
        """Return all recorded runs."""
