"""Step history for gasless sagas."""

from __future__ import annotations

from .inmemory import InMemoryStepRecorder
from .models import SagaRun, StepRecord
from .recorder import StepRecorder

__all__ = [
    "InMemoryStepRecorder",
    "SagaRun",
    "StepRecord",
    "StepRecorder",
]
