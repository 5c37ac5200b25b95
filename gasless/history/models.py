"""Data models for recorded saga step transitions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StepRecord(BaseModel):
    """Record of an individual step execution."""

    id: Optional[int] = None
    run_id: str
    step_name: str
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    status: Optional[str] = None
    error: Optional[str] = None


class SagaRun(BaseModel):
    """All step records sharing one saga run id."""

    run_id: str
    saga: str
    steps: list[StepRecord] = Field(default_factory=list)
