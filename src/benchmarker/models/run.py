"""Run and result data models.

A Run is one execution of a scenario against a target system version.
Its lifecycle state is owned by the backend; the core only writes the
initial ``paused`` state and observes what the backend reports after.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class RunState(str, Enum):
    """States the core writes or compares against.

    The backend may report others (for example "started"); Run.state keeps
    whatever string it stores.
    """

    created = "created"
    paused = "paused"
    running = "running"
    completed = "completed"
    failed = "failed"


class Run(BaseModel):
    """One execution of a scenario against a target system version."""

    model_config = {"extra": "ignore"}

    id: str
    scenario_id: str
    system_version: str
    project_id: str
    link: str | None = None
    user_id: str | None = None
    state: str = RunState.created.value
    created_at: datetime | None = None


class Result(BaseModel):
    """A reviewer's evaluation of a run.

    ``result`` is an opaque JSON payload. Once reviewed it carries a
    numeric ``score`` on a 0-10 scale.
    """

    model_config = {"extra": "ignore"}

    id: str
    run_id: str
    reviewer_id: str
    result: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    @property
    def score(self) -> float | None:
        """Numeric score from the payload, or None if not yet reviewed."""
        value = self.result.get("score")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return float(value)


class DimensionScore(BaseModel):
    """Mean reviewer score for one dimension of a run (derived, not stored)."""

    dimension: str
    average_score: float
    count: int
