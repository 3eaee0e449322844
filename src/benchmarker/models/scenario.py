"""Scenario and reviewer data models.

Scenario, Reviewer and ReviewDimension mirror rows of the backend tables
and ignore columns they do not know about. ScenarioDefinition encodes the
user-facing YAML contract for authoring a scenario with its reviewers
inline, and is strict about unknown fields.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Reviewer(BaseModel):
    """A scoring rubric along one dimension, attached to a scenario."""

    model_config = {"extra": "ignore"}

    id: str
    scenario_id: str
    dimension: str
    description: str = ""
    prompt: str = ""
    weight: float = 1.0
    llm_model: str = ""
    llm_temperature: float = 0.0
    run_count: int = 1
    created_at: datetime | None = None


class Scenario(BaseModel):
    """A named benchmark case: prompt, model config and its reviewers.

    Reviewers are not a column of the scenarios table; they are attached
    by BenchmarkRepository.load_scenarios() in insertion order.
    """

    model_config = {"extra": "ignore"}

    id: str
    name: str
    prompt: str
    llm_model: str = ""
    llm_temperature: float | None = None
    description: str | None = None
    created_at: datetime | None = None
    reviewers: list[Reviewer] = Field(default_factory=list)


class ReviewDimension(BaseModel):
    """A named axis of quality that reviewers score against."""

    model_config = {"extra": "ignore"}

    id: str
    name: str
    description: str | None = None
    created_at: datetime | None = None


class ReviewerDefinition(BaseModel):
    """A reviewer as written in a scenario YAML file."""

    model_config = {"extra": "forbid"}

    dimension: str
    description: str = ""
    prompt: str
    weight: float = Field(default=1.0, ge=0.0)
    llm_model: str = "gpt-4o"
    llm_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    run_count: int = Field(default=1, ge=1)


class ScenarioDefinition(BaseModel):
    """A complete scenario definition loaded from YAML.

    Imported into the backend as one benchmark_scenarios row plus one
    reviewers row per entry in ``reviewers``.
    """

    model_config = {"extra": "forbid"}

    name: str
    description: str = ""
    prompt: str
    llm_model: str = "gpt-4o"
    llm_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    reviewers: list[ReviewerDefinition] = Field(default_factory=list)

    def scenario_row(self) -> dict:
        """Return the benchmark_scenarios row for this definition."""
        return self.model_dump(exclude={"reviewers"})

    def reviewer_rows(self, scenario_id: str) -> list[dict]:
        """Return reviewers rows referencing the given scenario id."""
        return [
            {"scenario_id": scenario_id, **reviewer.model_dump()}
            for reviewer in self.reviewers
        ]
