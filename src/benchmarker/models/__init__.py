"""Benchmarker data models - re-exports all public model classes."""

from benchmarker.models.config import ProjectConfig
from benchmarker.models.run import DimensionScore, Result, Run, RunState
from benchmarker.models.scenario import (
    ReviewDimension,
    Reviewer,
    ReviewerDefinition,
    Scenario,
    ScenarioDefinition,
)
from benchmarker.models.secret import UserSecret

__all__ = [
    "DimensionScore",
    "ProjectConfig",
    "Result",
    "ReviewDimension",
    "Reviewer",
    "ReviewerDefinition",
    "Run",
    "RunState",
    "Scenario",
    "ScenarioDefinition",
    "UserSecret",
]
