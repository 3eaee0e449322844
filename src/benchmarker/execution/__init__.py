"""Benchmarker execution - batch orchestration of benchmark scenarios."""

from benchmarker.execution.orchestrator import (
    BatchSummary,
    BenchmarkOrchestrator,
    ScenarioOutcome,
)

__all__ = ["BatchSummary", "BenchmarkOrchestrator", "ScenarioOutcome"]
