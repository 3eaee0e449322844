"""Assemble the data shown on a run's result page."""

from __future__ import annotations

from dataclasses import dataclass, field

from benchmarker.evaluation.aggregation import (
    UNKNOWN_DIMENSION,
    check_result_consistency,
    dimension_scores,
)
from benchmarker.models.run import DimensionScore, Result, Run
from benchmarker.models.scenario import Reviewer
from benchmarker.storage.repository import BenchmarkRepository


@dataclass
class RunReport:
    """A run, its results, the reviewers behind them and per-dimension means."""

    run: Run
    results: list[Result]
    reviewers: dict[str, Reviewer]
    scores: list[DimensionScore]
    inconsistent_result_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "run": self.run.model_dump(mode="json"),
            "scores": [score.model_dump(mode="json") for score in self.scores],
            "results": [
                {
                    **result.model_dump(mode="json"),
                    "dimension": (
                        self.reviewers[result.reviewer_id].dimension
                        if result.reviewer_id in self.reviewers
                        else UNKNOWN_DIMENSION
                    ),
                }
                for result in self.results
            ],
            "inconsistent_result_ids": self.inconsistent_result_ids,
        }


async def build_run_report(repository: BenchmarkRepository, run_id: str) -> RunReport:
    """Load a run and its results and aggregate scores by dimension.

    Raises:
        NotFoundError: If the run does not exist.
    """
    run = await repository.get_run(run_id)
    results = await repository.list_run_results(run_id)

    reviewers: dict[str, Reviewer] = {}
    for reviewer_id in dict.fromkeys(result.reviewer_id for result in results):
        reviewer = await repository.get_reviewer(reviewer_id)
        if reviewer is not None:
            reviewers[reviewer_id] = reviewer

    return RunReport(
        run=run,
        results=results,
        reviewers=reviewers,
        scores=dimension_scores(results, reviewers),
        inconsistent_result_ids=check_result_consistency(run.scenario_id, results, reviewers),
    )
