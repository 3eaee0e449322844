"""Per-dimension score aggregation for a run's reviewer results.

A single pass groups results by their reviewer's dimension, keeps a
running sum and count, and reduces each group to its mean rounded to
one decimal. Reviewer weight is carried by the data model but is not
applied here.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from benchmarker.models.run import DimensionScore, Result
from benchmarker.models.scenario import Reviewer

UNKNOWN_DIMENSION = "Unknown"

ReviewerLookup = Union[Mapping[str, Reviewer], Callable[[str], Union[Reviewer, None]]]


def round_score(value: float) -> float:
    """Round to one decimal, halves away from zero on the exact binary value."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _resolve_dimension(reviewer_id: str, lookup: ReviewerLookup) -> str:
    if isinstance(lookup, Mapping):
        reviewer = lookup.get(reviewer_id)
    else:
        try:
            reviewer = lookup(reviewer_id)
        except LookupError:
            reviewer = None
    if reviewer is None or not reviewer.dimension:
        return UNKNOWN_DIMENSION
    return reviewer.dimension


def _accumulate(
    results: Iterable[Result],
    reviewer_lookup: ReviewerLookup,
) -> dict[str, list[float]]:
    """Return dimension -> [sum, count] over results that carry a score."""
    totals: dict[str, list[float]] = {}
    for result in results:
        score = result.score
        if score is None:
            continue
        dimension = _resolve_dimension(result.reviewer_id, reviewer_lookup)
        entry = totals.setdefault(dimension, [0.0, 0])
        entry[0] += score
        entry[1] += 1
    return totals


def aggregate(
    results: Iterable[Result],
    reviewer_lookup: ReviewerLookup,
) -> dict[str, float]:
    """Compute the mean score per dimension.

    Results without a numeric score (recorded but not reviewed yet) are
    skipped. Reviewers the lookup cannot resolve count under "Unknown".

    Args:
        results: A run's results, in any order.
        reviewer_lookup: Mapping or callable from reviewer id to Reviewer.

    Returns:
        Mapping of dimension label to mean score rounded to 1 decimal,
        sorted by dimension label. Empty when there is nothing to score.
    """
    totals = _accumulate(results, reviewer_lookup)
    return {
        dimension: round_score(total / count)
        for dimension, (total, count) in sorted(totals.items())
    }


def dimension_scores(
    results: Iterable[Result],
    reviewer_lookup: ReviewerLookup,
) -> list[DimensionScore]:
    """Same aggregation as aggregate(), as DimensionScore rows for display."""
    totals = _accumulate(results, reviewer_lookup)
    return [
        DimensionScore(
            dimension=dimension,
            average_score=round_score(total / count),
            count=int(count),
        )
        for dimension, (total, count) in sorted(totals.items())
    ]


def check_result_consistency(
    run_scenario_id: str,
    results: Iterable[Result],
    reviewer_lookup: Mapping[str, Reviewer],
) -> list[str]:
    """Return ids of results whose reviewer belongs to another scenario.

    Results whose reviewer cannot be resolved are reported too.
    """
    inconsistent: list[str] = []
    for result in results:
        reviewer = reviewer_lookup.get(result.reviewer_id)
        if reviewer is None or reviewer.scenario_id != run_scenario_id:
            inconsistent.append(result.id)
    return inconsistent
