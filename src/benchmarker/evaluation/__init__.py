"""Benchmarker evaluation - reviewer score aggregation and run reports."""

from benchmarker.evaluation.aggregation import (
    UNKNOWN_DIMENSION,
    aggregate,
    check_result_consistency,
    dimension_scores,
)
from benchmarker.evaluation.report import RunReport, build_run_report

__all__ = [
    "UNKNOWN_DIMENSION",
    "RunReport",
    "aggregate",
    "build_run_report",
    "check_result_consistency",
    "dimension_scores",
]
