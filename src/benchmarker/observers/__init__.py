"""Benchmarker observers - logging and user notifications for batches."""

from benchmarker.observers.base import BenchmarkObserver
from benchmarker.observers.composite import CompositeBenchmarkObserver
from benchmarker.observers.console import ConsoleNotificationObserver
from benchmarker.observers.structlog_observer import StructlogBenchmarkObserver

__all__ = [
    "BenchmarkObserver",
    "CompositeBenchmarkObserver",
    "ConsoleNotificationObserver",
    "StructlogBenchmarkObserver",
]
