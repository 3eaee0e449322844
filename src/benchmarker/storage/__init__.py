"""Benchmarker storage - typed repository over the data gateway."""

from benchmarker.storage.repository import BenchmarkRepository

__all__ = ["BenchmarkRepository"]
