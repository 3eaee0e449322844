"""Benchmarker - run LLM-system benchmark scenarios and review their scores."""

__version__ = "0.1.0"
