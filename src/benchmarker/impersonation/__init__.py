"""Benchmarker impersonation - user impersonation client layer."""

from benchmarker.impersonation.base import BaseImpersonator, ImpersonationOutcome
from benchmarker.impersonation.http_impersonator import HttpImpersonator
from benchmarker.impersonation.normalize import from_events, from_record, normalize_outcome
from benchmarker.impersonation.registry import get_impersonator

__all__ = [
    "BaseImpersonator",
    "HttpImpersonator",
    "ImpersonationOutcome",
    "from_events",
    "from_record",
    "get_impersonator",
    "normalize_outcome",
]
