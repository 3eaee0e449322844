"""Benchmarker gateways - backend store abstraction layer."""

from benchmarker.gateway.base import (
    PROCEDURE_START_PAUSED_RUN,
    TABLE_RESULTS,
    TABLE_REVIEW_DIMENSIONS,
    TABLE_REVIEWERS,
    TABLE_RUNS,
    TABLE_SCENARIOS,
    TABLE_USER_SECRETS,
    DataGateway,
)
from benchmarker.gateway.json_store import JsonGateway
from benchmarker.gateway.postgrest import PostgrestGateway
from benchmarker.gateway.registry import get_gateway

__all__ = [
    "PROCEDURE_START_PAUSED_RUN",
    "TABLE_RESULTS",
    "TABLE_REVIEW_DIMENSIONS",
    "TABLE_REVIEWERS",
    "TABLE_RUNS",
    "TABLE_SCENARIOS",
    "TABLE_USER_SECRETS",
    "DataGateway",
    "JsonGateway",
    "PostgrestGateway",
    "get_gateway",
]
