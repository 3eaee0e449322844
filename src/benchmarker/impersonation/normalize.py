"""Adapters from the two upstream impersonation shapes to ImpersonationOutcome.

Record shape:
    {"projectId": "...", "initialRequest": ..., "messages": [...]}

Event shape:
    [{"type": "...", "data": {...}}, ..., {"type": "project_created", "data": {"id": "..."}}]
"""

from __future__ import annotations

from typing import Any

from benchmarker.errors import UpstreamError
from benchmarker.impersonation.base import ImpersonationOutcome

PROJECT_CREATED_EVENT = "project_created"


def from_record(payload: dict[str, Any]) -> ImpersonationOutcome:
    """Normalize the flat record shape."""
    project_id = payload.get("projectId")
    if not project_id:
        raise UpstreamError("Impersonation response has no projectId")
    return ImpersonationOutcome(
        project_id=str(project_id),
        transcript={
            "initial_request": payload.get("initialRequest"),
            "messages": payload.get("messages", []),
        },
    )


def from_events(events: list[Any]) -> ImpersonationOutcome:
    """Normalize the event-sequence shape.

    The first ``project_created`` event carrying ``data.id`` wins.
    """
    for event in events:
        if not isinstance(event, dict) or event.get("type") != PROJECT_CREATED_EVENT:
            continue
        data = event.get("data")
        if isinstance(data, dict) and data.get("id"):
            return ImpersonationOutcome(project_id=str(data["id"]), transcript=events)
    raise UpstreamError("Failed to get project ID from impersonation results")


def normalize_outcome(payload: Any) -> ImpersonationOutcome:
    """Dispatch on the payload shape.

    Raises:
        UpstreamError: If the payload matches neither shape.
    """
    if isinstance(payload, dict):
        return from_record(payload)
    if isinstance(payload, list):
        return from_events(payload)
    raise UpstreamError(
        f"Unrecognized impersonation response of type {type(payload).__name__}"
    )
