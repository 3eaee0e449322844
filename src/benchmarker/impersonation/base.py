"""BaseImpersonator ABC and the canonical impersonation outcome.

The target system has been observed answering an impersonation request
in two shapes (a flat record, or a sequence of lifecycle events). Both
are normalized here, at the collaborator boundary, so the orchestrator
only ever sees an ImpersonationOutcome.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class ImpersonationOutcome:
    """Normalized result of impersonating a user against a target system.

    Attributes:
        project_id: Identifier of the project the target system created.
        transcript: Opaque record of what happened (initial request and
            messages, or the raw event list), stored with each result.
    """

    project_id: str
    transcript: Any


class BaseImpersonator(ABC):
    """Abstract base class for impersonation clients.

    Subclasses implement impersonate(), which asks a target system
    version to simulate a user submitting prompt.
    """

    @abstractmethod
    async def impersonate(
        self,
        prompt: str,
        system_version: str,
        temperature: float | None = None,
    ) -> ImpersonationOutcome:
        """Simulate a user submitting prompt to system_version.

        Raises:
            UpstreamError: On network failure, a non-success response, or
                a response from which no project id can be resolved.
        """
        ...

    async def aclose(self) -> None:
        """Release any held connections. Default is a no-op."""
