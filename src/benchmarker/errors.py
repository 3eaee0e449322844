"""Error taxonomy for benchmark orchestration.

Every error raised by the orchestrator, the impersonation client, the
target-system client, and the data gateways derives from BenchmarkError.
The batch boundary (BenchmarkOrchestrator.run_batch) catches BenchmarkError
once and halts the batch on the first fatal one.
"""

from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for all benchmarker errors."""

    def __init__(self, message: str, fatal: bool = True) -> None:
        super().__init__(message)
        self.message = message
        self.fatal = fatal


class ValidationError(BenchmarkError):
    """Bad or missing user input. Raised before any state is changed."""


class ConfigurationError(BenchmarkError):
    """Missing credential or invalid configuration. Raised before side effects."""


class NotFoundError(BenchmarkError):
    """A referenced record (scenario, run) does not exist."""


class UpstreamError(BenchmarkError):
    """The target system or impersonation endpoint failed.

    Attributes:
        status_code: HTTP status code, or None for transport-level failures.
        status_text: HTTP reason phrase, or None.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        status_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text


class GatewayError(BenchmarkError):
    """The remote data gateway rejected a query, write, or procedure call."""


class WarningCondition(BenchmarkError):
    """A run was created but the backend did not start it.

    Non-fatal: reported through the observer, never raised out of a batch.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, fatal=False)
