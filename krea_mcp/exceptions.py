"""Exception hierarchy for the Krea MCP server.

Every error carries a ``user_message`` suitable for returning to the agent and
a stable ``code``. Builders, the HTTP client and the poller raise these and
never catch them; the tool boundary in ``main`` converts them to ToolErrors.
"""

from __future__ import annotations

from typing import Any

from .shard import constants as C


class KreaMCPError(Exception):
    """Base class for all errors raised by this package."""

    code: str = "krea_error"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        self.user_message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(KreaMCPError):
    """Raised when required configuration (API key) is missing."""

    code = C.ERROR_CODE_CONFIGURATION


class KreaApiError(KreaMCPError):
    """Non-2xx response from the Krea API. Never retried."""

    code = C.ERROR_CODE_API

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        message = f"Krea API error {status}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message, details={"status": status, "body": body})


class ValidationError(KreaMCPError):
    """Caller input does not satisfy the model or mode requirements."""

    code = C.ERROR_CODE_VALIDATION


class UnknownModelError(KreaMCPError):
    """Lookup of a model key that is not in the catalog."""

    code = C.ERROR_CODE_UNKNOWN_MODEL

    def __init__(self, key: str, known: list[str] | None = None):
        self.key = key
        message = f"Unknown model '{key}'."
        if known:
            message += f" Supported models: {', '.join(known)}"
        super().__init__(message)


class MissingJobIdError(KreaMCPError):
    """The create response had neither ``id`` nor ``job_id``."""

    code = C.ERROR_CODE_MISSING_JOB_ID

    def __init__(self, raw_response: str):
        self.raw_response = raw_response
        super().__init__(f"Krea response does not include job id. Response: {raw_response}")


class JobTimeoutError(KreaMCPError, TimeoutError):
    """Polling hit the deadline before the job reached a terminal status."""

    code = C.ERROR_CODE_JOB_TIMEOUT

    def __init__(self, job_id: str, timeout_ms: int):
        self.job_id = job_id
        self.timeout_ms = timeout_ms
        super().__init__(f"Job {job_id} did not reach a terminal status within {timeout_ms}ms.")


__all__ = [
    "KreaMCPError",
    "ConfigurationError",
    "KreaApiError",
    "ValidationError",
    "UnknownModelError",
    "MissingJobIdError",
    "JobTimeoutError",
]
