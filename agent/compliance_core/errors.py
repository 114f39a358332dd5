"""
Error taxonomy for the monitoring pipeline.

Nothing here is fatal to the scheduler loop: sync errors fall back to the
cache, storage errors mean "no cache", report errors are logged per violation.
"""


class AgentError(Exception):
    """Base class for every error raised by compliance_core."""


class StorageError(AgentError):
    """Reading or writing the local policy cache failed."""


class ApiError(AgentError):
    """A call to the authority failed. Raised by sync and report."""


class NetworkError(ApiError):
    """Transport failure: DNS, refused connection, timeout, TLS."""


class AuthError(ApiError):
    """Non-success status from an authenticated call."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(ApiError):
    """Response body is not what the endpoint promises."""
