"""
Ingestion error taxonomy.

UserNotFoundError and IngestionTimeoutError are raised across a coordinator
boundary; the other kinds are raised inside a coordinator and converted to
a failure outcome there. Anything else is Unexpected and is caught at the
RPC boundary.
"""


class IngestionError(Exception):
    """Base class for ingestion domain errors."""


class UserNotFoundError(IngestionError):
    """The user id does not resolve to a user record."""

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class UpstreamUnavailableError(IngestionError):
    """A source API could not be reached, timed out, or answered garbage."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source} API unavailable: {reason}")


class InvalidInputError(IngestionError):
    """Malformed caller input such as a non-PDF upload or a bad job id."""


class ExtractionEmptyError(IngestionError):
    """A document parsed but yielded no text."""


class IngestionTimeoutError(IngestionError):
    """A source run passed its deadline before committing; nothing was written."""

    def __init__(self, source: str, timeout: float):
        self.source = source
        self.timeout = timeout
        super().__init__(f"{source} ingestion timed out after {timeout:g}s")


__all__ = [
    "IngestionError",
    "UserNotFoundError",
    "UpstreamUnavailableError",
    "InvalidInputError",
    "ExtractionEmptyError",
    "IngestionTimeoutError",
]
