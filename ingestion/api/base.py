"""Result type shared by the source clients."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from ingestion.exceptions import UpstreamUnavailableError

T = TypeVar("T")


class FetchStatus(str, Enum):
    """Outcome kind of a single source fetch."""
    OK = "ok"
    NOT_FOUND = "not_found"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Raw source payload or a well-defined "no data" / "error" kind.

    Clients return this instead of raising for not-found and network
    conditions so the coordinator decides what a failure means.
    """

    status: FetchStatus
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T) -> "FetchResult[T]":
        return cls(FetchStatus.OK, data=data)

    @classmethod
    def not_found(cls, reason: str | None = None) -> "FetchResult[T]":
        return cls(FetchStatus.NOT_FOUND, error=reason)

    @classmethod
    def upstream_error(cls, reason: str) -> "FetchResult[T]":
        return cls(FetchStatus.UPSTREAM_ERROR, error=reason)

    @property
    def is_ok(self) -> bool:
        return self.status is FetchStatus.OK

    @property
    def is_not_found(self) -> bool:
        return self.status is FetchStatus.NOT_FOUND

    def raise_for_upstream(self, source: str) -> None:
        """Raise UpstreamUnavailableError if the fetch failed in transit."""
        if self.status is FetchStatus.UPSTREAM_ERROR:
            raise UpstreamUnavailableError(source, self.error or "unknown error")


__all__ = ["FetchStatus", "FetchResult"]
