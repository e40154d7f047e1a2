"""Error types raised by update resolution and install remapping."""

from __future__ import annotations

from pathlib import Path


class UpdateSyncError(Exception):
    """Base error for update resolution."""


class MissingUpdateSource(UpdateSyncError):
    """The package does not declare an update source URL."""


class InvalidUpdateSource(MissingUpdateSource):
    """The declared update source is not a usable repository URL."""


class UnknownProvider(UpdateSyncError):
    """No provider adapter is registered for the update source host."""


class NetworkError(UpdateSyncError):
    """Transport failure, timeout or unexpected HTTP status."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class MalformedResponse(UpdateSyncError):
    """The provider returned an empty, non-JSON or unusable payload."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class RemoteRepoNotFound(MalformedResponse):
    """The provider answered with an explicit error payload."""


class RemapFailed(UpdateSyncError):
    """Moving the extracted archive folder into place failed."""

    def __init__(self, message: str, *, source: Path, target: Path) -> None:
        super().__init__(message)
        self.source = source
        self.target = target
