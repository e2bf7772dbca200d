"""Error taxonomy shared by adapters, the orchestrator and the scheduler."""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for every error raised by the sync core."""


class SourceError(SyncError):
    """Raised by source adapters when a page cannot be fetched."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CursorExpiredError(SourceError):
    """The delta token, history id or offset is no longer accepted by the vendor."""


class TransientSourceError(SourceError):
    """Network failure, 5xx, rate limit or timeout; retrying the whole run is safe."""


class FatalSourceError(SourceError):
    """Authentication failure or another condition that needs operator intervention."""


class NormalizationError(SyncError):
    """Raised for a single record that cannot be turned into a canonical event."""

    def __init__(self, message: str, *, natural_key: str | int | None = None) -> None:
        super().__init__(message)
        self.natural_key = natural_key


class RegistryError(SyncError):
    """Raised when the entity-type registry configuration is invalid."""


__all__ = [
    "CursorExpiredError",
    "FatalSourceError",
    "NormalizationError",
    "RegistryError",
    "SourceError",
    "SyncError",
    "TransientSourceError",
]
