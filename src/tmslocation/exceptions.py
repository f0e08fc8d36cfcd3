"""Custom exception hierarchy for tmslocation."""

from __future__ import annotations

from enum import StrEnum


class TmsError(Exception):
    """Base exception for all tmslocation errors."""


class TmsConfigError(TmsError):
    """Invalid or missing configuration."""


class SharingNotInstalledError(TmsConfigError):
    """The location sharing state holder was used before being installed.

    Raised when a consumer is constructed without a state holder, or when
    ``read()`` / ``set_sharing()`` / ``set_last_update()`` is called before
    ``initialize()``.  This is a programming error: wire the holder up at
    application start instead of catching it.
    """


class StorageUnavailableError(TmsError):
    """Persistent key-value storage could not be read or written."""


class TmsTransportError(TmsError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class LocationErrorKind(StrEnum):
    PERMISSION = "permission"
    NETWORK = "network"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


class LocationError(TmsError):
    """The device position could not be obtained.

    ``kind`` classifies the failure so callers can pick a user-facing
    message without matching on exception types.
    """

    kind: LocationErrorKind = LocationErrorKind.UNKNOWN

    def __init__(self, message: str = "", *, kind: LocationErrorKind | None = None) -> None:
        if kind is not None:
            self.kind = kind
        super().__init__(message or f"location error ({self.kind})")


class LocationPermissionDeniedError(LocationError):
    """The user (or platform) refused access to the device position."""

    kind = LocationErrorKind.PERMISSION


class LocationUnavailableError(LocationError):
    """No position could be determined (no fix, provider failure)."""

    kind = LocationErrorKind.UNAVAILABLE


class LocationTimeoutError(LocationError):
    """The position request did not complete in time."""

    kind = LocationErrorKind.TIMEOUT


class LocationNotSupportedError(LocationError):
    """The location source cannot provide positions on this device."""

    kind = LocationErrorKind.UNSUPPORTED


class DeviceOfflineError(LocationError):
    """The device has no network connectivity; updates cannot be delivered."""

    kind = LocationErrorKind.NETWORK
