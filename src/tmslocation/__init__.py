"""tmslocation - Async driver location sharing client for the TMS platform."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tmslocation")
except PackageNotFoundError:
    __version__ = "0+local"
from tmslocation._transport import HttpLocationTransport, LocationTransport
from tmslocation.app import TmsLocationApp, build_sharing_state, build_storage
from tmslocation.config import TmsConfig
from tmslocation.controller import SharingController
from tmslocation.exceptions import (
    DeviceOfflineError,
    LocationError,
    LocationErrorKind,
    LocationNotSupportedError,
    LocationPermissionDeniedError,
    LocationTimeoutError,
    LocationUnavailableError,
    SharingNotInstalledError,
    StorageUnavailableError,
    TmsConfigError,
    TmsError,
    TmsTransportError,
)
from tmslocation.models import LocationFix, SharingSnapshot
from tmslocation.source import LocationSource, ReplayLocationSource
from tmslocation.state import LocationSharingState, SharingChange, SharingChangeKind, require_sharing_state
from tmslocation.storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from tmslocation.tracker import LocationTracker

__all__ = [
    "__version__",
    "DeviceOfflineError",
    "HttpLocationTransport",
    "JsonFileStorage",
    "KeyValueStorage",
    "LocationError",
    "LocationErrorKind",
    "LocationFix",
    "LocationNotSupportedError",
    "LocationPermissionDeniedError",
    "LocationSharingState",
    "LocationSource",
    "LocationTimeoutError",
    "LocationTracker",
    "LocationTransport",
    "LocationUnavailableError",
    "MemoryStorage",
    "ReplayLocationSource",
    "SharingChange",
    "SharingChangeKind",
    "SharingController",
    "SharingNotInstalledError",
    "SharingSnapshot",
    "StorageUnavailableError",
    "TmsConfig",
    "TmsConfigError",
    "TmsError",
    "TmsLocationApp",
    "TmsTransportError",
    "build_sharing_state",
    "build_storage",
    "require_sharing_state",
]
