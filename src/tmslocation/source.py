"""Device position sources.

The platform-specific geolocation backend lives outside this library;
it only has to satisfy :class:`LocationSource`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from tmslocation.exceptions import LocationPermissionDeniedError, LocationUnavailableError
from tmslocation.models.location import LocationFix


class LocationSource(Protocol):
    """Structural interface for position providers.

    ``request_permission`` and ``get_current_position`` raise a
    :class:`~tmslocation.exceptions.LocationError` subclass on failure.
    """

    @property
    def is_supported(self) -> bool:
        ...

    async def request_permission(self) -> LocationFix:
        ...

    async def get_current_position(self) -> LocationFix:
        ...


class ReplayLocationSource:
    """Serves a fixed sequence of fixes, then reports the position unavailable.

    Handy for simulators and tests.  ``granted=False`` makes every
    permission request fail.
    """

    def __init__(self, fixes: Iterable[LocationFix], *, granted: bool = True, supported: bool = True) -> None:
        self._fixes = list(fixes)
        self._index = 0
        self._granted = granted
        self._supported = supported

    @property
    def is_supported(self) -> bool:
        return self._supported

    @property
    def remaining(self) -> int:
        return len(self._fixes) - self._index

    async def request_permission(self) -> LocationFix:
        if not self._granted:
            raise LocationPermissionDeniedError("Location permission denied")
        if not self._fixes:
            raise LocationUnavailableError("No position available")
        # Peek without consuming; the tracker reads the first fix itself.
        return self._fixes[min(self._index, len(self._fixes) - 1)]

    async def get_current_position(self) -> LocationFix:
        if not self._granted:
            raise LocationPermissionDeniedError("Location permission denied")
        if self._index >= len(self._fixes):
            raise LocationUnavailableError("No more recorded positions")
        fix = self._fixes[self._index]
        self._index += 1
        return fix
