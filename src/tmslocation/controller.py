"""Start/stop logic for location sharing."""

from __future__ import annotations

import logging
from collections.abc import Callable

from tmslocation.exceptions import (
    DeviceOfflineError,
    LocationError,
    LocationErrorKind,
    LocationNotSupportedError,
)
from tmslocation.models.sharing import SharingSnapshot
from tmslocation.source import LocationSource
from tmslocation.state.sharing import LocationSharingState, require_sharing_state

_logger = logging.getLogger(__name__)


def _always_online() -> bool:
    return True


class SharingController:
    """Turns sharing on and off on behalf of the driver.

    Starting requires connectivity, a supported location source and a
    granted permission.  Any failure leaves sharing off, is kept in
    :attr:`last_error`, and is re-raised to the caller.
    """

    def __init__(
        self,
        state: LocationSharingState,
        source: LocationSource,
        *,
        connectivity: Callable[[], bool] | None = None,
    ) -> None:
        self._state = require_sharing_state(state)
        self._source = source
        self._is_online = connectivity or _always_online
        self._last_error: LocationError | None = None

    @property
    def last_error(self) -> LocationError | None:
        return self._last_error

    async def toggle(self) -> SharingSnapshot:
        """Stop sharing if it is on, otherwise try to start it."""
        if self._state.is_sharing:
            return self.stop()
        return await self.start()

    async def start(self) -> SharingSnapshot:
        self._last_error = None
        if self._state.is_sharing:
            return self._state.read()

        try:
            if not self._is_online():
                raise DeviceOfflineError("Device is offline")
            if not self._source.is_supported:
                raise LocationNotSupportedError("Location is not supported on this device")
            await self._source.request_permission()
        except LocationError as exc:
            self._fail(exc)
            raise

        _logger.debug("Location permission granted")
        return self._state.set_sharing(True)

    def stop(self) -> SharingSnapshot:
        self._last_error = None
        return self._state.set_sharing(False)

    def handle_offline(self) -> SharingSnapshot:
        """Connectivity was lost: record a network error and stop sharing."""
        self._fail(DeviceOfflineError("Device went offline"))
        return self._state.read()

    def handle_online(self) -> None:
        """Connectivity came back; a pending network error no longer applies."""
        if self._last_error is not None and self._last_error.kind is LocationErrorKind.NETWORK:
            self._last_error = None

    def _fail(self, exc: LocationError) -> None:
        _logger.warning("Location sharing unavailable (%s): %s", exc.kind, exc)
        self._last_error = exc
        self._state.set_sharing(False)
