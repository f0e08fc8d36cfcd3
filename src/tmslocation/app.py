"""Application wiring for the driver location client."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from tmslocation._transport import HttpLocationTransport, LocationTransport
from tmslocation.config import TmsConfig
from tmslocation.controller import SharingController
from tmslocation.exceptions import TmsError
from tmslocation.source import LocationSource
from tmslocation.state.sharing import LocationSharingState
from tmslocation.storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from tmslocation.tracker import LocationTracker

_logger = logging.getLogger(__name__)


def build_storage(config: TmsConfig) -> KeyValueStorage:
    """JSON file storage at ``config.storage_path``, or memory when unset."""
    if config.storage_path:
        return JsonFileStorage(config.storage_path)
    return MemoryStorage()


def build_sharing_state(config: TmsConfig, storage: KeyValueStorage | None = None) -> LocationSharingState:
    """Build and initialize the one state holder for this process."""
    state = LocationSharingState(
        storage if storage is not None else build_storage(config),
        storage_key=config.storage_key,
    )
    state.initialize()
    return state


class TmsLocationApp:
    """Composition root: builds the shared state once and hands it to every consumer.

    Usage::

        async with TmsLocationApp(config, source=source, driver_id="d-1") as app:
            await app.controller.toggle()
    """

    def __init__(
        self,
        config: TmsConfig,
        *,
        source: LocationSource,
        driver_id: str,
        storage: KeyValueStorage | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: LocationTransport | None = None,
        connectivity: Callable[[], bool] | None = None,
    ) -> None:
        self._config = config
        self._source = source
        self._driver_id = driver_id
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self.state = build_sharing_state(config, storage)
        self.controller = SharingController(self.state, source, connectivity=connectivity)
        self._tracker: LocationTracker | None = None

    @property
    def tracker(self) -> LocationTracker:
        if self._tracker is None:
            raise TmsError("App not started. Use 'async with TmsLocationApp(...) as app:'")
        return self._tracker

    async def __aenter__(self) -> TmsLocationApp:
        transport = self._transport
        if transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpLocationTransport(self._config, self._http_session)
        self._tracker = LocationTracker(
            self.state,
            self._source,
            transport,
            driver_id=self._driver_id,
            interval=self._config.update_interval,
        )
        self._tracker.start()
        _logger.debug("Location client started for driver %s", self._driver_id)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        tracker = self._tracker
        self._tracker = None
        if tracker is not None:
            await tracker.stop()
            tracker.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
