"""Periodic location emission while sharing is on."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

from tmslocation._constants import DEFAULT_UPDATE_INTERVAL
from tmslocation._transport import LocationTransport
from tmslocation.exceptions import LocationError, TmsTransportError
from tmslocation.models.location import LocationFix
from tmslocation.source import LocationSource
from tmslocation.state.events import SharingChange, SharingChangeKind
from tmslocation.state.sharing import LocationSharingState, require_sharing_state

_logger = logging.getLogger(__name__)


class LocationTracker:
    """Reads the device position and publishes it every ``interval`` seconds.

    The sharing flag gates every tick, so the loop can keep running while
    sharing is toggled off and on.

    Usage::

        async with LocationTracker(state, source, transport, driver_id="d-1"):
            ...
    """

    def __init__(
        self,
        state: LocationSharingState,
        source: LocationSource,
        transport: LocationTransport,
        *,
        driver_id: str,
        interval: float = DEFAULT_UPDATE_INTERVAL,
    ) -> None:
        if not driver_id:
            raise ValueError("driver_id must be non-empty")
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._state = require_sharing_state(state)
        self._source = source
        self._transport = transport
        self._driver_id = driver_id
        self._interval = interval
        self._task: asyncio.Task[None] | None = None
        self._wakeup = asyncio.Event()
        self._last_fix: LocationFix | None = None
        self._unsubscribe = self._state.subscribe(self._on_sharing_change)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_fix(self) -> LocationFix | None:
        return self._last_fix

    async def __aenter__(self) -> LocationTracker:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        self.close()

    async def emit_once(self) -> LocationFix | None:
        """Read and publish one position.

        Returns ``None`` without touching the source when sharing is off.
        A location error stops sharing; a transport error leaves it on.
        Both propagate.
        """
        if not self._state.is_sharing:
            return None

        try:
            fix = await self._source.get_current_position()
        except LocationError as exc:
            _logger.warning("Stopping location sharing (%s): %s", exc.kind, exc)
            self._state.set_sharing(False)
            raise

        await self._transport.publish(self._driver_id, fix)

        # Sharing may have been turned off while the request was in flight.
        if self._state.is_sharing:
            self._last_fix = fix
            self._state.touch()
        return fix

    def start(self) -> None:
        """Start the background emission loop (idempotent)."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"tms-location-{self._driver_id}")

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def close(self) -> None:
        """Detach from the state holder (idempotent).  Call :meth:`stop` first."""
        self._unsubscribe()

    async def _run(self) -> None:
        while True:
            self._wakeup.clear()
            try:
                await self.emit_once()
            except TmsTransportError as exc:
                _logger.warning("Location update failed: %s", exc)
            except LocationError:
                pass  # already logged; sharing is off now
            except Exception:
                _logger.exception("Unexpected error while emitting location")

            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._wakeup.wait(), timeout=self._interval)

    def _on_sharing_change(self, change: SharingChange) -> None:
        # Emit right away when sharing starts instead of waiting out the interval.
        if change.kind is SharingChangeKind.STARTED:
            self._wakeup.set()
