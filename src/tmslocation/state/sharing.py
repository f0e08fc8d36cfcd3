"""Location sharing state holder.

One instance is built at application start and handed to every consumer
that needs it.  The boolean flag is persisted through a
:class:`~tmslocation.storage.KeyValueStorage`; the last update time lives
in memory only.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from tmslocation._constants import SHARING_DISABLED, SHARING_ENABLED, SHARING_STORAGE_KEY
from tmslocation.exceptions import SharingNotInstalledError, StorageUnavailableError
from tmslocation.models.sharing import SharingSnapshot
from tmslocation.state.events import SharingChange, SharingChangeKind
from tmslocation.storage import KeyValueStorage

_logger = logging.getLogger(__name__)

SharingListener = Callable[[SharingChange], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LocationSharingState:
    """Single source of truth for whether this client is sharing its location.

    Usage::

        state = LocationSharingState(JsonFileStorage(path))
        state.initialize()
        tracker = LocationTracker(state, source, transport, driver_id=...)

    Every operation other than :meth:`initialize` and :meth:`subscribe`
    requires the holder to be initialized first and raises
    :class:`SharingNotInstalledError` otherwise.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        storage_key: str = SHARING_STORAGE_KEY,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._clock = clock
        self._installed = False
        self._is_sharing = False
        self._last_update: datetime | None = None
        self._listeners: list[SharingListener] = []

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def storage_key(self) -> str:
        return self._storage_key

    def initialize(self) -> SharingSnapshot:
        """Seed the in-memory flag from storage.

        Only the first call reads storage; later calls return the current
        snapshot unchanged.
        """
        if self._installed:
            return self.read()

        try:
            saved = self._storage.get_item(self._storage_key)
        except StorageUnavailableError:
            _logger.debug("Sharing flag unreadable, defaulting to off", exc_info=True)
            saved = None

        self._is_sharing = saved == SHARING_ENABLED
        self._last_update = None
        self._installed = True
        _logger.debug("Location sharing initialized (sharing=%s)", self._is_sharing)
        snapshot = self.read()
        self._notify(SharingChangeKind.INITIALIZED, snapshot)
        return snapshot

    def read(self) -> SharingSnapshot:
        """Return the current ``{is_sharing, last_update}`` snapshot."""
        self._require_installed("read")
        return SharingSnapshot(is_sharing=self._is_sharing, last_update=self._last_update)

    @property
    def is_sharing(self) -> bool:
        self._require_installed("is_sharing")
        return self._is_sharing

    @property
    def last_update(self) -> datetime | None:
        self._require_installed("last_update")
        return self._last_update

    def set_sharing(self, enabled: bool) -> SharingSnapshot:
        """Turn sharing on or off and persist the flag.

        Turning sharing off also clears ``last_update``.  A storage failure
        is logged and the in-memory state still changes; the persisted flag
        catches up on the next successful write.
        """
        self._require_installed("set_sharing")
        enabled = bool(enabled)
        self._is_sharing = enabled
        if not enabled:
            self._last_update = None

        try:
            self._storage.set_item(self._storage_key, SHARING_ENABLED if enabled else SHARING_DISABLED)
        except StorageUnavailableError as exc:
            _logger.warning("Could not persist sharing flag: %s", exc)

        _logger.info("Location sharing %s", "started" if enabled else "stopped")
        snapshot = self.read()
        self._notify(SharingChangeKind.STARTED if enabled else SharingChangeKind.STOPPED, snapshot)
        return snapshot

    def set_last_update(self, time: datetime | None) -> SharingSnapshot:
        """Record the time of the most recent successful location emission.

        In-memory only; *time* is stored exactly as given.  A timestamp
        arriving while sharing is off is dropped with a warning, since
        ``last_update`` has no meaning then.
        """
        self._require_installed("set_last_update")
        if time is not None and not self._is_sharing:
            _logger.warning("Dropping last_update %s: location sharing is off", time.isoformat())
            return self.read()

        self._last_update = time
        snapshot = self.read()
        self._notify(SharingChangeKind.LOCATION_UPDATED, snapshot)
        return snapshot

    def touch(self) -> SharingSnapshot:
        """Set ``last_update`` to the holder's clock."""
        return self.set_last_update(self._clock())

    def subscribe(self, listener: SharingListener) -> Callable[[], None]:
        """Register *listener* for change notifications.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, kind: SharingChangeKind, snapshot: SharingSnapshot) -> None:
        if not self._listeners:
            return
        change = SharingChange(kind=kind, snapshot=snapshot)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                _logger.exception("Sharing listener %r failed", listener)

    def _require_installed(self, operation: str) -> None:
        if not self._installed:
            raise SharingNotInstalledError(
                f"{operation}() called before LocationSharingState.initialize(); "
                "build the state holder at application start and pass it to consumers"
            )


def require_sharing_state(state: LocationSharingState | None) -> LocationSharingState:
    """Precondition for consumers: *state* must be a built, initialized holder."""
    if state is None:
        raise SharingNotInstalledError("A LocationSharingState instance is required")
    if not state.installed:
        raise SharingNotInstalledError("LocationSharingState must be initialized before it is handed to consumers")
    return state
