from __future__ import annotations

import pytest

from tmslocation.controller import SharingController
from tmslocation.exceptions import (
    DeviceOfflineError,
    LocationErrorKind,
    LocationNotSupportedError,
    LocationPermissionDeniedError,
    LocationTimeoutError,
    SharingNotInstalledError,
)
from tmslocation.models.location import LocationFix
from tmslocation.source import ReplayLocationSource
from tmslocation.state.sharing import LocationSharingState
from tmslocation.storage import MemoryStorage


def _fix() -> LocationFix:
    return LocationFix(latitude=12.97, longitude=77.59, accuracy=10.0)


def _state() -> LocationSharingState:
    state = LocationSharingState(MemoryStorage())
    state.initialize()
    return state


class _TimeoutSource:
    is_supported = True

    async def request_permission(self) -> LocationFix:
        raise LocationTimeoutError("no answer from GPS")

    async def get_current_position(self) -> LocationFix:  # pragma: no cover
        raise LocationTimeoutError("no answer from GPS")


def test_constructor_requires_initialized_state() -> None:
    source = ReplayLocationSource([_fix()])
    with pytest.raises(SharingNotInstalledError):
        SharingController(None, source)  # type: ignore[arg-type]
    with pytest.raises(SharingNotInstalledError):
        SharingController(LocationSharingState(MemoryStorage()), source)


@pytest.mark.asyncio
async def test_toggle_starts_then_stops() -> None:
    state = _state()
    controller = SharingController(state, ReplayLocationSource([_fix()]))

    assert (await controller.toggle()).is_sharing is True
    state.set_last_update(_fix().timestamp)

    snapshot = await controller.toggle()
    assert snapshot.is_sharing is False
    assert snapshot.last_update is None
    assert controller.last_error is None


@pytest.mark.asyncio
async def test_permission_denied_leaves_sharing_off() -> None:
    state = _state()
    controller = SharingController(state, ReplayLocationSource([_fix()], granted=False))

    with pytest.raises(LocationPermissionDeniedError):
        await controller.toggle()

    assert state.read().is_sharing is False
    assert controller.last_error is not None
    assert controller.last_error.kind is LocationErrorKind.PERMISSION


@pytest.mark.asyncio
async def test_unsupported_source_rejected() -> None:
    state = _state()
    controller = SharingController(state, ReplayLocationSource([_fix()], supported=False))

    with pytest.raises(LocationNotSupportedError):
        await controller.start()
    assert state.read().is_sharing is False


@pytest.mark.asyncio
async def test_timeout_is_classified() -> None:
    controller = SharingController(_state(), _TimeoutSource())

    with pytest.raises(LocationTimeoutError):
        await controller.start()
    assert controller.last_error is not None
    assert controller.last_error.kind is LocationErrorKind.TIMEOUT


@pytest.mark.asyncio
async def test_offline_blocks_start() -> None:
    state = _state()
    controller = SharingController(state, ReplayLocationSource([_fix()]), connectivity=lambda: False)

    with pytest.raises(DeviceOfflineError):
        await controller.start()
    assert state.read().is_sharing is False
    assert controller.last_error is not None
    assert controller.last_error.kind is LocationErrorKind.NETWORK


@pytest.mark.asyncio
async def test_going_offline_stops_sharing_and_online_clears_error() -> None:
    state = _state()
    controller = SharingController(state, ReplayLocationSource([_fix()]))
    await controller.start()

    snapshot = controller.handle_offline()
    assert snapshot.is_sharing is False
    assert controller.last_error is not None

    controller.handle_online()
    assert controller.last_error is None
    # Coming back online does not restart sharing by itself.
    assert state.read().is_sharing is False


@pytest.mark.asyncio
async def test_online_keeps_non_network_error() -> None:
    controller = SharingController(_state(), ReplayLocationSource([_fix()], granted=False))
    with pytest.raises(LocationPermissionDeniedError):
        await controller.start()

    controller.handle_online()
    assert controller.last_error is not None


@pytest.mark.asyncio
async def test_start_while_sharing_is_noop() -> None:
    state = _state()
    state.set_sharing(True)
    controller = SharingController(state, ReplayLocationSource([], granted=False))

    assert (await controller.start()).is_sharing is True
